from __future__ import annotations

from flask import Flask, Response, jsonify

from ..common.http import attachment_options, json_body, json_errors, query_date, query_int
from ..common.serializers import attendance_to_json, report_row_to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/checkins", methods=["POST"], endpoint="checkins_create")
    @json_errors
    def checkins_create():
        data = json_body()
        record = container.check_in_processor.check_in(
            data.get("tokenPayload"),
            data.get("studentName"),
            data.get("studentId"),
            data.get("location"),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "message": "Attendance marked successfully",
                    "attendance": attendance_to_json(record),
                }
            ),
            201,
        )

    @app.route("/attendance", methods=["GET"], endpoint="attendance_list")
    @json_errors
    def attendance_list():
        rows = container.report_service.list_attendance(course_id=query_int("courseId"), on_date=query_date())
        return jsonify([report_row_to_json(r) for r in rows])

    @app.route("/attendance/<int:course_id>", methods=["GET"], endpoint="attendance_for_course")
    @json_errors
    def attendance_for_course(course_id: int):
        rows = container.report_service.course_attendance(course_id, on_date=query_date())
        return jsonify([report_row_to_json(r) for r in rows])

    @app.route("/attendance/<int:course_id>/session-report", methods=["GET"], endpoint="attendance_session_report")
    @json_errors
    def attendance_session_report(course_id: int):
        return jsonify(container.report_service.session_report(course_id, on_date=query_date()))

    @app.route("/attendance/<int:course_id>/export", methods=["GET"], endpoint="attendance_export")
    @json_errors
    def attendance_export(course_id: int):
        export = container.report_service.export_csv(course_id, on_date=query_date())
        # The response closes the stream, which deletes the temporary file.
        response = Response(export.stream, mimetype="text/csv")
        response.headers.set("Content-Disposition", "attachment", **attachment_options(export.filename))
        return response
