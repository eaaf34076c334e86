from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_errors, query_date, query_int
from ..common.serializers import course_summary_to_json, student_summary_to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @json_errors
    def dashboard():
        return jsonify(container.report_service.dashboard())

    @app.route("/recent-activity", methods=["GET"], endpoint="recent_activity")
    @json_errors
    def recent_activity():
        activities = container.report_service.recent_activity()
        return jsonify(
            [
                {**a, "timestamp": a["timestamp"].isoformat() if a["timestamp"] else None}
                for a in activities
            ]
        )

    @app.route("/reports/courses", methods=["GET"], endpoint="reports_by_course")
    @json_errors
    def reports_by_course():
        grouped = container.report_service.by_course(course_id=query_int("courseId"), on_date=query_date())
        return jsonify({str(course_id): course_summary_to_json(s) for course_id, s in grouped.items()})

    @app.route("/reports/students", methods=["GET"], endpoint="reports_by_student")
    @json_errors
    def reports_by_student():
        summaries = container.report_service.by_student(course_id=query_int("courseId"), on_date=query_date())
        return jsonify([student_summary_to_json(s) for s in summaries])
