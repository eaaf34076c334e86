from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, json_errors
from ..common.serializers import student_to_json
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/students", methods=["GET"], endpoint="students_list")
    @json_errors
    def students_list():
        return jsonify([student_to_json(s) for s in container.student_service.list_all()])

    @app.route("/students", methods=["POST"], endpoint="students_create")
    @json_errors
    def students_create():
        data = json_body()
        enrolled = data.get("enrolledCourses") or []
        if not isinstance(enrolled, list):
            raise ValidationError("enrolledCourses must be a list")

        student = container.student_service.create(
            name=data.get("name"),
            student_number=data.get("studentId"),
            email=data.get("email"),
            enrolled_course_ids=enrolled,
        )
        return jsonify(student_to_json(student)), 201

    @app.route("/students/<int:student_id>", methods=["GET"], endpoint="students_get")
    @json_errors
    def students_get(student_id: int):
        return jsonify(student_to_json(container.student_service.get(student_id)))
