from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, json_errors
from ..common.serializers import course_to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/courses", methods=["GET"], endpoint="courses_list")
    @json_errors
    def courses_list():
        return jsonify([course_to_json(c) for c in container.course_service.list_all()])

    @app.route("/courses", methods=["POST"], endpoint="courses_create")
    @json_errors
    def courses_create():
        data = json_body()
        course = container.course_service.create(
            name=data.get("name"),
            instructor=data.get("instructor"),
            schedule=data.get("schedule"),
            description=data.get("description"),
        )
        return jsonify(course_to_json(course)), 201

    @app.route("/courses/<int:course_id>", methods=["GET"], endpoint="courses_get")
    @json_errors
    def courses_get(course_id: int):
        return jsonify(course_to_json(container.course_service.get(course_id)))
