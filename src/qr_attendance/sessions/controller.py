from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.http import json_body, json_errors
from ..common.serializers import issued_session_to_json
from ..common.validators import require_int
from ..container import Container
from .qr_image import render_qr_png


def register(app: Flask, container: Container) -> None:
    @app.route("/sessions", methods=["POST"], endpoint="sessions_issue")
    @json_errors
    def sessions_issue():
        data = json_body()
        issued = container.session_issuer.issue(
            require_int(data.get("courseId"), "courseId"),
            data.get("durationMinutes"),
        )
        return jsonify(issued_session_to_json(issued)), 201

    @app.route("/sessions/qr.png", methods=["GET"], endpoint="sessions_qr_image")
    @json_errors
    def sessions_qr_image():
        """PNG of a previously issued token, for projector display."""
        payload = request.args.get("tokenPayload", "")
        # Refuse to render anything we did not sign.
        container.token_codec.decode(payload)
        return send_file(io.BytesIO(render_qr_png(payload.strip())), mimetype="image/png")
