from __future__ import annotations

import io
import logging
from concurrent.futures import TimeoutError as TaskTimeout
from dataclasses import asdict, fields
from typing import Any, Dict

from flask import Flask, jsonify, request
from PIL import Image, UnidentifiedImageError

from .config import SETTINGS, configure_logging
from .engine import MASKS, MemorySurface
from .infrastructure.network import FETCHER
from .infrastructure.responses import send_result
from .infrastructure.serialization import image_to_string
from .infrastructure.tasks import COMMANDS, run_task

APP_VERSION = "1.0.0"

log = logging.getLogger(__name__)


def _check_size(image: Image.Image) -> Image.Image:
    """Reject images over ``SETTINGS.max_pixels`` using only their header size."""

    width, height = image.size
    if width * height > SETTINGS.max_pixels:
        raise ValueError(f"Image of {width * height} pixels exceeds the {SETTINGS.max_pixels} pixel limit")
    return image


def _load_upload(field: str, url_field: str) -> Image.Image | None:
    upload = request.files.get(field)
    if upload is not None:
        return _check_size(Image.open(io.BytesIO(upload.read()))).convert("RGBA")
    source_url = request.values.get(url_field)
    if source_url:
        return _check_size(FETCHER.fetch_source(source_url))
    return None


def _image_request(cmd: str) -> Dict[str, Any]:
    """Translate an image upload plus form/query parameters into a task request."""

    data: Dict[str, Any] = request.values.to_dict()
    data.pop("source_url", None)
    data.pop("blend_url", None)
    data.update(type="Filter", cmd=cmd)

    if cmd == "SumHistogram":
        return data

    image = _load_upload("image", "source_url")
    if image is None:
        raise ValueError("An 'image' upload or 'source_url' is required")
    data.update(width=image.size[0], height=image.size[1])
    data["imageString"] = image_to_string(MemorySurface.from_image(image))

    if cmd == "Blend":
        overlay = _load_upload("blend", "blend_url")
        if overlay is None:
            raise ValueError("Blend requires a 'blend' upload or 'blend_url'")
        data["imageBlendString"] = image_to_string(MemorySurface.from_image(overlay))
    return data


def create_app() -> Flask:
    configure_logging()
    app = Flask(__name__)

    @app.route("/filter", methods=["POST"])
    def filter_task():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify(error="Expected a JSON object"), 400
        try:
            messages = run_task(payload)
        except TaskTimeout:
            log.error("%s request timed out after %ss", payload.get("cmd"), SETTINGS.task_timeout)
            return jsonify(error="Task timed out", tag=payload.get("tag")), 504

        status = 400 if messages and messages[-1]["cmd"] == "Error" else 200
        return jsonify(messages=messages), status

    @app.route("/filter/<cmd>", methods=["POST"])
    def filter_image(cmd: str):
        if cmd not in COMMANDS:
            return (f"Unknown command: {cmd}", 404)
        try:
            data = _image_request(cmd)
        except (ValueError, UnidentifiedImageError) as exc:
            return (str(exc), 400)
        except RuntimeError as exc:
            return (f"Source Error: {exc}", 502)

        try:
            messages = run_task(data)
        except TaskTimeout:
            return ("Task timed out", 504)

        result = messages[-1]
        if result["cmd"] == "Error":
            return (result["msg"], 400)
        return send_result(cmd, result["msg"])

    @app.route("/masks")
    def masks():
        return jsonify(
            {
                name: {"weights": [list(row) for row in mask.weights], "factor": mask.factor, "bias": mask.bias}
                for name, mask in MASKS.items()
            }
        )

    @app.route("/health")
    def health():
        return jsonify(ok=True, version=APP_VERSION, commands=sorted(COMMANDS))

    @app.route("/settings", methods=["GET", "PATCH"])
    def settings_view():
        if request.method == "GET":
            return jsonify(asdict(SETTINGS))

        payload = request.get_json(silent=True) or {}
        errors: dict[str, str] = {}
        applied: dict[str, object] = {}

        for field in fields(SETTINGS):
            if field.name not in payload:
                continue

            raw_value = payload[field.name]
            try:
                if field.type is int:
                    coerced = int(raw_value)
                elif field.type is float:
                    coerced = float(raw_value)
                else:
                    coerced = str(raw_value)
            except (TypeError, ValueError):
                errors[field.name] = f"Expected {field.type.__name__}"
                continue

            setattr(SETTINGS, field.name, coerced)
            applied[field.name] = coerced

        status = 400 if errors else 200
        return (
            jsonify(updated=applied, errors=errors, settings=asdict(SETTINGS)),
            status,
        )

    return app


# Expose a module-level Flask application for Gunicorn import paths like ``surface_filters.app:app``
# and provide a conventional ``application`` alias for WSGI servers that default to that name.
app = create_app()
application = app
