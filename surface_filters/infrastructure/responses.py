from __future__ import annotations

import io

from flask import Response, abort, send_file
from PIL import Image

from .serialization import surface_from_string
from .tasks import HISTOGRAM_COMMANDS


def send_png(img: Image.Image):
    buffer = io.BytesIO()
    img.save(buffer, "PNG", optimize=True)
    buffer.seek(0)
    return send_file(buffer, mimetype="image/png")


def send_result(cmd: str, msg: str):
    """Encode a task result for HTTP: histograms as text, images as PNG."""

    if cmd in HISTOGRAM_COMMANDS:
        return Response(msg, mimetype="text/plain")

    surface = surface_from_string(msg)
    if surface is None:
        abort(500, description=f"{cmd} produced a malformed image")
    return send_png(surface.to_image())
