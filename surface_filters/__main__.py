"""Serve the filter task protocol with Flask's development server."""

from __future__ import annotations

import logging

from .app import app
from .config import SETTINGS
from .infrastructure.tasks import COMMANDS, shutdown

log = logging.getLogger(__name__)


def main() -> None:
    log.info("Serving %d filter commands on port %s", len(COMMANDS), SETTINGS.port)
    try:
        app.run(host="0.0.0.0", port=SETTINGS.port, debug=False)
    finally:
        shutdown()


if __name__ == "__main__":
    main()
