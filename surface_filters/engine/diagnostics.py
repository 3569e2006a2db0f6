from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

Hook = Callable[[str, Any], None]


@dataclass(frozen=True)
class Diagnostics:
    """Optional progress/log/warn/error callbacks invoked inline by filters.

    Each hook receives the filter name and a payload (a percentage for
    ``progress``, a message otherwise). Hooks run on the scanning thread, so
    they must return quickly.
    """

    progress: Optional[Hook] = None
    log: Optional[Hook] = None
    warn: Optional[Hook] = None
    error: Optional[Hook] = None

    def report_progress(self, filter_name: str, step: int, total: int) -> None:
        if self.progress and total:
            self.progress(filter_name, math.ceil((step / total) * 100))

    def report_log(self, filter_name: str, message: str) -> None:
        if self.log:
            self.log(filter_name, message)

    def report_warning(self, filter_name: str, message: str) -> None:
        if self.warn:
            self.warn(filter_name, message)

    def report_missing(self, filter_name: str, x: float, y: float) -> None:
        self.report_warning(filter_name, f"Null color found at row {y} column {x}.")

    def report_error(self, filter_name: str, message: str) -> None:
        if self.error:
            self.error(filter_name, message)


SILENT = Diagnostics()


def logging_diagnostics(logger: logging.Logger) -> Diagnostics:
    return Diagnostics(
        progress=lambda name, pct: logger.debug("%s: %s%%", name, pct),
        log=lambda name, msg: logger.info("%s: %s", name, msg),
        warn=lambda name, msg: logger.warning("%s: %s", name, msg),
        error=lambda name, msg: logger.error("%s: %s", name, msg),
    )
