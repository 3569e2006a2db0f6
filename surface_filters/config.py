import logging
import os
from dataclasses import dataclass


@dataclass
class FilterSettings:
    port: int
    log_level: str
    fill_color: str
    erosion_tolerance: float
    max_pixels: int
    task_workers: int
    task_timeout: float
    cache_ttl: float
    timeout: float
    retries: int

    @classmethod
    def from_env(cls) -> "FilterSettings":
        return cls(
            port=int(os.getenv("PORT", "5600")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            fill_color=os.getenv("FILL_COLOR", "rgba(255, 255, 255, 1)"),
            erosion_tolerance=float(os.getenv("EROSION_TOLERANCE", "0.01")),
            max_pixels=int(os.getenv("MAX_PIXELS", str(2048 * 2048))),
            task_workers=int(os.getenv("TASK_WORKERS", "2")),
            task_timeout=float(os.getenv("TASK_TIMEOUT", "60")),
            cache_ttl=float(os.getenv("CACHE_TTL", "30")),
            timeout=float(os.getenv("SOURCE_TIMEOUT", "10.0")),
            retries=int(os.getenv("SOURCE_RETRIES", "2")),
        )


SETTINGS = FilterSettings.from_env()


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level)
    return logging.getLogger("surface-filters")
