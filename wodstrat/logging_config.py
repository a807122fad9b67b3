"""Central logging configuration for the WOD strategy core."""
from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from wodstrat.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILENAME = "wodstrat.log"

_configured = False


def build_logging_config(
    level: str,
    package_level: str | None = None,
    log_dir: Path | None = None,
) -> dict[str, Any]:
    """
    dictConfig schema for the host process.

    The root logger keeps ``level`` for third-party output while the
    ``wodstrat`` logger can be turned up or down on its own. Handlers carry no
    level so logger levels alone decide what is emitted. Without ``log_dir``
    only the console handler is installed.
    """
    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    }
    if log_dir is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": str(log_dir / LOG_FILENAME),
            "encoding": "utf-8",
            "formatter": "standard",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": LOG_FORMAT}},
        "handlers": handlers,
        "loggers": {
            "wodstrat": {"level": package_level or level},
        },
        "root": {
            "level": level,
            "handlers": list(handlers),
        },
    }


def configure_logging() -> None:
    """Configure logging once per process from ``Settings``."""

    global _configured
    if _configured:
        return

    try:
        settings = get_settings()
        level = settings.log_level
        package_level = settings.package_log_level
        log_dir = settings.log_dir if settings.log_to_file else None
    except ValidationError:
        # Invalid WODSTRAT_* values must not take console logging down with them.
        level, package_level, log_dir = "INFO", None, None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(build_logging_config(level, package_level, log_dir))
    _configured = True
