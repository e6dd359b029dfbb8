from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

from .config import resolve_log_settings


def setup_logging(level: str | None = None, fmt: str | None = None) -> logging.Logger:
    """
    Configure the root logger with one stderr handler.

    `fmt="json"` emits JSON lines, anything else plain text. Defaults come from
    `MS_LOG_LEVEL` / `MS_LOG_FORMAT`.
    """
    env_level, env_fmt = resolve_log_settings()
    level = (level or env_level).upper()
    fmt = (fmt or env_fmt).lower()

    logger = logging.getLogger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            json_ensure_ascii=False,
        )
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(level)

    # Streamlit's watcher is chatty at INFO.
    logging.getLogger("watchdog").setLevel(logging.WARNING)
    return logger
