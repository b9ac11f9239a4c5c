"""Logging setup shared by every module: console plus a dated file under logs/."""
from __future__ import annotations

import logging
import os
import sys
from datetime import date
from pathlib import Path

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

# HTTP client libraries log every connection at DEBUG
QUIET_LOGGERS: tuple[str, ...] = ("urllib3", "charset_normalizer")

_configured = False


def get_logger(name: str) -> logging.Logger:
    global _configured
    if not _configured:
        _configure()
        _configured = True
    return logging.getLogger(name)


def _file_logging_enabled() -> bool:
    return os.environ.get("SCRAPER_LOG_FILE", "true").strip().lower() not in ("0", "false", "no", "off")


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _configure() -> None:
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Someone (a test runner, an embedding app) already owns the handlers
    if root.handlers:
        return

    root.addHandler(_handler(logging.StreamHandler(sys.stdout), level))
    if not _file_logging_enabled():
        return
    log_dir = Path(os.environ.get("SCRAPER_LOG_DIR") or DEFAULT_LOG_DIR)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        path = log_dir / f"scraper_{date.today().isoformat()}.log"
        root.addHandler(_handler(logging.FileHandler(path, encoding="utf-8"), logging.DEBUG))
    except OSError as exc:
        root.warning("File logging disabled, cannot write to %s: %s", log_dir, exc)
