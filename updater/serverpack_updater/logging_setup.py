"""
Logging for the updater
-----------------------
Console output (stderr) for CI logs, optional JSON records for log shippers
and an optional rotating file via LOG_FILE. The scratch directory is deleted
after every run, so logs never go there.
"""

from __future__ import annotations
import json
import logging
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .settings import Settings

ROOT_LOGGER = "serverpack.updater"
PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "function": record.funcName,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JsonLogFormatter()
    return logging.Formatter(fmt=PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(settings: Settings) -> None:
    level = settings.log_level.upper()
    fmt = _formatter(settings.log_json)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    if settings.log_file is None:
        return
    try:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(settings.log_file, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    except OSError as e:
        root.warning("Could not open log file %s, continuing with console logging only: %s", settings.log_file, e)
        return
    fh.setFormatter(fmt)
    fh.setLevel(level)
    logging.getLogger(ROOT_LOGGER).addHandler(fh)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
