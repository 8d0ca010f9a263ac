"""Logging setup for enforce-toggles.

Report lines go to stdout; log records go to stderr so a pre-commit run can
show the report without diagnostic noise, and CI can collect JSON logs.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Mapping, Optional


DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMATS = ("text", "json")


class AuditLogFormatter(logging.Formatter):
    """Single-line formatter: ``<iso time> <LEVEL> <logger>: <message>`` or JSON."""

    def __init__(self, as_json: bool = False) -> None:
        super().__init__()
        self.as_json = as_json

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:  # noqa: N802
        return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds")

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record)
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        if self.as_json:
            return json.dumps(
                {"timestamp": timestamp, "severity": record.levelname, "logger": record.name, "message": message},
                ensure_ascii=False,
            )
        return f"{timestamp} {record.levelname} {record.name}: {message}"


def configure_logging(environ: Optional[Mapping[str, str]] = None) -> None:
    """Install a stderr handler on the root logger.

    Supported env vars:
    - TOGGLES_LOG_LEVEL: Python logging level (default: WARNING)
    - TOGGLES_LOG_FORMAT: text|json (default: text)

    Args:
        environ: Mapping to read from; defaults to ``os.environ``.
    """
    env = os.environ if environ is None else environ

    level_name = (env.get("TOGGLES_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    log_format = (env.get("TOGGLES_LOG_FORMAT") or "text").strip().lower()
    if log_format not in LOG_FORMATS:
        log_format = "text"

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(AuditLogFormatter(as_json=log_format == "json"))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
