"""
Coolify Worker Structured Logging
=================================

JSON lines for production, plain text for development. Services attach
context (command, tenant, project, application, workflow step) through
``extra=``; the JSON formatter lifts those onto the top-level object.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Optional

SERVICE_NAME = "coolify-worker"

CONTEXT_FIELDS = ("command", "tenant_id", "project_uuid", "app_uuid", "step")

# Libraries that log every request at INFO
NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore")

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, stamped with the record's own creation time."""

    def __init__(self, service: str = SERVICE_NAME):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(
    level: str = "INFO",
    fmt: str = "json",
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """
    Replace the root handlers with a single stream handler.

    Args:
        level: Log level name; unknown names fall back to INFO
        fmt: "json" for structured output, anything else for plain text
        stream: Destination, stdout by default

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler
