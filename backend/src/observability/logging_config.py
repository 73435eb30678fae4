"""Logging setup for the document service.

JSON lines by default; LOG_JSON=false switches to a plain format for local
runs. Every record is stamped with the request id and the header it came
from, and document fields passed through ``extra=`` are lifted into the JSON
payload.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from .request_id import NO_REQUEST_ID, get_request_id, get_request_id_source

SERVICE_NAME = "loan-documents"

# Attributes copied into the payload when a log call supplies them
DOCUMENT_FIELDS = ("document_id", "user_id", "storage_path", "status_code", "duration_ms")

PLAIN_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s"

_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "botocore", "boto3", "urllib3")


class RequestContextFilter(logging.Filter):
    """Stamp records with the current request id and its source header."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        record.request_id_source = get_request_id_source()
        return True


class DocumentJSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "logger": record.name,
            "request_id": getattr(record, "request_id", NO_REQUEST_ID),
            "message": record.getMessage(),
        }

        source = getattr(record, "request_id_source", None)
        if source:
            payload["request_id_source"] = source

        for name in DOCUMENT_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)

        if record.exc_info:
            payload["error"] = repr(record.exc_info[1])
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR); unknown names fall back to INFO
        json_format: JSON lines if True, PLAIN_FORMAT otherwise
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(DocumentJSONFormatter() if json_format else logging.Formatter(PLAIN_FORMAT))
    handler.addFilter(RequestContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
