"""Correlation ids for document requests.

Each request carries one id through its log lines, its audit entries and the
X-Request-ID response header. A client may supply its own id through
X-Request-ID or X-Correlation-ID; the name of the header that was honored is
kept next to the id so logs show where it came from.
"""

import uuid
from contextvars import ContextVar
from typing import Mapping, Optional, Tuple

# Incoming headers accepted as a correlation id, in order of preference
REQUEST_ID_HEADERS = ("X-Request-ID", "X-Correlation-ID")
RESPONSE_HEADER = "X-Request-ID"

NO_REQUEST_ID = "no-request-id"
GENERATED = "generated"

# Longer client ids are ignored and replaced
MAX_CLIENT_ID_LENGTH = 128

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
request_id_source_var: ContextVar[Optional[str]] = ContextVar("request_id_source", default=None)


def resolve_request_id(headers: Mapping[str, str]) -> Tuple[str, str]:
    """Pick the id for an incoming request.

    Returns:
        Tuple of (request_id, source) where source is the header that
        supplied the id, or "generated" when none was usable

    Example:
        >>> resolve_request_id({"X-Correlation-ID": "loan-42"})
        ('loan-42', 'X-Correlation-ID')
    """
    for header in REQUEST_ID_HEADERS:
        value = (headers.get(header) or "").strip()
        if value and len(value) <= MAX_CLIENT_ID_LENGTH and value.isprintable():
            return value, header
    return str(uuid.uuid4()), GENERATED


def bind_request_id(request_id: str, source: str) -> None:
    """Make request_id current for the rest of this request's context."""
    request_id_var.set(request_id)
    request_id_source_var.set(source)


def get_request_id() -> str:
    return request_id_var.get() or NO_REQUEST_ID


def get_request_id_source() -> Optional[str]:
    return request_id_source_var.get()
