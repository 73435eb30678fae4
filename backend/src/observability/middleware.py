"""FastAPI middleware for observability.

Provides request ID generation and logging for all HTTP requests.
"""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .request_id import RESPONSE_HEADER, bind_request_id, resolve_request_id

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware to generate and inject request IDs.

    Honors an incoming X-Request-ID or X-Correlation-ID header so a client
    can correlate its own logs with ours.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id, source = resolve_request_id(request.headers)
        bind_request_id(request_id, source)

        start_time = time.time()
        logger.info(f"{request.method} {request.url.path} (request id from {source})")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {type(e).__name__}",
                extra={"duration_ms": round(duration_ms, 2)},
                exc_info=True
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Request completed: {response.status_code}",
            extra={
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            }
        )

        response.headers[RESPONSE_HEADER] = request_id
        return response
