import time
from typing import Callable

import structlog
import uuid6
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


class CorrelationIdMiddleware:
    """Binds a correlation id to every log line emitted while serving a request.

    The id comes from the ``X-Request-ID`` header when the client sends a
    usable one, otherwise a UUIDv7 is generated.  It is echoed back in the
    response header of the same name.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = _incoming_request_id(request) or str(uuid6.uuid7())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        start = time.monotonic()
        logger.info("request_started", method=request.method, path=request.path)

        response = self.get_response(request)

        logger.info(
            "request_finished",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )

        response[REQUEST_ID_HEADER] = cid
        return response


def _incoming_request_id(request: HttpRequest) -> str:
    value = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if len(value) > MAX_REQUEST_ID_LENGTH or not value.isprintable():
        return ""
    return value
