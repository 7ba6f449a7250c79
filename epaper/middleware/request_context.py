"""Request context middleware: X-Request-ID propagation and per-request access log.

The access log line also names the edition, page or hotspot the request
addressed, taken from the matched route's path parameters.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("epaper.request")

RESOURCE_PATH_PARAMS = ("edition_id", "page_id", "hotspot_id")


def resource_ids(path_params: dict) -> dict[str, int]:
    """Numeric edition/page/hotspot ids present in a matched route's path."""
    ids = {}
    for name in RESOURCE_PATH_PARAMS:
        value = path_params.get(name)
        if value is not None and str(value).isdigit():
            ids[name] = int(value)
    return ids


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns a request ID, times the request and logs one line per request."""

    async def dispatch(self, request: Request, call_next):
        # Admin frontend may send its own id
        req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_id_var.set(req_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        # Routing fills path_params on the shared scope
        ids = resource_ids(request.path_params)
        target = " ".join(f"{name}={value}" for name, value in ids.items())

        logger.info(
            "%s %s %s %.1fms%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            f" {target}" if target else "",
            extra={
                "event": "http.request",
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                **ids,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
