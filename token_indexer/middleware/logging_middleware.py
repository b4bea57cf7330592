"""
Request logging for the balances API.

Every request gets a short id, bound into structlog's context so provider
warnings emitted while resolving carry it too. The closing ``http_request``
line names the chain and resolution status of each address the route
resolved, which the balances router leaves on ``request.state``.
"""

import time
import uuid
from typing import Any, Dict

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.stdlib.get_logger("http")

REQUEST_ID_HEADER = "x-request-id"


def resolution_fields(request: Request) -> Dict[str, Any]:
    resolutions = getattr(request.state, "resolutions", None)
    if not resolutions:
        return {}
    if len(resolutions) == 1:
        chain, status = resolutions[0]
        return {"chain": chain, "resolution": status}
    return {
        "addresses": len(resolutions),
        "resolutions": sorted({status for _, status in resolutions}),
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            status_code = response.status_code if response is not None else 500
            level = "error" if status_code >= 500 else "warning" if status_code >= 400 else "info"
            getattr(logger, level)(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
                **resolution_fields(request),
            )
            structlog.contextvars.unbind_contextvars("request_id")
