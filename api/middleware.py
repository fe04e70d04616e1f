# ============================================================================
# File: api/middleware.py
# ============================================================================

import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
LATENCY_HEADER = "X-API-Latency-ms"
MAX_REQUEST_ID_LENGTH = 128


def request_id_for(request: Request) -> str:
    """Caller-supplied request id when usable, otherwise a fresh UUID."""
    incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH and incoming.isprintable():
        return incoming
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags every billboard API request with a request id and latency.

    The id is stored on request.state for route log lines, echoed in the
    response headers, and written to one access line per request. Client
    errors log at WARNING, server errors at ERROR.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.request_id = request_id_for(request)
        started = time.perf_counter()

        response: Response = await call_next(request)

        latency_ms = int((time.perf_counter() - started) * 1000)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        response.headers[LATENCY_HEADER] = str(latency_ms)

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        query = f"?{request.url.query}" if request.url.query else ""
        logger.log(
            level,
            f"[{request.state.request_id}] {request.method} {request.url.path}{query} "
            f"-> {response.status_code} ({latency_ms}ms)"
        )
        return response
