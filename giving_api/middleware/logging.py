"""
Request logging. Binds request id, trace id and gateway user to structlog
contextvars so every log line emitted while serving the request carries them.
"""
import time
import uuid

from fastapi import Request
from opentelemetry import trace
import structlog

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "x-request-id"


def _current_trace_id() -> str:
    context = trace.get_current_span().get_span_context()
    return format(context.trace_id, "032x") if context.is_valid else ""


async def logging_middleware(request: Request, call_next):
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    started = time.perf_counter()

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        trace_id=_current_trace_id(),
        user_id=request.headers.get("x-user-id", "")
    )

    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Request crashed", method=request.method, path=request.url.path)
        raise

    latency = round(time.perf_counter() - started, 3)
    response.headers[REQUEST_ID_HEADER] = request_id
    # Health checks and scrapes would drown everything else
    if not request.url.path.startswith(("/health", "/metrics")):
        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            latency_seconds=latency
        )

    structlog.contextvars.clear_contextvars()
    return response
