"""Request context middleware - request id propagation, timing and access logging.

Every response carries ``X-Request-ID`` (taken from the request when the
client sent one) and ``X-Response-Time``. The id is stored in a contextvar so
that every log line emitted while serving the request includes it. Requests
addressing one document (``/api/docs/{doc_id}...``) also tag their log lines
with that document ID.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ..core.logging_config import document_id_var, request_id_var

logger = logging.getLogger(__name__)

_DOCUMENT_PATH = re.compile(r"^/api/docs/([^/]+)")


def document_id_from_path(path: str) -> str:
    """Document ID addressed by a request path, or "" for collection routes."""
    match = _DOCUMENT_PATH.match(path)
    return match.group(1) if match else ""


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Single middleware handling request-id, timing and request logging."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # --- Request ID ---
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
        token = request_id_var.set(rid)
        doc_token = document_id_var.set(document_id_from_path(request.scope["path"]))

        try:
            # --- Timing ---
            start = time.monotonic()
            response = await call_next(request)
            duration_ms = round((time.monotonic() - start) * 1000, 1)

            # --- Response headers ---
            response.headers["X-Request-ID"] = rid
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            # --- Structured request log ---
            logger.info(
                f"{request.method} {request.url.path} {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )
            return response
        finally:
            document_id_var.reset(doc_token)
            request_id_var.reset(token)
