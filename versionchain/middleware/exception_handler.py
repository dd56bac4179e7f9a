"""Exception handler turning VersionChainError into structured JSON responses."""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse

from ..core.logging_config import request_id_var
from ..exceptions import VersionChainError

logger = logging.getLogger(__name__)


async def version_chain_exception_handler(request: Request, exc: VersionChainError) -> JSONResponse:
    """
    Log a VersionChainError against the chain it concerns and render it.

    Caller mistakes (4xx) log at WARNING. Chain integrity and database
    failures (5xx) log at ERROR, since they mean stored data cannot be read
    back. The body is ``exc.to_dict()`` plus the request id, so a client
    report can be matched to the server log line.
    """
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    extra = {
        "error_code": exc.error_code.value,
        "status_code": exc.status_code,
        "path": request.url.path,
        "method": request.method,
        "details": exc.details,
    }
    # Chain coordinates carried by the error take precedence over the path.
    for key in ("document_id", "version"):
        if key in exc.details:
            extra[key] = exc.details[key]

    logger.log(level, f"{exc.error_code.value}: {exc.message}", extra=extra)

    body = exc.to_dict()
    body["request_id"] = request_id_var.get("")
    return JSONResponse(status_code=exc.status_code, content=body)
