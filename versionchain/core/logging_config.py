"""Structured logging configuration for versionchain.

Every record is tagged with the chain it concerns: ``document_id`` and
``version`` come from the ``extra`` of the logging call, and the document
falls back to the one the current request addresses (set by the request
context middleware together with the request id).

JSON output puts ``request_id``, ``document_id`` and ``version`` at the top
level and nests any other ``extra`` fields under ``context``. Text output
prefixes the message with ``[document_id@vN]``.
"""

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional


# Shared contextvars: set by request_context middleware, read by the filter.
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")
document_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("document_id", default="")

_CHAIN_FIELDS = ("document_id", "version")


class ChainContextFilter(logging.Filter):
    """Fill in ``request_id``, ``document_id``, ``version`` and the ``chain`` label."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("")
        if not getattr(record, "document_id", None):
            record.document_id = document_id_var.get("") or None
        if not hasattr(record, "version"):
            record.version = None

        if record.document_id and record.version is not None:
            record.chain = f"{record.document_id}@v{record.version}"
        else:
            record.chain = record.document_id or "-"
        return True


class _JsonFormatter(logging.Formatter):
    """Emit each log record as a single JSON line."""

    # Keys that belong to the LogRecord itself, plus the ones the filter adds.
    _RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()) | {
        "request_id", "chain", *_CHAIN_FIELDS,
    }

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if getattr(record, "request_id", ""):
            payload["request_id"] = record.request_id
        for key in _CHAIN_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        context = {
            key: value for key, value in record.__dict__.items() if key not in self._RESERVED
        }
        if context:
            payload["context"] = context

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure application-wide logging.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL. Defaults to INFO.
        log_format: ``"json"`` for structured output, ``"text"`` for human-readable.
                    Defaults to ``"json"``.
    """
    level = (log_level or "INFO").upper()
    fmt = (log_format or "json").lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ChainContextFilter())

    if fmt == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s [%(chain)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # The request log already covers access lines; SQL echo is noisy.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging configured", extra={"level": level, "format": fmt})
