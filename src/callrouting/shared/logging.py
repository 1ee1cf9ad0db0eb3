"""
Structured JSON logging for call routing.

Each record is written to stdout as one JSON object. Code that handles a
single call wraps its work in ``bound_call(call_sid, ...)``; the call sid and
any other bound fields are then stamped on every record emitted inside the
block, so a routing decision and the warnings raised while building it can
be joined with the telephony call log.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterator, Mapping

from callrouting.config import get_settings

call_sid_var: ContextVar[str | None] = ContextVar("call_sid", default=None)
_bound_fields_var: ContextVar[Mapping[str, Any]] = ContextVar("bound_log_fields", default={})

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName", "extra_data"}


@contextmanager
def bound_call(call_sid: str | None = None, **fields: Any) -> Iterator[None]:
    """Stamp ``call_sid`` and ``fields`` on every record logged in the block.

    Bindings nest: inner fields are merged over outer ones, and a ``None``
    call sid keeps whatever sid is already bound.
    """
    sid_token = call_sid_var.set(call_sid) if call_sid else None
    fields_token = _bound_fields_var.set({**_bound_fields_var.get(), **fields})
    try:
        yield
    finally:
        _bound_fields_var.reset(fields_token)
        if sid_token is not None:
            call_sid_var.reset(sid_token)


def current_log_fields() -> dict[str, Any]:
    """Fields currently bound by ``bound_call``, call sid included."""
    fields = dict(_bound_fields_var.get())
    call_sid = call_sid_var.get()
    if call_sid:
        fields["call_sid"] = call_sid
    return fields


class StructuredFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(current_log_fields())

        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, dict):
            payload.update(extra_data)

        # logger.info(..., extra={...}) never overwrites the core keys
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS:
                continue
            payload[f"extra_{key}" if key in payload else key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def _stdout_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    return handler


def get_logger(name: str) -> logging.Logger:
    """Logger writing JSON to stdout at the configured level.

    Args:
        name: Logger name (typically __name__).
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(_stdout_handler())
        logger.propagate = False
    logger.setLevel(getattr(logging, get_settings().log_level, logging.INFO))
    return logger


def setup_logging() -> None:
    """Route the root logger through the JSON formatter."""
    root_logger = logging.getLogger()
    root_logger.setLevel(get_settings().log_level)
    root_logger.handlers = [_stdout_handler()]


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log ``message`` with ``extra`` as top-level JSON fields.

    Explicit fields win over fields bound by ``bound_call``.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"extra_data": extra})
