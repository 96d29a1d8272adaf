"""Structured logging helpers with run and directory context."""

from __future__ import annotations

import contextvars
import logging
import os
import uuid
from contextlib import contextmanager
from typing import Iterator

_RUN_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "run_id", default="-"
)
_DIRECTORY_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "directory", default="-"
)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | run_id=%(run_id)s | dir=%(directory)s | "
    "%(name)s | %(message)s"
)


class _InspectContextFilter(logging.Filter):
    """Inject run id and current directory into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID_VAR.get("-")
        record.directory = _DIRECTORY_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        has_filter = any(isinstance(f, _InspectContextFilter) for f in handler.filters)
        if not has_filter:
            handler.addFilter(_InspectContextFilter())


def configure_structured_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging format with run/directory context."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    _ensure_filter_on_root_handlers()


def set_run_id(run_id: str | None = None) -> str:
    """Set or generate run correlation ID."""
    value = run_id or uuid.uuid4().hex[:12]
    _RUN_ID_VAR.set(value)
    return value


def get_run_id() -> str:
    """Get current run correlation ID."""
    return _RUN_ID_VAR.get("-")


@contextmanager
def directory_scope(directory: str) -> Iterator[str]:
    """Tag logs emitted inside the block with the directory being inspected.

    The label uses forward slashes on every platform and ``.`` for the
    walk root. It is yielded so callers can reuse it in their own messages.
    """
    label = directory.replace(os.sep, "/") or "."
    token = _DIRECTORY_VAR.set(label)
    try:
        yield label
    finally:
        _DIRECTORY_VAR.reset(token)
