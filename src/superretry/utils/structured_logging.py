r"""Structured logging utilities for machine-readable log output.

``Retry.execute`` tags each of its log records with ``execution_id``,
``attempt`` and, when a retry is scheduled, ``delay_ms``. The formatter
below renders those records as JSON lines, which is useful when shipping
logs to an aggregation system.

The formatter is opt-in: superretry never installs handlers itself.

Example:
    ```python
    import logging
    from superretry.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("superretry")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_execution_id",
    "get_execution_id",
    "set_execution_id",
]

import contextvars
import json
import logging
import time
from typing import Any

# Identifier of the Retry.execute call running in the current context
_execution_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "execution_id", default=None
)

# Attributes present on every LogRecord; anything else came from ``extra``
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def get_execution_id() -> str | None:
    """Get the execution id of the current context.

    Returns:
        The execution id, or None outside of ``Retry.execute``.
    """
    return _execution_id.get()


def set_execution_id(execution_id: str) -> contextvars.Token:
    """Set the execution id for the current context.

    Args:
        execution_id: The id to attach to subsequent log records.

    Returns:
        A token that can be passed to ``clear_execution_id`` to restore
        the previous value.

    Example:
        ```pycon
        >>> from superretry.utils.structured_logging import (
        ...     clear_execution_id,
        ...     get_execution_id,
        ...     set_execution_id,
        ... )
        >>> token = set_execution_id("exec-1")
        >>> get_execution_id()
        'exec-1'
        >>> clear_execution_id(token)
        >>> get_execution_id()

        ```
    """
    return _execution_id.set(execution_id)


def clear_execution_id(token: contextvars.Token | None = None) -> None:
    """Clear the execution id, or restore the value saved in ``token``."""
    if token is not None:
        _execution_id.reset(token)
    else:
        _execution_id.set(None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record becomes one JSON object with the fields ``timestamp``,
    ``level``, ``logger``, ``message``, ``module``, ``function`` and
    ``line``, plus ``execution_id`` when set, ``exception`` when the
    record carries exception info, and every field passed through
    ``extra``. Values that are not JSON serializable are rendered with
    ``repr``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        execution_id = get_execution_id()
        if execution_id is not None:
            log_data["execution_id"] = execution_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=repr)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        if datefmt:
            return time.strftime(datefmt, time.gmtime(record.created))
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )
