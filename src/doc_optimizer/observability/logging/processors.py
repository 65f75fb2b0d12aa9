"""Observability – get_logger and log_safely helpers."""
from __future__ import annotations

from typing import Any

import structlog


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


def log_safely(logger: Any, level: str, event: str, **fields: Any) -> None:
    """Emit *event* on *logger* at *level*; errors raised by the backend are dropped.

    Used on control-flow paths where logging is advisory and must never
    change the outcome of the surrounding operation.
    """
    try:
        getattr(logger, level)(event, **fields)
    except Exception:  # noqa: BLE001
        pass


__all__ = ["get_logger", "log_safely"]
