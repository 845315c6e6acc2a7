"""Structured logging utilities for universal UTF reading.

Loggers returned by :func:`get_logger` attach a component name and an optional
correlation ID to every record so that decode operations belonging to the
same caller request can be traced together.
"""

import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple


class CorrelationLogger(logging.LoggerAdapter):
    """Logger adapter that includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name for structured logging
        """
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]
        super().__init__(
            logging.getLogger(name),
            {"component": self.component, "correlation_id": correlation_id},
        )

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        """Merge correlation info into the caller's ``extra`` mapping."""
        combined_extra: Dict[str, Any] = dict(self.extra or {})
        if kwargs.get("extra"):
            combined_extra.update(kwargs["extra"])
        kwargs["extra"] = combined_extra
        return msg, kwargs

    def bind(self, **extra: Any) -> "CorrelationLogger":
        """Return a sibling logger that shares this logger's correlation info."""
        bound = CorrelationLogger(self.logger.name, self.correlation_id, self.component)
        bound.extra = {**(self.extra or {}), **extra}
        return bound


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)
