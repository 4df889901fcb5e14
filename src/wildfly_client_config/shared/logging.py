"""Structured logging utilities for configuration reading.

Every reader layer logs through a correlation-aware wrapper so that records
produced while reading one configuration file can be grouped together.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Logger that attaches correlation ID and component to every record."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID shared by one read
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split('.')[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def _log(self, level: int, message: str, extra: Optional[Dict[str, Any]], exc_info: bool = False) -> None:
        # building the extra mapping is skipped for disabled levels
        if self.logger.isEnabledFor(level):
            self.logger.log(level, message, extra=self._get_extra(extra), exc_info=exc_info)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra)

    def warning(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log a warning, with the active exception when ``exc_info`` is set."""
        self._log(logging.WARNING, message, extra, exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID shared by one read
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)
