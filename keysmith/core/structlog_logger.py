"""Structlog logger factory and utilities for Keysmith."""

from typing import Any

import structlog


def get_struct_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger with the given name.

    Args:
        name: The logger name, usually __name__

    Returns:
        A bound structlog logger instance

    Note: For exception logging with debug stack traces, use this pattern:
        try:
            # some operation
        except Exception as e:
            exc_info = logging.getLogger().isEnabledFor(logging.DEBUG)
            logger.error("operation_failed", error=str(e), exc_info=exc_info)
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]


class StructlogMixin:
    """Mixin class to add structured logging capabilities to services."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._logger: structlog.stdlib.BoundLogger | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Get or create a logger for this service with bound context."""
        if self._logger is None:
            base_logger = get_struct_logger(self.__class__.__module__)
            self._logger = base_logger.bind(service=self.__class__.__name__)
        return self._logger


__all__ = ["StructlogMixin", "get_struct_logger"]
