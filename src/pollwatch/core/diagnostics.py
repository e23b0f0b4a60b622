"""
Diagnostic sinks injected into watchers.

Watchers report per-tick detail ("file has not changed", "stopping") through a
sink rather than a global toggle, so each watcher can be observed, or silenced,
on its own.
"""

import logging
import threading
from collections import deque

from pollwatch.core.interfaces import IDiagnosticSink


class NullDiagnosticSink(IDiagnosticSink):
    """Sink that discards everything. Used when no sink is injected."""

    @property
    def enabled(self) -> bool:
        return False

    def emit(self, message: str) -> None:
        pass


class LoggingDiagnosticSink(IDiagnosticSink):
    """Forwards diagnostic messages to a standard library logger."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG):
        self.logger = logger or logging.getLogger("pollwatch.diagnostics")
        self.level = level

    @property
    def enabled(self) -> bool:
        return self.logger.isEnabledFor(self.level)

    def emit(self, message: str) -> None:
        self.logger.log(self.level, message)


class BufferedDiagnosticSink(IDiagnosticSink):
    """
    Keeps the most recent diagnostic messages in memory.

    The buffer is bounded; once full, the oldest message is discarded for each
    new one. The sink can be switched on and off at runtime.
    """

    def __init__(self, capacity: int = 10, enabled: bool = True):
        """
        Initialize the buffered sink.

        Args:
            capacity: Maximum number of retained messages
            enabled: Whether the sink starts out accepting messages
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._messages: deque[str] = deque(maxlen=capacity)
        self._enabled = enabled
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        """Stop accepting messages and drop anything buffered."""
        self._enabled = False
        self.clear()

    def emit(self, message: str) -> None:
        with self._lock:
            self._messages.append(message)

    @property
    def messages(self) -> list[str]:
        with self._lock:
            return list(self._messages)

    def drain(self) -> list[str]:
        """Return and remove all buffered messages."""
        with self._lock:
            drained = list(self._messages)
            self._messages.clear()
        return drained

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()
