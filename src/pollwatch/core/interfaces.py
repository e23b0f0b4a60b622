"""
Abstract interfaces for the pollwatch package.

These interfaces define the contracts between the watchers and their
collaborators, so strategies and diagnostic sinks can be swapped at
construction time and replaced with doubles in tests.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pollwatch.models import ItemMetadata

if TYPE_CHECKING:
    from pollwatch.monitoring.channel import Channel


class IChangeDetectionStrategy(ABC):
    """Interface for capturing the metadata a watcher compares between ticks."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the identifier of this strategy."""
        pass

    @abstractmethod
    def capture(self, path: str) -> ItemMetadata | None:
        """
        Capture the current metadata of a filesystem entry.

        Args:
            path: Path of the entry to inspect

        Returns:
            Comparable metadata value, or None if the entry cannot be
            resolved (removed, unreadable) at the time of the call
        """
        pass


class IDiagnosticSink(ABC):
    """Interface for receiving tick-level diagnostic messages from watchers."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Check whether messages are currently accepted."""
        pass

    @abstractmethod
    def emit(self, message: str) -> None:
        """
        Accept one fully formatted diagnostic message.

        Args:
            message: Text to record
        """
        pass

    def log(self, message: str, *args: object) -> None:
        """
        Format and emit a message if the sink is enabled.

        Formatting is skipped entirely when the sink is disabled.

        Args:
            message: printf-style format string
            *args: Values interpolated into the message
        """
        if not self.enabled:
            return
        self.emit(message % args if args else message)


class IWatcher(ABC):
    """Interface shared by file and folder watchers."""

    @property
    @abstractmethod
    def moved(self) -> "Channel[bool]":
        """Channel signalling that the watched target is no longer observed."""
        pass

    @property
    @abstractmethod
    def stopped(self) -> "Channel[bool]":
        """Channel signalling that the poll loop has exited."""
        pass

    @abstractmethod
    def start(self) -> None:
        """Start the poll loop."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Request the poll loop to exit at its next tick boundary."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check whether the poll loop is currently running."""
        pass
