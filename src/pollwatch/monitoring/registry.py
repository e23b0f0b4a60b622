"""
Live watcher accounting.

Watchers increment their registry when their poll loop starts and decrement it
after the loop has exited and the stopped signal has been sent. A registry can be
injected per watcher; watchers created without one share the process default.
"""

import logging
import threading
from enum import Enum

logger = logging.getLogger(__name__)


class WatcherKind(str, Enum):
    """Watcher kind enumeration."""

    FILE = "file"
    FOLDER = "folder"


class WatcherRegistry:
    """Counts currently running watchers per kind."""

    def __init__(self):
        self._counts: dict[WatcherKind, int] = {kind: 0 for kind in WatcherKind}
        self._lock = threading.Lock()

    def increment(self, kind: WatcherKind | str) -> int:
        kind = WatcherKind(kind)
        with self._lock:
            self._counts[kind] += 1
            return self._counts[kind]

    def decrement(self, kind: WatcherKind | str) -> int:
        """Decrement the count for a kind; the count never goes below zero."""
        kind = WatcherKind(kind)
        with self._lock:
            if self._counts[kind] == 0:
                logger.warning("Unbalanced decrement of %s watcher count", kind.value)
                return 0
            self._counts[kind] -= 1
            return self._counts[kind]

    def count(self, kind: WatcherKind | str) -> int:
        with self._lock:
            return self._counts[WatcherKind(kind)]

    @property
    def file_watchers(self) -> int:
        return self.count(WatcherKind.FILE)

    @property
    def folder_watchers(self) -> int:
        return self.count(WatcherKind.FOLDER)

    def reset(self) -> None:
        with self._lock:
            for kind in WatcherKind:
                self._counts[kind] = 0

    def __repr__(self) -> str:
        return f"WatcherRegistry(file={self.file_watchers}, folder={self.folder_watchers})"


_default_registry = WatcherRegistry()


def get_default_registry() -> WatcherRegistry:
    """Get the registry shared by watchers created without an explicit one."""
    return _default_registry


def number_of_file_watchers() -> int:
    """Get the number of file watchers running against the default registry."""
    return _default_registry.file_watchers


def number_of_folder_watchers() -> int:
    """Get the number of folder watchers running against the default registry."""
    return _default_registry.folder_watchers
