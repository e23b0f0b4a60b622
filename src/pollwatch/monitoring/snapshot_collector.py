"""
Snapshot collection for watched folders.

Walks a directory tree, applies the exclusion predicate, and captures metadata
for every remaining entry through the watcher's change detection strategy.
"""

import logging
import os
from collections.abc import Callable, Iterable
from pathlib import Path

from watchdog.utils.patterns import match_any_paths

from pollwatch.core.interfaces import IChangeDetectionStrategy
from pollwatch.core.strategies import TimestampStrategy
from pollwatch.models import ItemMetadata, Snapshot, TargetInaccessibleError

logger = logging.getLogger(__name__)

ExcludePredicate = Callable[[str], bool]


def _never_exclude(path: str) -> bool:
    return False


def build_exclude_predicate(patterns: Iterable[str] | None, case_sensitive: bool = True) -> ExcludePredicate:
    """
    Build an exclusion predicate from glob patterns.

    Patterns are matched from the right, so "*.tmp" matches a file of that
    extension at any depth and ".git/*" matches direct children of any .git folder.

    Args:
        patterns: Glob patterns; None or empty excludes nothing
        case_sensitive: Whether matching is case sensitive

    Returns:
        Callable returning True for paths that must be left out
    """
    if isinstance(patterns, str):
        patterns = [patterns]
    pattern_list = list(patterns or [])
    if not pattern_list:
        return _never_exclude

    def exclude(path: str) -> bool:
        return match_any_paths([path], included_patterns=pattern_list, case_sensitive=case_sensitive)

    return exclude


class SnapshotCollector:
    """
    Produces snapshots of one directory.

    In recursive mode only non-directory entries are tracked and every readable
    subdirectory is walked depth-first; an unreadable subdirectory is skipped
    so one broken branch cannot hide the rest of the tree. In flat mode only
    direct children are tracked, with subdirectories kept as opaque entries
    when include_directories is set.
    """

    def __init__(
        self,
        root: str | Path,
        recursive: bool = True,
        exclude: ExcludePredicate | None = None,
        strategy: IChangeDetectionStrategy | None = None,
        include_directories: bool = True,
    ):
        """
        Initialize the collector.

        Args:
            root: Directory to snapshot
            recursive: Whether to descend into subdirectories
            exclude: Predicate returning True for paths to leave out
            strategy: Metadata capture strategy (timestamps by default)
            include_directories: Track direct subdirectories when not recursing
        """
        self.root = str(root)
        self.recursive = recursive
        self.exclude = exclude or _never_exclude
        self.strategy = strategy or TimestampStrategy()
        self.include_directories = include_directories

    def collect(self) -> Snapshot:
        """
        Take a snapshot of the root directory.

        Returns:
            Snapshot of all tracked entries, sorted by path

        Raises:
            TargetInaccessibleError: If the root itself cannot be listed
        """
        try:
            children = self._list(self.root)
        except OSError as e:
            raise TargetInaccessibleError(
                f"Cannot list watched folder: {self.root}", path=self.root, underlying_error=e
            ) from e

        entries: dict[str, ItemMetadata] = {}
        self._collect_children(children, entries)

        logger.debug("Collected %d entries under %s", len(entries), self.root)
        return Snapshot(entries)

    def _collect_children(self, children: list[tuple[str, bool]], entries: dict[str, ItemMetadata]) -> None:
        for path, is_dir in children:
            if self.exclude(path):
                continue

            if is_dir and self.recursive:
                try:
                    grandchildren = self._list(path)
                except OSError as e:
                    logger.debug("Skipping unreadable directory %s: %s", path, e)
                    continue
                self._collect_children(grandchildren, entries)
                continue

            if is_dir and not self.include_directories:
                continue

            metadata = self.strategy.capture(path)
            if metadata is None:
                # vanished or unreadable between listing and capture
                continue
            entries[path] = metadata

    @staticmethod
    def _list(directory: str) -> list[tuple[str, bool]]:
        """List (path, is_directory) pairs for a directory, sorted by name."""
        children = []
        with os.scandir(directory) as it:
            for entry in it:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                children.append((entry.name, os.path.join(directory, entry.name), is_dir))
        children.sort()
        return [(path, is_dir) for _, path, is_dir in children]
