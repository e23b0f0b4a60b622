"""
Polling watcher for a directory tree.

Each tick takes a fresh snapshot, classifies it against the snapshot retained
from the previous tick, and publishes a ChangeReport on the changes channel
when anything was new, moved or modified. Silent ticks publish nothing.
"""

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pollwatch.core.interfaces import IChangeDetectionStrategy
from pollwatch.core.strategies import DetectionStrategy, get_strategy
from pollwatch.models import ChangeReport, Snapshot, TargetInaccessibleError
from pollwatch.monitoring.base_watcher import BaseWatcher
from pollwatch.monitoring.change_classifier import build_change_report
from pollwatch.monitoring.channel import Channel
from pollwatch.monitoring.registry import WatcherKind
from pollwatch.monitoring.snapshot_collector import ExcludePredicate, SnapshotCollector, build_exclude_predicate

logger = logging.getLogger(__name__)


class FolderWatcher(BaseWatcher):
    """
    Watches a folder for new, moved and modified entries.

    Losing access to the root raises the moved signal once per loss. Whether
    the watcher then keeps polling (and resumes diffing when the root comes
    back) or stops is controlled by stop_on_root_loss.
    """

    kind = WatcherKind.FOLDER

    def __init__(
        self,
        folder_path: str | Path,
        recursive: bool = True,
        exclude: ExcludePredicate | Iterable[str] | None = None,
        interval: int = 1,
        *,
        strategy: IChangeDetectionStrategy | DetectionStrategy | str | None = None,
        include_directories: bool = True,
        stop_on_root_loss: bool = False,
        **kwargs: Any,
    ):
        """
        Initialize the folder watcher.

        Args:
            folder_path: Directory to watch
            recursive: Whether to descend into subdirectories
            exclude: Predicate returning True for paths to ignore, or glob patterns
            interval: Number of tick units between checks (at least 1)
            strategy: Change detection strategy (timestamps by default)
            include_directories: Track direct subdirectories when not recursing
            stop_on_root_loss: Stop once the root becomes inaccessible
            **kwargs: Lifecycle options accepted by BaseWatcher
        """
        super().__init__(folder_path, interval, **kwargs)
        self.recursive = recursive
        self.exclude = exclude if callable(exclude) else build_exclude_predicate(exclude)
        self.strategy = get_strategy(strategy)
        self.include_directories = include_directories
        self.stop_on_root_loss = stop_on_root_loss

        self._changes: Channel[ChangeReport] = self._make_channel("changes")
        self._snapshot: Snapshot | None = None
        self._root_lost = False

    @property
    def changes(self) -> Channel[ChangeReport]:
        return self._changes

    @property
    def folder(self) -> str:
        return self._path

    @property
    def snapshot(self) -> Snapshot | None:
        """Get the snapshot retained from the most recent tick."""
        return self._snapshot

    def set_folder(self, folder_path: str | Path) -> None:
        """
        Point the watcher at another folder.

        Must only be called while the watcher is not running.
        """
        self._path = str(folder_path)
        self._snapshot = None
        self._root_lost = False

    def _collector(self) -> SnapshotCollector:
        return SnapshotCollector(
            self._path,
            recursive=self.recursive,
            exclude=self.exclude,
            strategy=self.strategy,
            include_directories=self.include_directories,
        )

    def _prepare(self) -> None:
        self._root_lost = False
        try:
            self._snapshot = self._collector().collect()
        except TargetInaccessibleError as e:
            logger.warning("Initial snapshot of %s failed: %s", self._path, e)
            self._snapshot = Snapshot.empty()

    async def _tick(self) -> None:
        try:
            current = await asyncio.to_thread(self._collector().collect)
        except TargetInaccessibleError:
            await self._handle_root_loss()
            return

        if self._root_lost:
            logger.info("Folder %s is accessible again", self._path)
            self._root_lost = False

        report = build_change_report(self._snapshot or Snapshot.empty(), current)
        self._snapshot = current

        if report.is_empty:
            self.diagnostics.log("Folder %r has not changed.", self._path)
            return

        self.diagnostics.log("%s - %s", self, report)
        await self._emit(self._changes, report)

    async def _handle_root_loss(self) -> None:
        if not self._root_lost:
            self._root_lost = True
            logger.warning("Folder %s has been moved or is inaccessible", self._path)
            self.diagnostics.log("Folder %r has been moved or is inaccessible.", self._path)
            await self._emit(self._moved, True)

        if self.stop_on_root_loss:
            self._request_stop()
