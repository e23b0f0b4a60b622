"""
Polling watcher for a single file.

On every tick the watcher captures the file's metadata and compares it with
the baseline from the previous tick. A changed value raises the modified
signal; a file that can no longer be resolved raises the moved signal once
and stops the watcher.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

from pollwatch.core.interfaces import IChangeDetectionStrategy
from pollwatch.core.strategies import DetectionStrategy, get_strategy
from pollwatch.models import ItemMetadata
from pollwatch.monitoring.base_watcher import BaseWatcher
from pollwatch.monitoring.channel import Channel
from pollwatch.monitoring.registry import WatcherKind

logger = logging.getLogger(__name__)


class FileWatcher(BaseWatcher):
    """
    Watches one file for modification and disappearance.

    The last observed metadata is kept in memory when the watcher stops, so a
    restarted watcher reports changes that happened while it was stopped.

    Example:
        watcher = FileWatcher("/etc/hosts", interval=2)
        watcher.start()
        await watcher.modified.receive()
    """

    kind = WatcherKind.FILE

    def __init__(
        self,
        file_path: str | Path,
        interval: int = 1,
        *,
        strategy: IChangeDetectionStrategy | DetectionStrategy | str | None = None,
        **kwargs: Any,
    ):
        """
        Initialize the file watcher.

        Args:
            file_path: File to watch
            interval: Number of tick units between checks (at least 1)
            strategy: Change detection strategy (timestamps by default)
            **kwargs: Lifecycle options accepted by BaseWatcher
        """
        super().__init__(file_path, interval, **kwargs)
        self.strategy = get_strategy(strategy)
        self._modified: Channel[bool] = self._make_channel("modified")
        self._previous_metadata: ItemMetadata | None = None

    @property
    def modified(self) -> Channel[bool]:
        return self._modified

    @property
    def file(self) -> str:
        return self._path

    @property
    def previous_metadata(self) -> ItemMetadata | None:
        """Get the metadata observed on the most recent tick."""
        return self._previous_metadata

    def set_file(self, file_path: str | Path) -> None:
        """
        Point the watcher at another file and forget the old baseline.

        Must only be called while the watcher is not running.
        """
        self._path = str(file_path)
        self._previous_metadata = None

    async def _capture(self) -> ItemMetadata | None:
        return await asyncio.to_thread(self.strategy.capture, self._path)

    async def _report_moved(self) -> None:
        logger.info("File %s has been moved or is inaccessible", self._path)
        self.diagnostics.log("File %r has been moved or is inaccessible.", self._path)
        await self._emit(self._moved, True)
        self._request_stop()

    async def _on_loop_entry(self) -> None:
        if self._previous_metadata is not None:
            return

        metadata = await self._capture()
        if metadata is None:
            await self._report_moved()
            return
        self._previous_metadata = metadata

    async def _tick(self) -> None:
        metadata = await self._capture()
        if metadata is None:
            await self._report_moved()
            return

        changed = metadata != self._previous_metadata
        self._previous_metadata = metadata

        if changed:
            self.diagnostics.log("File %r has been modified.", self._path)
            await self._emit(self._modified, True)
        else:
            self.diagnostics.log("File %r has not changed.", self._path)
