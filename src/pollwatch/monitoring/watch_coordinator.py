"""
Watch coordinator for config-driven watcher lifecycles.

Creates file and folder watchers with defaults taken from WatcherConfig,
keeps track of the ones it started, and stops them together.
"""

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pollwatch.config.settings import WatcherConfig, get_config
from pollwatch.core.diagnostics import LoggingDiagnosticSink
from pollwatch.core.interfaces import IDiagnosticSink
from pollwatch.core.strategies import DetectionStrategy, get_strategy
from pollwatch.models import MonitoringError
from pollwatch.monitoring.base_watcher import BaseWatcher
from pollwatch.monitoring.file_watcher import FileWatcher
from pollwatch.monitoring.folder_watcher import FolderWatcher
from pollwatch.monitoring.registry import WatcherRegistry
from pollwatch.monitoring.snapshot_collector import ExcludePredicate

logger = logging.getLogger(__name__)


class WatchCoordinator:
    """
    Owns a set of watchers and the registry that counts them.

    A coordinator uses its own registry by default, so its counts only cover
    the watchers it created.
    """

    def __init__(
        self,
        config: WatcherConfig | None = None,
        registry: WatcherRegistry | None = None,
        diagnostics: IDiagnosticSink | None = None,
    ):
        """
        Initialize the watch coordinator.

        Args:
            config: Watcher defaults (global configuration if None)
            registry: Registry handed to every created watcher
            diagnostics: Sink handed to every created watcher; in debug mode
                a logging sink is used when none is given
        """
        self.config = config or get_config()
        self.registry = registry or WatcherRegistry()
        if diagnostics is None and self.config.debug_mode:
            diagnostics = LoggingDiagnosticSink()
        self.diagnostics = diagnostics

        self._watchers: list[BaseWatcher] = []

    def _strategy(self, strategy: DetectionStrategy | str | None):
        selected = strategy or self.config.detection_strategy
        return get_strategy(selected, length=self.config.digest_length)

    def _lifecycle_options(self) -> dict[str, Any]:
        return {
            "tick_unit": self.config.tick_unit_seconds,
            "diagnostics": self.diagnostics,
            "registry": self.registry,
            "channel_size": self.config.channel_buffer_size,
            "overflow_policy": self.config.overflow_policy,
        }

    def watch_file(
        self,
        file_path: str | Path,
        interval: int | None = None,
        strategy: DetectionStrategy | str | None = None,
    ) -> FileWatcher:
        """
        Create and start a file watcher.

        Args:
            file_path: File to watch
            interval: Tick units between checks (config default if None)
            strategy: Change detection strategy (config default if None)

        Returns:
            The running FileWatcher

        Raises:
            ConfigurationError: If the resulting configuration is invalid
            MonitoringError: If no event loop is running
        """
        watcher = FileWatcher(
            file_path,
            self.config.default_interval if interval is None else interval,
            strategy=self._strategy(strategy),
            **self._lifecycle_options(),
        )
        self._start(watcher)
        return watcher

    def watch_folder(
        self,
        folder_path: str | Path,
        recursive: bool | None = None,
        exclude: ExcludePredicate | Iterable[str] | None = None,
        interval: int | None = None,
        strategy: DetectionStrategy | str | None = None,
    ) -> FolderWatcher:
        """
        Create and start a folder watcher.

        Args:
            folder_path: Directory to watch
            recursive: Whether to descend into subdirectories (config default if None)
            exclude: Predicate or glob patterns; the configured ignored patterns are used if None
            interval: Tick units between checks (config default if None)
            strategy: Change detection strategy (config default if None)

        Returns:
            The running FolderWatcher

        Raises:
            ConfigurationError: If the resulting configuration is invalid
            MonitoringError: If no event loop is running
        """
        if exclude is None:
            exclude = self.config.should_ignore_file

        watcher = FolderWatcher(
            folder_path,
            self.config.recursive if recursive is None else recursive,
            exclude,
            self.config.default_interval if interval is None else interval,
            strategy=self._strategy(strategy),
            include_directories=self.config.include_directories,
            stop_on_root_loss=self.config.stop_on_root_loss,
            **self._lifecycle_options(),
        )
        self._start(watcher)
        return watcher

    def _start(self, watcher: BaseWatcher) -> None:
        try:
            watcher.start()
        except MonitoringError:
            logger.error("Failed to start %s", watcher)
            raise
        self._watchers.append(watcher)
        logger.info("Watching %s", watcher.path)

    async def stop_all(self, timeout: float | None = None) -> None:
        """
        Stop every watcher and wait until each loop has exited.

        Args:
            timeout: Maximum seconds to wait for all loops (no limit if None)

        Raises:
            MonitoringError: If the loops did not exit within the timeout
        """
        watchers = list(self._watchers)
        if not watchers:
            logger.debug("No watchers to stop")
            return

        logger.info("Stopping %d watchers...", len(watchers))
        for watcher in watchers:
            watcher.stop()

        try:
            await asyncio.wait_for(asyncio.gather(*(w.wait_stopped() for w in watchers)), timeout)
        except TimeoutError as e:
            raise MonitoringError(
                f"Watchers did not stop within {timeout} seconds", operation="stop_all", underlying_error=e
            ) from e

        self._watchers.clear()
        logger.info("All watchers stopped")

    @property
    def active_watchers(self) -> list[BaseWatcher]:
        """Get the started watchers whose loops are still running."""
        return [w for w in self._watchers if w.is_running()]

    def get_monitoring_stats(self) -> dict[str, Any]:
        """
        Get monitoring statistics.

        Returns:
            Dictionary with watcher counts and per-watcher state
        """
        return {
            "file_watchers": self.registry.file_watchers,
            "folder_watchers": self.registry.folder_watchers,
            "watchers": [
                {"kind": w.kind.value, "path": w.path, "state": w.state.value, "interval_seconds": w.sleep_seconds}
                for w in self._watchers
            ],
            "configuration": {
                "default_interval": self.config.default_interval,
                "tick_unit_seconds": self.config.tick_unit_seconds,
                "detection_strategy": DetectionStrategy(self.config.detection_strategy).value,
            },
        }
