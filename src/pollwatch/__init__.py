"""Polling-based change detection for files and directory trees."""

from pollwatch.config import OverflowPolicy, WatcherConfig, get_config
from pollwatch.core import (
    BufferedDiagnosticSink,
    DetectionStrategy,
    DigestStrategy,
    LoggingDiagnosticSink,
    NullDiagnosticSink,
    TimestampStrategy,
)
from pollwatch.models import (
    ChangeReport,
    ConfigurationError,
    MonitoringError,
    Snapshot,
    TargetInaccessibleError,
)
from pollwatch.monitoring import (
    Channel,
    FileWatcher,
    FolderWatcher,
    SnapshotCollector,
    WatchCoordinator,
    WatcherRegistry,
    WatcherState,
    classify_changes,
    number_of_file_watchers,
    number_of_folder_watchers,
)

__version__ = "0.1.0"

__all__ = [
    "ChangeReport",
    "Channel",
    "ConfigurationError",
    "DetectionStrategy",
    "DigestStrategy",
    "FileWatcher",
    "FolderWatcher",
    "MonitoringError",
    "OverflowPolicy",
    "Snapshot",
    "SnapshotCollector",
    "TargetInaccessibleError",
    "TimestampStrategy",
    "WatchCoordinator",
    "WatcherConfig",
    "WatcherRegistry",
    "WatcherState",
    "BufferedDiagnosticSink",
    "LoggingDiagnosticSink",
    "NullDiagnosticSink",
    "classify_changes",
    "get_config",
    "number_of_file_watchers",
    "number_of_folder_watchers",
]
