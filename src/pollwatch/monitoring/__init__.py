"""
Monitoring package for polling-based change detection.

This package provides the snapshot collector, change classifier, file and
folder watchers, and the coordinator that manages their lifecycles.
"""

from .base_watcher import BaseWatcher, WatcherState
from .change_classifier import build_change_report, classify_changes
from .channel import Channel
from .file_watcher import FileWatcher
from .folder_watcher import FolderWatcher
from .registry import (
    WatcherKind,
    WatcherRegistry,
    get_default_registry,
    number_of_file_watchers,
    number_of_folder_watchers,
)
from .snapshot_collector import SnapshotCollector, build_exclude_predicate
from .watch_coordinator import WatchCoordinator

__all__ = [
    "BaseWatcher",
    "WatcherState",
    "Channel",
    "FileWatcher",
    "FolderWatcher",
    "SnapshotCollector",
    "build_exclude_predicate",
    "classify_changes",
    "build_change_report",
    "WatcherKind",
    "WatcherRegistry",
    "get_default_registry",
    "number_of_file_watchers",
    "number_of_folder_watchers",
    "WatchCoordinator",
]
