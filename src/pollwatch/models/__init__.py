"""Data models and exceptions for the pollwatch package."""

from pollwatch.models.change_report import ChangeReport
from pollwatch.models.exceptions import (
    BaseError,
    ConfigurationError,
    MonitoringError,
    TargetInaccessibleError,
)
from pollwatch.models.snapshot import ItemMetadata, Snapshot

__all__ = [
    "ChangeReport",
    "Snapshot",
    "ItemMetadata",
    "BaseError",
    "ConfigurationError",
    "MonitoringError",
    "TargetInaccessibleError",
]
