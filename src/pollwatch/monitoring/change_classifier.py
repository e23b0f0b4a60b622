"""
Three-way classification of the delta between two snapshots.
"""

from collections.abc import Mapping
from datetime import datetime

from pollwatch.models import ChangeReport, ItemMetadata


def classify_changes(
    previous: Mapping[str, ItemMetadata],
    current: Mapping[str, ItemMetadata],
) -> tuple[list[str], list[str], list[str]]:
    """
    Classify every path of two snapshots as new, moved or modified.

    The three lists are disjoint and sorted by path. Classifying a snapshot
    against itself yields three empty lists, and swapping the arguments swaps
    the new and moved lists.

    Args:
        previous: Snapshot retained from the previous tick
        current: Snapshot taken on this tick

    Returns:
        Tuple of (new, moved, modified) path lists
    """
    new = sorted(path for path in current if path not in previous)
    moved = sorted(path for path in previous if path not in current)
    modified = sorted(path for path in current if path in previous and previous[path] != current[path])
    return new, moved, modified


def build_change_report(
    previous: Mapping[str, ItemMetadata],
    current: Mapping[str, ItemMetadata],
    timestamp: datetime | None = None,
) -> ChangeReport:
    """Classify two snapshots and wrap the result in a ChangeReport."""
    new, moved, modified = classify_changes(previous, current)
    return ChangeReport.from_delta(new, moved, modified, timestamp=timestamp)
