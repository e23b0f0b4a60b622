"""
Data model for the delta between two consecutive snapshots.

A change report is produced by a folder watcher whenever a poll tick finds at
least one new, moved or modified path, and is handed off to the consumer on the
watcher's change channel.
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class ChangeReport(BaseModel):
    """
    Represents the changes observed in a watched folder during one poll tick.

    "Moved" means no longer observed at the previously tracked path, which
    covers deletion as well as relocation.
    """

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the delta was computed",
    )
    new: tuple[str, ...] = Field(default=(), description="Paths that appeared since the previous tick")
    moved: tuple[str, ...] = Field(default=(), description="Paths no longer observed since the previous tick")
    modified: tuple[str, ...] = Field(default=(), description="Paths whose metadata changed since the previous tick")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_delta(
        cls,
        new: Iterable[str],
        moved: Iterable[str],
        modified: Iterable[str],
        timestamp: datetime | None = None,
    ) -> "ChangeReport":
        """Build a report from the three classified path sequences."""
        fields = {"new": tuple(new), "moved": tuple(moved), "modified": tuple(modified)}
        if timestamp is not None:
            fields["timestamp"] = timestamp
        return cls(**fields)

    @model_validator(mode='after')
    def validate_disjoint(self):
        """Ensure a path is classified at most once."""
        seen: set[str] = set()
        for path in (*self.new, *self.moved, *self.modified):
            if path in seen:
                raise ValueError(f"path classified more than once: {path}")
            seen.add(path)
        return self

    @computed_field
    @property
    def total_changes(self) -> int:
        """Get the number of paths across all three categories."""
        return len(self.new) + len(self.moved) + len(self.modified)

    @property
    def is_empty(self) -> bool:
        return self.total_changes == 0

    def __str__(self) -> str:
        return (
            f"ChangeReport(timestamp: {self.timestamp.isoformat()}, "
            f"new: {len(self.new)}, moved: {len(self.moved)}, modified: {len(self.modified)})"
        )
