"""
Point-in-time view of a watched directory.

A snapshot maps every tracked path to the metadata captured for it by the
watcher's change detection strategy (a nanosecond timestamp or a content digest).
"""

from collections.abc import Hashable, Iterable, Iterator, Mapping

ItemMetadata = Hashable


class Snapshot(Mapping[str, ItemMetadata]):
    """
    Immutable mapping from path to item metadata.

    Entries are stored sorted by path so iteration, and everything derived from
    it, is reproducible regardless of the order the walk produced them in.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, ItemMetadata] | Iterable[tuple[str, ItemMetadata]] = ()):
        items = entries.items() if isinstance(entries, Mapping) else entries
        self._entries: dict[str, ItemMetadata] = dict(sorted(items, key=lambda item: item[0]))

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls()

    def __getitem__(self, path: str) -> ItemMetadata:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Snapshot({len(self._entries)} entries)"

    @property
    def paths(self) -> list[str]:
        """Get the tracked paths in snapshot order."""
        return list(self._entries)
