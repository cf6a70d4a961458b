"""Change tracking for content model attributes."""

from __future__ import annotations


class AttributeChangeset:
    """Set of attribute names assigned on a model since its last save."""

    def __init__(self) -> None:
        self._changeset: set[str] = set()

    def will_change(self, name: str) -> None:
        """Record ``name`` as dirty. Recording it twice has no extra effect."""
        self._changeset.add(name)

    def changes(self) -> frozenset[str]:
        """Return a snapshot of the dirty attribute names."""
        return frozenset(self._changeset)

    def clear(self) -> None:
        self._changeset.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._changeset

    def __len__(self) -> int:
        return len(self._changeset)
