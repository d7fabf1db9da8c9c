"""Pending identifier worklist."""

from __future__ import annotations

from collections.abc import Iterable


class ItemQueue:
    """LIFO worklist of identifiers awaiting removal.

    The most recently added identifier is processed next, so a requeued
    identifier is retried before the rest of the list. Only the processing
    loop mutates it; no locking.
    """

    def __init__(self, identifiers: Iterable[str] = ()) -> None:
        self._items: list[str] = list(identifiers)

    def pop(self) -> str | None:
        """Take the next identifier, or None when the queue is empty."""
        if not self._items:
            return None
        return self._items.pop()

    def push_back(self, identifier: str) -> None:
        """Return an identifier after a failed attempt."""
        self._items.append(identifier)

    @property
    def size(self) -> int:
        return len(self._items)

    def snapshot(self) -> tuple[str, ...]:
        """Current contents, bottom to top."""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"ItemQueue(size={len(self._items)})"
