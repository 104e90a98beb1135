"""Bounded undo log of the actions applied during a scoring session."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional

from src.core.shared_types import ActionKind
from src.scoring.game_state import StateFragment

MAX_HISTORY = 10


@dataclass(frozen=True)
class ActionHistoryEntry:
    kind: ActionKind
    description: str
    timestamp: datetime
    prior_fragment: StateFragment


class ActionHistory:
    """
    Keeps the last MAX_HISTORY actions.
    ----

    The oldest entry is evicted when a new one comes in on a full log (FIFO),
    while undoing pops the newest entry first (LIFO). There is no redo.
    """

    def __init__(self, max_entries: int = MAX_HISTORY) -> None:
        self.max_entries = max_entries
        self._entries: list[ActionHistoryEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ActionHistoryEntry]:
        """Oldest first."""
        return iter(list(self._entries))

    @property
    def can_undo(self) -> bool:
        return bool(self._entries)

    @property
    def last(self) -> Optional[ActionHistoryEntry]:
        return self._entries[-1] if self._entries else None

    def record(
        self,
        kind: ActionKind,
        description: str,
        prior_fragment: StateFragment,
        timestamp: datetime,
    ) -> Optional[ActionHistoryEntry]:
        """Append a new entry. Returns the entry that got evicted to make room (if any)."""
        evicted = None
        if len(self._entries) >= self.max_entries:
            evicted = self._entries.pop(0)
        self._entries.append(
            ActionHistoryEntry(kind, description, timestamp, prior_fragment)
        )
        return evicted

    def pop(self) -> Optional[ActionHistoryEntry]:
        return self._entries.pop() if self._entries else None

    def undo_last(self) -> Optional[StateFragment]:
        """Prior-state fragment of the newest entry, or None if there is nothing to undo."""
        entry = self.pop()
        return entry.prior_fragment if entry else None

    def discard_last(self, restore: Optional[ActionHistoryEntry] = None) -> None:
        """
        Forget the newest entry (its action never made it to the server).
        If recording it pushed out the oldest entry, that one is put back.
        """
        self.pop()
        if restore is not None:
            self._entries.insert(0, restore)

    def restore(self, entry: ActionHistoryEntry) -> None:
        """Put a popped entry back on top (its undo never made it to the server)."""
        if len(self._entries) >= self.max_entries:
            self._entries.pop(0)
        self._entries.append(entry)

    def clear(self) -> None:
        self._entries.clear()
