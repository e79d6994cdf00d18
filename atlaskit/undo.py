"""Bounded undo/redo history for an editable text buffer.

Undo and redo records share one pool of ``state_count`` record slots and one
budget of ``char_count`` stored characters. When either runs out, the oldest
history is dropped.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from atlaskit.layout import TextBuffer

__all__ = [
    "DEFAULT_STATE_COUNT",
    "DEFAULT_CHAR_COUNT",
    "UndoRecord",
    "UndoState",
]

DEFAULT_STATE_COUNT = 99
"""Default number of undo and redo records kept."""

DEFAULT_CHAR_COUNT = 999
"""Default number of characters the history may store."""


@dataclass(frozen=True)
class UndoRecord:
    """One reversible edit.

    Applying the record deletes ``delete_length`` characters at ``where`` and
    then inserts ``chars`` there.
    """

    where: int
    delete_length: int
    chars: str = ""

    @property
    def insert_length(self) -> int:
        """Number of characters the record inserts."""
        return len(self.chars)


def _read(text: TextBuffer, where: int, length: int) -> str:
    return "".join(text.char_at(i) for i in range(where, where + length))


class UndoState:
    """Undo and redo stacks with shared record and character limits."""

    def __init__(
        self,
        state_count: int = DEFAULT_STATE_COUNT,
        char_count: int = DEFAULT_CHAR_COUNT,
    ) -> None:
        if state_count < 1:
            raise ValueError("state_count must be at least 1")
        if char_count < 0:
            raise ValueError("char_count must not be negative")
        self.state_count = state_count
        self.char_count = char_count
        # Oldest first; the newest entry is at the right end of each deque.
        self._undo: deque[UndoRecord] = deque()
        self._redo: deque[UndoRecord] = deque()

    @property
    def undo_records(self) -> tuple[UndoRecord, ...]:
        """Undo records, oldest first."""
        return tuple(self._undo)

    @property
    def redo_records(self) -> tuple[UndoRecord, ...]:
        """Redo records, oldest first."""
        return tuple(self._redo)

    @property
    def undo_chars(self) -> int:
        """Characters stored by undo records."""
        return sum(r.insert_length for r in self._undo)

    @property
    def redo_chars(self) -> int:
        """Characters stored by redo records."""
        return sum(r.insert_length for r in self._redo)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def clear(self) -> None:
        """Forget all history."""
        self._undo.clear()
        self._redo.clear()

    def flush_redo(self) -> None:
        """Forget everything that could be redone."""
        self._redo.clear()

    def discard_undo(self) -> None:
        """Drop the oldest undo record, if any."""
        if self._undo:
            self._undo.popleft()

    def discard_redo(self) -> None:
        """Drop the oldest redo record, if any."""
        if self._redo:
            self._redo.popleft()

    def _make_room(self, numchars: int) -> bool:
        """Prepare for a new undo record storing ``numchars`` characters."""
        self.flush_redo()
        if len(self._undo) == self.state_count:
            self.discard_undo()
        if numchars > self.char_count:
            self._undo.clear()
            return False
        while self._undo and self.undo_chars + numchars > self.char_count:
            self.discard_undo()
        return True

    def _create(self, where: int, delete_length: int, chars: str) -> None:
        if self._make_room(len(chars)):
            self._undo.append(UndoRecord(where, delete_length, chars))

    def record_insert(self, where: int, length: int) -> None:
        """Record that ``length`` characters were inserted at ``where``."""
        self._create(where, length, "")

    def record_delete(self, text: TextBuffer, where: int, length: int) -> None:
        """Record, before it happens, the deletion of ``length`` characters at ``where``."""
        if length > self.char_count:
            self._make_room(length)
            return
        self._create(where, 0, _read(text, where, length))

    def record_replace(
        self, text: TextBuffer, where: int, old_length: int, new_length: int
    ) -> None:
        """Record, before it happens, replacing ``old_length`` characters with ``new_length``."""
        if old_length > self.char_count:
            self._make_room(old_length)
            return
        self._create(where, new_length, _read(text, where, old_length))

    def undo(self, text: TextBuffer) -> int | None:
        """Revert the newest edit in ``text``; return the new cursor, or None if nothing to undo."""
        if not self._undo:
            return None
        u = self._undo[-1]
        redo_chars = ""

        if u.delete_length:
            undo_used = self.undo_chars
            if undo_used + u.delete_length < self.char_count:
                while self._redo and (
                    undo_used + u.delete_length > self.char_count - self.redo_chars
                ):
                    self.discard_redo()
                redo_chars = _read(text, u.where, u.delete_length)
            text.delete(u.where, u.delete_length)

        if u.insert_length:
            text.insert(u.where, u.chars)

        self._undo.pop()
        self._redo.append(UndoRecord(u.where, u.insert_length, redo_chars))
        return u.where + u.insert_length

    def redo(self, text: TextBuffer) -> int | None:
        """Reapply the newest undone edit; return the new cursor, or None if nothing to redo."""
        if not self._redo:
            return None
        r = self._redo[-1]
        delete_length = r.insert_length
        undo_chars = ""

        if r.delete_length:
            if self.undo_chars + r.delete_length > self.char_count - self.redo_chars:
                delete_length = 0
            else:
                undo_chars = _read(text, r.where, r.delete_length)
            text.delete(r.where, r.delete_length)

        if r.insert_length:
            text.insert(r.where, r.chars)

        self._redo.pop()
        self._undo.append(UndoRecord(r.where, delete_length, undo_chars))
        return r.where + r.insert_length