"""Editing state for a text widget.

Keyboard and mouse input become insertions, deletions and cursor and selection
changes. Every edit is recorded for undo.
"""

from __future__ import annotations

from enum import IntEnum

from atlaskit.layout import (
    NEWLINE,
    NEWLINE_WIDTH,
    TextBuffer,
    find_charpos,
    locate_coord,
)
from atlaskit.undo import UndoState

__all__ = [
    "KEY_BASE",
    "Key",
    "move_word_left",
    "move_word_right",
    "TextEditState",
]

KEY_BASE = 0x200000
"""Integer key codes at or above this value are control keys, not characters."""


class Key(IntEnum):
    """Control keys. Combine a key with ``Key.SHIFT`` to extend the selection."""

    LEFT = KEY_BASE
    RIGHT = KEY_BASE + 1
    UP = KEY_BASE + 2
    DOWN = KEY_BASE + 3
    PGUP = KEY_BASE + 4
    PGDOWN = KEY_BASE + 5
    LINESTART = KEY_BASE + 6
    LINEEND = KEY_BASE + 7
    TEXTSTART = KEY_BASE + 8
    TEXTEND = KEY_BASE + 9
    DELETE = KEY_BASE + 10
    BACKSPACE = KEY_BASE + 11
    UNDO = KEY_BASE + 12
    REDO = KEY_BASE + 13
    WORDLEFT = KEY_BASE + 14
    WORDRIGHT = KEY_BASE + 15
    INSERT = KEY_BASE + 16
    SHIFT = 0x400000


def _is_word_boundary(text: TextBuffer, idx: int) -> bool:
    if idx <= 0:
        return True
    return text.char_at(idx - 1).isspace() and not text.char_at(idx).isspace()


def move_word_left(text: TextBuffer, c: int) -> int:
    """Index of the start of the word before position ``c``."""
    c -= 1
    while c >= 0 and not _is_word_boundary(text, c):
        c -= 1
    return max(c, 0)


def move_word_right(text: TextBuffer, c: int) -> int:
    """Index of the start of the word after position ``c``."""
    length = len(text)
    c += 1
    while c < length and not _is_word_boundary(text, c):
        c += 1
    return min(c, length)


def _key_to_char(key: int | str) -> str | None:
    if isinstance(key, str):
        if len(key) != 1:
            raise ValueError("a character key must be a single character")
        return key if ord(key) > 0 else None
    if 0 < key < KEY_BASE:
        return chr(key)
    return None


class TextEditState:
    """Cursor, selection, insert mode and undo history of one text field."""

    def __init__(self, single_line: bool = False) -> None:
        self.undostate = UndoState()
        self.clear(single_line)

    def clear(self, single_line: bool = False) -> None:
        """Reset to the initial state, forgetting the undo history."""
        self.undostate.clear()
        self.cursor = 0
        self.select_start = 0
        self.select_end = 0
        self.has_preferred_x = False
        self.preferred_x = 0.0
        self.cursor_at_end_of_line = False
        self.initialized = True
        self.single_line = bool(single_line)
        self.insert_mode = False
        self.row_count_per_page = 0

    def has_selection(self) -> bool:
        """Whether some text is selected."""
        return self.select_start != self.select_end

    def clamp(self, text: TextBuffer) -> None:
        """Keep the cursor and selection inside ``text`` after it changed."""
        n = len(text)
        if self.has_selection():
            self.select_start = min(self.select_start, n)
            self.select_end = min(self.select_end, n)
            if self.select_start == self.select_end:
                self.cursor = self.select_start
        self.cursor = min(self.cursor, n)

    def click(self, text: TextBuffer, x: float, y: float) -> None:
        """Move the cursor to the clicked position and drop the selection."""
        if self.single_line:
            y = text.layout_row(0).ymin
        self.cursor = locate_coord(text, x, y)
        self.select_start = self.cursor
        self.select_end = self.cursor
        self.has_preferred_x = False

    def drag(self, text: TextBuffer, x: float, y: float) -> None:
        """Move the cursor and the selection end to the dragged-to position."""
        if self.single_line:
            y = text.layout_row(0).ymin
        if self.select_start == self.select_end:
            self.select_start = self.cursor
        p = locate_coord(text, x, y)
        self.cursor = self.select_end = p

    def _delete(self, text: TextBuffer, where: int, length: int) -> None:
        self.undostate.record_delete(text, where, length)
        text.delete(where, length)
        self.has_preferred_x = False

    def delete_selection(self, text: TextBuffer) -> None:
        """Remove the selected text, leaving the cursor where it was."""
        self.clamp(text)
        if not self.has_selection():
            return
        if self.select_start < self.select_end:
            self._delete(text, self.select_start, self.select_end - self.select_start)
            self.select_end = self.cursor = self.select_start
        else:
            self._delete(text, self.select_end, self.select_start - self.select_end)
            self.select_start = self.cursor = self.select_end
        self.has_preferred_x = False

    def _sort_selection(self) -> None:
        if self.select_end < self.select_start:
            self.select_start, self.select_end = self.select_end, self.select_start

    def _move_to_first(self) -> None:
        if self.has_selection():
            self._sort_selection()
            self.cursor = self.select_start
            self.select_end = self.select_start
            self.has_preferred_x = False

    def _move_to_last(self, text: TextBuffer) -> None:
        if self.has_selection():
            self._sort_selection()
            self.clamp(text)
            self.cursor = self.select_end
            self.select_start = self.select_end
            self.has_preferred_x = False

    def _prep_selection_at_cursor(self) -> None:
        if not self.has_selection():
            self.select_start = self.select_end = self.cursor
        else:
            self.cursor = self.select_end

    def cut(self, text: TextBuffer) -> bool:
        """Delete the selection; return whether there was one."""
        if self.has_selection():
            self.delete_selection(text)
            self.has_preferred_x = False
            return True
        return False

    def paste(self, text: TextBuffer, chars: str) -> bool:
        """Insert ``chars`` at the cursor, replacing the selection; return success."""
        self.clamp(text)
        self.delete_selection(text)
        if text.insert(self.cursor, chars):
            self.undostate.record_insert(self.cursor, len(chars))
            self.cursor += len(chars)
            self.has_preferred_x = False
            return True
        return False

    def _type_char(self, text: TextBuffer, ch: str) -> None:
        if ch == NEWLINE and self.single_line:
            return
        if self.insert_mode and not self.has_selection() and self.cursor < len(text):
            self.undostate.record_replace(text, self.cursor, 1, 1)
            text.delete(self.cursor, 1)
            if text.insert(self.cursor, ch):
                self.cursor += 1
                self.has_preferred_x = False
        else:
            self.delete_selection(text)
            if text.insert(self.cursor, ch):
                self.undostate.record_insert(self.cursor, 1)
                self.cursor += 1
                self.has_preferred_x = False

    def _seek_in_row(self, text: TextBuffer, start: int, goal_x: float) -> int:
        self.cursor = start
        row = text.layout_row(start)
        x = row.x0
        for i in range(row.num_chars):
            dx = text.char_width_at(start, i)
            if dx == NEWLINE_WIDTH:
                break
            x += dx
            if x > goal_x:
                break
            self.cursor += 1
        self.clamp(text)
        return row.num_chars

    def _move_down(self, text: TextBuffer, key: int, sel: bool) -> None:
        is_page = (key & ~Key.SHIFT) == Key.PGDOWN
        row_count = self.row_count_per_page if is_page else 1
        if not is_page and self.single_line:
            self.key(text, Key.RIGHT | (key & Key.SHIFT))
            return
        if sel:
            self._prep_selection_at_cursor()
        elif self.has_selection():
            self._move_to_last(text)

        self.clamp(text)
        find = find_charpos(text, self.cursor, self.single_line)

        for _ in range(row_count):
            goal_x = self.preferred_x if self.has_preferred_x else find.x
            start = find.first_char + find.length
            if find.length == 0:
                break
            # Going down from the last line must not jump to its end.
            if text.char_at(start - 1) != NEWLINE:
                break
            num_chars = self._seek_in_row(text, start, goal_x)
            self.has_preferred_x = True
            self.preferred_x = goal_x
            if sel:
                self.select_end = self.cursor
            find.first_char = start
            find.length = num_chars

    def _move_up(self, text: TextBuffer, key: int, sel: bool) -> None:
        is_page = (key & ~Key.SHIFT) == Key.PGUP
        row_count = self.row_count_per_page if is_page else 1
        if not is_page and self.single_line:
            self.key(text, Key.LEFT | (key & Key.SHIFT))
            return
        if sel:
            self._prep_selection_at_cursor()
        elif self.has_selection():
            self._move_to_first()

        self.clamp(text)
        find = find_charpos(text, self.cursor, self.single_line)

        for _ in range(row_count):
            goal_x = self.preferred_x if self.has_preferred_x else find.x
            if find.prev_first == find.first_char:
                break
            self._seek_in_row(text, find.prev_first, goal_x)
            self.has_preferred_x = True
            self.preferred_x = goal_x
            if sel:
                self.select_end = self.cursor
            prev_scan = find.prev_first - 1 if find.prev_first > 0 else 0
            while prev_scan > 0 and text.char_at(prev_scan - 1) != NEWLINE:
                prev_scan -= 1
            find.first_char = find.prev_first
            find.prev_first = prev_scan

    def _line_start(self, text: TextBuffer) -> None:
        if self.single_line:
            self.cursor = 0
        else:
            while self.cursor > 0 and text.char_at(self.cursor - 1) != NEWLINE:
                self.cursor -= 1

    def _line_end(self, text: TextBuffer) -> None:
        n = len(text)
        if self.single_line:
            self.cursor = n
        else:
            while self.cursor < n and text.char_at(self.cursor) != NEWLINE:
                self.cursor += 1

    def key(self, text: TextBuffer, key: int | str) -> None:
        """Apply one keyboard input: a character to type, or a :class:`Key` code."""
        ch = _key_to_char(key)
        if ch is not None:
            self._type_char(text, ch)
            return
        if isinstance(key, str):
            return

        sel = bool(key & Key.SHIFT)
        base = key & ~Key.SHIFT

        if key == Key.INSERT:
            self.insert_mode = not self.insert_mode
        elif key in (Key.UNDO, Key.REDO):
            history = self.undostate.undo if key == Key.UNDO else self.undostate.redo
            cursor = history(text)
            if cursor is not None:
                self.cursor = cursor
            self.has_preferred_x = False
        elif key == Key.LEFT:
            if self.has_selection():
                self._move_to_first()
            elif self.cursor > 0:
                self.cursor -= 1
            self.has_preferred_x = False
        elif key == Key.RIGHT:
            if self.has_selection():
                self._move_to_last(text)
            else:
                self.cursor += 1
            self.clamp(text)
            self.has_preferred_x = False
        elif key == Key.LEFT | Key.SHIFT:
            self.clamp(text)
            self._prep_selection_at_cursor()
            if self.select_end > 0:
                self.select_end -= 1
            self.cursor = self.select_end
            self.has_preferred_x = False
        elif key == Key.RIGHT | Key.SHIFT:
            self._prep_selection_at_cursor()
            self.select_end += 1
            self.clamp(text)
            self.cursor = self.select_end
            self.has_preferred_x = False
        elif base in (Key.WORDLEFT, Key.WORDRIGHT):
            mover = move_word_left if base == Key.WORDLEFT else move_word_right
            if sel:
                if not self.has_selection():
                    self._prep_selection_at_cursor()
                self.cursor = mover(text, self.cursor)
                self.select_end = self.cursor
                self.clamp(text)
            elif self.has_selection():
                if base == Key.WORDLEFT:
                    self._move_to_first()
                else:
                    self._move_to_last(text)
            else:
                self.cursor = mover(text, self.cursor)
                self.clamp(text)
        elif base in (Key.DOWN, Key.PGDOWN):
            self._move_down(text, key, sel)
        elif base in (Key.UP, Key.PGUP):
            self._move_up(text, key, sel)
        elif base == Key.DELETE:
            if self.has_selection():
                self.delete_selection(text)
            elif self.cursor < len(text):
                self._delete(text, self.cursor, 1)
            self.has_preferred_x = False
        elif base == Key.BACKSPACE:
            if self.has_selection():
                self.delete_selection(text)
            else:
                self.clamp(text)
                if self.cursor > 0:
                    self._delete(text, self.cursor - 1, 1)
                    self.cursor -= 1
            self.has_preferred_x = False
        elif key == Key.TEXTSTART:
            self.cursor = self.select_start = self.select_end = 0
            self.has_preferred_x = False
        elif key == Key.TEXTEND:
            self.cursor = len(text)
            self.select_start = self.select_end = 0
            self.has_preferred_x = False
        elif key == Key.TEXTSTART | Key.SHIFT:
            self._prep_selection_at_cursor()
            self.cursor = self.select_end = 0
            self.has_preferred_x = False
        elif key == Key.TEXTEND | Key.SHIFT:
            self._prep_selection_at_cursor()
            self.cursor = self.select_end = len(text)
            self.has_preferred_x = False
        elif base in (Key.LINESTART, Key.LINEEND):
            self.clamp(text)
            if sel:
                self._prep_selection_at_cursor()
            else:
                self._move_to_first()
            if base == Key.LINESTART:
                self._line_start(text)
            else:
                self._line_end(text)
            if sel:
                self.select_end = self.cursor
            self.has_preferred_x = False