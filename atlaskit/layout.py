"""Text layout queries used by the text editor: rows, widths and coordinate lookups."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

__all__ = [
    "NEWLINE",
    "NEWLINE_WIDTH",
    "TextRow",
    "TextBuffer",
    "PlainTextBuffer",
    "CharPosition",
    "locate_coord",
    "find_charpos",
]

NEWLINE = "\n"
"""The character that ends a row."""

NEWLINE_WIDTH = -1.0
"""Width reported for a newline character, so that cursor movement can stop at it."""


@dataclass(frozen=True)
class TextRow:
    """Layout of one displayed row."""

    x0: float
    x1: float
    baseline_y_delta: float
    ymin: float
    ymax: float
    num_chars: int


class TextBuffer(ABC):
    """The string being edited, together with its layout."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of characters."""

    @abstractmethod
    def char_at(self, index: int) -> str:
        """The character at ``index``."""

    @abstractmethod
    def layout_row(self, start: int) -> TextRow:
        """Lay out the row that begins at character ``start``."""

    @abstractmethod
    def char_width_at(self, line_start: int, index: int) -> float:
        """Width of the ``index``-th character of the row starting at ``line_start``."""

    @abstractmethod
    def delete(self, index: int, count: int) -> None:
        """Remove ``count`` characters starting at ``index``."""

    @abstractmethod
    def insert(self, index: int, chars: str) -> bool:
        """Insert ``chars`` at ``index``; return False if that is not possible."""


class PlainTextBuffer(TextBuffer):
    """A monospaced buffer where every newline ends a row."""

    def __init__(
        self, text: str = "", char_width: float = 1.0, line_height: float = 1.0
    ) -> None:
        if char_width <= 0:
            raise ValueError("char_width must be positive")
        if line_height <= 0:
            raise ValueError("line_height must be positive")
        self._text = text
        self.char_width = char_width
        self.line_height = line_height

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return (
            f"PlainTextBuffer({self._text!r}, char_width={self.char_width!r}, "
            f"line_height={self.line_height!r})"
        )

    def char_at(self, index: int) -> str:
        if not 0 <= index < len(self._text):
            raise IndexError(f"character index {index} out of range")
        return self._text[index]

    def layout_row(self, start: int) -> TextRow:
        if start < 0:
            raise IndexError(f"row start {start} out of range")
        newline = self._text.find(NEWLINE, start)
        stop = len(self._text) if newline < 0 else newline + 1
        stop = max(stop, start)
        visible = (newline if newline >= 0 else stop) - start
        visible = max(visible, 0)
        return TextRow(
            x0=0.0,
            x1=visible * self.char_width,
            baseline_y_delta=self.line_height,
            ymin=0.0,
            ymax=self.line_height,
            num_chars=stop - start,
        )

    def char_width_at(self, line_start: int, index: int) -> float:
        if self.char_at(line_start + index) == NEWLINE:
            return NEWLINE_WIDTH
        return self.char_width

    def delete(self, index: int, count: int) -> None:
        if count < 0 or index < 0 or index + count > len(self._text):
            raise IndexError(f"cannot delete {count} characters at {index}")
        self._text = self._text[:index] + self._text[index + count:]

    def insert(self, index: int, chars: str) -> bool:
        if not 0 <= index <= len(self._text):
            return False
        self._text = self._text[:index] + "".join(chars) + self._text[index:]
        return True


@dataclass
class CharPosition:
    """Where a character sits, and which rows surround it."""

    x: float
    y: float
    height: float
    first_char: int
    length: int
    prev_first: int


def locate_coord(text: TextBuffer, x: float, y: float) -> int:
    """Return the character index nearest to the display position ``(x, y)``."""
    n = len(text)
    base_y = 0.0
    i = 0
    row = TextRow(0.0, 0.0, 0.0, 0.0, 0.0, 0)

    while i < n:
        row = text.layout_row(i)
        if row.num_chars <= 0:
            return n
        if i == 0 and y < base_y + row.ymin:
            return 0
        if y < base_y + row.ymax:
            break
        i += row.num_chars
        base_y += row.baseline_y_delta

    if i >= n:
        return n

    if x < row.x0:
        return i

    if x < row.x1:
        prev_x = row.x0
        for k in range(row.num_chars):
            w = text.char_width_at(i, k)
            if x < prev_x + w:
                return i + k if x < prev_x + w / 2 else i + k + 1
            prev_x += w

    last = i + row.num_chars - 1
    if text.char_at(last) == NEWLINE:
        return last
    return i + row.num_chars


def find_charpos(text: TextBuffer, n: int, single_line: bool) -> CharPosition:
    """Locate character ``n`` and the rows around it; ``n`` may equal the length."""
    z = len(text)
    if not 0 <= n <= z:
        raise ValueError(f"character index {n} out of range 0..{z}")

    if n == z:
        if single_line:
            row = text.layout_row(0)
            return CharPosition(
                x=row.x1,
                y=0.0,
                height=row.ymax - row.ymin,
                first_char=0,
                length=z,
                prev_first=0,
            )
        i = prev_start = 0
        while i < z:
            row = text.layout_row(i)
            if row.num_chars <= 0:
                raise ValueError("layout produced an empty row")
            prev_start = i
            i += row.num_chars
        return CharPosition(
            x=0.0, y=0.0, height=1.0, first_char=i, length=0, prev_first=prev_start
        )

    y = 0.0
    i = prev_start = 0
    while True:
        row = text.layout_row(i)
        if n < i + row.num_chars:
            break
        if row.num_chars <= 0:
            raise ValueError("layout produced an empty row")
        prev_start = i
        i += row.num_chars
        y += row.baseline_y_delta

    x = row.x0 + sum(text.char_width_at(i, k) for k in range(n - i))
    return CharPosition(
        x=x,
        y=y,
        height=row.ymax - row.ymin,
        first_char=i,
        length=row.num_chars,
        prev_first=prev_start,
    )