"""Row layout and coordinate lookup for a text editing widget.

The editor never stores layout. It asks the text for one row at a time,
starting from a character index, and walks forward through the rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Protocol, Sequence

NEWLINE = "\n"
NEWLINE_WIDTH = -1.0
"""Width reported for a newline character; it takes no horizontal space."""


@dataclass
class Row:
    """Layout of one displayed row of characters."""

    x0: float = 0.0
    x1: float = 0.0
    baseline_y_delta: float = 0.0
    ymin: float = 0.0
    ymax: float = 0.0
    num_chars: int = 0


@dataclass
class FindState:
    """Where a character sits: its position and the row holding it."""

    x: float = 0.0
    y: float = 0.0
    height: float = 0.0
    first_char: int = 0
    length: int = 0
    prev_first: int = 0


class TextLayout(Protocol):
    """What the editor needs from the text being edited."""

    def __len__(self) -> int: ...

    def get_char(self, index: int) -> Any: ...

    def layout_row(self, start: int) -> Row: ...

    def get_width(self, line_start: int, index: int) -> float: ...

    def delete_chars(self, index: int, count: int) -> Any: ...

    def insert_chars(self, index: int, chars: Sequence[Any]) -> Any: ...


class MonospaceText:
    """Editable text laid out in a fixed-width font, one row per line."""

    def __init__(self, text: str = "", char_width: float = 1.0, line_height: float = 1.0) -> None:
        if char_width <= 0 or line_height <= 0:
            raise ValueError("character width and line height must be positive")
        self.chars: list[str] = list(text)
        self.char_width = char_width
        self.line_height = line_height

    @property
    def text(self) -> str:
        return "".join(self.chars)

    def __len__(self) -> int:
        return len(self.chars)

    def __str__(self) -> str:
        return self.text

    def get_char(self, index) -> str:
        """Return the character at ``index``."""
        if not 0 <= index < len(self.chars):
            raise IndexError(f"character index {index} out of range")
        return self.chars[index]

    def layout_row(self, start) -> Row:
        """Lay out the row starting at ``start``; it ends after a newline."""
        end = start
        while end < len(self.chars) and self.chars[end] != NEWLINE:
            end += 1
        visible = end - start
        if end < len(self.chars):
            end += 1
        return Row(
            x0=0.0,
            x1=visible * self.char_width,
            baseline_y_delta=self.line_height,
            ymin=0.0,
            ymax=self.line_height,
            num_chars=end - start,
        )

    def get_width(self, line_start, index) -> float:
        """Width of the ``index``-th character of the row at ``line_start``."""
        if self.get_char(line_start + index) == NEWLINE:
            return NEWLINE_WIDTH
        return self.char_width

    def delete_chars(self, index, count) -> None:
        """Remove ``count`` characters starting at ``index``."""
        if index < 0 or count < 0 or index + count > len(self.chars):
            raise IndexError(f"cannot delete {count} characters at {index}")
        del self.chars[index:index + count]

    def insert_chars(self, index, chars: Iterable[str]) -> bool:
        """Insert ``chars`` at ``index``; return True on success."""
        if not 0 <= index <= len(self.chars):
            raise IndexError(f"cannot insert at {index}")
        self.chars[index:index] = list(chars)
        return True


def locate_coord(text: TextLayout, x: float, y: float) -> int:
    """Return the character index nearest to the display position (x, y)."""
    n = len(text)
    base_y = 0.0
    i = 0
    r = Row()

    while i < n:
        r = text.layout_row(i)
        if r.num_chars <= 0:
            return n
        if i == 0 and y < base_y + r.ymin:
            return 0
        if y < base_y + r.ymax:
            break
        i += r.num_chars
        base_y += r.baseline_y_delta

    if i >= n:
        return n

    if x < r.x0:
        return i

    if x < r.x1:
        prev_x = r.x0
        for k in range(r.num_chars):
            w = text.get_width(i, k)
            if x < prev_x + w:
                return k + i if x < prev_x + w / 2 else k + i + 1
            prev_x += w

    if text.get_char(i + r.num_chars - 1) == NEWLINE:
        return i + r.num_chars - 1
    return i + r.num_chars


def find_charpos(text: TextLayout, n: int, single_line: bool) -> FindState:
    """Locate character ``n`` and remember the start of the row above it."""
    z = len(text)

    if n == z and single_line:
        r = text.layout_row(0)
        return FindState(x=r.x1, y=0.0, height=r.ymax - r.ymin, first_char=0, length=z)

    find = FindState()
    prev_start = 0
    i = 0
    while True:
        r = text.layout_row(i)
        if n < i + r.num_chars:
            break
        if i + r.num_chars == z and z > 0 and text.get_char(z - 1) != NEWLINE:
            break
        prev_start = i
        i += r.num_chars
        find.y += r.baseline_y_delta
        if i == z:
            break

    first = i
    find.first_char = first
    find.length = r.num_chars
    find.height = r.ymax - r.ymin
    find.prev_first = prev_start

    find.x = r.x0
    k = 0
    while first + k < n:
        find.x += text.get_width(first, k)
        k += 1
    return find