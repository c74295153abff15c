"""Cursor, selection and keyboard handling for a text editing widget.

A ``TextEditState`` holds everything about one edit field except the text
itself. The text is any object that satisfies ``TextLayout``, for example
``MonospaceText``. Each call may change both the text and the state.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Iterable

from bulbcore.textedit_layout import (
    NEWLINE,
    NEWLINE_WIDTH,
    TextLayout,
    find_charpos,
    locate_coord,
)
from bulbcore.textedit_undo import DEFAULT_CHAR_COUNT, DEFAULT_STATE_COUNT, UndoState


class Key(IntEnum):
    """Control keys. Any smaller key code is a character to insert.

    ``SHIFT`` is a bit that may be or-ed into a movement key to extend
    the selection.
    """

    LEFT = 0x200000
    RIGHT = 0x200001
    UP = 0x200002
    DOWN = 0x200003
    LINESTART = 0x200004
    LINEEND = 0x200005
    TEXTSTART = 0x200006
    TEXTEND = 0x200007
    DELETE = 0x200008
    BACKSPACE = 0x200009
    UNDO = 0x20000A
    REDO = 0x20000B
    WORDLEFT = 0x20000C
    WORDRIGHT = 0x20000D
    PGUP = 0x20000E
    PGDOWN = 0x20000F
    INSERT = 0x200010
    SHIFT = 0x400000


_SHIFT = int(Key.SHIFT)
_FIRST_CONTROL_KEY = int(Key.LEFT)


def _is_space(ch: Any) -> bool:
    return isinstance(ch, str) and ch.isspace()


def is_word_boundary(text: TextLayout, idx: int) -> bool:
    """Return True if a word starts at ``idx`` (or ``idx`` is 0)."""
    if idx <= 0:
        return True
    return _is_space(text.get_char(idx - 1)) and not _is_space(text.get_char(idx))


def move_word_left(text: TextLayout, c: int) -> int:
    """Return the start of the word before position ``c``."""
    c -= 1
    while c >= 0 and not is_word_boundary(text, c):
        c -= 1
    return max(c, 0)


def move_word_right(text: TextLayout, c: int) -> int:
    """Return the start of the word after position ``c``."""
    length = len(text)
    c += 1
    while c < length and not is_word_boundary(text, c):
        c += 1
    return min(c, length)


class TextEditState:
    """Cursor, selection, insert mode and undo history of one edit field."""

    def __init__(
        self,
        single_line: bool = False,
        undo_state_count: int = DEFAULT_STATE_COUNT,
        undo_char_count: int = DEFAULT_CHAR_COUNT,
    ) -> None:
        self.undo = UndoState(undo_state_count, undo_char_count)
        self.reset(single_line)

    def reset(self, single_line) -> None:
        """Return to the initial state: empty selection, no history."""
        self.undo.clear()
        self.cursor = 0
        self.select_start = 0
        self.select_end = 0
        self.has_preferred_x = False
        self.preferred_x = 0.0
        self.single_line = bool(single_line)
        self.insert_mode = False
        self.row_count_per_page = 0

    @property
    def has_selection(self) -> bool:
        return self.select_start != self.select_end

    @property
    def selection(self) -> tuple[int, int]:
        """The selection as an ordered (start, end) pair."""
        return min(self.select_start, self.select_end), max(self.select_start, self.select_end)

    # -- helpers -----------------------------------------------------------

    def clamp(self, text) -> None:
        """Make the cursor and selection valid after the text changed."""
        n = len(text)
        if self.has_selection:
            self.select_start = min(self.select_start, n)
            self.select_end = min(self.select_end, n)
            if self.select_start == self.select_end:
                self.cursor = self.select_start
        self.cursor = min(self.cursor, n)

    def _delete(self, text: TextLayout, where: int, length: int) -> None:
        self.undo.make_delete(text, where, length)
        text.delete_chars(where, length)
        self.has_preferred_x = False

    def delete_selection(self, text) -> None:
        """Delete the selected characters, if any."""
        self.clamp(text)
        if not self.has_selection:
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
        if self.has_selection:
            self._sort_selection()
            self.cursor = self.select_start
            self.select_end = self.select_start
            self.has_preferred_x = False

    def _move_to_last(self, text: TextLayout) -> None:
        if self.has_selection:
            self._sort_selection()
            self.clamp(text)
            self.cursor = self.select_end
            self.select_start = self.select_end
            self.has_preferred_x = False

    def _prep_selection_at_cursor(self) -> None:
        if not self.has_selection:
            self.select_start = self.select_end = self.cursor
        else:
            self.cursor = self.select_end

    # -- mouse -------------------------------------------------------------

    def _single_line_y(self, text: TextLayout, y: float) -> float:
        # Pin y to the only row so dragging keeps working off the field.
        return text.layout_row(0).ymin if self.single_line else y

    def click(self, text, x, y) -> None:
        """Move the cursor to the clicked position and clear the selection."""
        y = self._single_line_y(text, y)
        self.cursor = locate_coord(text, x, y)
        self.select_start = self.select_end = self.cursor
        self.has_preferred_x = False

    def drag(self, text, x, y) -> None:
        """Move the cursor and the selection end to the dragged position."""
        y = self._single_line_y(text, y)
        if self.select_start == self.select_end:
            self.select_start = self.cursor
        self.cursor = self.select_end = locate_coord(text, x, y)

    # -- clipboard ---------------------------------------------------------

    def cut(self, text) -> bool:
        """Delete the selection; return True if there was one."""
        if self.has_selection:
            self.delete_selection(text)
            self.has_preferred_x = False
            return True
        return False

    def paste(self, text, chars: Iterable[Any]) -> bool:
        """Insert ``chars`` at the cursor, replacing any selection.

        Returns False if the text refused the insertion; the deleted
        selection can then still be restored by an undo.
        """
        chars = list(chars)
        self.clamp(text)
        self.delete_selection(text)
        if text.insert_chars(self.cursor, chars):
            self.undo.make_insert(self.cursor, len(chars))
            self.cursor += len(chars)
            self.has_preferred_x = False
            return True
        return False

    # -- keyboard ----------------------------------------------------------

    def key(self, text, key) -> None:
        """Handle one key press: a control key or a character to insert."""
        if isinstance(key, str):
            if len(key) != 1:
                raise ValueError(f"expected a single character, got {key!r}")
            key = ord(key)
        key = int(key)
        shift = key & _SHIFT
        base = key & ~_SHIFT

        if self.single_line and base in (Key.UP, Key.DOWN):
            # Single-line fields treat up and down like left and right.
            key = (Key.LEFT if base == Key.UP else Key.RIGHT) | shift
            base = key & ~_SHIFT

        handler = _HANDLERS.get(key)
        if handler is not None:
            handler(self, text)
        elif base in (Key.DOWN, Key.PGDOWN):
            self._move_down(text, bool(shift), base == Key.PGDOWN)
        elif base in (Key.UP, Key.PGUP):
            self._move_up(text, bool(shift), base == Key.PGUP)
        elif base == Key.DELETE:
            self._key_delete(text)
        elif base == Key.BACKSPACE:
            self._key_backspace(text)
        elif 0 < key < _FIRST_CONTROL_KEY:
            self._insert_char(text, chr(key))

    def _insert_char(self, text: TextLayout, ch: str) -> None:
        if ch == NEWLINE and self.single_line:
            return
        if self.insert_mode and not self.has_selection and self.cursor < len(text):
            self.undo.make_replace(text, self.cursor, 1, 1)
            text.delete_chars(self.cursor, 1)
            if text.insert_chars(self.cursor, [ch]):
                self.cursor += 1
                self.has_preferred_x = False
        else:
            self.delete_selection(text)
            if text.insert_chars(self.cursor, [ch]):
                self.undo.make_insert(self.cursor, 1)
                self.cursor += 1
                self.has_preferred_x = False

    def _key_insert(self, text: TextLayout) -> None:
        self.insert_mode = not self.insert_mode

    def _key_undo(self, text: TextLayout) -> None:
        position = self.undo.undo(text)
        if position is not None:
            self.cursor = position
        self.has_preferred_x = False

    def _key_redo(self, text: TextLayout) -> None:
        position = self.undo.redo(text)
        if position is not None:
            self.cursor = position
        self.has_preferred_x = False

    def _key_left(self, text: TextLayout) -> None:
        if self.has_selection:
            self._move_to_first()
        elif self.cursor > 0:
            self.cursor -= 1
        self.has_preferred_x = False

    def _key_right(self, text: TextLayout) -> None:
        if self.has_selection:
            self._move_to_last(text)
        else:
            self.cursor += 1
        self.clamp(text)
        self.has_preferred_x = False

    def _key_shift_left(self, text: TextLayout) -> None:
        self.clamp(text)
        self._prep_selection_at_cursor()
        if self.select_end > 0:
            self.select_end -= 1
        self.cursor = self.select_end
        self.has_preferred_x = False

    def _key_shift_right(self, text: TextLayout) -> None:
        self._prep_selection_at_cursor()
        self.select_end += 1
        self.clamp(text)
        self.cursor = self.select_end
        self.has_preferred_x = False

    def _key_word_left(self, text: TextLayout) -> None:
        if self.has_selection:
            self._move_to_first()
        else:
            self.cursor = move_word_left(text, self.cursor)
            self.clamp(text)

    def _key_shift_word_left(self, text: TextLayout) -> None:
        if not self.has_selection:
            self._prep_selection_at_cursor()
        self.cursor = move_word_left(text, self.cursor)
        self.select_end = self.cursor
        self.clamp(text)

    def _key_word_right(self, text: TextLayout) -> None:
        if self.has_selection:
            self._move_to_last(text)
        else:
            self.cursor = move_word_right(text, self.cursor)
            self.clamp(text)

    def _key_shift_word_right(self, text: TextLayout) -> None:
        if not self.has_selection:
            self._prep_selection_at_cursor()
        self.cursor = move_word_right(text, self.cursor)
        self.select_end = self.cursor
        self.clamp(text)

    def _seek_x(self, text: TextLayout, row_start: int, goal_x: float) -> None:
        """Put the cursor on the row at ``row_start`` nearest ``goal_x``."""
        self.cursor = row_start
        row = text.layout_row(row_start)
        x = row.x0
        for i in range(row.num_chars):
            dx = text.get_width(row_start, i)
            if dx == NEWLINE_WIDTH:
                break
            x += dx
            if x > goal_x:
                break
            self.cursor += 1
        self.clamp(text)
        return row

    def _move_down(self, text: TextLayout, sel: bool, is_page: bool) -> None:
        row_count = self.row_count_per_page if is_page else 1
        if sel:
            self._prep_selection_at_cursor()
        elif self.has_selection:
            self._move_to_last(text)

        self.clamp(text)
        find = find_charpos(text, self.cursor, self.single_line)

        for _ in range(row_count):
            goal_x = self.preferred_x if self.has_preferred_x else find.x
            start = find.first_char + find.length
            if find.length == 0:
                break
            # On the last line there is nowhere to go down to.
            if text.get_char(find.first_char + find.length - 1) != NEWLINE:
                break
            row = self._seek_x(text, start, goal_x)
            self.has_preferred_x = True
            self.preferred_x = goal_x
            if sel:
                self.select_end = self.cursor
            find.first_char = find.first_char + find.length
            find.length = row.num_chars

    def _move_up(self, text: TextLayout, sel: bool, is_page: bool) -> None:
        row_count = self.row_count_per_page if is_page else 1
        if sel:
            self._prep_selection_at_cursor()
        elif self.has_selection:
            self._move_to_first()

        self.clamp(text)
        find = find_charpos(text, self.cursor, self.single_line)

        for _ in range(row_count):
            goal_x = self.preferred_x if self.has_preferred_x else find.x
            if find.prev_first == find.first_char:
                break
            self._seek_x(text, find.prev_first, goal_x)
            self.has_preferred_x = True
            self.preferred_x = goal_x
            if sel:
                self.select_end = self.cursor
            prev_scan = find.prev_first - 1 if find.prev_first > 0 else 0
            while prev_scan > 0 and text.get_char(prev_scan - 1) != NEWLINE:
                prev_scan -= 1
            find.first_char = find.prev_first
            find.prev_first = prev_scan

    def _key_delete(self, text: TextLayout) -> None:
        if self.has_selection:
            self.delete_selection(text)
        elif self.cursor < len(text):
            self._delete(text, self.cursor, 1)
        self.has_preferred_x = False

    def _key_backspace(self, text: TextLayout) -> None:
        if self.has_selection:
            self.delete_selection(text)
        else:
            self.clamp(text)
            if self.cursor > 0:
                self._delete(text, self.cursor - 1, 1)
                self.cursor -= 1
        self.has_preferred_x = False

    def _key_text_start(self, text: TextLayout) -> None:
        self.cursor = self.select_start = self.select_end = 0
        self.has_preferred_x = False

    def _key_text_end(self, text: TextLayout) -> None:
        self.cursor = len(text)
        self.select_start = self.select_end = 0
        self.has_preferred_x = False

    def _key_shift_text_start(self, text: TextLayout) -> None:
        self._prep_selection_at_cursor()
        self.cursor = self.select_end = 0
        self.has_preferred_x = False

    def _key_shift_text_end(self, text: TextLayout) -> None:
        self._prep_selection_at_cursor()
        self.cursor = self.select_end = len(text)
        self.has_preferred_x = False

    def _seek_line_start(self, text: TextLayout) -> None:
        if self.single_line:
            self.cursor = 0
            return
        while self.cursor > 0 and text.get_char(self.cursor - 1) != NEWLINE:
            self.cursor -= 1

    def _seek_line_end(self, text: TextLayout) -> None:
        n = len(text)
        if self.single_line:
            self.cursor = n
            return
        while self.cursor < n and text.get_char(self.cursor) != NEWLINE:
            self.cursor += 1

    def _key_line_start(self, text: TextLayout) -> None:
        self.clamp(text)
        self._move_to_first()
        self._seek_line_start(text)
        self.has_preferred_x = False

    def _key_line_end(self, text: TextLayout) -> None:
        self.clamp(text)
        self._move_to_first()
        self._seek_line_end(text)
        self.has_preferred_x = False

    def _key_shift_line_start(self, text: TextLayout) -> None:
        self.clamp(text)
        self._prep_selection_at_cursor()
        self._seek_line_start(text)
        self.select_end = self.cursor
        self.has_preferred_x = False

    def _key_shift_line_end(self, text: TextLayout) -> None:
        self.clamp(text)
        self._prep_selection_at_cursor()
        self._seek_line_end(text)
        self.select_end = self.cursor
        self.has_preferred_x = False


_HANDLERS = {
    int(Key.INSERT): TextEditState._key_insert,
    int(Key.UNDO): TextEditState._key_undo,
    int(Key.REDO): TextEditState._key_redo,
    int(Key.LEFT): TextEditState._key_left,
    int(Key.RIGHT): TextEditState._key_right,
    Key.LEFT | _SHIFT: TextEditState._key_shift_left,
    Key.RIGHT | _SHIFT: TextEditState._key_shift_right,
    int(Key.WORDLEFT): TextEditState._key_word_left,
    Key.WORDLEFT | _SHIFT: TextEditState._key_shift_word_left,
    int(Key.WORDRIGHT): TextEditState._key_word_right,
    Key.WORDRIGHT | _SHIFT: TextEditState._key_shift_word_right,
    int(Key.TEXTSTART): TextEditState._key_text_start,
    int(Key.TEXTEND): TextEditState._key_text_end,
    Key.TEXTSTART | _SHIFT: TextEditState._key_shift_text_start,
    Key.TEXTEND | _SHIFT: TextEditState._key_shift_text_end,
    int(Key.LINESTART): TextEditState._key_line_start,
    int(Key.LINEEND): TextEditState._key_line_end,
    Key.LINESTART | _SHIFT: TextEditState._key_shift_line_start,
    Key.LINEEND | _SHIFT: TextEditState._key_shift_line_end,
}