"""Bounded undo/redo history for a text editing widget.

Undo records grow upward from the start of a fixed-size record table and
redo records grow downward from its end; the characters they need to
restore share one fixed-size character buffer in the same way. When space
runs out, the oldest undo (or redo) entries are discarded.

The text being edited is any object with ``get_char(index)``,
``delete_chars(index, count)`` and ``insert_chars(index, chars)``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Protocol, Sequence

DEFAULT_STATE_COUNT = 99
DEFAULT_CHAR_COUNT = 999


class EditableText(Protocol):
    def get_char(self, index: int) -> Any: ...

    def delete_chars(self, index: int, count: int) -> Any: ...

    def insert_chars(self, index: int, chars: Sequence[Any]) -> Any: ...


@dataclass
class UndoRecord:
    """One undoable edit.

    Undoing it deletes ``delete_length`` characters at ``where`` and then
    inserts the ``insert_length`` characters stored at ``char_storage``
    (-1 when nothing is stored).
    """

    where: int = 0
    insert_length: int = 0
    delete_length: int = 0
    char_storage: int = -1


class UndoState:
    """Undo and redo history with fixed record and character capacity."""

    def __init__(self, state_count: int = DEFAULT_STATE_COUNT, char_count: int = DEFAULT_CHAR_COUNT) -> None:
        if state_count < 1 or char_count < 1:
            raise ValueError("undo capacities must be positive")
        self.state_count = state_count
        self.char_count = char_count
        self.records: list[UndoRecord] = [UndoRecord() for _ in range(state_count)]
        self.chars: list[Any] = [None] * char_count
        self.clear()

    def clear(self) -> None:
        """Forget all undo and redo history."""
        self.undo_point = 0
        self.undo_char_point = 0
        self.redo_point = self.state_count
        self.redo_char_point = self.char_count

    @property
    def can_undo(self) -> bool:
        return self.undo_point > 0

    @property
    def can_redo(self) -> bool:
        return self.redo_point < self.state_count

    def flush_redo(self) -> None:
        """Drop every redo record."""
        self.redo_point = self.state_count
        self.redo_char_point = self.char_count

    def discard_undo(self) -> None:
        """Discard the oldest undo record and its stored characters."""
        if self.undo_point <= 0:
            return
        first = self.records[0]
        if first.char_storage >= 0:
            n = first.insert_length
            self.undo_char_point -= n
            self.chars[0:self.undo_char_point] = self.chars[n:n + self.undo_char_point]
            for record in self.records[:self.undo_point]:
                if record.char_storage >= 0:
                    record.char_storage -= n
        self.undo_point -= 1
        self.records[0:self.undo_point] = [replace(r) for r in self.records[1:self.undo_point + 1]]

    def discard_redo(self) -> None:
        """Discard the oldest redo record and its stored characters."""
        k = self.state_count - 1
        if self.redo_point > k:
            return
        last = self.records[k]
        if last.char_storage >= 0:
            n = last.insert_length
            self.redo_char_point += n
            start = self.redo_char_point
            self.chars[start:] = self.chars[start - n:self.char_count - n]
            for record in self.records[self.redo_point:k]:
                if record.char_storage >= 0:
                    record.char_storage += n
        self.records[self.redo_point + 1:] = [replace(r) for r in self.records[self.redo_point:k]]
        self.redo_point += 1

    def _create_record(self, numchars: int) -> UndoRecord | None:
        self.flush_redo()
        if self.undo_point == self.state_count:
            self.discard_undo()
        if numchars > self.char_count:
            # Too large to ever fit: the whole history becomes unusable.
            self.undo_point = 0
            self.undo_char_point = 0
            return None
        while self.undo_char_point + numchars > self.char_count:
            self.discard_undo()
        record = UndoRecord()
        self.records[self.undo_point] = record
        self.undo_point += 1
        return record

    def create_undo(self, pos, insert_len, delete_len) -> int | None:
        """Add an undo record; return the offset in ``chars`` reserved for
        the ``insert_len`` characters to restore, or None if none is reserved."""
        record = self._create_record(insert_len)
        if record is None:
            return None
        record.where = pos
        record.insert_length = insert_len
        record.delete_length = delete_len
        if insert_len == 0:
            record.char_storage = -1
            return None
        record.char_storage = self.undo_char_point
        self.undo_char_point += insert_len
        return record.char_storage

    def make_insert(self, where, length) -> None:
        """Record that ``length`` characters are about to be inserted at ``where``."""
        self.create_undo(where, 0, length)

    def make_delete(self, text, where, length) -> None:
        """Record that ``length`` characters at ``where`` are about to be deleted."""
        self._save(text, self.create_undo(where, length, 0), where, length)

    def make_replace(self, text, where, old_length, new_length) -> None:
        """Record that ``old_length`` characters at ``where`` are about to be
        replaced by ``new_length`` new ones."""
        self._save(text, self.create_undo(where, old_length, new_length), where, old_length)

    def _save(self, text: EditableText, storage: int | None, where: int, length: int) -> None:
        if storage is None:
            return
        self.chars[storage:storage + length] = [text.get_char(where + i) for i in range(length)]

    def undo(self, text) -> int | None:
        """Undo the latest edit on ``text``; return the new cursor position,
        or None if nothing was undone."""
        if self.undo_point == 0:
            return None
        u = replace(self.records[self.undo_point - 1])
        r = UndoRecord(
            where=u.where,
            insert_length=u.delete_length,
            delete_length=u.insert_length,
            char_storage=-1,
        )
        self.records[self.redo_point - 1] = r

        if u.delete_length:
            if self.undo_char_point + u.delete_length >= self.char_count:
                # No room to keep the deleted characters for a redo.
                r.insert_length = 0
            else:
                while self.undo_char_point + u.delete_length > self.redo_char_point:
                    if self.redo_point == self.state_count:
                        return None
                    self.discard_redo()
                r = self.records[self.redo_point - 1]
                r.char_storage = self.redo_char_point - u.delete_length
                self.redo_char_point -= u.delete_length
                self.chars[r.char_storage:r.char_storage + u.delete_length] = [
                    text.get_char(u.where + i) for i in range(u.delete_length)
                ]
            text.delete_chars(u.where, u.delete_length)

        if u.insert_length:
            start = u.char_storage
            text.insert_chars(u.where, self.chars[start:start + u.insert_length])
            self.undo_char_point -= u.insert_length

        self.undo_point -= 1
        self.redo_point -= 1
        return u.where + u.insert_length

    def redo(self, text) -> int | None:
        """Redo the latest undone edit on ``text``; return the new cursor
        position, or None if nothing was redone."""
        if self.redo_point == self.state_count:
            return None
        r = replace(self.records[self.redo_point])
        u = UndoRecord(
            where=r.where,
            insert_length=r.delete_length,
            delete_length=r.insert_length,
            char_storage=-1,
        )
        self.records[self.undo_point] = u

        if r.delete_length:
            if self.undo_char_point + u.insert_length > self.redo_char_point:
                u.insert_length = 0
                u.delete_length = 0
            else:
                u.char_storage = self.undo_char_point
                self.undo_char_point += u.insert_length
                self.chars[u.char_storage:u.char_storage + u.insert_length] = [
                    text.get_char(u.where + i) for i in range(u.insert_length)
                ]
            text.delete_chars(r.where, r.delete_length)

        if r.insert_length:
            start = r.char_storage
            text.insert_chars(r.where, self.chars[start:start + r.insert_length])
            self.redo_char_point += r.insert_length

        self.undo_point += 1
        self.redo_point += 1
        return r.where + r.insert_length