"""Cursor, selection, row layout lookup and bounded undo/redo for text fields."""

__version__ = "0.1.0"
__all__ = ["textedit", "textedit_layout", "textedit_undo"]