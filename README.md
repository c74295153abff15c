# bulbcore

A pure-Python state machine for single- and multi-line text fields. It covers
the cursor, the selection, keyboard and mouse handling, and a bounded
undo/redo history. The text itself lives in a separate object that the
editor asks for characters and row layout.

## Modules

- `bulbcore.textedit` holds `TextEditState`, which stores the cursor, the
  selection, insert mode and undo history of one field. It has `click`,
  `drag`, `cut`, `paste`, `key`, `delete_selection`, `clamp` and `reset`.
  `Key` lists the control keys, and `Key.SHIFT` can be or-ed into a movement
  key to extend the selection. Any smaller key code, or a one-character
  string, is inserted as text. The word-movement helpers are
  `is_word_boundary`, `move_word_left` and `move_word_right`.
- `bulbcore.textedit_layout` defines `MonospaceText`, an editable buffer laid
  out in a fixed-width font with one row per line. It also has the `Row` and
  `FindState` records, the `TextLayout` protocol that any text object must
  meet, and the lookups `locate_coord` (display position to character index)
  and `find_charpos` (character index to position and row).
- `bulbcore.textedit_undo` defines `UndoState` and `UndoRecord`. The history
  has a fixed number of records (99 by default) and a fixed character
  capacity (999 by default). When either runs out, the oldest entries are
  dropped.

## Example

```python
from bulbcore.textedit import Key, TextEditState
from bulbcore.textedit_layout import MonospaceText, locate_coord

text = MonospaceText("hello")
state = TextEditState(single_line=True)
state.key(text, Key.TEXTEND)
state.paste(text, " world")
print(text.text)            # hello world
state.key(text, Key.UNDO)
print(text.text)            # hello

lines = MonospaceText("ab\ncd")
state = TextEditState()
state.key(lines, Key.TEXTEND)
state.key(lines, Key.UP)
print(state.cursor)         # 2
print(locate_coord(lines, 1.6, 1.2))  # 5
```

A text object of your own can be used in place of `MonospaceText`. It needs
`__len__`, `get_char`, `layout_row`, `get_width`, `delete_chars` and
`insert_chars`, as set out by `TextLayout`.

## What it does not do

The package draws nothing and does not read input devices. You pass it key
codes and mouse coordinates, and you render the text and cursor yourself. It
does not touch the system clipboard: `cut` only deletes the selection, and
`paste` inserts the characters it is given. It does not decode machine code
or patch functions.

## Running the tests

```
pip install .[test]
pytest
```