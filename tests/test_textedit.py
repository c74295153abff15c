import pytest

from bulbcore.textedit import (
    Key,
    TextEditState,
    is_word_boundary,
    move_word_left,
    move_word_right,
)
from bulbcore.textedit_layout import MonospaceText


def type_text(state, text, chars):
    for ch in chars:
        state.key(text, ch)


def make(initial="", cursor=0, single_line=False):
    text = MonospaceText(initial)
    state = TextEditState(single_line=single_line)
    state.cursor = cursor
    return text, state


def test_typing_inserts_and_moves_cursor():
    text, state = make()
    type_text(state, text, "hello")
    assert text.text == "hello"
    assert state.cursor == len("hello")


def test_integer_character_key_inserts():
    text, state = make()
    state.key(text, ord("x"))
    assert text.text == "x"


def test_multi_character_string_key_is_rejected():
    text, state = make()
    with pytest.raises(ValueError):
        state.key(text, "ab")


def test_backspace_and_delete():
    text, state = make("abc", cursor=2)
    state.key(text, Key.BACKSPACE)
    assert text.text == "ac"
    assert state.cursor == 1
    state.key(text, Key.DELETE)
    assert text.text == "a"
    assert state.cursor == 1


def test_shift_left_selects_and_typing_replaces():
    text, state = make("hello", cursor=5)
    state.key(text, Key.LEFT | Key.SHIFT)
    state.key(text, Key.LEFT | Key.SHIFT)
    assert state.selection == (3, 5)
    state.key(text, "p")
    assert text.text == "help"
    assert not state.has_selection


def test_cut_removes_selection_once():
    text, state = make("hello world", cursor=0)
    state.key(text, Key.WORDRIGHT | Key.SHIFT)
    assert state.cut(text) is True
    assert text.text == "world"
    assert state.cut(text) is False
    assert text.text == "world"


def test_paste_over_selection_and_undo():
    text, state = make("abcdef", cursor=0)
    state.key(text, Key.TEXTEND | Key.SHIFT)
    assert state.paste(text, "xyz") is True
    assert text.text == "xyz"
    assert state.cursor == len("xyz")
    state.key(text, Key.UNDO)
    assert text.text == ""
    state.key(text, Key.UNDO)
    assert text.text == "abcdef"


def test_insert_mode_overwrites():
    text, state = make("abc", cursor=0)
    state.key(text, Key.INSERT)
    assert state.insert_mode is True
    state.key(text, "z")
    assert text.text == "zbc"
    state.key(text, Key.UNDO)
    assert text.text == "abc"


def test_single_line_rejects_newline():
    text, state = make("ab", cursor=2, single_line=True)
    state.key(text, "\n")
    assert text.text == "ab"


def test_single_line_up_acts_as_left():
    text, state = make("abc", cursor=2, single_line=True)
    state.key(text, Key.UP)
    assert state.cursor == 1
    state.key(text, Key.DOWN)
    assert state.cursor == 2


def test_line_start_and_end():
    text, state = make("ab\ncd", cursor=4)
    state.key(text, Key.LINESTART)
    assert state.cursor == 3
    state.key(text, Key.LINEEND)
    assert state.cursor == len(text)


def test_shift_line_start_selects_line():
    text, state = make("ab\ncd", cursor=5)
    state.key(text, Key.LINESTART | Key.SHIFT)
    start, end = state.selection
    assert text.text[start:end] == "cd"


def test_down_then_up_returns_to_column():
    text, state = make("abc\ndef", cursor=1)
    state.key(text, Key.DOWN)
    assert text.get_char(state.cursor) == "e"
    state.key(text, Key.UP)
    assert state.cursor == 1


def test_down_on_last_line_stays():
    text, state = make("abc\ndef", cursor=5)
    state.key(text, Key.DOWN)
    assert state.cursor == 5


def test_page_down_moves_rows():
    text, state = make("a\nb\nc", cursor=0)
    state.row_count_per_page = 2
    state.key(text, Key.PGDOWN)
    assert text.get_char(state.cursor) == "c"
    state.key(text, Key.PGUP)
    assert state.cursor == 0


def test_text_start_end_and_select_all():
    text, state = make("hello", cursor=2)
    state.key(text, Key.TEXTEND)
    assert state.cursor == len(text)
    state.key(text, Key.TEXTSTART)
    assert state.cursor == 0
    state.key(text, Key.TEXTEND | Key.SHIFT)
    assert state.selection == (0, len(text))


def test_word_movement():
    text, state = make("foo bar", cursor=0)
    state.key(text, Key.WORDRIGHT)
    assert text.get_char(state.cursor) == "b"
    state.key(text, Key.TEXTEND)
    state.key(text, Key.WORDLEFT)
    assert text.get_char(state.cursor) == "b"


def test_word_helpers():
    text = MonospaceText("foo bar")
    assert is_word_boundary(text, 0) is True
    assert is_word_boundary(text, 1) is False
    assert move_word_left(text, 0) == 0
    assert move_word_right(text, len(text)) == len(text)
    assert is_word_boundary(text, move_word_right(text, 0)) is True


def test_click_and_drag_select():
    text, state = make("hello")
    state.click(text, 2.4, 0.5)
    assert state.cursor == 2
    assert not state.has_selection
    state.drag(text, 4.6, 0.5)
    assert state.selection == (2, len(text))


def test_clamp_after_external_change():
    text, state = make("hello", cursor=5)
    state.select_start, state.select_end = 1, 5
    text.delete_chars(0, 4)
    state.clamp(text)
    assert state.cursor <= len(text)
    assert max(state.selection) <= len(text)


def test_right_at_end_is_clamped():
    text, state = make("ab", cursor=2)
    state.key(text, Key.RIGHT)
    assert state.cursor == len(text)


def test_reset_clears_history():
    text, state = make()
    type_text(state, text, "ab")
    state.reset(False)
    state.key(text, Key.UNDO)
    assert text.text == "ab"
    assert state.cursor == 0


def test_delete_selection_with_reversed_selection():
    text, state = make("abcdef")
    state.select_start, state.select_end = 4, 1
    state.delete_selection(text)
    assert text.text == "aef"
    assert state.cursor == 1
    assert not state.has_selection