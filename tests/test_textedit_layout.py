import pytest

from bulbcore.textedit_layout import (
    NEWLINE_WIDTH,
    FindState,
    MonospaceText,
    Row,
    find_charpos,
    locate_coord,
)

SAMPLES = ["", "hello", "ab\ncd", "ab\n", "\n\nxyz\nq", "one\ntwo\nthree"]


def _rows(text):
    rows = []
    i = 0
    while i < len(text):
        row = text.layout_row(i)
        rows.append(row)
        i += row.num_chars
    return rows


@pytest.mark.parametrize("source", SAMPLES)
def test_rows_cover_whole_text(source):
    text = MonospaceText(source, char_width=10, line_height=20)
    rows = _rows(text)
    assert sum(r.num_chars for r in rows) == len(source)
    assert len(rows) == len(source.splitlines(keepends=True))


def test_layout_row_ends_after_newline():
    text = MonospaceText("ab\ncd", char_width=10, line_height=20)
    row = text.layout_row(0)
    assert row.num_chars == len("ab\n")
    assert row.x1 == len("ab") * 10
    assert row.ymax - row.ymin == 20


def test_newline_width():
    text = MonospaceText("a\nb", char_width=7)
    assert text.get_width(0, 1) == NEWLINE_WIDTH
    assert text.get_width(0, 0) == 7


@pytest.mark.parametrize("source", [s for s in SAMPLES if s])
def test_charpos_locate_round_trip(source):
    text = MonospaceText(source, char_width=10, line_height=20)
    for n in range(len(source) + 1):
        pos = find_charpos(text, n, False)
        assert locate_coord(text, pos.x + 1, pos.y + 1) == n


def test_locate_above_text_is_start():
    text = MonospaceText("hello\nworld", char_width=10, line_height=20)
    assert locate_coord(text, 30, -5) == 0


def test_locate_below_text_is_end():
    source = "hello\nworld"
    text = MonospaceText(source, char_width=10, line_height=20)
    assert locate_coord(text, 0, 1000) == len(source)


def test_locate_right_of_line_stops_at_newline():
    source = "hello\nworld"
    text = MonospaceText(source, char_width=10, line_height=20)
    assert locate_coord(text, 1000, 5) == source.index("\n")


def test_locate_empty_text():
    text = MonospaceText("")
    assert locate_coord(text, 3, 3) == 0


def test_find_charpos_single_line_end():
    source = "hello"
    text = MonospaceText(source, char_width=10, line_height=20)
    pos = find_charpos(text, len(source), True)
    row = text.layout_row(0)
    assert pos == FindState(x=row.x1, y=0.0, height=20, first_char=0, length=len(source))


def test_find_charpos_tracks_previous_row():
    source = "one\ntwo\nthree"
    text = MonospaceText(source, char_width=10, line_height=20)
    n = source.index("three") + 2
    pos = find_charpos(text, n, False)
    assert pos.first_char == source.index("three")
    assert pos.prev_first == source.index("two")
    assert pos.y == 2 * 20


def test_insert_and_delete_round_trip():
    text = MonospaceText("hello")
    assert text.insert_chars(2, "XYZ") is True
    assert text.text == "heXYZllo"
    text.delete_chars(2, 3)
    assert str(text) == "hello"


def test_get_char_out_of_range():
    text = MonospaceText("ab")
    with pytest.raises(IndexError):
        text.get_char(2)


def test_delete_out_of_range():
    text = MonospaceText("ab")
    with pytest.raises(IndexError):
        text.delete_chars(1, 5)


def test_bad_metrics_rejected():
    with pytest.raises(ValueError):
        MonospaceText("a", char_width=0)


def test_row_defaults_empty():
    text = MonospaceText("")
    assert text.layout_row(0) == Row(baseline_y_delta=1.0, ymax=1.0)