import pytest
from hypothesis import given
from hypothesis import strategies as st

from atlaskit.layout import (
    NEWLINE_WIDTH,
    PlainTextBuffer,
    TextBuffer,
    find_charpos,
    locate_coord,
)

TEXT = "ab\ncd"
WIDTH = 10.0
HEIGHT = 20.0
SECOND_ROW = TEXT.index("\n") + 1


def make(text=TEXT):
    return PlainTextBuffer(text, char_width=WIDTH, line_height=HEIGHT)


def test_len_and_str():
    buf = make()
    assert len(buf) == len(TEXT)
    assert str(buf) == TEXT


def test_char_at_matches_text():
    buf = make()
    assert [buf.char_at(i) for i in range(len(buf))] == list(TEXT)


def test_char_at_out_of_range():
    with pytest.raises(IndexError):
        make().char_at(len(TEXT))
    with pytest.raises(IndexError):
        make().char_at(-1)


def test_invalid_metrics():
    with pytest.raises(ValueError):
        PlainTextBuffer("a", char_width=0, line_height=1)
    with pytest.raises(ValueError):
        PlainTextBuffer("a", char_width=1, line_height=-1)


def test_text_buffer_is_abstract():
    with pytest.raises(TypeError):
        TextBuffer()


def test_layout_row_includes_newline():
    row = make().layout_row(0)
    assert row.num_chars == SECOND_ROW
    assert row.x0 == 0.0
    assert row.x1 == (SECOND_ROW - 1) * WIDTH
    assert row.ymax - row.ymin == HEIGHT
    assert row.baseline_y_delta == HEIGHT


def test_layout_last_row():
    row = make().layout_row(SECOND_ROW)
    assert row.num_chars == len(TEXT) - SECOND_ROW
    assert row.x1 == (len(TEXT) - SECOND_ROW) * WIDTH


def test_layout_row_past_end_is_empty():
    assert make().layout_row(len(TEXT)).num_chars == 0


def test_char_widths():
    buf = make()
    assert buf.char_width_at(0, 0) == WIDTH
    assert buf.char_width_at(0, SECOND_ROW - 1) == NEWLINE_WIDTH


def test_insert_delete_round_trip():
    buf = make()
    assert buf.insert(1, "xyz") is True
    assert str(buf) == "axyzb\ncd"
    buf.delete(1, 3)
    assert str(buf) == TEXT


def test_insert_out_of_range_fails():
    buf = make()
    assert buf.insert(len(TEXT) + 1, "x") is False
    assert str(buf) == TEXT


def test_delete_out_of_range():
    with pytest.raises(IndexError):
        make().delete(len(TEXT) - 1, 2)


def test_locate_above_text():
    assert locate_coord(make(), WIDTH / 2, -1.0) == 0


def test_locate_below_text():
    assert locate_coord(make(), 0.0, HEIGHT * 10) == len(TEXT)


def test_locate_left_of_row():
    assert locate_coord(make(), -5.0, HEIGHT * 1.5) == SECOND_ROW


def test_locate_right_of_row_with_newline():
    assert locate_coord(make(), WIDTH * 50, HEIGHT / 2) == SECOND_ROW - 1


def test_locate_right_of_last_row():
    assert locate_coord(make(), WIDTH * 50, HEIGHT * 1.5) == len(TEXT)


def test_locate_rounds_to_nearest_boundary():
    buf = make()
    assert locate_coord(buf, WIDTH * 0.25, HEIGHT / 2) == 0
    assert locate_coord(buf, WIDTH * 0.75, HEIGHT / 2) == 1


def test_locate_empty_buffer():
    assert locate_coord(make(""), 3.0, 3.0) == 0


def test_find_charpos_middle():
    pos = find_charpos(make(), SECOND_ROW + 1, False)
    assert pos.first_char == SECOND_ROW
    assert pos.length == len(TEXT) - SECOND_ROW
    assert pos.prev_first == 0
    assert pos.y == HEIGHT
    assert pos.x == WIDTH
    assert pos.height == HEIGHT


def test_find_charpos_end_multi_line():
    pos = find_charpos(make(), len(TEXT), False)
    assert pos.first_char == len(TEXT)
    assert pos.length == 0
    assert pos.prev_first == SECOND_ROW


def test_find_charpos_end_single_line():
    buf = make("abc")
    pos = find_charpos(buf, len(buf), True)
    assert pos.x == buf.layout_row(0).x1
    assert pos.first_char == 0
    assert pos.length == len(buf)


def test_find_charpos_out_of_range():
    with pytest.raises(ValueError):
        find_charpos(make(), len(TEXT) + 1, False)
    with pytest.raises(ValueError):
        find_charpos(make(), -1, False)


@given(
    text=st.text(alphabet="ab \n", min_size=1, max_size=20),
    width=st.integers(min_value=1, max_value=20),
    height=st.integers(min_value=1, max_value=20),
    data=st.data(),
)
def test_charpos_and_locate_round_trip(text, width, height, data):
    buf = PlainTextBuffer(text, char_width=width, line_height=height)
    n = data.draw(st.integers(min_value=0, max_value=len(text) - 1))
    pos = find_charpos(buf, n, False)
    assert pos.first_char <= n < pos.first_char + pos.length
    assert locate_coord(buf, pos.x, pos.y) == n


@given(text=st.text(alphabet="ab\n", max_size=20))
def test_rows_cover_whole_text(text):
    buf = PlainTextBuffer(text)
    i = 0
    while i < len(buf):
        row = buf.layout_row(i)
        assert row.num_chars > 0
        i += row.num_chars
    assert i == len(text)