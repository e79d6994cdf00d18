import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from atlaskit.rectpack import MAX_VALUE, Heuristic, Packer, Rect


def _overlaps(a, b):
    return a.x < b.x + b.w and b.x < a.x + a.w and a.y < b.y + b.h and b.y < a.y + a.h


def _check_layout(rects, width, height):
    placed = [r for r in rects if r.was_packed and r.w and r.h]
    for r in placed:
        assert 0 <= r.x and r.x + r.w <= width
        assert 0 <= r.y and r.y + r.h <= height
    for i, a in enumerate(placed):
        for b in placed[i + 1:]:
            assert not _overlaps(a, b)


def test_single_rect_at_origin():
    packer = Packer(100, 100, 100)
    rect = Rect(10, 10)
    assert packer.pack([rect]) is True
    assert (rect.x, rect.y, rect.was_packed) == (0, 0, True)


def test_too_large_rect_is_marked_unpacked():
    packer = Packer(64, 64, 64)
    big = Rect(65, 10)
    small = Rect(8, 8)
    assert packer.pack([big, small]) is False
    assert big.was_packed is False
    assert (big.x, big.y) == (MAX_VALUE, MAX_VALUE)
    assert small.was_packed is True


def test_empty_rect_is_packed_at_origin():
    packer = Packer(16, 16, 16)
    rect = Rect(0, 5, x=3, y=4)
    assert packer.pack([rect]) is True
    assert (rect.x, rect.y, rect.was_packed) == (0, 0, True)


def test_exact_fill_of_four_quarters():
    packer = Packer(100, 100, 100)
    rects = [Rect(50, 50, id=i) for i in range(4)]
    assert packer.pack(rects) is True
    _check_layout(rects, 100, 100)
    assert sorted(r.id for r in rects) == [0, 1, 2, 3]


def test_fifth_quarter_does_not_fit():
    packer = Packer(100, 100, 100)
    rects = [Rect(50, 50) for _ in range(5)]
    assert packer.pack(rects) is False
    assert sum(r.was_packed for r in rects) == 4


def test_rect_order_is_preserved():
    packer = Packer(200, 200, 200)
    rects = [Rect(5, 5, id=1), Rect(30, 40, id=2), Rect(10, 20, id=3)]
    packer.pack(rects)
    assert [r.id for r in rects] == [1, 2, 3]


def test_packing_continues_across_calls():
    packer = Packer(100, 100, 100)
    first = [Rect(100, 50)]
    second = [Rect(100, 50)]
    assert packer.pack(first) is True
    assert packer.pack(second) is True
    _check_layout(first + second, 100, 100)
    assert packer.pack([Rect(1, 1)]) is False


def test_out_of_nodes_when_quantization_disabled():
    packer = Packer(100, 100, 1)
    packer.allow_out_of_mem(True)
    rects = [Rect(10, 10, id=0), Rect(10, 10, id=1)]
    assert packer.pack(rects) is False
    assert [r.was_packed for r in rects] == [True, False]


def test_alignment_setting():
    packer = Packer(100, 100, 10)
    assert packer.align == 10
    packer.allow_out_of_mem(True)
    assert packer.align == 1


def test_invalid_heuristic_raises():
    packer = Packer(10, 10, 10)
    with pytest.raises(ValueError):
        packer.set_heuristic(7)


def test_set_heuristic_accepts_int():
    packer = Packer(10, 10, 10)
    packer.set_heuristic(1)
    assert packer.heuristic is Heuristic.SKYLINE_BF_SORT_HEIGHT


def test_zero_nodes_rejected():
    with pytest.raises(ValueError):
        Packer(10, 10, 0)


rect_lists = st.lists(
    st.tuples(st.integers(0, 40), st.integers(0, 40)), min_size=0, max_size=25
)


@settings(max_examples=60, deadline=None)
@given(
    sizes=rect_lists,
    heuristic=st.sampled_from(list(Heuristic)),
    allow=st.booleans(),
)
def test_layout_invariants(sizes, heuristic, allow):
    width, height = 64, 64
    packer = Packer(width, height, width)
    packer.set_heuristic(heuristic)
    packer.allow_out_of_mem(allow)
    rects = [Rect(w, h, id=i) for i, (w, h) in enumerate(sizes)]
    result = packer.pack(rects)
    assert result == all(r.was_packed for r in rects)
    assert [r.id for r in rects] == list(range(len(sizes)))
    for r in rects:
        if not r.was_packed:
            assert (r.x, r.y) == (MAX_VALUE, MAX_VALUE)
    _check_layout(rects, width, height)


@settings(max_examples=40, deadline=None)
@given(sizes=st.lists(st.tuples(st.integers(1, 16), st.integers(1, 16)), max_size=10))
def test_small_rects_always_fit_in_large_target(sizes):
    packer = Packer(1024, 1024, 1024)
    rects = [Rect(w, h) for w, h in sizes]
    assert packer.pack(rects) is True
    _check_layout(rects, 1024, 1024)