"""Tests for tabterm.viewport."""
from __future__ import annotations

from rich.text import Text

from tabterm.viewport import Viewport


def numbered(count: int) -> Text:
    return Text("\n".join(f"line {i}" for i in range(count)))


def viewport(height: int = 4, lines: int = 10) -> Viewport:
    return Viewport(width=20, height=height, ready=True).set_content(numbered(lines))


def test_content_height_and_max_offset():
    vp = viewport()
    assert vp.content_height == 10
    assert vp.max_offset == 6
    assert vp.y_offset == 0


def test_scroll_is_clamped():
    vp = viewport()
    assert vp.scroll(100).y_offset == 6
    assert vp.scroll(3).scroll(-100).y_offset == 0


def test_scroll_percent():
    vp = viewport()
    assert vp.scroll_percent() == 0
    assert vp.scroll(3).scroll_percent() == 0.5
    assert vp.goto_bottom().scroll_percent() == 1


def test_scroll_percent_when_content_fits():
    assert viewport(height=10, lines=5).scroll(2).scroll_percent() == 0


def test_visible_slice():
    vp = viewport().scroll(3)
    assert [line.plain for line in vp.visible_slice()] == ["line 3", "line 4", "line 5", "line 6"]


def test_visible_slice_is_short_at_the_end():
    vp = viewport(height=4, lines=2)
    assert [line.plain for line in vp.visible_slice()] == ["line 0", "line 1"]


def test_zero_height_shows_nothing():
    assert viewport(height=0).visible_slice() == []


def test_set_content_clamps_offset():
    vp = viewport().goto_bottom()
    assert vp.y_offset == 6

    shorter = vp.set_content(numbered(5))
    assert shorter.y_offset == 1
    assert shorter.y_offset <= shorter.content_height - shorter.height


def test_set_content_that_fits_resets_to_zero():
    vp = viewport().goto_bottom().set_content(numbered(3))
    assert vp.y_offset == 0


def test_set_content_keeps_offset_when_in_bounds():
    vp = viewport().scroll(2).set_content(numbered(20))
    assert vp.y_offset == 2


def test_resize_clamps_offset():
    vp = viewport().goto_bottom().resize(20, 8)
    assert vp.height == 8
    assert vp.y_offset == 2


def test_negative_resize_clamps_to_zero():
    vp = viewport().resize(-5, -5)
    assert (vp.width, vp.height) == (0, 0)
    assert vp.visible_slice() == []


def test_paging():
    vp = viewport()
    assert vp.page_down().y_offset == 4
    assert vp.page_down().page_down().y_offset == 6
    assert vp.goto_bottom().page_up().y_offset == 2
    assert vp.goto_bottom().goto_top().at_top


def test_half_paging():
    vp = viewport()
    assert vp.half_page_down().y_offset == 2
    assert vp.half_page_down().half_page_down().half_page_down().half_page_down().y_offset == 6
    assert vp.goto_bottom().half_page_up().y_offset == 4
    assert viewport(height=1).half_page_down().y_offset == 1


def test_empty_content():
    vp = Viewport(height=5, ready=True).set_content(Text())
    assert vp.content_height == 0
    assert vp.visible_slice() == []
    assert vp.at_bottom
