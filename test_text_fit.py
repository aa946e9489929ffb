from datetime import date

import pytest

from events import Event
from month_layout import layout_month
from settings import LayoutConfig
from text_fit import PillowTextMeasurer, estimate_text_width


def test_estimate_is_two_thirds_of_font_size_per_char():
    assert estimate_text_width("abc", 12) == pytest.approx(24.0)
    assert estimate_text_width("Conference", 14) == pytest.approx(10 * 14 * 2 / 3)


@pytest.mark.parametrize("text", ["", None])
def test_estimate_empty_text_is_zero(text):
    assert estimate_text_width(text, 14) == 0.0


def test_pillow_measurer_default_font():
    measure = PillowTextMeasurer()
    assert measure("", 14) == 0.0
    one = measure("W", 14)
    four = measure("WWWW", 14)
    assert one > 0
    assert four > one


def test_pillow_measurer_falls_back_when_font_missing():
    measure = PillowTextMeasurer("/nonexistent/font.ttf")
    assert measure("abc", 14) > 0


def test_text_width_is_pluggable():
    wide = LayoutConfig(viewport_width_px=7000, text_width=lambda text, size: 10_000.0)
    event = Event(id=1, start=date(2024, 3, 10), end=date(2024, 3, 16), text="x")
    placed = layout_month([event], "2024-03", wide).events[0]
    assert placed.should_ellipsis

    narrow = LayoutConfig(viewport_width_px=7000, text_width=lambda text, size: 0.0)
    placed = layout_month([event], "2024-03", narrow).events[0]
    assert not placed.should_ellipsis
