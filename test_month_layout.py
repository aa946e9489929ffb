import logging
from dataclasses import replace
from datetime import date

from calendar_logic import MarkingType
from events import Event
from month_layout import LayoutCache, events_fingerprint, layout_month
from settings import LayoutConfig
from week_layout import SegmentKind

CONFIG = LayoutConfig(viewport_width_px=350, font_size_px=14)


def sample_events():
    return [
        Event(id="conf", start=date(2024, 3, 10), end=date(2024, 3, 16), text="Conference"),
        Event(id="trip", start=date(2024, 2, 27), end=date(2024, 3, 6), text="Trip", leading_decoration="<"),
        Event(id="bday", start=date(2024, 3, 21), end=date(2024, 3, 21), text="Birthday", color="#ff00ff"),
        Event(id="move", start=date(2024, 3, 28), end=date(2024, 4, 9), text="Moving house"),
    ]


def test_layout_month_is_idempotent():
    events = sample_events()
    first = layout_month(events, "2024-03", CONFIG)
    second = layout_month(events, date(2024, 3, 17), CONFIG)
    assert first == second
    assert first is not second


def test_layout_month_leaves_inputs_untouched():
    events = sample_events()
    before = list(events)
    layout_month(events, "2024-03", CONFIG)
    assert events == before
    assert events[0].color is None


def test_full_week_event_through_pipeline():
    layout = layout_month([sample_events()[0]], "2024-03", CONFIG)
    placed = layout.events[0]
    for week in layout.weeks:
        spans = [s for s in week.segments if s.kind is SegmentKind.EVENT]
        if week.row.days[0] == date(2024, 3, 10):
            assert [s.weight for s in spans] == [7.0]
            assert placed.label_week_index == week.row.week_number
        else:
            assert spans == []


def test_every_week_weighs_seven():
    for first_day in (0, 1):
        layout = layout_month(sample_events(), "2024-03", replace(CONFIG, first_day_of_week=first_day))
        assert all(week.weight == 7.0 for week in layout.weeks)


def test_invalid_events_are_skipped(caplog):
    events = sample_events() + [Event(id="bad", start=date(2024, 3, 9), end=date(2024, 3, 2))]
    with caplog.at_level(logging.WARNING):
        layout = layout_month(events, "2024-03", CONFIG)
    assert "bad" not in [p.event.id for p in layout.events]
    assert len(layout.events) == 4
    assert "bad" in caplog.text


def test_layout_without_events():
    layout = layout_month([], "2024-02", CONFIG)
    assert layout.events == ()
    assert all([(s.kind, s.weight) for s in w.segments] == [(SegmentKind.GAP, 7.0)] for w in layout.weeks)


def test_grid_options_are_carried():
    config = replace(CONFIG, marking_type=MarkingType.PERIOD, show_week_numbers=True, hide_extra_days=True)
    grid = layout_month([], "2024-03", config).grid
    assert grid.marking_type is MarkingType.PERIOD
    assert grid.show_week_numbers
    assert grid.hide_extra_days


def test_events_fingerprint_tracks_content():
    events = sample_events()
    assert events_fingerprint(events) == events_fingerprint(list(events))
    changed = [replace(events[0], text="Summit")] + events[1:]
    assert events_fingerprint(changed) != events_fingerprint(events)


def test_layout_cache_reuses_results():
    cache = LayoutCache(maxsize=2)
    events = sample_events()
    first = cache.get(events, "2024-03", CONFIG)
    assert cache.get(list(events), "2024-03-20", CONFIG) is first
    assert len(cache) == 1

    changed = events[:-1]
    assert cache.get(changed, "2024-03", CONFIG) is not first
    assert cache.get(events, "2024-03", replace(CONFIG, viewport_width_px=700)) is not first
    assert len(cache) == 2

    cache.clear()
    assert len(cache) == 0
