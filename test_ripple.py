"""Ripple scheduling and click handling."""

import math
from datetime import date

import pytest

from heatmap_logic import STATE_COLORS, DayClassifier, DayState
from ripple import (
    HIGHLIGHT_COLOR,
    MAX_RIPPLE_DISTANCE,
    RIPPLE_DURATION_MS,
    blend_color,
    ease_in_out,
    grid_distance,
    handle_click,
    phase_frames,
    scale_rect,
    schedule_ripple,
)

TODAY = date(2025, 6, 15)  # day-of-year 165


class Holder:
    """Caller-side state: a completed list and the classifier built from it."""

    def __init__(self, completed=()):
        self.completed = list(completed)
        self.calls = []
        self.classifier = DayClassifier(2025, self.completed, TODAY)

    def on_complete_day(self, d):
        self.calls.append(d)
        self.completed.append(d.isoformat())
        self.classifier = DayClassifier(2025, self.completed, TODAY)

    def resting_color(self, day):
        return self.classifier.color(day)


def test_grid_distance_uses_plain_week_grid():
    assert grid_distance(10, 10) == 0
    assert grid_distance(0, 7) == 1
    assert grid_distance(0, 1) == 1
    # Days 6 and 7 are neighbours on screen but far apart in the plain grid
    assert grid_distance(6, 7) == pytest.approx(math.sqrt(1 + 36))


def test_self_ripple_has_zero_delay():
    entries = schedule_ripple(100, range(365))
    by_day = {e.day_of_year: e for e in entries}
    assert by_day[100].delay_ms == 0


def test_delay_is_monotonic_in_distance():
    clicked = 123
    entries = schedule_ripple(clicked, range(365))
    ordered = sorted(entries, key=lambda e: grid_distance(clicked, e.day_of_year))
    delays = [e.delay_ms for e in ordered]
    assert delays == sorted(delays)
    per_unit = RIPPLE_DURATION_MS / MAX_RIPPLE_DISTANCE
    for e in entries:
        assert e.delay_ms == pytest.approx(grid_distance(clicked, e.day_of_year) * per_unit)


def test_max_distance_limits_participants():
    entries = schedule_ripple(0, range(365), max_distance=1.5)
    assert sorted(e.day_of_year for e in entries) == [0, 1, 7, 8]


def test_entries_follow_input_order():
    entries = schedule_ripple(5, [9, 3, 5])
    assert [e.day_of_year for e in entries] == [9, 3, 5]
    assert all(e.highlight_color == HIGHLIGHT_COLOR for e in entries)


def test_final_color_without_resolver_raises():
    entry = schedule_ripple(0, [0])[0]
    with pytest.raises(ValueError):
        entry.final_color()


def test_click_scenario():
    holder = Holder()
    hidden = []
    entries = handle_click(59, holder.classifier, holder.on_complete_day,
                           holder.resting_color, lambda: hidden.append(True))
    assert holder.calls == [date(2025, 3, 1)]
    assert hidden == [True]
    assert len(entries) == 365
    assert {e.day_of_year: e for e in entries}[59].delay_ms == 0


def test_future_click_is_a_no_op():
    holder = Holder()
    hidden = []
    entries = handle_click(200, holder.classifier, holder.on_complete_day,
                           holder.resting_color, lambda: hidden.append(True))
    assert entries == []
    assert holder.calls == []
    # Tooltip still goes away
    assert hidden == [True]


def test_today_click_is_valid():
    holder = Holder()
    entries = handle_click(165, holder.classifier, holder.on_complete_day, holder.resting_color)
    assert holder.calls == [TODAY]
    assert len(entries) == 365


def test_resting_color_reflects_state_after_click():
    holder = Holder()
    assert holder.classifier.state(59) is DayState.PAST_INCOMPLETE
    entries = handle_click(59, holder.classifier, holder.on_complete_day, holder.resting_color)
    by_day = {e.day_of_year: e for e in entries}
    assert by_day[59].final_color() == STATE_COLORS[DayState.PAST_COMPLETE]
    assert by_day[60].final_color() == STATE_COLORS[DayState.PAST_INCOMPLETE]
    assert by_day[300].final_color() == STATE_COLORS[DayState.FUTURE]


def test_click_out_of_range_raises():
    holder = Holder()
    with pytest.raises(IndexError):
        handle_click(365, holder.classifier, holder.on_complete_day)
    assert holder.calls == []


# ------------------------------------------------------------------
# Tweening helpers
# ------------------------------------------------------------------
def test_blend_color():
    assert blend_color("#000000", "#ffffff", 0) == "#000000"
    assert blend_color("#000000", "#ffffff", 1) == "#ffffff"
    assert blend_color("#000000", "#ffffff", 0.5) == "#808080"
    assert blend_color("red", "#0000ff", 2) == "#0000ff"


def test_blend_color_rejects_unknown():
    with pytest.raises(ValueError):
        blend_color("not-a-colour", "#ffffff", 0.5)


def test_ease_in_out_endpoints():
    assert ease_in_out(0) == 0
    assert ease_in_out(1) == 1
    assert ease_in_out(0.5) == pytest.approx(0.5)
    assert ease_in_out(0.25) < 0.25


def test_phase_frames_end_at_full_progress():
    frames = phase_frames(600, 30)
    assert len(frames) == 20
    assert frames[-1] == (600, 1.0)
    elapsed = [e for e, _ in frames]
    assert elapsed == sorted(elapsed)
    assert phase_frames(10, 30) == [(10, 1.0)]


def test_scale_rect_keeps_centre():
    x0, y0, x1, y1 = scale_rect(10, 20, 18, 1.2)
    assert (x0 + x1) / 2 == pytest.approx(19)
    assert (y0 + y1) / 2 == pytest.approx(29)
    assert x1 - x0 == pytest.approx(21.6)
