"""Click ripple: per-cell delays, click handling and colour tweening. No UI dependencies."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable

from PIL import ImageColor

from heatmap_logic import DAYS_IN_WEEK, DayClassifier, DayState

logger = logging.getLogger(__name__)

RIPPLE_DURATION_MS = 5000
# Far enough that every day of a year participates
MAX_RIPPLE_DISTANCE = 1000
HIGHLIGHT_MS = 600
RESTORE_MS = 200
HIGHLIGHT_SCALE = 1.2
HIGHLIGHT_COLOR = "#ff9f43"
FRAME_MS = 30


def grid_distance(a: int, b: int) -> float:
    """Distance between two days on the plain week x weekday grid.

    Uses ``(day // 7, day % 7)`` rather than the month-aware screen
    coordinates, so the wave spreads evenly across month gaps.
    """
    week_a, dow_a = divmod(a, DAYS_IN_WEEK)
    week_b, dow_b = divmod(b, DAYS_IN_WEEK)
    return math.hypot(week_b - week_a, dow_b - dow_a)


@dataclass(frozen=True)
class RippleEntry:
    day_of_year: int
    delay_ms: float
    highlight_color: str = HIGHLIGHT_COLOR
    _resting: Callable[[int], str] | None = field(default=None, repr=False, compare=False)

    def final_color(self) -> str:
        """Resting colour, looked up when the restore phase starts."""
        if self._resting is None:
            raise ValueError(f"no resting colour for day {self.day_of_year}")
        return self._resting(self.day_of_year)


def schedule_ripple(clicked_day: int, all_days: Iterable[int],
                    resting_color: Callable[[int], str] | None = None,
                    duration_ms: float = RIPPLE_DURATION_MS,
                    max_distance: float = MAX_RIPPLE_DISTANCE,
                    highlight_color: str = HIGHLIGHT_COLOR) -> list[RippleEntry]:
    """Return one entry per day within *max_distance* of *clicked_day*."""
    ms_per_unit = duration_ms / max_distance
    entries: list[RippleEntry] = []
    for day in all_days:
        d = grid_distance(clicked_day, day)
        if d <= max_distance:
            entries.append(RippleEntry(day, d * ms_per_unit, highlight_color, resting_color))
    logger.debug("Ripple from day %d covers %d cells", clicked_day, len(entries))
    return entries


def handle_click(day: int, classifier: DayClassifier,
                 on_complete_day: Callable[[date], None],
                 resting_color: Callable[[int], str] | None = None,
                 hide_tooltip: Callable[[], None] | None = None) -> list[RippleEntry]:
    """Apply a click on *day*: hide tooltip, schedule ripple, notify caller.

    Future days are ignored. The callback runs synchronously, before any
    animation frame, so resting colours looked up later see its effect.
    """
    if hide_tooltip is not None:
        hide_tooltip()
    if classifier.state(day) is DayState.FUTURE:
        return []
    entries = schedule_ripple(day, range(classifier.total_days), resting_color)
    on_complete_day(classifier.date(day))
    return entries


# ------------------------------------------------------------------
# Tweening helpers
# ------------------------------------------------------------------
def blend_color(start: str, end: str, t: float) -> str:
    """Linear RGB mix of two colour strings; t=0 gives *start*."""
    r1, g1, b1 = ImageColor.getrgb(start)[:3]
    r2, g2, b2 = ImageColor.getrgb(end)[:3]
    t = min(1.0, max(0.0, t))
    return "#{:02x}{:02x}{:02x}".format(
        round(r1 + (r2 - r1) * t),
        round(g1 + (g2 - g1) * t),
        round(b1 + (b2 - b1) * t),
    )


def ease_in_out(t: float) -> float:
    """Cubic ease-in-out on [0, 1]."""
    t = min(1.0, max(0.0, t))
    if t < 0.5:
        return 4 * t * t * t
    return 1 - (-2 * t + 2) ** 3 / 2


def phase_frames(duration_ms: float, frame_ms: float = FRAME_MS) -> list[tuple[float, float]]:
    """(elapsed_ms, eased progress) for each frame of one phase, ending at 1.0."""
    steps = max(1, math.ceil(duration_ms / frame_ms))
    return [
        (duration_ms * i / steps, ease_in_out(i / steps))
        for i in range(1, steps + 1)
    ]


def scale_rect(x: float, y: float, size: float, scale: float) -> tuple[float, float, float, float]:
    """Square of *size* at (x, y) scaled about its centre."""
    half = size * scale / 2
    cx, cy = x + size / 2, y + size / 2
    return cx - half, cy - half, cx + half, cy + half
