"""Pure heatmap calculations: grid layout and day classification. No UI dependencies."""

from __future__ import annotations

import calendar
import enum
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime

logger = logging.getLogger(__name__)

MONDAY = calendar.MONDAY
SUNDAY = calendar.SUNDAY

DAYS_IN_WEEK = 7
MONTH_COUNT = 12
CORNER_RADIUS_RATIO = 0.15

# Colours (alpha pre-blended on white, Tk has no alpha)
GRID_BG = "white"
LABEL_FG = "#6b7280"
TODAY_OUTLINE = "red"

_EPOCH = date(1970, 1, 1)
_DAY_INITIALS = ["M", "T", "W", "T", "F", "S", "S"]  # indexed by date.weekday()


def round_half_up(value: float) -> int:
    """Round .5 upwards (Python's round() is banker's rounding)."""
    return math.floor(value + 0.5)


def corner_radius(square_size: float) -> int:
    """Rounding of a day square, never below 1 pixel."""
    return max(1, round_half_up(square_size * CORNER_RADIUS_RATIO))


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def day_initials(first_weekday: int = SUNDAY) -> list[str]:
    """Row labels, top row first."""
    return [_DAY_INITIALS[(first_weekday + i) % 7] for i in range(DAYS_IN_WEEK)]


# ------------------------------------------------------------------
# Months
# ------------------------------------------------------------------
@dataclass(frozen=True)
class Month:
    name: str
    day_count: int
    first_day_of_week: int
    start_day_of_year: int

    @property
    def week_count(self) -> int:
        """Number of grid columns the month occupies."""
        return math.ceil((self.first_day_of_week + self.day_count) / DAYS_IN_WEEK)


def month_info(year: int, first_weekday: int = SUNDAY) -> list[Month]:
    """Return the 12 months of *year*, contiguous and in order.

    ``first_day_of_week`` counts from *first_weekday* (0 = top grid row),
    so with the default Sunday-first week a month starting on Wednesday
    gets 3.
    """
    months: list[Month] = []
    start = 0
    for m in range(1, MONTH_COUNT + 1):
        weekday, day_count = calendar.monthrange(year, m)
        months.append(Month(
            name=calendar.month_abbr[m],
            day_count=day_count,
            first_day_of_week=(weekday - first_weekday) % DAYS_IN_WEEK,
            start_day_of_year=start,
        ))
        start += day_count
    return months


def _check_day(day: int, total_days: int) -> None:
    if not 0 <= day < total_days:
        raise IndexError(f"day_of_year {day} out of range [0, {total_days - 1}]")


def month_for_day(months: list[Month], day: int) -> tuple[int, Month]:
    """Return (index, month) of the last month starting on or before *day*."""
    _check_day(day, months[-1].start_day_of_year + months[-1].day_count)
    index = 0
    for i, month in enumerate(months):
        if month.start_day_of_year <= day:
            index = i
    return index, months[index]


def grid_position(months: list[Month], day: int, square_size: float,
                  padding: float, month_gap: float) -> tuple[float, float]:
    """Top-left (x, y) of the square for *day*."""
    index, month = month_for_day(months, day)
    adjusted = month.first_day_of_week + (day - month.start_day_of_year)
    week_in_month, dow = divmod(adjusted, DAYS_IN_WEEK)

    previous_weeks = sum(m.week_count for m in months[:index])
    pitch = square_size + padding
    x = (previous_weeks + week_in_month) * pitch + index * month_gap
    y = dow * pitch
    return x, y


def canvas_size(months: list[Month], square_size: float, padding: float,
                month_gap: float) -> tuple[float, float]:
    pitch = square_size + padding
    total_weeks = sum(m.week_count for m in months)
    return (total_weeks * pitch + (len(months) - 1) * month_gap,
            DAYS_IN_WEEK * pitch)


# ------------------------------------------------------------------
# Layout
# ------------------------------------------------------------------
@dataclass(frozen=True)
class Layout:
    year: int
    square_size: float
    padding: float
    month_gap: float
    first_weekday: int
    months: tuple[Month, ...]
    positions: tuple[tuple[float, float], ...]
    width: float
    height: float

    @property
    def total_days(self) -> int:
        return len(self.positions)

    @property
    def pitch(self) -> float:
        return self.square_size + self.padding

    @property
    def corner_radius(self) -> int:
        return corner_radius(self.square_size)

    def position(self, day: int) -> tuple[float, float]:
        _check_day(day, self.total_days)
        return self.positions[day]

    def month_label_positions(self) -> list[tuple[str, float]]:
        """(name, centre x) for each month's column block."""
        labels: list[tuple[str, float]] = []
        x = 0.0
        for month in self.months:
            block = month.week_count * self.pitch
            labels.append((month.name, x + block / 2))
            x += block + self.month_gap
        return labels


def layout(year: int, square_size: float, padding: float, month_gap: float,
           first_weekday: int = SUNDAY) -> Layout:
    """Compute months, per-day positions and canvas size for *year*."""
    if square_size <= 0:
        raise ValueError(f"square_size must be positive, got {square_size}")
    if padding < 0 or month_gap < 0:
        raise ValueError("padding and month_gap must not be negative")

    months = month_info(year, first_weekday)
    total = days_in_year(year)
    positions = tuple(
        grid_position(months, day, square_size, padding, month_gap)
        for day in range(total)
    )
    width, height = canvas_size(months, square_size, padding, month_gap)
    return Layout(
        year=year, square_size=square_size, padding=padding,
        month_gap=month_gap, first_weekday=first_weekday,
        months=tuple(months), positions=positions,
        width=width, height=height,
    )


# ------------------------------------------------------------------
# Dates and day numbers
# ------------------------------------------------------------------
def date_for_day(year: int, day: int) -> date:
    """Calendar date of the 0-based *day* in *year*."""
    _check_day(day, days_in_year(year))
    return date.fromordinal(date(year, 1, 1).toordinal() + day)


def day_of_year(d: date) -> int:
    """Return the 0-based day-of-year for the given date."""
    return d.timetuple().tm_yday - 1


def day_number(d: date) -> int:
    """Days since 1970-01-01."""
    return d.toordinal() - _EPOCH.toordinal()


def tooltip_text(d: date) -> str:
    return f"Date: {d.strftime('%a %b %d %Y')}"


def _parse_date(entry) -> date:
    if isinstance(entry, datetime):
        return entry.date()
    if isinstance(entry, date):
        return entry
    text = str(entry).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()


def parse_completed_dates(entries) -> set[int]:
    """Convert completed dates to day numbers once; bad entries are skipped."""
    completed: set[int] = set()
    for entry in entries or ():
        try:
            completed.add(day_number(_parse_date(entry)))
        except (TypeError, ValueError):
            logger.warning("Skipping unparseable completed date %r", entry)
    return completed


# ------------------------------------------------------------------
# Classification
# ------------------------------------------------------------------
class DayState(enum.Enum):
    FUTURE = "future"
    PAST_INCOMPLETE = "past_incomplete"
    PAST_COMPLETE = "past_complete"


STATE_COLORS = {
    DayState.FUTURE: "#f2f2f2",
    DayState.PAST_INCOMPLETE: "#cccccc",
    DayState.PAST_COMPLETE: "#ba6306",
}


def classify(this_day: int, today: int, completed: set[int]) -> DayState:
    if this_day > today:
        return DayState.FUTURE
    if this_day in completed:
        return DayState.PAST_COMPLETE
    return DayState.PAST_INCOMPLETE


def is_today(this_day: int, today: int) -> bool:
    return this_day == today


class DayClassifier:
    """Per-render snapshot of "today" and the completed set for one year."""

    __slots__ = ("year", "total_days", "today", "completed", "_first_number")

    def __init__(self, year: int, completed_dates=(), today: date | None = None) -> None:
        self.year = year
        self.total_days = days_in_year(year)
        self.today = day_number(today or date.today())
        self.completed = parse_completed_dates(completed_dates)
        self._first_number = day_number(date(year, 1, 1))

    def day_number(self, day: int) -> int:
        _check_day(day, self.total_days)
        return self._first_number + day

    def date(self, day: int) -> date:
        return date_for_day(self.year, day)

    def state(self, day: int) -> DayState:
        return classify(self.day_number(day), self.today, self.completed)

    def is_today(self, day: int) -> bool:
        return is_today(self.day_number(day), self.today)

    @property
    def today_date(self) -> date:
        return date.fromordinal(_EPOCH.toordinal() + self.today)

    def is_future(self, day: int) -> bool:
        return self.state(day) is DayState.FUTURE

    def color(self, day: int) -> str:
        """Resting fill for *day*."""
        return STATE_COLORS[self.state(day)]
