"""Pillow renderers: the tray icon and a PNG export of the whole heatmap."""

import logging
from datetime import date, timedelta

from PIL import Image, ImageDraw, ImageFont

from heatmap_logic import (
    DAYS_IN_WEEK,
    GRID_BG,
    LABEL_FG,
    TODAY_OUTLINE,
    DayClassifier,
    Layout,
    day_initials,
    day_of_year,
)

logger = logging.getLogger(__name__)

DAY_INITIALS_WIDTH = 16
LABEL_HEIGHT = 25
ICON_WEEKS = 4


def _font(size: int):
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        return ImageFont.load_default()


def _centred_text(draw: ImageDraw.ImageDraw, x: float, baseline: float, text: str, font) -> None:
    """Centre *text* horizontally on x with its bottom at *baseline*."""
    left, _top, right, bottom = draw.textbbox((0, 0), text, font=font)
    draw.text((x - (right - left) / 2 - left, baseline - bottom), text, fill=LABEL_FG, font=font)


def render_heatmap_image(layout: Layout, classifier: DayClassifier,
                         scale: int = 1) -> Image.Image:
    """Draw the full-year grid the same way the window does."""
    width = round((layout.width + DAY_INITIALS_WIDTH) * scale)
    height = round((layout.height + LABEL_HEIGHT) * scale)
    img = Image.new("RGB", (width, height), GRID_BG)
    draw = ImageDraw.Draw(img)
    font = _font(10 * scale)

    pitch = layout.pitch
    for row, initial in enumerate(day_initials(layout.first_weekday)):
        y = row * pitch + layout.square_size * 0.75
        _centred_text(draw, 6 * scale, y * scale, initial, font)

    radius = layout.corner_radius * scale
    for day, (x, y) in enumerate(layout.positions):
        x0 = (x + DAY_INITIALS_WIDTH) * scale
        y0 = y * scale
        rect = [x0, y0, x0 + layout.square_size * scale, y0 + layout.square_size * scale]
        today = classifier.is_today(day)
        draw.rounded_rectangle(
            rect, radius=radius, fill=classifier.color(day),
            outline=TODAY_OUTLINE if today else None, width=2 * scale if today else 0,
        )

    for name, cx in layout.month_label_positions():
        _centred_text(draw, (cx + DAY_INITIALS_WIDTH) * scale,
                      (layout.height + 16) * scale, name, font)
    return img


def export_png(path: str, layout: Layout, classifier: DayClassifier,
               scale: int = 2) -> None:
    render_heatmap_image(layout, classifier, scale).save(path, format="PNG")
    logger.debug("Exported heatmap for %d to %s", layout.year, path)


def create_icon_image(completed_dates=(), today: date | None = None) -> Image.Image:
    """Return a 64x64 RGBA image: the last four weeks as a 7x4 mini heatmap.

    Columns are weeks (oldest left), rows are weekdays Sunday first, the
    current week is the rightmost column.
    """
    size = 64
    img = Image.new("RGBA", (size, size), "white")
    draw = ImageDraw.Draw(img)

    today = today or date.today()
    # Sunday of the current week
    week_start = today - timedelta(days=(today.weekday() + 1) % DAYS_IN_WEEK)
    first = week_start - timedelta(weeks=ICON_WEEKS - 1)

    cell = size // DAYS_IN_WEEK  # 9 px, weekdays fill the height
    gap = 1
    left = (size - ICON_WEEKS * cell) // 2
    top = (size - DAYS_IN_WEEK * cell) // 2

    classifiers: dict[int, DayClassifier] = {}
    for col in range(ICON_WEEKS):
        for row in range(DAYS_IN_WEEK):
            d = first + timedelta(days=col * DAYS_IN_WEEK + row)
            classifier = classifiers.get(d.year)
            if classifier is None:
                classifier = DayClassifier(d.year, completed_dates, today)
                classifiers[d.year] = classifier
            day = day_of_year(d)
            x0 = left + col * cell
            y0 = top + row * cell
            draw.rounded_rectangle(
                [x0, y0, x0 + cell - gap - 1, y0 + cell - gap - 1],
                radius=1, fill=classifier.color(day),
                outline=TODAY_OUTLINE if classifier.is_today(day) else None,
            )
    return img

