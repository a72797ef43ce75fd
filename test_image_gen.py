"""Pillow renders of the heatmap and the tray icon."""

from datetime import date

from PIL import Image, ImageColor

from heatmap_logic import STATE_COLORS, DayClassifier, DayState, layout
from image_gen import (
    DAY_INITIALS_WIDTH,
    LABEL_HEIGHT,
    create_icon_image,
    export_png,
    render_heatmap_image,
)

TODAY = date(2025, 6, 15)


def _rgb(state):
    return ImageColor.getrgb(STATE_COLORS[state])


def test_render_heatmap_image_size_and_cells():
    lay = layout(2025, 18, 2.5, 20)
    classifier = DayClassifier(2025, ["2025-03-01"], TODAY)
    img = render_heatmap_image(lay, classifier)
    assert img.size == (round(lay.width + DAY_INITIALS_WIDTH), round(lay.height + LABEL_HEIGHT))

    def centre(day):
        x, y = lay.position(day)
        return round(x + DAY_INITIALS_WIDTH + 9), round(y + 9)

    assert img.getpixel(centre(59)) == _rgb(DayState.PAST_COMPLETE)
    assert img.getpixel(centre(60)) == _rgb(DayState.PAST_INCOMPLETE)
    assert img.getpixel(centre(200)) == _rgb(DayState.FUTURE)


def test_export_png(tmp_path):
    lay = layout(2025, 10, 2, 8)
    path = tmp_path / "heatmap.png"
    export_png(str(path), lay, DayClassifier(2025, [], TODAY), scale=1)
    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.size[0] == round(lay.width + DAY_INITIALS_WIDTH)


def test_icon_shows_last_four_weeks():
    img = create_icon_image(["2025-06-15"], today=TODAY)
    assert img.size == (64, 64)
    assert img.mode == "RGBA"
    # Today (a Sunday) is the top cell of the rightmost column
    assert img.getpixel((44, 3))[:3] == _rgb(DayState.PAST_COMPLETE)
    # Monday after is still to come
    assert img.getpixel((44, 12))[:3] == _rgb(DayState.FUTURE)
    # Three weeks earlier, not completed
    assert img.getpixel((17, 3))[:3] == _rgb(DayState.PAST_INCOMPLETE)


def test_icon_spans_year_boundary():
    img = create_icon_image([], today=date(2026, 1, 2))
    assert img.size == (64, 64)
