"""Caller-side completion handling and tray helpers."""

import os
from datetime import date
from types import SimpleNamespace

import pytest

# No system tray in tests
os.environ.setdefault("PYSTRAY_BACKEND", "dummy")
pytest.importorskip("tkinter")

import settings as settings_mod  # noqa: E402
from main import complete_day  # noqa: E402
from settings import load_settings, save_settings  # noqa: E402
from tray_icon import refresh_tray, tray_title  # noqa: E402


class FakeHeatmap:
    def __init__(self):
        self.painted = []

    def set_completed_dates(self, completed):
        self.painted.append(list(completed))


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr(settings_mod, "_SETTINGS_PATH", str(path))
    return path


def test_complete_day_toggles_saves_and_repaints(settings_path):
    heatmap = FakeHeatmap()
    assert complete_day(date(2025, 3, 1), heatmap) == ["2025-03-01"]
    assert load_settings()["completed_dates"] == ["2025-03-01"]
    assert complete_day(date(2025, 3, 1), heatmap) == []
    assert load_settings()["completed_dates"] == []
    assert heatmap.painted == [["2025-03-01"], []]


def test_complete_day_keeps_window_position(settings_path):
    # Startup copy, then the window saves its position on hide
    startup = load_settings()
    moved = load_settings()
    moved["window_x"], moved["window_y"] = 500, 300
    save_settings(moved)

    complete_day(date(2025, 3, 1), FakeHeatmap())

    saved = load_settings()
    assert (saved["window_x"], saved["window_y"]) == (500, 300)
    assert saved["completed_dates"] == ["2025-03-01"]
    assert startup["window_x"] is None


def test_complete_day_refreshes_tray(settings_path):
    tray = SimpleNamespace(icon=None, title="")
    complete_day(date.today(), FakeHeatmap(), tray)
    assert tray.icon.size == (64, 64)
    assert tray.title.endswith("(done)")
    complete_day(date.today(), FakeHeatmap(), tray)
    assert tray.title.endswith("(open)")


def test_tray_title():
    assert tray_title(True).endswith("(done)")
    assert tray_title(False).startswith("Mini Heatmap")


def test_refresh_tray_swaps_icon_and_title():
    tray = SimpleNamespace(icon="old", title="old")
    refresh_tray(tray, "new-image", completed_today=False)
    assert tray.icon == "new-image"
    assert tray.title == tray_title(False)
