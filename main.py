"""Entry point: glues pystray (daemon thread) with tkinter (main thread)."""

import ctypes
import logging
import threading
from datetime import date

from heatmap_logic import DayClassifier, DayState, day_of_year
from heatmap_window import HeatmapWindow
from image_gen import create_icon_image
from settings import first_weekday, load_settings, save_settings, toggle_completed
from tray_icon import create_tray, refresh_tray


def _completed_today(completed_dates) -> bool:
    today = date.today()
    classifier = DayClassifier(today.year, completed_dates, today)
    return classifier.state(day_of_year(today)) is DayState.PAST_COMPLETE


def complete_day(d: date, heatmap, tray=None) -> list[str]:
    """Toggle *d* in the stored list, then repaint the window and tray icon.

    Settings are re-read from disk so values saved elsewhere (window
    position) survive the write.
    """
    settings = load_settings()
    completed = toggle_completed(settings, d)
    save_settings(settings)
    heatmap.set_completed_dates(completed)
    if tray is not None:
        refresh_tray(tray, create_icon_image(completed), _completed_today(completed))
    return completed


def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    # DPI awareness so positions / fonts are crisp on Hi-DPI monitors
    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(1)
    except (AttributeError, OSError):
        pass

    settings = load_settings()
    tray = None

    def on_complete_day(d: date) -> None:
        complete_day(d, heatmap, tray)

    heatmap = HeatmapWindow(
        settings["completed_dates"], on_complete_day,
        year=settings["year"], square_size=settings["square_size"],
        padding=settings["padding"], month_gap=settings["month_gap"],
        first_weekday=first_weekday(settings),
    )

    # Callbacks marshalled onto the tkinter main thread
    def on_show() -> None:
        heatmap.root.after(0, heatmap.toggle)

    def on_complete_today() -> None:
        heatmap.root.after(0, on_complete_day, date.today())

    def on_export() -> None:
        heatmap.root.after(0, heatmap.export_dialog)

    def on_exit() -> None:
        def _quit() -> None:
            tray.stop()
            heatmap.root.destroy()
        heatmap.root.after(0, _quit)

    completed = settings["completed_dates"]
    tray = create_tray(create_icon_image(completed), on_show, on_exit,
                       on_complete_today=on_complete_today, on_export=on_export,
                       completed_today=_completed_today(completed))

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()

    # tkinter main loop on the main thread
    heatmap.root.mainloop()


if __name__ == "__main__":
    main()
