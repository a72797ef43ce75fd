"""Annual heatmap window (tkinter): one rounded square per day, click ripple, hover tooltip."""

from __future__ import annotations

import logging
import math
import tkinter as tk
from datetime import date
from tkinter import filedialog
from tkinter import font as tkfont
from typing import Callable

from heatmap_logic import (
    GRID_BG,
    LABEL_FG,
    SUNDAY,
    TODAY_OUTLINE,
    DayClassifier,
    Layout,
    day_initials,
    layout,
    tooltip_text,
)
from image_gen import DAY_INITIALS_WIDTH, LABEL_HEIGHT, export_png
from ripple import (
    HIGHLIGHT_MS,
    HIGHLIGHT_SCALE,
    RESTORE_MS,
    RippleEntry,
    blend_color,
    handle_click,
    phase_frames,
    scale_rect,
)
from settings import load_settings, save_settings

logger = logging.getLogger(__name__)

DAY_TAG = "day"
FOOTER_FG = "#555555"


def rounded_rect_points(x0: float, y0: float, x1: float, y1: float,
                        r: float) -> list[float]:
    """Polygon points that render as a rounded rectangle with smooth=True."""
    return [
        x0 + r, y0, x1 - r, y0, x1, y0, x1, y0 + r,
        x1, y1 - r, x1, y1, x1 - r, y1, x0 + r, y1,
        x0, y1, x0, y1 - r, x0, y0 + r, x0, y0,
    ]


class _ToolTip:
    """Single shared tooltip that follows the pointer."""

    __slots__ = ("_root", "_tw", "_label")

    def __init__(self, root: tk.Tk) -> None:
        self._root = root
        self._tw: tk.Toplevel | None = None
        self._label: tk.Label | None = None

    @property
    def visible(self) -> bool:
        return self._tw is not None

    def show(self, text: str, x: int, y: int) -> None:
        if self._tw is None:
            tw = tk.Toplevel(self._root)
            tw.wm_overrideredirect(True)
            tw.wm_attributes("-topmost", True)
            self._label = tk.Label(
                tw, bg="#FFFFFF", fg="black",
                relief="solid", borderwidth=1, padx=8, pady=4, justify="left",
            )
            self._label.pack()
            self._tw = tw
        self._label.configure(text=text)
        self._tw.wm_geometry(f"+{x}+{y}")

    def hide(self) -> None:
        if self._tw:
            self._tw.destroy()
            self._tw = None
            self._label = None


class HeatmapWindow:
    """Full-year heatmap of completed days."""

    def __init__(self, completed_dates=(),
                 on_complete_day: Callable[[date], None] | None = None,
                 year: int | None = None, square_size: float = 18,
                 padding: float = 2.5, month_gap: float = 20,
                 first_weekday: int = SUNDAY, today: date | None = None) -> None:
        self.root = tk.Tk()
        self.root.resizable(False, False)
        self.root.configure(bg=GRID_BG)
        self.root.attributes("-topmost", True)

        self._setup_fonts()

        # None follows the calendar year of "today" on every render
        self._configured_year = year
        self.year = year if year is not None else (today or date.today()).year
        self.square_size = square_size
        self.padding = padding
        self.month_gap = month_gap
        self.first_weekday = first_weekday
        # Fixed "today" for tests; None reads the clock on every render
        self._fixed_today = today
        self._on_complete_day = on_complete_day
        self._completed_dates: list = list(completed_dates)

        self._layout: Layout | None = None
        self._classifier: DayClassifier | None = None
        # Canvas item per day and back
        self._day_items: list[int] = []
        self._item_days: dict[int, int] = {}

        self._canvas = tk.Canvas(self.root, bg=GRID_BG, highlightthickness=0, borderwidth=0)
        self._canvas.pack(padx=8, pady=(8, 0))
        self._footer_label = tk.Label(
            self.root, font=self.font_footer, bg=GRID_BG, fg=FOOTER_FG,
        )
        self._footer_label.pack(pady=(2, 6))
        self._tooltip = _ToolTip(self.root)

        self._canvas.tag_bind(DAY_TAG, "<Button-1>", self._on_click)
        self._canvas.tag_bind(DAY_TAG, "<Enter>", self._on_cell_enter)
        self._canvas.tag_bind(DAY_TAG, "<Motion>", self._on_cell_motion)
        self._canvas.tag_bind(DAY_TAG, "<Leave>", self._on_cell_leave)

        self.render()

        self.root.bind("<Escape>", lambda _e: self.hide())
        self.root.bind("<Control-s>", lambda _e: self.export_dialog())
        self.root.protocol("WM_DELETE_WINDOW", self.hide)
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_label = tkfont.Font(family=base, size=8)
        self.font_footer = tkfont.Font(family=base, size=9)

    def _title(self) -> str:
        return f"Mini Heatmap  {self.year}"

    @property
    def classifier(self) -> DayClassifier:
        return self._classifier

    @property
    def layout(self) -> Layout:
        return self._layout

    # ------------------------------------------------------------------
    # Render: rebuild the whole canvas from the layout
    # ------------------------------------------------------------------
    def render(self) -> None:
        if self._configured_year is None:
            self.year = (self._fixed_today or date.today()).year
        self._layout = layout(self.year, self.square_size, self.padding,
                              self.month_gap, self.first_weekday)
        self._classifier = DayClassifier(self.year, self._completed_dates, self._fixed_today)
        lay = self._layout
        canvas = self._canvas
        self._tooltip.hide()

        canvas.delete("all")
        self._day_items.clear()
        self._item_days.clear()
        canvas.configure(
            width=math.ceil(lay.width + DAY_INITIALS_WIDTH),
            height=math.ceil(lay.height + LABEL_HEIGHT),
        )

        for row, initial in enumerate(day_initials(self.first_weekday)):
            canvas.create_text(
                6, row * lay.pitch + lay.square_size * 0.75, text=initial,
                anchor="s", fill=LABEL_FG, font=self.font_label,
            )

        for day in range(lay.total_days):
            item = canvas.create_polygon(self._cell_points(day, 1.0), smooth=True,
                                         tags=(DAY_TAG,))
            self._day_items.append(item)
            self._item_days[item] = day
        self._paint_all()

        for name, cx in lay.month_label_positions():
            canvas.create_text(
                cx + DAY_INITIALS_WIDTH, lay.height + 16, text=name,
                anchor="s", fill=LABEL_FG, font=self.font_label,
            )

        self.root.title(self._title())

    def _cell_points(self, day: int, scale: float) -> list[float]:
        lay = self._layout
        x, y = lay.position(day)
        x0, y0, x1, y1 = scale_rect(x + DAY_INITIALS_WIDTH, y, lay.square_size, scale)
        return rounded_rect_points(x0, y0, x1, y1, lay.corner_radius * scale)

    # ------------------------------------------------------------------
    # Repaint fills without rebuilding
    # ------------------------------------------------------------------
    def set_completed_dates(self, completed_dates) -> None:
        """Re-classify every day against a new completed list and repaint."""
        self._completed_dates = list(completed_dates)
        self._classifier = DayClassifier(self.year, self._completed_dates, self._fixed_today)
        self._paint_all()

    def _paint_all(self) -> None:
        for day in range(len(self._day_items)):
            self._paint_day(day)
        done = sum(1 for day in range(self._classifier.total_days)
                   if self._classifier.day_number(day) in self._classifier.completed)
        self._footer_label.configure(
            text=f"Today: {self._classifier.today_date.strftime('%d.%m.%Y')}     {done} days completed in {self.year}")

    def _paint_day(self, day: int) -> None:
        item = self._day_items[day]
        today = self._classifier.is_today(day)
        self._canvas.coords(item, *self._cell_points(day, 1.0))
        self._canvas.itemconfigure(
            item, fill=self._classifier.color(day),
            outline=TODAY_OUTLINE if today else "", width=2 if today else 0,
        )

    def resting_color(self, day: int) -> str:
        """Colour of *day* under the current classification."""
        return self._classifier.color(day)

    # ------------------------------------------------------------------
    # Click -> ripple
    # ------------------------------------------------------------------
    def _event_day(self) -> int | None:
        found = self._canvas.find_withtag("current")
        if not found:
            return None
        return self._item_days.get(found[0])

    def _on_click(self, _event: tk.Event) -> None:
        day = self._event_day()
        if day is not None:
            self.click_day(day)

    def click_day(self, day: int) -> list[RippleEntry]:
        entries = handle_click(
            day, self._classifier, self._complete_day,
            resting_color=self.resting_color, hide_tooltip=self._tooltip.hide,
        )
        for entry in entries:
            self.root.after(round(entry.delay_ms), self._highlight_cell, entry)
        return entries

    def _complete_day(self, d: date) -> None:
        if self._on_complete_day is not None:
            self._on_complete_day(d)

    def _highlight_cell(self, entry: RippleEntry) -> None:
        item = self._day_items[entry.day_of_year]
        start = self._canvas.itemcget(item, "fill") or entry.highlight_color
        self._run_phase(entry, start, entry.highlight_color, 1.0, HIGHLIGHT_SCALE,
                        HIGHLIGHT_MS, self._restore_cell)

    def _restore_cell(self, entry: RippleEntry) -> None:
        self._run_phase(entry, entry.highlight_color, entry.final_color(),
                        HIGHLIGHT_SCALE, 1.0, RESTORE_MS, self._settle_cell)

    def _settle_cell(self, entry: RippleEntry) -> None:
        if entry.day_of_year < len(self._day_items):
            self._paint_day(entry.day_of_year)

    def _run_phase(self, entry: RippleEntry, color0: str, color1: str,
                   scale0: float, scale1: float, duration_ms: float,
                   then: Callable[[RippleEntry], None]) -> None:
        item = self._day_items[entry.day_of_year]
        for elapsed, t in phase_frames(duration_ms):
            self.root.after(
                round(elapsed), self._draw_frame, item, entry.day_of_year,
                blend_color(color0, color1, t), scale0 + (scale1 - scale0) * t,
            )
        self.root.after(round(duration_ms), then, entry)

    def _draw_frame(self, item: int, day: int, color: str, scale: float) -> None:
        # Item may be gone after a full re-render
        if self._item_days.get(item) != day:
            return
        self._canvas.coords(item, *self._cell_points(day, scale))
        self._canvas.itemconfigure(item, fill=color)
        self._canvas.tag_raise(item)

    # ------------------------------------------------------------------
    # Tooltip on hover
    # ------------------------------------------------------------------
    def _show_tooltip(self, event: tk.Event) -> None:
        day = self._event_day()
        if day is None:
            return
        self._tooltip.show(tooltip_text(self._classifier.date(day)),
                           event.x_root + 10, event.y_root - 20)

    def _on_cell_enter(self, event: tk.Event) -> None:
        self._show_tooltip(event)

    def _on_cell_motion(self, event: tk.Event) -> None:
        self._show_tooltip(event)

    def _on_cell_leave(self, _event: tk.Event) -> None:
        self._tooltip.hide()

    # ------------------------------------------------------------------
    # PNG export
    # ------------------------------------------------------------------
    def export_dialog(self) -> None:
        path = filedialog.asksaveasfilename(
            parent=self.root, title="Export heatmap",
            defaultextension=".png", filetypes=[("PNG image", "*.png")],
            initialfile=f"heatmap-{self.year}.png",
        )
        if path:
            export_png(path, self._layout, self._classifier)

    # ------------------------------------------------------------------
    # Show / Hide / Toggle
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        if self.root.state() == "withdrawn" or not self.root.winfo_viewable():
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        # Pick up a new day since the last render
        self.render()
        self.root.deiconify()
        self.root.update_idletasks()
        self._position_window()
        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        self._tooltip.hide()
        if self.root.state() != "withdrawn":
            self._persist_position()
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Position: last saved spot, else bottom-right of the screen
    # ------------------------------------------------------------------
    def _persist_position(self) -> None:
        settings = load_settings()
        settings["window_x"] = self.root.winfo_x()
        settings["window_y"] = self.root.winfo_y()
        save_settings(settings)

    def _position_window(self) -> None:
        self.root.update_idletasks()
        win_w = self.root.winfo_reqwidth()
        win_h = self.root.winfo_reqheight()

        settings = load_settings()
        x, y = settings["window_x"], settings["window_y"]
        if x is None or y is None:
            x = self.root.winfo_screenwidth() - win_w - 12
            y = self.root.winfo_screenheight() - win_h - 60
        self.root.geometry(f"{win_w}x{win_h}+{x}+{y}")
