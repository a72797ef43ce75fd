"""System-tray icon setup via pystray."""

from datetime import date
from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem, Menu


def tray_title(completed_today: bool) -> str:
    mark = "done" if completed_today else "open"
    return f"Mini Heatmap – {date.today().strftime('%a %d %b')} ({mark})"


def create_tray(
    icon_image: Image.Image,
    on_show: Callable[[], None],
    on_exit: Callable[[], None],
    on_complete_today: Callable[[], None] | None = None,
    on_export: Callable[[], None] | None = None,
    completed_today: bool = False,
) -> pystray.Icon:
    """Build and return a pystray Icon (not yet started)."""
    items: list[MenuItem | Menu] = [
        MenuItem("Show Heatmap", lambda _icon, _item: on_show(), default=True),
    ]
    if on_complete_today is not None:
        items.append(MenuItem("Toggle Today", lambda _icon, _item: on_complete_today()))
    if on_export is not None:
        items.append(MenuItem("Export PNG...", lambda _icon, _item: on_export()))
    items.append(Menu.SEPARATOR)
    items.append(MenuItem("Exit", lambda _icon, _item: on_exit()))
    menu = Menu(*items)
    return pystray.Icon("mini-heatmap", icon_image, tray_title(completed_today), menu)


def refresh_tray(icon: pystray.Icon, icon_image: Image.Image, completed_today: bool) -> None:
    """Swap in a freshly rendered icon and tooltip title."""
    icon.icon = icon_image
    icon.title = tray_title(completed_today)
