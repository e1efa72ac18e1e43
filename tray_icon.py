"""System-tray icon setup via pystray.

The tray thread never touches the picker directly: the tk thread builds a
plain-text summary with ``tray_summary`` and the menu reads that snapshot.
"""

from typing import Callable

import pystray
from PIL import Image
from pystray import MenuItem, Menu

from calendar_logic import format_jalali, month_name
from picker import PickerController

APP_NAME = "Mini Jalali Calendar"


def tray_summary(controller: PickerController) -> dict[str, str | None]:
    """Return the tooltip and menu texts for the current picker state."""
    now = controller.today()
    title = f"{APP_NAME} – {now.day} {month_name(now.month)} {now.year}"
    value = controller.value
    if value is None:
        picked = controller.placeholder
    else:
        picked = f"{controller.display_text()}  ({value})"
        title += f"\n{format_jalali(controller.selected, pad=True)} → {value}"
    return {"title": title, "picked": picked, "value": value}


def tray_menu(
    summary: dict[str, str | None],
    on_show: Callable[[], None],
    on_exit: Callable[[], None],
    on_copy: Callable[[], None] | None = None,
    on_settings: Callable[[], None] | None = None,
    on_about: Callable[[], None] | None = None,
) -> Menu:
    """Menu whose copy entry reads its label from *summary* on every redraw."""
    items: list[MenuItem | Menu] = [
        MenuItem("Show Picker", lambda _icon, _item: on_show(), default=True),
    ]
    if on_copy is not None:
        items.append(MenuItem(
            lambda _item: f"Copy {summary['picked']}",
            lambda _icon, _item: on_copy(),
            enabled=lambda _item: summary["value"] is not None,
        ))
    if on_settings is not None:
        items.append(MenuItem("Settings", lambda _icon, _item: on_settings()))
    if on_about is not None:
        items.append(MenuItem("About", lambda _icon, _item: on_about()))
    items.append(Menu.SEPARATOR)
    items.append(MenuItem("Exit", lambda _icon, _item: on_exit()))
    return Menu(*items)


def create_tray(
    icon_image: Image.Image,
    summary: dict[str, str | None],
    on_show: Callable[[], None],
    on_exit: Callable[[], None],
    **actions: Callable[[], None] | None,
) -> pystray.Icon:
    """Build and return a pystray Icon (not yet started)."""
    menu = tray_menu(summary, on_show, on_exit, **actions)
    return pystray.Icon("mini-jalali-calendar", icon_image, summary["title"], menu)


def refresh_tray(icon: pystray.Icon, summary: dict[str, str | None],
                 controller: PickerController,
                 icon_image: Image.Image | None = None) -> None:
    """Update the shared summary in place and push it to the tray."""
    summary.update(tray_summary(controller))
    icon.title = summary["title"]
    if icon_image is not None:
        icon.icon = icon_image
    icon.update_menu()
