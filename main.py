"""Entry point — glues pystray (daemon thread) with tkinter (main thread)."""

import ctypes
import logging
import os
import threading

from calendar_window import PickerWindow
from icon_gen import create_icon_image
from tray_icon import create_tray, refresh_tray, tray_summary

# Redraw the tray icon hourly so the Jalali day rolls over at midnight
_REFRESH_MS = 60 * 60 * 1000

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    level = os.environ.get("MINI_JALALI_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    _setup_logging()

    # DPI awareness on Windows; other platforms have no windll
    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(1)
    except (AttributeError, OSError):
        pass

    picker_win = PickerWindow()
    root = picker_win.root
    controller = picker_win.controller
    summary = tray_summary(controller)
    shown_day = controller.today()

    # Callbacks marshalled onto the tkinter main thread
    def on_show() -> None:
        root.after(0, picker_win.toggle)

    def on_copy() -> None:
        root.after(0, picker_win.copy_value)

    def on_exit() -> None:
        def _quit() -> None:
            tray.stop()
            root.destroy()
        root.after(0, _quit)

    def on_settings() -> None:
        root.after(0, picker_win.open_settings)

    def on_about() -> None:
        root.after(0, picker_win.open_about)

    tray = create_tray(create_icon_image(), summary, on_show, on_exit,
                       on_copy=on_copy, on_settings=on_settings, on_about=on_about)

    # Runs on the tk thread: either inside select_day or from the timer below
    picker_win.on_selection = lambda _value: refresh_tray(tray, summary, controller)

    def tick() -> None:
        nonlocal shown_day
        today = controller.today()
        if today != shown_day:
            logger.info("Day changed to %s", today)
            shown_day = today
            refresh_tray(tray, summary, controller, icon_image=create_icon_image())
        root.after(_REFRESH_MS, tick)

    root.after(_REFRESH_MS, tick)

    # Run pystray in a daemon thread so it doesn't block tkinter
    tray_thread = threading.Thread(target=tray.run, daemon=True)
    tray_thread.start()

    root.mainloop()


if __name__ == "__main__":
    main()
