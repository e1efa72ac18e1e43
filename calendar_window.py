"""Jalali date-picker window (tkinter) positioned above the taskbar.

Everything shown here is read from ``PickerController``'s derived queries;
clicks are forwarded to its commands and the window redraws afterwards.
"""

import logging
import tkinter as tk
from tkinter import colorchooser, messagebox
from tkinter import font as tkfont

from calendar_logic import DAY_ABBR, day_of_year, format_jalali
from official_holidays import holiday_keys
from picker import DayOutOfRange, PickerController, PickerStatus, YearOutOfRange
from settings import load_settings, save_settings

logger = logging.getLogger(__name__)

# Colours
ACCENT = "#0078D4"
SEL_BG = "#B3D7F2"
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
FRIDAY_FG = "#CC0000"
MUTED_FG = "#555555"


class _ToolTip:
    """Lightweight shared tooltip for holiday labels."""

    __slots__ = ("_root", "_tw")

    def __init__(self, root: tk.Tk) -> None:
        self._root = root
        self._tw: tk.Toplevel | None = None

    def show(self, widget: tk.Widget, text: str) -> None:
        self.hide()
        tw = tk.Toplevel(self._root)
        tw.wm_overrideredirect(True)
        tw.wm_attributes("-topmost", True)
        lbl = tk.Label(
            tw, text=text, bg="#FFFFE0", fg="black",
            relief="solid", borderwidth=1, padx=6, pady=3, justify="right",
        )
        lbl.pack()
        x = widget.winfo_rootx() + widget.winfo_width() // 2
        y = widget.winfo_rooty() + widget.winfo_height() + 2
        tw.wm_geometry(f"+{x}+{y}")
        self._tw = tw

    def hide(self) -> None:
        if self._tw:
            self._tw.destroy()
            self._tw = None


class _DayPanel:
    """Pre-allocated widget pool for the day grid (weekday row + 6 weeks)."""

    __slots__ = ("frame", "cells")

    def __init__(self, parent: tk.Frame, fonts: dict, on_click, on_enter, on_leave) -> None:
        self.frame = tk.Frame(parent, bg=GRID_BG)

        for col, abbr in enumerate(DAY_ABBR):
            fg = FRIDAY_FG if col == 6 else "#333333"
            tk.Label(
                self.frame, text=abbr, font=fonts["bold"], bg=GRID_BG, fg=fg, width=3,
            ).grid(row=0, column=col)

        self.cells: list[tk.Label] = []
        for i in range(42):
            cell = tk.Label(
                self.frame, font=fonts["normal"], bg=GRID_BG, width=3,
                borderwidth=1, relief="flat",
            )
            cell.grid(row=i // 7 + 1, column=i % 7, padx=1, pady=1)
            cell.bind("<Button-1>", on_click)
            cell.bind("<Enter>", on_enter)
            cell.bind("<Leave>", on_leave)
            self.cells.append(cell)


class _MonthTiles:
    """Twelve month tiles in a 3×4 grid."""

    __slots__ = ("frame", "tiles")

    def __init__(self, parent: tk.Frame, fonts: dict, on_click) -> None:
        self.frame = tk.Frame(parent, bg=GRID_BG)
        self.tiles: list[tk.Label] = []
        for i in range(12):
            tile = tk.Label(
                self.frame, font=fonts["normal"], bg=GRID_BG, width=9, pady=6,
                cursor="hand2",
            )
            tile.grid(row=i // 3, column=i % 3, padx=2, pady=2)
            tile.bind("<Button-1>", lambda _e, m=i + 1: on_click(m))
            self.tiles.append(tile)


class PickerWindow:
    """Date picker that appears above the taskbar and copies picks to the clipboard."""

    def __init__(self, disabled: bool = False) -> None:
        self.root = tk.Tk()
        self.root.title("Mini Jalali Calendar")
        self.root.resizable(False, False)
        self.root.configure(bg=GRID_BG)
        self.root.attributes("-topmost", True)

        self._setup_fonts()

        settings = load_settings()
        self.year_span_before: int = settings["year_span_before"]
        self.year_span_after: int = settings["year_span_after"]
        self._holiday_color: str = settings["holiday_color"]
        self._saved_x: int | None = settings["window_x"]
        self._saved_y: int | None = settings["window_y"]

        # The host must not turn input into commands while disabled
        self.disabled = disabled
        self._last_value: str | None = None
        # Called with the Gregorian value after each pick (tray refresh)
        self.on_selection = None

        self.controller = PickerController(
            on_change=self._on_change,
            year_anchor=settings["year_anchor"],
            enabled_holidays=settings["holidays"],
        )

        # Widget-to-day mapping (filled during _render_days)
        self._cell_days: dict[int, int] = {}
        self._cell_holidays: dict[int, tuple[str, ...]] = {}
        self._year_values: list[int] = []

        self._build_shell()
        self._tooltip = _ToolTip(self.root)
        self._render()

        self.root.bind("<Escape>", lambda _e: self._dispatch(self.controller.close))
        self.root.bind_all("<ButtonPress-1>", self._on_pointer_down, add="+")
        self.root.bind("<FocusOut>", self._on_focus_out)
        self.root.protocol("WM_DELETE_WINDOW", self.hide)
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Vazirmatn" if "Vazirmatn" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=10)
        self.font_bold = tkfont.Font(family=base, size=10, weight="bold")
        self.font_header = tkfont.Font(family=base, size=11, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")
        self.font_footer = tkfont.Font(family=base, size=9)
        self._fonts = {"normal": self.font_normal, "bold": self.font_bold}

    # ------------------------------------------------------------------
    # Build shell (once) — input field, popup (nav bar + views), footer
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        self._outer = tk.Frame(self.root, bg=GRID_BG)
        self._outer.pack(padx=6, pady=4)

        self._field = tk.Label(
            self._outer, font=self.font_header, bg=HEADER_BG, fg="#333333",
            relief="groove", padx=12, pady=4, cursor="hand2",
        )
        self._field.pack(fill="x")
        self._field.bind("<Button-1>", lambda _e: self._dispatch(self.controller.toggle))

        self._popup = tk.Frame(self._outer, bg=GRID_BG)

        # Navigation row: ◀  month  year  Today  ▶
        nav = tk.Frame(self._popup, bg=GRID_BG)
        nav.pack(fill="x", pady=(4, 2))

        btn_prev = tk.Label(nav, text="◀", font=self.font_nav, bg=GRID_BG, cursor="hand2")
        btn_prev.pack(side="left", padx=6)
        btn_prev.bind("<Button-1>", lambda _e: self._dispatch(self.controller.prev_month))

        btn_next = tk.Label(nav, text="▶", font=self.font_nav, bg=GRID_BG, cursor="hand2")
        btn_next.pack(side="right", padx=6)
        btn_next.bind("<Button-1>", lambda _e: self._dispatch(self.controller.next_month))

        self._month_label = tk.Label(
            nav, font=self.font_header, bg=GRID_BG, cursor="hand2",
        )
        self._month_label.pack(side="left", padx=6)
        self._month_label.bind(
            "<Button-1>", lambda _e: self._dispatch(self.controller.show_month_view))

        self._year_label = tk.Label(
            nav, font=self.font_header, bg=GRID_BG, cursor="hand2",
        )
        self._year_label.pack(side="left", padx=6)
        self._year_label.bind(
            "<Button-1>", lambda _e: self._dispatch(self.controller.show_year_view))

        btn_today = tk.Label(
            nav, text="امروز", font=self.font_bold, bg=GRID_BG, fg=ACCENT, cursor="hand2",
        )
        btn_today.pack(side="right", padx=6)
        btn_today.bind("<Button-1>", lambda _e: self._dispatch(self.controller.go_today))

        self._body = tk.Frame(self._popup, bg=GRID_BG)
        self._body.pack()

        self._days = _DayPanel(
            self._body, self._fonts,
            self._on_day_click, self._on_cell_enter, self._on_cell_leave,
        )
        self._months = _MonthTiles(
            self._body, self._fonts,
            lambda m: self._dispatch(self.controller.select_month, m),
        )

        self._years = tk.Frame(self._body, bg=GRID_BG)
        scroll = tk.Scrollbar(self._years, orient="vertical")
        self._year_list = tk.Listbox(
            self._years, height=8, width=12, font=self.font_normal,
            exportselection=False, yscrollcommand=scroll.set, activestyle="none",
        )
        scroll.configure(command=self._year_list.yview)
        self._year_list.pack(side="left", fill="y")
        scroll.pack(side="right", fill="y")
        self._year_list.bind("<<ListboxSelect>>", self._on_year_select)

        # Footer
        self._footer_label = tk.Label(
            self._outer, font=self.font_footer, bg=GRID_BG, fg=MUTED_FG,
        )
        self._footer_label.pack(pady=(4, 0))

    # ------------------------------------------------------------------
    # Command dispatch
    # ------------------------------------------------------------------
    def _dispatch(self, command, *args) -> None:
        if self.disabled:
            return
        try:
            command(*args)
        except (DayOutOfRange, YearOutOfRange) as exc:
            logger.warning("Rejected input: %s", exc)
        self._render()

    def _on_change(self, value: str) -> None:
        self._last_value = value
        self._copy(value)
        if self.on_selection is not None:
            self.on_selection(value)

    def _copy(self, value: str) -> None:
        self.root.clipboard_clear()
        self.root.clipboard_append(value)
        logger.info("Copied %s to clipboard", value)

    def copy_value(self) -> None:
        """Copy the current selection (Gregorian ISO) again."""
        if self.controller.value is not None:
            self._copy(self.controller.value)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _render(self) -> None:
        self._tooltip.hide()
        self._field.configure(text=self.controller.display_text())
        self._footer_label.configure(text=self._footer_text())

        status = self.controller.status
        if status is PickerStatus.CLOSED:
            self._popup.pack_forget()
            return
        self._popup.pack(before=self._footer_label)

        name, year = self.controller.header()
        self._month_label.configure(text=name)
        self._year_label.configure(text=str(year))

        for view in (self._days.frame, self._months.frame, self._years):
            view.pack_forget()
        if status is PickerStatus.OPEN_DAY:
            self._render_days()
            self._days.frame.pack()
        elif status is PickerStatus.OPEN_MONTH:
            self._render_months()
            self._months.frame.pack()
        else:
            self._render_years()
            self._years.pack()

    def _render_days(self) -> None:
        self._cell_days.clear()
        self._cell_holidays.clear()
        offset = self.controller.leading_blank_count()
        days = self.controller.visible_days()

        for i, cell in enumerate(self._days.cells):
            idx = i - offset
            if idx < 0 or idx >= len(days):
                cell.configure(text="", bg=GRID_BG, relief="flat", cursor="")
                continue
            info = days[idx]
            bg, fg = self._day_colors(info.is_selected, info.is_holiday, bool(info.holidays))
            cell.configure(
                text=str(info.date.day), bg=bg, fg=fg, cursor="hand2",
                font=self.font_bold if info.is_today else self.font_normal,
                relief="solid" if info.is_today else "flat",
            )
            self._cell_days[id(cell)] = info.date.day
            if info.holidays:
                self._cell_holidays[id(cell)] = info.holidays

    def _day_colors(self, is_selected: bool, is_friday: bool,
                    is_official: bool) -> tuple[str, str]:
        if is_selected:
            return SEL_BG, "black"
        if is_official:
            return self._holiday_color, "white"
        if is_friday:
            return GRID_BG, FRIDAY_FG
        return GRID_BG, "black"

    def _render_months(self) -> None:
        for tile, info in zip(self._months.tiles, self.controller.month_tiles()):
            tile.configure(
                text=info.name,
                bg=SEL_BG if info.is_cursor else GRID_BG,
                fg=ACCENT if info.is_current else "black",
                font=self.font_bold if info.is_current else self.font_normal,
            )

    def _render_years(self) -> None:
        self._year_values = self.controller.year_range(
            self.year_span_before, self.year_span_after)
        current = self.controller.today().year
        cursor_year = self.controller.cursor.year

        self._year_list.delete(0, "end")
        for i, year in enumerate(self._year_values):
            self._year_list.insert("end", str(year))
            if year == current:
                self._year_list.itemconfigure(i, fg=ACCENT)
        self._year_list.selection_clear(0, "end")
        if cursor_year in self._year_values:
            idx = self._year_values.index(cursor_year)
            self._year_list.selection_set(idx)
            self._year_list.see(idx)

    def _footer_text(self) -> str:
        today = self.controller.today()
        text = f"امروز: {format_jalali(today, pad=True)}  (روز {day_of_year(today)})"
        if self._last_value:
            text += f"     {self._last_value}"
        return text

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------
    def _on_day_click(self, event: tk.Event) -> None:
        day = self._cell_days.get(id(event.widget))
        if day is not None:
            self._dispatch(self.controller.select_day, day)

    def _on_year_select(self, _event: tk.Event) -> None:
        chosen = self._year_list.curselection()
        if not chosen or self.controller.status is not PickerStatus.OPEN_YEAR:
            return
        self._dispatch(self.controller.select_year, self._year_values[chosen[0]])

    def _on_pointer_down(self, event: tk.Event) -> None:
        if self.controller.status is PickerStatus.CLOSED:
            return
        widget = event.widget
        if isinstance(widget, str) or self._inside(widget, self._popup) \
                or widget is self._field:
            return
        self._dispatch(self.controller.outside_interaction)

    def _on_focus_out(self, event: tk.Event) -> None:
        # Only when focus left the application entirely
        if event.widget is self.root and self.root.focus_get() is None:
            if self.controller.status is not PickerStatus.CLOSED:
                self._dispatch(self.controller.outside_interaction)

    @staticmethod
    def _inside(widget: tk.Misc, container: tk.Misc) -> bool:
        while widget is not None:
            if widget is container:
                return True
            widget = widget.master
        return False

    # ------------------------------------------------------------------
    # Tooltip on hover
    # ------------------------------------------------------------------
    def _on_cell_enter(self, event: tk.Event) -> None:
        names = self._cell_holidays.get(id(event.widget))
        if names:
            self._tooltip.show(event.widget, "\n".join(names))

    def _on_cell_leave(self, _event: tk.Event) -> None:
        self._tooltip.hide()

    # ------------------------------------------------------------------
    # Settings dialog
    # ------------------------------------------------------------------
    def open_settings(self) -> None:
        dlg = tk.Toplevel(self.root)
        dlg.title("Settings")
        dlg.resizable(False, False)
        dlg.attributes("-topmost", True)
        dlg.grab_set()

        frame = tk.Frame(dlg, padx=12, pady=8)
        frame.pack()

        tk.Label(frame, text="Years before:", font=self.font_normal).grid(
            row=0, column=0, sticky="w", pady=4,
        )
        spin_before = tk.Spinbox(frame, from_=0, to=200, width=5, font=self.font_normal)
        spin_before.delete(0, "end")
        spin_before.insert(0, str(self.year_span_before))
        spin_before.grid(row=0, column=1, padx=(8, 0), pady=4)

        tk.Label(frame, text="Years after:", font=self.font_normal).grid(
            row=1, column=0, sticky="w", pady=4,
        )
        spin_after = tk.Spinbox(frame, from_=0, to=200, width=5, font=self.font_normal)
        spin_after.delete(0, "end")
        spin_after.insert(0, str(self.year_span_after))
        spin_after.grid(row=1, column=1, padx=(8, 0), pady=4)

        anchor_var = tk.StringVar(value=self.controller.year_anchor)
        anchor_frame = tk.Frame(frame)
        anchor_frame.grid(row=2, column=0, columnspan=2, sticky="w", pady=4)
        tk.Label(anchor_frame, text="Center year list on:", font=self.font_normal).pack(side="left")
        for value, label in (("cursor", "browsed year"), ("today", "this year")):
            tk.Radiobutton(
                anchor_frame, text=label, value=value, variable=anchor_var,
                font=self.font_normal,
            ).pack(side="left")

        # --- Holiday section ---
        holiday_frame = tk.LabelFrame(
            frame, text="Official holidays", font=self.font_bold, padx=8, pady=4,
        )
        holiday_frame.grid(row=3, column=0, columnspan=2, sticky="we", pady=(8, 0))

        color_val = [self._holiday_color]
        hdr = tk.Frame(holiday_frame)
        hdr.pack(fill="x", pady=(0, 4))
        tk.Label(hdr, text="Colour", font=self.font_normal).pack(side="left")
        swatch = tk.Label(
            hdr, text="  ", bg=color_val[0], relief="raised", borderwidth=1, cursor="hand2",
        )
        swatch.pack(side="left", padx=(4, 0))

        def _pick(_e=None):
            result = colorchooser.askcolor(
                color=color_val[0], parent=dlg, title="Holiday colour")
            if result[1]:
                color_val[0] = result[1]
                swatch.configure(bg=result[1])

        swatch.bind("<Button-1>", _pick)

        check_vars: dict[str, tk.BooleanVar] = {}
        for key, name in holiday_keys():
            var = tk.BooleanVar(value=(key in self.controller.enabled_holidays))
            check_vars[key] = var
            tk.Checkbutton(
                holiday_frame, text=name, variable=var, font=self.font_normal, anchor="w",
            ).pack(fill="x")

        # --- Buttons ---
        btn_frame = tk.Frame(frame)
        btn_frame.grid(row=4, column=0, columnspan=2, pady=(8, 0))

        def on_ok() -> None:
            try:
                self.year_span_before = max(0, min(200, int(spin_before.get())))
                self.year_span_after = max(0, min(200, int(spin_after.get())))
            except ValueError:
                return

            new_enabled = [k for k, v in check_vars.items() if v.get()]

            settings = load_settings()
            settings["year_span_before"] = self.year_span_before
            settings["year_span_after"] = self.year_span_after
            settings["year_anchor"] = anchor_var.get()
            settings["holidays"] = new_enabled
            settings["holiday_color"] = color_val[0]
            save_settings(settings)

            self.controller.year_anchor = anchor_var.get()
            self.controller.enabled_holidays = set(new_enabled)
            self._holiday_color = color_val[0]
            dlg.destroy()
            self._render()

        tk.Button(btn_frame, text="OK", width=8, command=on_ok).pack(side="left", padx=4)
        tk.Button(btn_frame, text="Cancel", width=8, command=dlg.destroy).pack(
            side="left", padx=4,
        )

    def open_about(self) -> None:
        messagebox.showinfo(
            "About",
            "Mini Jalali Calendar\n\nPick a Jalali date; its Gregorian form "
            "(YYYY-MM-DD) is copied to the clipboard.",
            parent=self.root,
        )

    # ------------------------------------------------------------------
    # Persist window position
    # ------------------------------------------------------------------
    def _persist_position(self) -> None:
        settings = load_settings()
        settings["window_x"] = self._saved_x
        settings["window_y"] = self._saved_y
        save_settings(settings)

    # ------------------------------------------------------------------
    # Show / Hide / Toggle
    # ------------------------------------------------------------------
    def toggle(self) -> None:
        if self.root.state() == "withdrawn" or not self.root.winfo_viewable():
            self.show()
        else:
            self.hide()

    def show(self) -> None:
        if not self.disabled:
            self.controller.open()
        self._render()
        self.root.deiconify()
        self._position_window()
        self.root.lift()
        self.root.focus_force()

    def hide(self) -> None:
        if self.controller.status is not PickerStatus.CLOSED:
            self.controller.close()
        if self.root.winfo_viewable():
            self._saved_x = self.root.winfo_x()
            self._saved_y = self.root.winfo_y()
            self._persist_position()
        self.root.withdraw()

    # ------------------------------------------------------------------
    # Position bottom-right above the taskbar unless a position was saved
    # ------------------------------------------------------------------
    def _position_window(self) -> None:
        self.root.update_idletasks()
        win_w = self.root.winfo_reqwidth()
        win_h = self.root.winfo_reqheight()
        if self._saved_x is not None and self._saved_y is not None:
            x, y = self._saved_x, self._saved_y
        else:
            x = self.root.winfo_screenwidth() - win_w - 12
            y = self.root.winfo_screenheight() - win_h - 60
        self.root.geometry(f"+{x}+{y}")
