"""Jalali date-picker state machine — no UI dependencies.

The host UI translates clicks into the commands below and re-reads the
derived queries after every command to redraw itself.  The controller owns
all picker state; nothing else mutates it.
"""

from __future__ import annotations

import enum
import functools
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Iterable

import calendar_logic as cal
from calendar_logic import CalendarDate, UnparsableDate
from official_holidays import holidays_for_year

logger = logging.getLogger(__name__)

YEAR_ANCHORS = ("cursor", "today")
DEFAULT_PLACEHOLDER = "Select a date"


class DayOutOfRange(ValueError):
    """select_day() was given a day that is not in the browsed month."""


class YearOutOfRange(ValueError):
    """select_year() was given a year the calendar cannot represent."""


class ReentrantCommand(RuntimeError):
    """A command was issued while another command was still running."""


class ViewMode(enum.Enum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


class PickerStatus(enum.Enum):
    CLOSED = "closed"
    OPEN_DAY = "open_day"
    OPEN_MONTH = "open_month"
    OPEN_YEAR = "open_year"


_OPEN_STATUS = {
    ViewMode.DAY: PickerStatus.OPEN_DAY,
    ViewMode.MONTH: PickerStatus.OPEN_MONTH,
    ViewMode.YEAR: PickerStatus.OPEN_YEAR,
}
_ANY_OPEN = (PickerStatus.OPEN_DAY, PickerStatus.OPEN_MONTH, PickerStatus.OPEN_YEAR)
_ANY = (PickerStatus.CLOSED,) + _ANY_OPEN


@dataclass(frozen=True)
class Cursor:
    year: int
    month: int


@dataclass
class PickerState:
    cursor: Cursor
    selected: CalendarDate | None = None
    view: ViewMode = ViewMode.DAY
    open: bool = False

    @property
    def status(self) -> PickerStatus:
        if not self.open:
            return PickerStatus.CLOSED
        return _OPEN_STATUS[self.view]


@dataclass(frozen=True)
class DayCell:
    date: CalendarDate
    is_today: bool
    is_selected: bool
    is_holiday: bool
    holidays: tuple[str, ...] = ()


@dataclass(frozen=True)
class MonthTile:
    month: int
    name: str
    is_cursor: bool
    is_current: bool


def _command(*allowed: PickerStatus):
    """Run the wrapped command only from the listed states.

    Returns True when the command ran, False when the current state does
    not accept it or the command itself declined (returned False).
    """
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(self, *args, **kwargs):
            self._enter(fn.__name__)
            try:
                status = self.state.status
                if status not in allowed:
                    logger.debug("%s() ignored while %s", fn.__name__, status.name)
                    return False
                return fn(self, *args, **kwargs) is not False
            finally:
                self._busy = False
        return wrapper
    return decorator


class PickerController:
    """Interactive state for one Jalali date picker."""

    def __init__(
        self,
        on_change: Callable[[str], None] | None = None,
        value: str | None = None,
        value_format: str = cal.GREGORIAN_ISO,
        year_anchor: str = "cursor",
        enabled_holidays: Iterable[str] = (),
        clock: Callable[[], date] | None = None,
        on_warning: Callable[[UnparsableDate], None] | None = None,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ) -> None:
        if year_anchor not in YEAR_ANCHORS:
            raise ValueError(f"year_anchor must be one of {YEAR_ANCHORS}, got {year_anchor!r}")
        self.on_change = on_change
        self.on_warning = on_warning
        self.year_anchor = year_anchor
        self.enabled_holidays: set[str] = set(enabled_holidays)
        self.placeholder = placeholder
        self._clock = clock
        self._busy = False
        self.seed_error: UnparsableDate | None = None

        now = self.today()
        self.state = PickerState(cursor=Cursor(now.year, now.month))
        self._seed(value, value_format)

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------
    def _seed(self, text: str | None, fmt: str) -> None:
        self.seed_error = None
        if text is None or not str(text).strip():
            self.state.selected = None
            return
        try:
            self.state.selected = cal.parse(text, fmt)
        except UnparsableDate as exc:
            self.state.selected = None
            self.seed_error = exc
            logger.warning("Ignoring initial value %r: %s", text, exc)
            if self.on_warning is not None:
                self.on_warning(exc)

    def set_value(self, text: str | None, fmt: str = cal.GREGORIAN_ISO) -> bool:
        """Replace the selection from an external string without emitting.

        Returns False (and leaves nothing selected) when ``text`` cannot be
        parsed.
        """
        self._enter("set_value")
        try:
            self._seed(text, fmt)
        finally:
            self._busy = False
        return self.seed_error is None

    def _enter(self, name: str) -> None:
        if self._busy:
            raise ReentrantCommand(f"{name}() issued while another command is running")
        self._busy = True

    # ------------------------------------------------------------------
    # Open / close
    # ------------------------------------------------------------------
    def _open(self) -> None:
        selected = self.state.selected
        if selected is not None:
            self.state.cursor = Cursor(selected.year, selected.month)
        self.state.view = ViewMode.DAY
        self.state.open = True

    @_command(PickerStatus.CLOSED)
    def open(self) -> None:
        self._open()

    @_command(*_ANY_OPEN)
    def close(self) -> None:
        self.state.open = False

    @_command(*_ANY)
    def toggle(self) -> None:
        if self.state.open:
            self.state.open = False
        else:
            self._open()

    @_command(*_ANY_OPEN)
    def outside_interaction(self) -> None:
        self.state.open = False

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    @_command(PickerStatus.OPEN_DAY)
    def show_month_view(self) -> None:
        self.state.view = ViewMode.MONTH

    @_command(PickerStatus.OPEN_DAY)
    def show_year_view(self) -> None:
        self.state.view = ViewMode.YEAR

    @_command(PickerStatus.OPEN_MONTH, PickerStatus.OPEN_YEAR)
    def show_day_view(self) -> None:
        self.state.view = ViewMode.DAY

    @_command(PickerStatus.OPEN_MONTH)
    def select_month(self, month: int) -> None:
        cal.check_month(month)
        self.state.cursor = replace(self.state.cursor, month=month)
        self.state.view = ViewMode.DAY

    @_command(PickerStatus.OPEN_YEAR)
    def select_year(self, year: int) -> None:
        if isinstance(year, bool) or not isinstance(year, int) \
                or not cal.MIN_YEAR <= year <= cal.MAX_YEAR:
            raise YearOutOfRange(
                f"year must be in {cal.MIN_YEAR}..{cal.MAX_YEAR}, got {year!r}")
        self.state.cursor = replace(self.state.cursor, year=year)
        self.state.view = ViewMode.DAY

    # ------------------------------------------------------------------
    # Month navigation
    # ------------------------------------------------------------------
    @_command(PickerStatus.OPEN_DAY)
    def next_month(self) -> bool | None:
        c = self.state.cursor
        target = cal.next_month(c.year, c.month)
        if not cal.month_in_range(*target):
            logger.debug("next_month() stopped at %s/%s", c.year, c.month)
            return False
        self.state.cursor = Cursor(*target)

    @_command(PickerStatus.OPEN_DAY)
    def prev_month(self) -> bool | None:
        c = self.state.cursor
        target = cal.prev_month(c.year, c.month)
        if not cal.month_in_range(*target):
            logger.debug("prev_month() stopped at %s/%s", c.year, c.month)
            return False
        self.state.cursor = Cursor(*target)

    @_command(PickerStatus.OPEN_DAY)
    def go_today(self) -> None:
        now = self.today()
        self.state.cursor = Cursor(now.year, now.month)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    @_command(PickerStatus.OPEN_DAY)
    def select_day(self, day: int) -> None:
        c = self.state.cursor
        last = cal.days_in_month(c.year, c.month)
        if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= last:
            raise DayOutOfRange(f"day must be in 1..{last} for {c.year}/{c.month}, got {day!r}")

        self.state.selected = CalendarDate(c.year, c.month, day)
        self.state.open = False
        value = cal.format_date(self.state.selected)
        logger.info("Selected %s (%s)", cal.format_jalali(self.state.selected), value)
        if self.on_change is not None:
            self.on_change(value)

    # ------------------------------------------------------------------
    # Derived queries
    # ------------------------------------------------------------------
    @property
    def status(self) -> PickerStatus:
        return self.state.status

    @property
    def cursor(self) -> Cursor:
        return self.state.cursor

    @property
    def selected(self) -> CalendarDate | None:
        return self.state.selected

    @property
    def value(self) -> str | None:
        """Gregorian ISO form of the selection, if any."""
        if self.state.selected is None:
            return None
        return cal.format_date(self.state.selected)

    def today(self) -> CalendarDate:
        return cal.today(self._clock)

    def display_text(self) -> str:
        if self.state.selected is None:
            return self.placeholder
        return cal.format_jalali(self.state.selected)

    def header(self) -> tuple[str, int]:
        """Return (month name, year) of the browsed month."""
        c = self.state.cursor
        return cal.month_name(c.month), c.year

    def leading_blank_count(self) -> int:
        c = self.state.cursor
        return cal.weekday_offset(c.year, c.month)

    def visible_days(self) -> list[DayCell]:
        c = self.state.cursor
        now = self.today()
        selected = self.state.selected
        official = holidays_for_year(c.year, self.enabled_holidays)

        days: list[DayCell] = []
        for day in range(1, cal.days_in_month(c.year, c.month) + 1):
            d = CalendarDate(c.year, c.month, day)
            days.append(DayCell(
                date=d,
                is_today=d == now,
                is_selected=d == selected,
                is_holiday=cal.is_holiday(d),
                holidays=tuple(official.get(d, ())),
            ))
        return days

    def month_tiles(self) -> list[MonthTile]:
        c = self.state.cursor
        now = self.today()
        return [
            MonthTile(
                month=m,
                name=name,
                is_cursor=m == c.month,
                is_current=(c.year, m) == (now.year, now.month),
            )
            for m, name in enumerate(cal.MONTH_NAMES, start=1)
        ]

    def year_range(self, span_before: int = 50, span_after: int = 49) -> list[int]:
        """Return candidate years around the anchor year, oldest first.

        The range is clipped to the years the calendar can represent.
        """
        if span_before < 0 or span_after < 0:
            raise ValueError("year spans must not be negative")
        if self.year_anchor == "today":
            anchor = self.today().year
        else:
            anchor = self.state.cursor.year
        first = max(cal.MIN_YEAR, anchor - span_before)
        last = min(cal.MAX_YEAR, anchor + span_after)
        return list(range(first, last + 1))
