"""Pure Jalali calendar calculations — no UI dependencies."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Callable

import jdatetime

MONTH_NAMES = [
    "فروردین", "اردیبهشت", "خرداد", "تیر", "مرداد", "شهریور",
    "مهر", "آبان", "آذر", "دی", "بهمن", "اسفند",
]

# Saturday first: شنبه … جمعه
DAY_ABBR = ["ش", "ی", "د", "س", "چ", "پ", "ج"]

FRIDAY = 6

MIN_YEAR = jdatetime.MINYEAR
MAX_YEAR = jdatetime.MAXYEAR

GREGORIAN_ISO = "gregorian-iso"
JALALI = "jalali"

_FORMAT_ALIASES = {
    GREGORIAN_ISO: GREGORIAN_ISO,
    "YYYY-MM-DD": GREGORIAN_ISO,
    JALALI: JALALI,
    "jYYYY/jMM/jDD": JALALI,
}

_GREGORIAN_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_JALALI_RE = re.compile(r"^(\d{1,4})/(\d{1,2})/(\d{1,2})$")

# Persian and Arabic-Indic digits → ASCII
_DIGITS = str.maketrans("۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩", "01234567890123456789")


class InvalidYear(ValueError):
    """A calendar query was made with a year jdatetime cannot represent."""


class InvalidMonth(ValueError):
    """A calendar query was made with a month outside 1–12."""


class InvalidDay(ValueError):
    """A day does not exist in the given Jalali month."""


class UnparsableDate(ValueError):
    """An external date string could not be read."""


def check_year(year: int) -> None:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidYear(f"year must be in {MIN_YEAR}..{MAX_YEAR}, got {year!r}")


def check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise InvalidMonth(f"month must be in 1..12, got {month!r}")


@dataclass(frozen=True, order=True)
class CalendarDate:
    """A Jalali calendar date."""

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        last = days_in_month(self.year, self.month)
        if not 1 <= self.day <= last:
            raise InvalidDay(
                f"day must be in 1..{last} for {self.year}/{self.month}, got {self.day!r}"
            )

    @classmethod
    def from_gregorian(cls, d: date) -> "CalendarDate":
        j = jdatetime.date.fromgregorian(date=d)
        return cls(j.year, j.month, j.day)

    def to_gregorian(self) -> date:
        return jdatetime.date(self.year, self.month, self.day).togregorian()

    def weekday(self) -> int:
        """Saturday = 0 … Friday = 6."""
        return jdatetime.date(self.year, self.month, self.day).weekday()


def is_leap_year(year: int) -> bool:
    """Return True if Esfand of the given Jalali year has 30 days."""
    check_year(year)
    return jdatetime.date(year, 1, 1).isleap()


def days_in_month(year: int, month: int) -> int:
    check_year(year)
    check_month(month)
    if month <= 6:
        return 31
    if month <= 11:
        return 30
    return 30 if is_leap_year(year) else 29


def weekday_offset(year: int, month: int) -> int:
    """Return the weekday (Saturday = 0) of the first day of a month.

    This is also the number of empty cells before day 1 in a month grid.
    """
    check_year(year)
    check_month(month)
    return jdatetime.date(year, month, 1).weekday()


def today(clock: Callable[[], date] | None = None) -> CalendarDate:
    """Return today's date in the Jalali calendar.

    ``clock`` returns the current Gregorian date; it defaults to the
    system clock.
    """
    return CalendarDate.from_gregorian((clock or date.today)())


def is_holiday(d: CalendarDate) -> bool:
    """Fridays are the weekly holiday."""
    return d.weekday() == FRIDAY


def parse(text: str, fmt: str = GREGORIAN_ISO) -> CalendarDate:
    """Parse ``text`` into a Jalali date.

    ``fmt`` is ``"gregorian-iso"`` (``YYYY-MM-DD``) or ``"jalali"``
    (``jYYYY/jMM/jDD``).
    """
    kind = _FORMAT_ALIASES.get(fmt)
    if kind is None:
        raise UnparsableDate(f"unknown date format {fmt!r}")
    if not isinstance(text, str):
        raise UnparsableDate(f"expected a string, got {type(text).__name__}")

    raw = text.strip().translate(_DIGITS)
    pattern = _GREGORIAN_RE if kind == GREGORIAN_ISO else _JALALI_RE
    match = pattern.match(raw)
    if match is None:
        raise UnparsableDate(f"{text!r} does not match {fmt!r}")
    y, m, d = (int(part) for part in match.groups())

    try:
        if kind == GREGORIAN_ISO:
            return CalendarDate.from_gregorian(date(y, m, d))
        return CalendarDate(y, m, d)
    except ValueError as exc:
        raise UnparsableDate(f"{text!r} is not a valid date: {exc}") from exc


def format_date(d: CalendarDate) -> str:
    """Return the Gregorian ISO form (``YYYY-MM-DD``) of a Jalali date."""
    return d.to_gregorian().isoformat()


def format_jalali(d: CalendarDate, sep: str = "/", pad: bool = False) -> str:
    if pad:
        return f"{d.year:04d}{sep}{d.month:02d}{sep}{d.day:02d}"
    return f"{d.year}{sep}{d.month}{sep}{d.day}"


def month_name(month: int) -> str:
    check_month(month)
    return MONTH_NAMES[month - 1]


def month_grid(year: int, month: int) -> list[list[int | None]]:
    """Return a 6×7 grid for the given Jalali month.

    Each cell is a day number (1–31) or None for empty slots.
    Weeks start on Saturday.
    Always 6 rows so the calendar height stays constant.
    """
    cells: list[int | None] = [None] * weekday_offset(year, month)
    cells.extend(range(1, days_in_month(year, month) + 1))
    cells.extend([None] * (42 - len(cells)))
    return [cells[i:i + 7] for i in range(0, 42, 7)]


def day_of_year(d: CalendarDate) -> int:
    """Return the 1-based day-of-year for the given Jalali date."""
    if d.month <= 6:
        return (d.month - 1) * 31 + d.day
    return 186 + (d.month - 7) * 30 + d.day


def month_in_range(year: int, month: int) -> bool:
    """True if (year, month) lies inside the years jdatetime can represent."""
    return MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1
