"""Iranian official holidays that fall on fixed Jalali dates.

Holidays that follow the lunar Hijri calendar move every solar year and are
not listed here.
"""

from __future__ import annotations

from calendar_logic import CalendarDate


# --- date generators --------------------------------------------------------

def _fixed(m: int, d: int):
    return lambda year: [CalendarDate(year, m, d)]


def _fixed_range(m: int, d: int, n: int):
    return lambda year: [CalendarDate(year, m, d + i) for i in range(n)]


# --- Holiday registry: (key, name, dates_fn) --------------------------------

HOLIDAYS: list[tuple] = [
    ("nowruz",             "نوروز",                    _fixed_range(1, 1, 4)),
    ("republic_day",       "روز جمهوری اسلامی",        _fixed(1, 12)),
    ("nature_day",         "روز طبیعت",                _fixed(1, 13)),
    ("khomeini_demise",    "رحلت امام خمینی",          _fixed(3, 14)),
    ("khordad_uprising",   "قیام ۱۵ خرداد",            _fixed(3, 15)),
    ("revolution_day",     "پیروزی انقلاب اسلامی",     _fixed(11, 22)),
    ("oil_nationalization", "ملی شدن صنعت نفت",        _fixed(12, 29)),
]


def holiday_keys() -> list[tuple[str, str]]:
    """Return [(key, name), ...] in calendar order."""
    return [(h[0], h[1]) for h in HOLIDAYS]


def holidays_for_year(
    year: int, enabled_keys: set[str],
) -> dict[CalendarDate, list[str]]:
    """Return {date: [name, ...]} for all enabled holidays in a Jalali year."""
    result: dict[CalendarDate, list[str]] = {}
    for key, name, dates_fn in HOLIDAYS:
        if key not in enabled_keys:
            continue
        for d in dates_fn(year):
            result.setdefault(d, []).append(name)
    return result


def holidays_on(d: CalendarDate, enabled_keys: set[str]) -> list[str]:
    return holidays_for_year(d.year, enabled_keys).get(d, [])
