from datetime import date

import pytest

from calendar_logic import (
    CalendarDate,
    InvalidDay,
    InvalidMonth,
    InvalidYear,
    MAX_YEAR,
    MIN_YEAR,
    UnparsableDate,
    day_of_year,
    days_in_month,
    format_date,
    format_jalali,
    is_holiday,
    is_leap_year,
    month_grid,
    month_in_range,
    month_name,
    next_month,
    parse,
    prev_month,
    today,
    weekday_offset,
)

# Leap years of the cycle 1375–1408
LEAP_YEARS = {1375, 1379, 1383, 1387, 1391, 1395, 1399, 1403, 1408}


def test_leap_years_match_reference_cycle():
    for year in range(1375, 1409):
        assert is_leap_year(year) == (year in LEAP_YEARS), year


def test_days_in_month():
    for year in range(1375, 1409):
        for month in range(1, 13):
            n = days_in_month(year, month)
            if month <= 6:
                assert n == 31
            elif month <= 11:
                assert n == 30
            else:
                assert n == (30 if is_leap_year(year) else 29)


@pytest.mark.parametrize("month", [0, 13, -1])
def test_invalid_month_rejected(month):
    with pytest.raises(InvalidMonth):
        days_in_month(1403, month)
    with pytest.raises(InvalidMonth):
        weekday_offset(1403, month)
    with pytest.raises(InvalidMonth):
        month_name(month)


def test_calendar_date_validates_day():
    with pytest.raises(InvalidDay):
        CalendarDate(1402, 12, 30)
    with pytest.raises(InvalidDay):
        CalendarDate(1403, 7, 31)
    with pytest.raises(InvalidMonth):
        CalendarDate(1403, 13, 1)
    assert CalendarDate(1403, 12, 30).day == 30


def test_weekday_offset_saturday_first():
    # 1 Farvardin 1403 was a Wednesday
    assert weekday_offset(1403, 1) == 4
    # 1 Farvardin 1402 (2023-03-21) was a Tuesday
    assert weekday_offset(1402, 1) == 3


def test_fridays_are_holidays():
    assert is_holiday(CalendarDate(1403, 1, 3))  # 2024-03-22
    assert not is_holiday(CalendarDate(1403, 1, 1))
    assert not is_holiday(CalendarDate(1403, 1, 4))


def test_today_uses_clock():
    assert today(lambda: date(2024, 3, 20)) == CalendarDate(1403, 1, 1)
    assert today(lambda: date(2024, 3, 19)) == CalendarDate(1402, 12, 29)


def test_format_date_is_gregorian_iso():
    assert format_date(CalendarDate(1403, 1, 1)) == "2024-03-20"
    assert format_date(CalendarDate(1403, 1, 15)) == "2024-04-03"
    assert format_date(CalendarDate(1399, 12, 30)) == "2021-03-20"


def test_format_jalali():
    d = CalendarDate(1403, 1, 5)
    assert format_jalali(d) == "1403/1/5"
    assert format_jalali(d, sep="-", pad=True) == "1403-01-05"


def test_parse_gregorian_iso():
    assert parse("2024-03-20") == CalendarDate(1403, 1, 1)
    assert parse(" 2024-03-20 ", "YYYY-MM-DD") == CalendarDate(1403, 1, 1)


def test_parse_jalali():
    assert parse("1403/01/15", "jalali") == CalendarDate(1403, 1, 15)
    assert parse("1403/1/15", "jYYYY/jMM/jDD") == CalendarDate(1403, 1, 15)
    assert parse("۱۴۰۳/۰۱/۱۵", "jalali") == CalendarDate(1403, 1, 15)


@pytest.mark.parametrize(
    "text,fmt",
    [
        ("", "gregorian-iso"),
        ("2024/03/20", "gregorian-iso"),
        ("2024-02-30", "gregorian-iso"),
        ("20-03-2024", "gregorian-iso"),
        ("1402/12/30", "jalali"),
        ("1403/13/01", "jalali"),
        ("1403-01-01", "jalali"),
        ("2024-03-20", "dd.mm.yyyy"),
    ],
)
def test_parse_rejects_malformed(text, fmt):
    with pytest.raises(UnparsableDate):
        parse(text, fmt)


def test_parse_rejects_non_string():
    with pytest.raises(UnparsableDate):
        parse(None)


def test_format_then_parse_returns_same_date():
    for year in (1375, 1399, 1402, 1403):
        for month in range(1, 13):
            for day in (1, 15, days_in_month(year, month)):
                d = CalendarDate(year, month, day)
                assert parse(format_date(d), "gregorian-iso") == d


def test_month_grid():
    grid = month_grid(1403, 1)
    assert len(grid) == 6
    assert all(len(row) == 7 for row in grid)
    assert grid[0] == [None, None, None, None, 1, 2, 3]
    days = [d for row in grid for d in row if d is not None]
    assert days == list(range(1, 32))


def test_day_of_year():
    assert day_of_year(CalendarDate(1403, 1, 1)) == 1
    assert day_of_year(CalendarDate(1403, 7, 1)) == 187
    assert day_of_year(CalendarDate(1403, 12, 30)) == 366


def test_month_wrap_helpers():
    assert next_month(1402, 12) == (1403, 1)
    assert prev_month(1403, 1) == (1402, 12)
    assert next_month(1403, 5) == (1403, 6)
    assert prev_month(1403, 5) == (1403, 4)


@pytest.mark.parametrize("year", [MIN_YEAR - 1, MAX_YEAR + 1])
def test_years_outside_the_calendar_are_rejected(year):
    with pytest.raises(InvalidYear):
        is_leap_year(year)
    with pytest.raises(InvalidYear):
        days_in_month(year, 1)
    with pytest.raises(InvalidYear):
        weekday_offset(year, 1)
    with pytest.raises(InvalidYear):
        CalendarDate(year, 1, 1)


def test_jalali_year_zero_is_unparsable():
    with pytest.raises(UnparsableDate):
        parse("0/01/01", "jalali")


def test_month_in_range():
    assert month_in_range(MIN_YEAR, 1)
    assert month_in_range(MAX_YEAR, 12)
    assert not month_in_range(MIN_YEAR - 1, 12)
    assert not month_in_range(MAX_YEAR + 1, 1)
    assert not month_in_range(1403, 13)
