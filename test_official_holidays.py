from calendar_logic import CalendarDate
from official_holidays import holiday_keys, holidays_for_year, holidays_on


def test_keys_are_unique():
    keys = [key for key, _name in holiday_keys()]
    assert len(keys) == len(set(keys))
    assert "nowruz" in keys


def test_only_enabled_holidays_are_returned():
    assert holidays_for_year(1403, set()) == {}
    result = holidays_for_year(1403, {"nowruz"})
    assert sorted(result) == [CalendarDate(1403, 1, d) for d in range(1, 5)]
    assert result[CalendarDate(1403, 1, 1)] == ["نوروز"]


def test_unknown_keys_are_ignored():
    assert holidays_for_year(1403, {"christmas"}) == {}


def test_every_holiday_exists_in_common_years():
    all_keys = {key for key, _name in holiday_keys()}
    # 1402 is a common year; Esfand 29 is its last day
    result = holidays_for_year(1402, all_keys)
    assert CalendarDate(1402, 12, 29) in result
    assert sum(len(names) for names in result.values()) == 10


def test_holidays_on():
    enabled = {"revolution_day", "nature_day"}
    assert holidays_on(CalendarDate(1403, 11, 22), enabled) == ["پیروزی انقلاب اسلامی"]
    assert holidays_on(CalendarDate(1403, 11, 23), enabled) == []
