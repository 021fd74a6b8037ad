import datetime

from src.filters import filter_rows, period_bounds, subtract_month
from src.models import CustomRange, ExpenseRow, FilterPeriod

TODAY = datetime.date(2024, 6, 15)

ROWS = [
    ExpenseRow(id="1", date="2024-01-01", amount=100, reason="A"),
    ExpenseRow(id="2", date="2024-05-15", amount=20, reason="C"),
    ExpenseRow(id="3", date="2024-06-08", amount=10, reason="D"),
    ExpenseRow(id="4", date="2024-06-15", amount=50, reason="B"),
    ExpenseRow(id="5", date="", amount=5, reason="no date"),
]


def ids(rows):
    return [r.id for r in rows]


def test_all_is_identity():
    assert filter_rows(ROWS, FilterPeriod.ALL, TODAY) == ROWS


def test_today():
    rows = [ROWS[0], ROWS[3]]
    assert ids(filter_rows(rows, FilterPeriod.TODAY, TODAY)) == ["4"]


def test_week_is_inclusive():
    assert ids(filter_rows(ROWS, FilterPeriod.WEEK, TODAY)) == ["3", "4"]


def test_month_uses_calendar_month():
    assert ids(filter_rows(ROWS, FilterPeriod.MONTH, TODAY)) == ["2", "3", "4"]


def test_subtract_month_clamps_day():
    assert subtract_month(datetime.date(2024, 3, 31)) == datetime.date(2024, 2, 29)
    assert subtract_month(datetime.date(2023, 3, 31)) == datetime.date(2023, 2, 28)
    assert subtract_month(datetime.date(2024, 1, 10)) == datetime.date(2023, 12, 10)


def test_custom_range_inclusive():
    rng = CustomRange(start="2024-05-15", end="2024-06-08")
    assert ids(filter_rows(ROWS, FilterPeriod.CUSTOM, TODAY, rng)) == ["2", "3"]


def test_custom_range_with_missing_bound_is_unfiltered():
    assert filter_rows(ROWS, FilterPeriod.CUSTOM, TODAY, CustomRange(start="", end="2024-01-01")) == ROWS
    assert filter_rows(ROWS, FilterPeriod.CUSTOM, TODAY, CustomRange(start="2024-01-01", end="")) == ROWS
    assert filter_rows(ROWS, FilterPeriod.CUSTOM, TODAY) == ROWS


def test_filter_is_idempotent():
    for period in FilterPeriod:
        once = filter_rows(ROWS, period, TODAY, CustomRange("2024-01-01", "2024-05-31"))
        twice = filter_rows(once, period, TODAY, CustomRange("2024-01-01", "2024-05-31"))
        assert once == twice


def test_period_bounds():
    assert period_bounds(FilterPeriod.ALL, TODAY) == (None, None)
    assert period_bounds(FilterPeriod.WEEK, TODAY) == ("2024-06-08", "2024-06-15")
    assert period_bounds(FilterPeriod.MONTH, TODAY) == ("2024-05-15", "2024-06-15")
