import pytest

from src.aggregate import aggregate, daily_totals, format_amount
from src.models import ExpenseRow, coerce_amount


def test_aggregate_rows():
    rows = [
        ExpenseRow(id="1", date="2024-01-01", amount=100, reason="A"),
        ExpenseRow(id="2", date="2024-06-15", amount=50, reason="B"),
    ]
    summary = aggregate(rows)
    assert summary.total == 150
    assert summary.count == 2
    assert summary.average == 75


def test_aggregate_empty_average_is_zero():
    summary = aggregate([])
    assert (summary.total, summary.count, summary.average) == (0, 0, 0.0)


def test_aggregate_negative_and_bad_amounts():
    rows = [
        ExpenseRow(id="1", amount=-20),
        ExpenseRow(id="2", amount="oops"),
        ExpenseRow(id="3", amount=None),
    ]
    summary = aggregate(rows)
    assert summary.total == -20
    assert summary.count == 3
    assert summary.average == pytest.approx(-20 / 3)


@pytest.mark.parametrize("value,expected", [
    ("12.5", 12.5),
    ("12,5", 12.5),
    ("", 0.0),
    (None, 0.0),
    (float("nan"), 0.0),
    ("inf", 0.0),
    (7, 7.0),
])
def test_coerce_amount(value, expected):
    assert coerce_amount(value) == expected


def test_daily_totals_groups_by_date():
    rows = [
        ExpenseRow(id="1", date="2024-06-15", amount=10),
        ExpenseRow(id="2", date="2024-06-14", amount=5),
        ExpenseRow(id="3", date="2024-06-15", amount=2.5),
        ExpenseRow(id="4", date="", amount=100),
    ]
    df = daily_totals(rows)
    assert [d.strftime("%Y-%m-%d") for d in df["date"]] == ["2024-06-14", "2024-06-15"]
    assert list(df["amount"]) == [5.0, 12.5]


def test_daily_totals_empty():
    df = daily_totals([ExpenseRow(id="1", date="", amount=3)])
    assert df.empty
    assert list(df.columns) == ["date", "amount"]


def test_format_amount():
    assert format_amount(1234.5, "₽") == "1 234,5 ₽"
    assert format_amount(0, "₽") == "0 ₽"
    assert format_amount(-1000000, "$") == "-1 000 000 $"
    assert format_amount(10.126, "") == "10,13"
