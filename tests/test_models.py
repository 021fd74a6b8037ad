import datetime

from src.export import sheet_frame
from src.models import ExpenseRow, Sheet


def test_row_dict_round_trip():
    row = ExpenseRow(id="r1", date="2024-06-15", amount=12.5, reason="Lunch")
    assert row.to_dict() == {"id": "r1", "date": "2024-06-15", "amount": 12.5, "reason": "Lunch"}
    assert ExpenseRow.from_dict(row.to_dict()) == row


def test_from_dict_coerces_and_fills_defaults():
    row = ExpenseRow.from_dict({"id": "r2", "date": datetime.date(2024, 1, 2), "amount": "abc"})
    assert row == ExpenseRow(id="r2", date="2024-01-02", amount=0.0, reason="")
    generated = ExpenseRow.from_dict({})
    assert generated.id
    assert generated.amount == 0.0


def test_export_frame_built_from_row_dicts():
    rows = (ExpenseRow.from_dict({"id": "a", "date": "2024-06-01", "amount": "7", "reason": "x"}),)
    df = sheet_frame(Sheet(id="s", name="S", rows=rows))
    assert df.values.tolist() == [["2024-06-01", 7.0, "x"], ["TOTAL", 7.0, ""]]
