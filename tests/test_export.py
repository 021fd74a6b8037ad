import datetime
from io import BytesIO

import pytest
from openpyxl import load_workbook

from src.export import build_frames, export_file_name, export_workbook, unique_titles, worksheet_title
from src.models import ExpenseRow, Sheet


def make_sheet(sheet_id, name, amounts):
    rows = tuple(
        ExpenseRow(id=f"{sheet_id}-{i}", date=f"2024-06-{i + 1:02d}", amount=a, reason=f"r{i}")
        for i, a in enumerate(amounts)
    )
    return Sheet(id=sheet_id, name=name, rows=rows)


def test_frame_has_trailing_total_row():
    frames = build_frames([make_sheet("s1", "Home", [100, 50])])
    df = frames["Home"]
    assert list(df.columns) == ["Date", "Amount", "Reason"]
    assert len(df) == 3
    assert list(df.iloc[-1]) == ["TOTAL", 150, ""]
    assert list(df["Reason"][:2]) == ["r0", "r1"]


def test_worksheet_title_sanitizing():
    assert worksheet_title("a/b:c") == "a_b_c"
    assert worksheet_title("   ") == "Sheet"
    assert len(worksheet_title("x" * 40)) == 31


def test_unique_titles_suffixes_duplicates():
    assert unique_titles(["Home", "home", "Home"]) == ["Home", "home (2)", "Home (3)"]
    long_titles = unique_titles(["y" * 40, "y" * 40])
    assert long_titles[1].endswith(" (2)")
    assert len(long_titles[1]) == 31


def test_export_workbook_round_trip():
    sheets = [make_sheet("s1", "Home", [100, 50]), make_sheet("s2", "Trip", [-5])]
    wb = load_workbook(BytesIO(export_workbook(sheets)))
    assert wb.sheetnames == ["Home", "Trip"]
    home = [list(r) for r in wb["Home"].iter_rows(values_only=True)]
    assert home[0] == ["Date", "Amount", "Reason"]
    assert home[1] == ["2024-06-01", 100, "r0"]
    assert home[-1][:2] == ["TOTAL", 150]
    assert wb["Home"]["A4"].font.bold
    assert wb["Home"].column_dimensions["C"].width == 40
    trip = [list(r) for r in wb["Trip"].iter_rows(values_only=True)]
    assert trip[-1][:2] == ["TOTAL", -5]


def test_export_empty_raises():
    with pytest.raises(ValueError):
        export_workbook([])


def test_export_file_name():
    assert export_file_name(datetime.date(2024, 6, 15)) == "expenses_2024-06-15.xlsx"
    assert export_file_name(datetime.date(2024, 6, 15), label="report") == "report_2024-06-15.xlsx"
