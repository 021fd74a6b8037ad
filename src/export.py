"""
export.py - spreadsheet export of all sheets

Each sheet becomes one worksheet with Date / Amount / Reason columns and a
trailing TOTAL row computed from every row of the sheet (the on-screen filter
is not applied). The workbook is built in memory and returned as bytes, so a
failed export never leaves a partial file behind.
"""

import datetime
import re
from io import BytesIO
from typing import Dict, Iterable, List, Sequence

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from src.aggregate import aggregate
from src.config import (
    EXPORT_COLUMN_WIDTHS,
    EXPORT_COLUMNS,
    EXPORT_FILE_LABEL,
    TOTAL_LABEL,
    get_logger,
)
from src.models import Sheet, coerce_amount

logger = get_logger(__name__)

# xlsx worksheet titles: max 31 chars, none of []:*?/\
MAX_TITLE_LENGTH = 31
_INVALID_TITLE_CHARS = re.compile(r"[\[\]:*?/\\]")


def worksheet_title(name: str) -> str:
    title = _INVALID_TITLE_CHARS.sub("_", (name or "").strip())
    # leading/trailing apostrophes are rejected by Excel
    title = title.strip("'")[:MAX_TITLE_LENGTH].strip()
    return title or "Sheet"


def unique_titles(names: Iterable[str]) -> List[str]:
    """Valid, case-insensitively unique worksheet titles in the given order."""
    titles: List[str] = []
    seen = set()
    for name in names:
        base = worksheet_title(name)
        title = base
        n = 2
        while title.lower() in seen:
            suffix = f" ({n})"
            title = base[: MAX_TITLE_LENGTH - len(suffix)] + suffix
            n += 1
        seen.add(title.lower())
        titles.append(title)
    return titles


def sheet_frame(sheet: Sheet) -> pd.DataFrame:
    """Rows of one sheet in store order followed by the TOTAL row."""
    df = pd.DataFrame([r.to_dict() for r in sheet.rows], columns=["id", "date", "amount", "reason"])
    df["amount"] = df["amount"].map(coerce_amount)
    total = pd.DataFrame([{"date": TOTAL_LABEL, "amount": aggregate(sheet.rows).total, "reason": ""}])
    df = pd.concat([df.drop(columns=["id"]), total], ignore_index=True)
    df.columns = EXPORT_COLUMNS
    return df


def build_frames(sheets: Sequence[Sheet]) -> Dict[str, pd.DataFrame]:
    """One DataFrame per sheet keyed by its worksheet title, in store order."""
    titles = unique_titles(s.name for s in sheets)
    return {title: sheet_frame(sheet) for title, sheet in zip(titles, sheets)}


def export_workbook(sheets: Sequence[Sheet]) -> bytes:
    """Write every sheet into an xlsx workbook and return its bytes."""
    if not sheets:
        raise ValueError("Nothing to export: no sheets")
    frames = build_frames(sheets)
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for title, df in frames.items():
            df.to_excel(writer, index=False, sheet_name=title)
            ws = writer.sheets[title]
            for idx, column in enumerate(EXPORT_COLUMNS, start=1):
                ws.column_dimensions[get_column_letter(idx)].width = EXPORT_COLUMN_WIDTHS.get(column, 12)
            # header is row 1, data rows follow, TOTAL is the last row
            for cell in ws[len(df) + 1]:
                cell.font = Font(bold=True)
    # context manager already saved into buffer
    logger.debug("Built workbook with sheets: %s", ", ".join(frames))
    return buffer.getvalue()


def export_file_name(today: datetime.date, label: str = EXPORT_FILE_LABEL) -> str:
    """<label>_<YYYY-MM-DD>.xlsx; repeated exports on one day share the name."""
    return f"{label}_{today.isoformat()}.xlsx"
