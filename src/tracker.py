"""
tracker.py - core application state: sheets, rows and the rename dialog

Responsibilities:
 - SheetStore: an immutable snapshot of all sheets plus the active sheet id.
   Every operation returns a new snapshot; a refused operation (deleting the
   last row or sheet, renaming to a blank name, unknown ids) returns the same
   snapshot object unchanged.
 - ExpenseTracker: the single object the UI keeps in session state. It holds
   the current snapshot together with the filter selection and the rename
   dialog, and exposes the derived views consumed by the page:
     visible_rows, summary, sheet_total, export
"""

import datetime
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from src.aggregate import Summary, aggregate
from src.config import DEFAULT_SHEET_NAME_TEMPLATE, get_logger
from src.export import export_file_name, export_workbook
from src.filters import filter_rows
from src.models import (
    EDITABLE_FIELDS,
    CustomRange,
    ExpenseRow,
    FilterPeriod,
    RenameClosed,
    RenameDialog,
    RenameOpen,
    Sheet,
    coerce_amount,
    coerce_date,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class SheetStore:
    """
    Ordered sheets and the id of the active one.

    Invariants: at least one sheet, every sheet has at least one row and
    active_id names one of the sheets.
    """
    sheets: Tuple[Sheet, ...]
    active_id: str

    @staticmethod
    def initial(today: datetime.date) -> "SheetStore":
        first = Sheet.new(DEFAULT_SHEET_NAME_TEMPLATE.format(n=1), today)
        return SheetStore(sheets=(first,), active_id=first.id)

    # -----------------------
    # Read helpers
    # -----------------------
    @property
    def sheet_ids(self) -> List[str]:
        return [s.id for s in self.sheets]

    @property
    def active_sheet(self) -> Sheet:
        return self.get_sheet(self.active_id) or self.sheets[0]

    def get_sheet(self, sheet_id: str) -> Optional[Sheet]:
        return next((s for s in self.sheets if s.id == sheet_id), None)

    def _replace_sheet(self, updated: Sheet) -> "SheetStore":
        sheets = tuple(updated if s.id == updated.id else s for s in self.sheets)
        return replace(self, sheets=sheets)

    # -----------------------
    # Sheet operations
    # -----------------------
    def add_sheet(self, today: datetime.date) -> "SheetStore":
        """Append a new sheet with one default row and make it active."""
        sheet = Sheet.new(DEFAULT_SHEET_NAME_TEMPLATE.format(n=len(self.sheets) + 1), today)
        return SheetStore(sheets=self.sheets + (sheet,), active_id=sheet.id)

    def delete_sheet(self, sheet_id: str) -> "SheetStore":
        """
        Remove a sheet. Refused when it is the only sheet.
        Deleting the active sheet activates the first remaining one.
        """
        if len(self.sheets) <= 1 or self.get_sheet(sheet_id) is None:
            return self
        remaining = tuple(s for s in self.sheets if s.id != sheet_id)
        active_id = remaining[0].id if self.active_id == sheet_id else self.active_id
        return SheetStore(sheets=remaining, active_id=active_id)

    def rename_sheet(self, sheet_id: str, name: str) -> "SheetStore":
        """Set the trimmed name. Blank names are refused."""
        name = (name or "").strip()
        sheet = self.get_sheet(sheet_id)
        if not name or sheet is None:
            return self
        return self._replace_sheet(replace(sheet, name=name))

    def select_sheet(self, sheet_id: str) -> "SheetStore":
        if sheet_id == self.active_id or self.get_sheet(sheet_id) is None:
            return self
        return replace(self, active_id=sheet_id)

    # -----------------------
    # Row operations
    # -----------------------
    def add_row(self, sheet_id: str, today: datetime.date) -> "SheetStore":
        sheet = self.get_sheet(sheet_id)
        if sheet is None:
            return self
        return self._replace_sheet(replace(sheet, rows=sheet.rows + (ExpenseRow.new(today),)))

    def delete_row(self, sheet_id: str, row_id: str) -> "SheetStore":
        """Remove a row by id. The last row of a sheet is never removed."""
        sheet = self.get_sheet(sheet_id)
        if sheet is None or len(sheet.rows) <= 1 or sheet.find_row(row_id) is None:
            return self
        return self._replace_sheet(replace(sheet, rows=tuple(r for r in sheet.rows if r.id != row_id)))

    def update_row(self, sheet_id: str, row_id: str, field: str, value) -> "SheetStore":
        """
        Replace one field of a row. Supported fields: date, amount, reason.
        Amounts are coerced to float (non-numeric input becomes 0.0).
        """
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown row field: {field!r}")
        sheet = self.get_sheet(sheet_id)
        row = sheet.find_row(row_id) if sheet is not None else None
        if row is None:
            return self
        if field == "amount":
            value = coerce_amount(value)
        elif field == "date":
            value = coerce_date(value)
        else:
            value = "" if value is None else str(value)
        if getattr(row, field) == value:
            return self
        updated = replace(row, **{field: value})
        rows = tuple(updated if r.id == row_id else r for r in sheet.rows)
        return self._replace_sheet(replace(sheet, rows=rows))


class ExpenseTracker:
    """
    Single-instance style tracker object. The dashboard keeps one
    ExpenseTracker in st.session_state and routes every user action through it.

    `today` is a callable so tests can pin the current date.
    """

    def __init__(self, today: Callable[[], datetime.date] = datetime.date.today):
        self._today = today
        self.store: SheetStore = SheetStore.initial(self._today())
        self.period: FilterPeriod = FilterPeriod.ALL
        self.custom_range: CustomRange = CustomRange()
        self.rename_dialog: RenameDialog = RenameClosed()

    def today(self) -> datetime.date:
        return self._today()

    def _apply(self, new_store: SheetStore, action: str, reason: str = "") -> bool:
        """Swap in a new snapshot. Returns False when the store refused the change."""
        if new_store is self.store:
            logger.info("Refused %s%s", action, f" ({reason})" if reason else "")
            return False
        self.store = new_store
        logger.info("Applied %s (sheets=%d)", action, len(new_store.sheets))
        return True

    @property
    def active_sheet(self) -> Sheet:
        return self.store.active_sheet

    # -----------------------
    # Sheet actions
    # -----------------------
    def add_sheet(self) -> Sheet:
        self._apply(self.store.add_sheet(self.today()), "add_sheet")
        return self.active_sheet

    def delete_sheet(self, sheet_id: str) -> bool:
        deleted = self._apply(self.store.delete_sheet(sheet_id), f"delete_sheet id={sheet_id}",
                              "only one sheet left" if len(self.store.sheets) <= 1 else "unknown sheet")
        if deleted and isinstance(self.rename_dialog, RenameOpen) and self.rename_dialog.sheet_id == sheet_id:
            self.rename_dialog = RenameClosed()
        return deleted

    def select_sheet(self, sheet_id: str) -> bool:
        return self._apply(self.store.select_sheet(sheet_id), f"select_sheet id={sheet_id}",
                           "already active or unknown sheet")

    # -----------------------
    # Rename dialog
    # -----------------------
    def open_rename(self, sheet_id: Optional[str] = None) -> None:
        sheet = self.store.get_sheet(sheet_id or self.store.active_id)
        if sheet is None:
            return
        self.rename_dialog = RenameOpen(sheet_id=sheet.id, draft=sheet.name)

    def set_rename_draft(self, text: str) -> None:
        if isinstance(self.rename_dialog, RenameOpen):
            self.rename_dialog = replace(self.rename_dialog, draft=text)

    def confirm_rename(self) -> bool:
        """
        Apply the draft name. A blank draft keeps the dialog open and the name
        unchanged; on success the dialog closes.
        """
        dialog = self.rename_dialog
        if not isinstance(dialog, RenameOpen):
            return False
        if not dialog.draft.strip():
            logger.info("Refused rename of sheet id=%s (blank name)", dialog.sheet_id)
            return False
        self._apply(self.store.rename_sheet(dialog.sheet_id, dialog.draft),
                    f"rename_sheet id={dialog.sheet_id}", "name unchanged")
        self.rename_dialog = RenameClosed()
        return True

    def cancel_rename(self) -> None:
        self.rename_dialog = RenameClosed()

    # -----------------------
    # Row actions (on the active sheet)
    # -----------------------
    def add_row(self) -> None:
        self._apply(self.store.add_row(self.store.active_id, self.today()), "add_row")

    def delete_row(self, row_id: str) -> bool:
        return self._apply(self.store.delete_row(self.store.active_id, row_id),
                           f"delete_row id={row_id}", "last row or unknown row")

    def update_row(self, row_id: str, field: str, value) -> bool:
        return self._apply(self.store.update_row(self.store.active_id, row_id, field, value),
                           f"update_row id={row_id} field={field}", "unknown row or unchanged value")

    # -----------------------
    # Filter selection and derived views
    # -----------------------
    def set_period(self, period: FilterPeriod, custom_range: Optional[CustomRange] = None) -> None:
        self.period = period
        if custom_range is not None:
            self.custom_range = custom_range

    def visible_rows(self, today: Optional[datetime.date] = None) -> List[ExpenseRow]:
        """Rows of the active sheet that pass the selected period filter."""
        return filter_rows(self.active_sheet.rows, self.period, today or self.today(), self.custom_range)

    def summary(self, today: Optional[datetime.date] = None) -> Summary:
        return aggregate(self.visible_rows(today))

    def sheet_total(self, sheet_id: Optional[str] = None) -> float:
        """Unfiltered total of a sheet (active sheet by default)."""
        sheet = self.store.get_sheet(sheet_id or self.store.active_id)
        return aggregate(sheet.rows).total if sheet is not None else 0.0

    def export(self, today: Optional[datetime.date] = None) -> Tuple[str, bytes]:
        """Return (file name, xlsx bytes) for all sheets, ignoring the filter."""
        today = today or self.today()
        data = export_workbook(self.store.sheets)
        file_name = export_file_name(today)
        logger.info("Exported %d sheet(s) to %s (%d bytes)", len(self.store.sheets), file_name, len(data))
        return file_name, data
