"""
models.py - Data model definitions

This file defines the immutable value types shared by the store, the filters,
the export and the UI. Every type is a frozen dataclass: changing a row or a
sheet means building a new one with dataclasses.replace, so a snapshot handed
to the UI can never change underneath it.
"""

import datetime
import enum
import math
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

# fields of ExpenseRow that the UI may edit (id is fixed for the row lifetime)
EDITABLE_FIELDS = ("date", "amount", "reason")


def new_id() -> str:
    return uuid.uuid4().hex


def coerce_amount(value: Any) -> float:
    """
    Convert user input to a float amount.

    Anything that is not a finite number (None, "", "abc", NaN, inf) becomes 0.0
    instead of being rejected.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(str(value).strip().replace(",", ".")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


def coerce_date(value: Union[datetime.date, str, None]) -> str:
    """Return an ISO "YYYY-MM-DD" string for a date object or pass a string through."""
    if value is None:
        return ""
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value).strip()


@dataclass(frozen=True)
class ExpenseRow:
    """
    A single dated expense entry.

    Fields:
      - id: unique string, generated once
      - date: ISO date string "YYYY-MM-DD" (no time component)
      - amount: numeric amount, zero and negative values allowed
      - reason: free text
    """
    id: str = field(default_factory=new_id)
    date: str = ""
    amount: float = 0.0
    reason: str = ""

    @staticmethod
    def new(today: datetime.date) -> "ExpenseRow":
        """Default row: today's date, zero amount, empty reason."""
        return ExpenseRow(id=new_id(), date=today.isoformat(), amount=0.0, reason="")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "date": self.date, "amount": self.amount, "reason": self.reason}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ExpenseRow":
        """
        Construct an ExpenseRow from a dict (inverse of to_dict).
        Missing keys get defaults and the amount is coerced.
        """
        return ExpenseRow(
            id=str(d.get("id") or new_id()),
            date=coerce_date(d.get("date", "")),
            amount=coerce_amount(d.get("amount", 0.0)),
            reason=str(d.get("reason", "") or ""),
        )


@dataclass(frozen=True)
class Sheet:
    """A named collection of expense rows. Always holds at least one row."""
    id: str
    name: str
    rows: Tuple[ExpenseRow, ...]

    @staticmethod
    def new(name: str, today: datetime.date) -> "Sheet":
        return Sheet(id=new_id(), name=name, rows=(ExpenseRow.new(today),))

    def find_row(self, row_id: str) -> Optional[ExpenseRow]:
        return next((r for r in self.rows if r.id == row_id), None)


class FilterPeriod(enum.Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return PERIOD_LABELS[self]


PERIOD_LABELS = {
    FilterPeriod.ALL: "All time",
    FilterPeriod.TODAY: "Today",
    FilterPeriod.WEEK: "Last 7 days",
    FilterPeriod.MONTH: "Last month",
    FilterPeriod.CUSTOM: "Custom range",
}


@dataclass(frozen=True)
class CustomRange:
    """Inclusive date bounds for the custom filter; an empty bound disables it."""
    start: str = ""
    end: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.start) and bool(self.end)


@dataclass(frozen=True)
class RenameClosed:
    pass


@dataclass(frozen=True)
class RenameOpen:
    sheet_id: str
    draft: str


RenameDialog = Union[RenameClosed, RenameOpen]
