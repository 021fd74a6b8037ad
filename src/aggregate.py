"""
aggregate.py - totals over a set of rows and display formatting
"""

from dataclasses import dataclass
from typing import Iterable

import pandas as pd

from src.config import CURRENCY_SYMBOL
from src.models import ExpenseRow, coerce_amount


@dataclass(frozen=True)
class Summary:
    total: float
    count: int
    average: float


def aggregate(rows: Iterable[ExpenseRow]) -> Summary:
    """
    Sum, count and average of the given rows.
    The average of zero rows is 0.0.
    """
    amounts = [coerce_amount(r.amount) for r in rows]
    total = sum(amounts)
    count = len(amounts)
    average = total / count if count > 0 else 0.0
    return Summary(total=total, count=count, average=average)


def daily_totals(rows: Iterable[ExpenseRow]) -> pd.DataFrame:
    """Per-day sums sorted by date; rows without a valid date are left out."""
    records = [{"date": r.date, "amount": coerce_amount(r.amount)} for r in rows]
    df = pd.DataFrame(records, columns=["date", "amount"])
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    df = df.dropna(subset=["date"])
    if df.empty:
        return pd.DataFrame({"date": pd.Series(dtype="datetime64[ns]"), "amount": pd.Series(dtype="float64")})
    return df.groupby("date", as_index=False)["amount"].sum().sort_values("date").reset_index(drop=True)


def format_amount(value: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """
    Format an amount the way the page shows it: space as thousands separator,
    comma as decimal mark, at most two decimals, e.g. "1 234,5 ₽".
    """
    text = f"{round(coerce_amount(value), 2):,.2f}".rstrip("0").rstrip(".")
    text = text.replace(",", " ").replace(".", ",")
    if text in ("-0", ""):
        text = "0"
    return f"{text} {symbol}".rstrip()
