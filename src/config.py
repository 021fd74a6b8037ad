"""
config.py - application settings and logging setup

Settings are read once from environment variables at import time. When the app
runs on Streamlit Cloud, app.py copies matching entries from st.secrets into
the environment before this module is imported.
"""

import logging
import os

# base name of the exported workbook, e.g. expenses_2024-06-15.xlsx
EXPORT_FILE_LABEL = (os.getenv("EXPENSES_EXPORT_LABEL") or "").strip() or "expenses"
CURRENCY_SYMBOL = (os.getenv("EXPENSES_CURRENCY_SYMBOL") or "").strip() or "₽"
LOG_LEVEL = (os.getenv("EXPENSES_LOG_LEVEL") or "").strip().upper() or "INFO"

DEFAULT_SHEET_NAME_TEMPLATE = "Sheet {n}"

EXPORT_COLUMNS = ["Date", "Amount", "Reason"]
TOTAL_LABEL = "TOTAL"
# character widths for the Date, Amount and Reason columns
EXPORT_COLUMN_WIDTHS = {"Date": 12, "Amount": 12, "Reason": 40}
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, attaching a stream handler on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    return logger
