"""
dashboard.py - Streamlit UI entrypoint and orchestration

This module wires the UI components (src.ui.components) with the application
state (src.tracker). main() builds the page top to bottom: sheets, rename
dialog, filter, rows, totals, chart and export.

Design notes:
 - Keep the dashboard responsible only for UI orchestration and presentation.
 - All state and rules live in src.tracker; the tracker is kept in
   st.session_state so it survives reruns of the same browser session.
"""

import streamlit as st

from src.tracker import ExpenseTracker
from src.ui import components

SESSION_KEY = "expense_tracker"


def get_tracker() -> ExpenseTracker:
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = ExpenseTracker()
    return st.session_state[SESSION_KEY]


def main():
    """Streamlit page for the expense sheets."""
    st.title("Expense Sheets")
    st.caption("Simple expense tracking across named sheets")
    tracker = get_tracker()

    components.display_sheet_bar(tracker)
    components.display_rename_dialog(tracker)
    st.markdown("---")

    components.display_filter_controls(tracker)
    components.display_rows_editor(tracker)
    st.markdown("---")

    rows = tracker.visible_rows()
    components.display_summary(tracker, tracker.summary())
    components.display_daily_chart(rows)
    components.display_export(tracker)


if __name__ == "__main__":
    main()
