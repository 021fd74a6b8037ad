"""
components.py - reusable Streamlit components / forms / displays

This module contains the UI pieces used by the dashboard:
 - display_sheet_bar(tracker): sheet selector and add / rename / delete buttons
 - display_rename_dialog(tracker): rename form shown while the dialog is open
 - display_filter_controls(tracker): period select and custom date range
 - display_rows_editor(tracker): editable date / amount / reason rows
 - display_summary / display_daily_chart / display_export

Widgets call tracker methods from their on_change / on_click callbacks, so the
tracker always holds the edited values before the page is re-rendered.
"""

import datetime
from typing import Optional

import altair as alt
import streamlit as st

from src.aggregate import Summary, daily_totals, format_amount
from src.config import XLSX_MIME, get_logger
from src.filters import period_bounds
from src.models import CustomRange, FilterPeriod, RenameOpen
from src.tracker import ExpenseTracker

logger = get_logger(__name__)

# session state keys of widgets whose value outlives a single rerun
SHEET_KEY = "active_sheet"
PERIOD_KEY = "filter_period"
FROM_KEY = "filter_from"
TO_KEY = "filter_to"


# Trigger a Streamlit rerun in a way compatible with multiple Streamlit versions.
def _trigger_rerun():
    if hasattr(st, "rerun"):
        st.rerun()
    elif hasattr(st, "experimental_rerun"):
        st.experimental_rerun()


def _to_date(value: str) -> Optional[datetime.date]:
    try:
        return datetime.date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def display_sheet_bar(tracker: ExpenseTracker):
    """Sheet selector plus the sheet-level buttons."""
    store = tracker.store
    ids = store.sheet_ids
    names = {s.id: s.name for s in store.sheets}
    # sheet buttons change the active sheet outside the radio, so push it in before rendering
    if st.session_state.get(SHEET_KEY) != store.active_id:
        st.session_state[SHEET_KEY] = store.active_id
    st.radio(
        "Sheets",
        options=ids,
        format_func=lambda sheet_id: names.get(sheet_id, sheet_id),
        horizontal=True,
        key=SHEET_KEY,
        on_change=lambda: tracker.select_sheet(st.session_state[SHEET_KEY]),
    )

    col1, col2, col3 = st.columns(3)
    with col1:
        st.button("New sheet", on_click=tracker.add_sheet, width="stretch")
    with col2:
        st.button("Rename", on_click=tracker.open_rename, args=(store.active_id,), width="stretch")
    with col3:
        st.button(
            "Delete sheet",
            on_click=tracker.delete_sheet,
            args=(store.active_id,),
            disabled=len(ids) == 1,
            width="stretch",
        )


def display_rename_dialog(tracker: ExpenseTracker):
    """
    Rename form for the sheet targeted by the open dialog.
    Pressing Enter in the text field submits the form like the Save button.
    """
    dialog = tracker.rename_dialog
    if not isinstance(dialog, RenameOpen):
        return
    sheet = tracker.store.get_sheet(dialog.sheet_id)
    with st.form(key=f"rename_form_{dialog.sheet_id}"):
        # default stays the current name while the form is open; typed text lives under the key
        new_name = st.text_input(
            "Sheet name",
            value=sheet.name if sheet is not None else dialog.draft,
            key=f"rename_input_{dialog.sheet_id}",
        )
        col1, col2 = st.columns(2)
        with col1:
            save = st.form_submit_button("Save")
        with col2:
            cancel = st.form_submit_button("Cancel")

    if cancel:
        tracker.cancel_rename()
        _trigger_rerun()
    elif save:
        tracker.set_rename_draft(new_name)
        if tracker.confirm_rename():
            _trigger_rerun()
        else:
            st.error("Sheet name must not be empty.")


def _on_filter_change(tracker: ExpenseTracker):
    period = st.session_state.get(PERIOD_KEY, FilterPeriod.ALL)
    start = st.session_state.get(FROM_KEY)
    end = st.session_state.get(TO_KEY)
    custom_range = CustomRange(
        start=start.isoformat() if start else "",
        end=end.isoformat() if end else "",
    )
    tracker.set_period(period, custom_range)


def display_filter_controls(tracker: ExpenseTracker):
    """
    Period select and, for a custom period, the From / To dates.
    Widget defaults are fixed; the selection lives in session state under
    stable keys and reaches the tracker through on_change.
    """
    st.selectbox(
        "Period",
        options=list(FilterPeriod),
        index=0,
        format_func=lambda p: p.label,
        key=PERIOD_KEY,
        on_change=_on_filter_change,
        args=(tracker,),
    )
    if tracker.period != FilterPeriod.CUSTOM:
        return
    col1, col2 = st.columns(2)
    with col1:
        st.date_input("From", value=None, key=FROM_KEY, on_change=_on_filter_change, args=(tracker,))
    with col2:
        st.date_input("To", value=None, key=TO_KEY, on_change=_on_filter_change, args=(tracker,))
    if not tracker.custom_range.is_complete:
        st.caption("Pick both dates to filter; showing all rows.")


def _on_row_change(tracker: ExpenseTracker, row_id: str, field: str, key: str):
    tracker.update_row(row_id, field, st.session_state.get(key))


def display_rows_editor(tracker: ExpenseTracker):
    """
    Editable table of the rows visible under the current filter.
    The delete button is disabled while the sheet has a single row.
    """
    sheet = tracker.active_sheet
    rows = tracker.visible_rows()
    can_delete = len(sheet.rows) > 1

    header = st.columns([3, 2, 5, 1])
    header[0].markdown("**Date**")
    header[1].markdown("**Amount**")
    header[2].markdown("**Reason**")

    if not rows:
        st.info("No rows in the selected period.")
    for row in rows:
        date_key = f"date_{sheet.id}_{row.id}"
        amount_key = f"amount_{sheet.id}_{row.id}"
        reason_key = f"reason_{sheet.id}_{row.id}"
        cols = st.columns([3, 2, 5, 1])
        with cols[0]:
            st.date_input(
                "Date",
                value=_to_date(row.date),
                key=date_key,
                label_visibility="collapsed",
                on_change=_on_row_change,
                args=(tracker, row.id, "date", date_key),
            )
        with cols[1]:
            st.number_input(
                "Amount",
                value=float(row.amount),
                step=1.0,
                format="%.2f",
                key=amount_key,
                label_visibility="collapsed",
                on_change=_on_row_change,
                args=(tracker, row.id, "amount", amount_key),
            )
        with cols[2]:
            st.text_input(
                "Reason",
                value=row.reason,
                placeholder="Enter a reason...",
                key=reason_key,
                label_visibility="collapsed",
                on_change=_on_row_change,
                args=(tracker, row.id, "reason", reason_key),
            )
        with cols[3]:
            st.button(
                "🗑",
                key=f"delete_{sheet.id}_{row.id}",
                on_click=tracker.delete_row,
                args=(row.id,),
                disabled=not can_delete,
            )

    st.button("Add row", on_click=tracker.add_row)


def display_summary(tracker: ExpenseTracker, summary: Summary):
    """Totals of the visible rows and the unfiltered sheet total."""
    col1, col2, col3 = st.columns(3)
    col1.metric("Total", format_amount(summary.total))
    col2.metric("Rows", summary.count)
    col3.metric("Average", format_amount(summary.average))

    start, end = period_bounds(tracker.period, tracker.today(), tracker.custom_range)
    if start is not None:
        st.caption(f"{tracker.period.label}: {start} - {end}")
    st.markdown(f"**TOTAL (all rows): {format_amount(tracker.sheet_total())}**")


def display_daily_chart(rows):
    """Bar chart of spending per day for the visible rows."""
    df = daily_totals(rows)
    if df.empty or not df["amount"].any():
        return
    chart = alt.Chart(df).mark_bar().encode(
        x=alt.X("date:T", title="Date", axis=alt.Axis(format="%Y-%m-%d", labelAngle=-45)),
        y=alt.Y("amount:Q", title="Amount"),
        tooltip=[
            alt.Tooltip("date:T", title="Date", format="%Y-%m-%d"),
            alt.Tooltip("amount:Q", title="Amount", format=".2f"),
        ],
    ).properties(width="container", height=250)
    st.altair_chart(chart, width="stretch")


def display_export(tracker: ExpenseTracker):
    """Download button for the xlsx export of every sheet."""
    try:
        file_name, data = tracker.export()
    except Exception as exc:
        logger.exception("Failed to build the export workbook")
        st.error(f"Export failed: {exc}")
        return
    st.download_button(
        label="Export to Excel",
        data=data,
        file_name=file_name,
        mime=XLSX_MIME,
    )
