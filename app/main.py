"""
Streamlit Frontend for the Expense Ledger

A single page: an expense form, a table of expenses and the running total.

DESIGN PRINCIPLES:
1. The page holds no data of its own; ExpenseFormSession owns the ledger
2. Every invalid field is reported inline, all at once
3. Sorting and filtering only change what is shown, never what is stored

The session lives in st.session_state, so it lasts as long as the
browser tab and is discarded with it.
"""

import streamlit as st

from expense_ledger.audit import configure_logging
from expense_ledger.formatting import format_amount
from expense_ledger.models.expense import Rejected, SortKey
from expense_ledger.session import ExpenseFormSession, create_session


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="centered",
)

# Input widget keys -> draft fields
FIELD_KEYS = {
    "name": "expense_name",
    "amount": "expense_amount",
    "category": "expense_category",
    "date": "expense_date",
}

CATEGORY_PLACEHOLDER = ""


@st.cache_resource
def init_logging() -> None:
    """Configure logging once per server process."""
    configure_logging()


def get_session() -> ExpenseFormSession:
    """Get or create the form session for this browser tab."""
    if "expense_session" not in st.session_state:
        st.session_state.expense_session = create_session()
    return st.session_state.expense_session


def sync_field(session: ExpenseFormSession, field: str) -> None:
    """on_change callback: push a widget value into the draft."""
    session.set_field(field, st.session_state[FIELD_KEYS[field]])


def field_error(session: ExpenseFormSession, field: str, message: str) -> None:
    if session.is_field_invalid(field):
        st.caption(f"❌ {message}")


def render_form(session: ExpenseFormSession) -> None:
    """Render the expense form."""
    st.subheader("Add Expense")

    col1, col2 = st.columns(2)

    with col1:
        st.text_input(
            "Expense Name",
            placeholder="Expense Name",
            key=FIELD_KEYS["name"],
            on_change=sync_field,
            args=(session, "name"),
        )
        field_error(session, "name", "Please enter a name")

        st.text_input(
            "Amount",
            placeholder="Amount",
            key=FIELD_KEYS["amount"],
            on_change=sync_field,
            args=(session, "amount"),
        )
        field_error(session, "amount", "Please enter an amount greater than zero")

    with col2:
        st.selectbox(
            "Category",
            options=[CATEGORY_PLACEHOLDER] + [c.value for c in session.categories],
            format_func=lambda c: "Select category" if c == CATEGORY_PLACEHOLDER else c,
            key=FIELD_KEYS["category"],
            on_change=sync_field,
            args=(session, "category"),
        )
        field_error(session, "category", "Please choose a category")

        st.text_input(
            "Date",
            placeholder="Date",
            help="YYYY-MM-DD",
            key=FIELD_KEYS["date"],
            on_change=sync_field,
            args=(session, "date"),
        )
        field_error(session, "date", "Please enter a date (YYYY-MM-DD)")

    st.button("Add Expense", type="primary", on_click=submit_form, args=(session,))
    if st.session_state.get("form_rejected"):
        st.error("Please fix the highlighted fields.")


def submit_form(session: ExpenseFormSession) -> None:
    """
    on_click callback for "Add Expense".

    Runs before the next script run, which is the only point where
    widget values may be reset.
    """
    result = session.submit()
    st.session_state.form_rejected = isinstance(result, Rejected)
    if not st.session_state.form_rejected:
        st.session_state[FIELD_KEYS["name"]] = ""
        st.session_state[FIELD_KEYS["amount"]] = ""


def render_view_controls(session: ExpenseFormSession) -> None:
    """Sort and filter buttons."""
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        if st.button("Sort by Amount"):
            session.sort_by(SortKey.AMOUNT)
    with col2:
        if st.button("Sort by Date"):
            session.sort_by(SortKey.DATE)
    with col3:
        if st.button("Filter"):
            session.filter_by_category()
    with col4:
        if st.button("Show All"):
            session.clear_filter()
            session.clear_sort()


def render_table(session: ExpenseFormSession) -> None:
    """Render the expense table with a delete button per row."""
    rows = session.rows()

    if session.active_filter is not None:
        st.caption(f"Showing category: {session.active_filter or 'none selected'}")

    if not rows:
        st.info("No expenses to show.")
        return

    header = st.columns([3, 2, 2, 2, 1])
    for col, title in zip(header, ["Name", "Amount", "Category", "Date", ""]):
        col.markdown(f"**{title}**")

    for record in rows:
        cols = st.columns([3, 2, 2, 2, 1])
        cols[0].write(record.name)
        cols[1].write(record.display_amount)
        cols[2].write(record.category.value)
        cols[3].write(record.date.isoformat())
        if cols[4].button("Delete", key=f"delete_{record.id}"):
            session.delete(record.id)
            st.rerun()


def render_summary(session: ExpenseFormSession) -> None:
    st.markdown(f"### {session.total_label()}")

    by_category = session.totals_by_category()
    if by_category:
        with st.expander("Totals by category"):
            for category, amount in by_category.items():
                st.markdown(f"- **{category.value}:** {format_amount(amount)}")


def main():
    """Main application entry point."""
    init_logging()
    session = get_session()

    st.title("💰 Expense Tracker")

    render_form(session)
    st.markdown("---")
    render_view_controls(session)
    render_table(session)
    st.markdown("---")
    render_summary(session)


if __name__ == "__main__":
    main()
