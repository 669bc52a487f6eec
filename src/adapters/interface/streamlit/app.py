"""Streamlit dashboard entry point."""

from collections.abc import Sequence
from decimal import Decimal
import os

import streamlit as st
import altair as alt

from src.adapters.interface.streamlit.budget_flow import (
    build_budget_flow_model,
    build_plotly_figure,
)
from src.domain.models import Category, Event, Expense
from src.domain.services import compute_expense_paid_amount
from src.infrastructure.container import (
    build_category_service,
    build_event_service,
    build_expense_service,
)

_CURRENCY_SYMBOLS = {
    "USD": "$",
    "AUD": "A$",
    "PHP": "₱",
    "EUR": "€",
    "GBP": "£",
}


def _fetch_events(owner_id: str) -> Sequence[Event]:
    """Fetch the events of a workspace."""
    service = build_event_service()
    return service.fetch_events(owner_id)


@st.cache_data(show_spinner=False)
def _load_events(owner_id: str) -> Sequence[Event]:
    """Cached wrapper around _fetch_events for Streamlit sessions."""
    return _fetch_events(owner_id)


def _fetch_categories(owner_id: str, event_id: str) -> Sequence[Category]:
    """Fetch the categories of an event."""
    service = build_category_service()
    return service.fetch_categories(owner_id, event_id)


@st.cache_data(show_spinner=False)
def _load_categories(owner_id: str, event_id: str) -> Sequence[Category]:
    """Cached wrapper around _fetch_categories."""
    return _fetch_categories(owner_id, event_id)


def _fetch_expenses(owner_id: str, event_id: str) -> Sequence[Expense]:
    """Fetch the expenses of an event, newest first."""
    service = build_expense_service()
    return service.fetch_expenses(owner_id, event_id)


@st.cache_data(show_spinner=False)
def _load_expenses(owner_id: str, event_id: str) -> Sequence[Expense]:
    """Cached wrapper around _fetch_expenses."""
    return _fetch_expenses(owner_id, event_id)


def _check_altair_dependencies() -> tuple[bool, str | None]:
    """Check that the array libraries Altair serializes through are usable.

    Returns:
        tuple[bool, str | None]: Whether charts can render, and the reason
        when they cannot.
    """
    try:
        import numpy
        import pandas
    except ImportError as exc:
        return False, f"Chart dependencies are missing: {exc}"
    if not hasattr(numpy, "ndarray"):
        return False, "numpy is installed but incomplete (no ndarray)."
    if not hasattr(pandas, "Timestamp"):
        return False, "pandas is installed but incomplete (no Timestamp)."
    return True, None


def _format_currency(value: Decimal, currency_code: str) -> str:
    """Format currency values for display."""
    symbol = _CURRENCY_SYMBOLS.get(currency_code, currency_code)
    return f"{symbol}{value:,.2f}"


def _event_label(event: Event) -> str:
    """Return the sidebar label of an event."""
    if event.event_date is None:
        return event.name
    return f"{event.name} ({event.event_date:%Y-%m-%d})"


def _prepare_category_chart_data(
    categories: Sequence[Category],
    currency_code: str,
) -> list[dict[str, str | float]]:
    """Prepare long-form chart rows with one row per category and measure.

    Args:
        categories: Categories of the selected event.
        currency_code: Event currency used for the tooltip labels.

    Returns:
        Altair-ready rows with ``category``, ``measure`` and ``amount``.
    """
    data: list[dict[str, str | float]] = []
    for category in categories:
        for measure, amount in (
            ("Budgeted", category.budgeted_amount),
            ("Scheduled", category.scheduled_amount),
            ("Spent", category.spent_amount),
        ):
            data.append(
                {
                    "category": category.name,
                    "measure": measure,
                    "amount": float(amount),
                    "amount_label": _format_currency(amount, currency_code),
                }
            )
    return data


def _render_category_chart(
    categories: Sequence[Category],
    currency_code: str,
    title: str,
) -> None:
    """Render grouped bars of budgeted, scheduled and spent per category."""
    if not categories:
        st.info("No categories available for the chart.")
        return
    data = _prepare_category_chart_data(categories, currency_code)
    chart = alt.Chart(alt.Data(values=data)).mark_bar(
        cornerRadiusTopLeft=4,
        cornerRadiusTopRight=4,
    ).encode(
        x=alt.X("category:N", title=None),
        xOffset=alt.XOffset("measure:N"),
        y=alt.Y("amount:Q", title=None),
        color=alt.Color(
            "measure:N",
            scale=alt.Scale(
                domain=["Budgeted", "Scheduled", "Spent"],
                range=["#457b9d", "#f4a261", "#2e7d32"],
            ),
            legend=alt.Legend(orient="bottom", title=None),
        ),
        tooltip=[
            alt.Tooltip("category:N"),
            alt.Tooltip("measure:N"),
            alt.Tooltip("amount_label:N"),
        ],
    ).properties(
        height=360,
    ).configure_view(
        stroke=None
    )
    st.subheader(title)
    st.altair_chart(chart, width='stretch')


def _render_budget_flow(categories: Sequence[Category]) -> None:
    """Render the budget to paid/unpaid Sankey."""
    model = build_budget_flow_model(categories)
    if not model.links:
        return
    st.subheader("Budget flow")
    st.plotly_chart(build_plotly_figure(model), width="stretch")


def _render_expenses(expenses: Sequence[Expense], currency_code: str) -> None:
    """Render the expenses table."""
    st.subheader("Expenses")
    data = [
        {
            "Name": expense.name,
            "Category": expense.category.name,
            "Amount": _format_currency(expense.amount, currency_code),
            "Paid": _format_currency(
                compute_expense_paid_amount(expense), currency_code
            ),
            "Date": f"{expense.date:%Y-%m-%d}" if expense.date else "—",
            "Vendor": expense.vendor.name or "—",
        }
        for expense in expenses
    ]
    st.caption(f"{len(data)} expenses")
    st.dataframe(data, width="stretch", hide_index=True)


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Event Budget Tracker", layout="wide")
    st.title("Event Budget Tracker")

    owner_id = st.sidebar.text_input(
        "Workspace",
        value=os.getenv("OWNER_ID", ""),
    ).strip()
    if not owner_id:
        st.warning("Enter a workspace id to load its events.")
        return

    events = _load_events(owner_id)
    if not events:
        st.warning("No events found for this workspace.")
        return

    event_by_label = {_event_label(event): event for event in events}
    selected = st.sidebar.selectbox("Event", list(event_by_label))
    event = event_by_label[selected]
    totals = event.totals

    st.caption(
        f"{event.type.title()} · {event.currency} · "
        f"{totals.status.value.replace('-', ' ')}"
    )
    budgeted_col, scheduled_col, spent_col = st.columns(3)
    budgeted_col.metric(
        "Budgeted",
        _format_currency(totals.total_budgeted_amount, event.currency),
    )
    scheduled_col.metric(
        "Scheduled",
        _format_currency(totals.total_scheduled_amount, event.currency),
    )
    spent_col.metric(
        "Spent",
        _format_currency(totals.total_spent_amount, event.currency),
        f"{totals.spent_percentage}% of budget",
        delta_color="off",
    )

    categories = _load_categories(owner_id, event.id)
    charts_ok, charts_error = _check_altair_dependencies()
    if not charts_ok:
        st.error(charts_error)
    else:
        chart_col, flow_col = st.columns(2)
        with chart_col:
            _render_category_chart(
                categories,
                event.currency,
                f"Categories ({event.currency})",
            )
        with flow_col:
            _render_budget_flow(categories)
    expenses = _load_expenses(owner_id, event.id)
    _render_expenses(expenses, event.currency)


if __name__ == "__main__":  # pragma: no cover
    main()
