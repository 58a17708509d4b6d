import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import time

import pandas as pd
import plotly.express as px
import streamlit as st

from spendwise.aggregates import current_month, month_options
from spendwise.config import settings
from spendwise.domain import (
    EXPENSE,
    EXPENSE_CATEGORIES,
    INCOME,
    INCOME_CATEGORIES,
    InsightKind,
    InsightSeverity,
)
from spendwise.formatting import format_currency, format_date, format_month_long
from spendwise.functional import (
    find_budget_by_id,
    find_transaction,
    validate_budget_form,
    validate_transaction_form,
)
from spendwise.observability import setup_logging
from spendwise.services import DashboardService, Ledger
from spendwise.storage import LocalStore

INSIGHT_ICONS = {
    InsightKind.BUDGET_ALERT: "⚠️",
    InsightKind.TOP_CATEGORY: "📈",
    InsightKind.HIGH_SAVINGS: "🐷",
    InsightKind.LOW_SAVINGS: "🎯",
}

st.set_page_config(page_title="Personal Finance Dashboard", layout="wide", page_icon="💰")

if "ledger" not in st.session_state:
    setup_logging()
    st.session_state.ledger = Ledger(LocalStore(settings.data_dir)).load()
if "editing_tx" not in st.session_state:
    st.session_state.editing_tx = None
if "editing_budget" not in st.session_state:
    st.session_state.editing_budget = None
if "selected_month" not in st.session_state:
    st.session_state.selected_month = current_month()

ledger: Ledger = st.session_state.ledger


def show_errors(errors: dict) -> None:
    for field, message in errors.items():
        st.error(f"**{field.capitalize()}**: {message}")


def transaction_form() -> None:
    editing = st.session_state.editing_tx
    st.subheader("✏️ Edit Transaction" if editing else "➕ Add Transaction")

    tx_type = st.radio(
        "Type",
        [EXPENSE, INCOME],
        index=1 if editing and editing.type == INCOME else 0,
        horizontal=True,
        format_func=str.capitalize,
    )
    categories = list(EXPENSE_CATEGORIES if tx_type == EXPENSE else INCOME_CATEGORIES)

    with st.form("transaction_form", clear_on_submit=editing is None):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.number_input(
                "Amount ($)", min_value=0.0, step=1.0, format="%.2f",
                value=float(editing.amount) if editing else 0.0,
            )
            tx_date = st.date_input(
                "Date", value=pd.to_datetime(editing.date).date() if editing else pd.Timestamp.today().date()
            )
        with col2:
            category = st.selectbox(
                "Category",
                [""] + categories,
                index=categories.index(editing.category) + 1 if editing and editing.category in categories else 0,
            )
        description = st.text_area("Description", value=editing.description if editing else "")
        submitted = st.form_submit_button("Update Transaction" if editing else "Add Transaction")
        cancelled = st.form_submit_button("Cancel") if editing else False

    if cancelled:
        st.session_state.editing_tx = None
        st.rerun()

    if submitted:
        form = {
            "amount": amount,
            "date": tx_date,
            "description": description,
            "type": tx_type,
            "category": category,
        }
        result = validate_transaction_form(form, existing=editing)
        if result.is_left():
            show_errors(result.get_error())
            return

        with st.spinner("Saving..."):
            time.sleep(settings.submit_delay_seconds)
            if editing:
                ledger.edit_transaction(result.get_or_else(None))
                st.session_state.editing_tx = None
            else:
                ledger.add_transaction(result.get_or_else(None))
        st.rerun()


def budget_form() -> None:
    editing = st.session_state.editing_budget
    st.subheader("✏️ Edit Budget" if editing else "🎯 Set Budget")

    options = month_options()
    values = [v for v, _ in options]
    labels = dict(options)
    default_month = editing.month if editing else st.session_state.selected_month
    if default_month not in values:
        values.append(default_month)
        labels[default_month] = format_month_long(default_month)

    categories = list(EXPENSE_CATEGORIES)
    with st.form("budget_form", clear_on_submit=editing is None):
        col1, col2, col3 = st.columns(3)
        with col1:
            category = st.selectbox(
                "Category",
                [""] + categories,
                index=categories.index(editing.category) + 1 if editing and editing.category in categories else 0,
            )
        with col2:
            amount = st.number_input(
                "Budget Amount ($)", min_value=0.0, step=10.0, format="%.2f",
                value=float(editing.amount) if editing else 0.0,
            )
        with col3:
            month = st.selectbox(
                "Month", values, index=values.index(default_month), format_func=lambda v: labels[v]
            )
        submitted = st.form_submit_button("Update Budget" if editing else "Set Budget")
        cancelled = st.form_submit_button("Cancel") if editing else False

    if cancelled:
        st.session_state.editing_budget = None
        st.rerun()

    if submitted:
        taken = [b.category for b in ledger.budgets if b.month == month]
        result = validate_budget_form(
            {"category": category, "amount": amount, "month": month},
            existing_categories=taken,
            existing=editing,
        )
        if result.is_left():
            show_errors(result.get_error())
            return

        with st.spinner("Saving..."):
            time.sleep(settings.submit_delay_seconds)
            if editing:
                ledger.edit_budget(result.get_or_else(None))
                st.session_state.editing_budget = None
            else:
                ledger.add_budget(result.get_or_else(None))
        st.rerun()


dashboard = DashboardService().build(
    ledger.transactions, ledger.budgets, st.session_state.selected_month
)

st.title("💰 Personal Finance Dashboard")
st.caption("Track expenses, manage budgets, and gain insights into your spending")

k1, k2, k3, k4 = st.columns(4)
with k1:
    st.metric("Total Income", format_currency(dashboard["total_income"]))
with k2:
    st.metric("Total Expenses", format_currency(dashboard["total_expenses"]))
with k3:
    st.metric("Balance", format_currency(dashboard["balance"]))
with k4:
    st.metric("Transactions", dashboard["transaction_count"])

form_col, budget_col = st.columns(2)
with form_col:
    with st.expander("Transaction", expanded=st.session_state.editing_tx is not None):
        transaction_form()
with budget_col:
    with st.expander("Budget", expanded=st.session_state.editing_budget is not None):
        budget_form()

tab_overview, tab_transactions, tab_budgets, tab_insights = st.tabs(
    ["📊 Overview", "🧾 Transactions", "🎯 Budgets", "💡 Insights"]
)

with tab_overview:
    chart_left, chart_right = st.columns(2)
    with chart_left:
        monthly = dashboard["monthly"]
        if monthly:
            df_month = pd.DataFrame(
                [{"Month": m.month, "Amount": m.amount, "Transactions": m.count} for m in monthly]
            )
            fig = px.bar(
                df_month, x="Month", y="Amount", hover_data=["Transactions"],
                title="Monthly Expenses", template="plotly_white",
            )
            fig.update_traces(marker_color="#3B82F6")
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No expense data to chart yet.")
    with chart_right:
        categories = dashboard["categories"]
        if categories:
            df_cat = pd.DataFrame(
                [{"Category": c.category, "Amount": c.amount, "Transactions": c.count} for c in categories]
            )
            fig = px.pie(
                df_cat, values="Amount", names="Category", title="Expenses by Category",
                color="Category", color_discrete_map={c.category: c.color for c in categories},
            )
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No category data to chart yet.")

with tab_transactions:
    if ledger.transactions:
        ordered = sorted(ledger.transactions, key=lambda t: t.date, reverse=True)
        df_tx = pd.DataFrame([
            {
                "Date": format_date(t.date),
                "Description": t.description,
                "Category": t.category,
                "Type": t.type.capitalize(),
                "Amount": ("+" if t.type == INCOME else "-") + format_currency(t.amount),
            }
            for t in ordered
        ])
        st.dataframe(df_tx, use_container_width=True, hide_index=True)

        labels = {t.id: f"{format_date(t.date)} · {t.description} · {format_currency(t.amount)}" for t in ordered}
        selected = st.selectbox("Select transaction", list(labels), format_func=lambda i: labels[i])
        edit_col, delete_col = st.columns(2)
        with edit_col:
            if st.button("✏️ Edit", key="btn_edit_tx"):
                st.session_state.editing_tx = find_transaction(ledger.transactions, selected).get_or_else(None)
                st.rerun()
        with delete_col:
            if st.button("🗑 Delete", key="btn_delete_tx"):
                ledger.delete_transaction(selected)
                st.rerun()
    else:
        st.info("No transactions yet.")

with tab_budgets:
    head_left, head_right = st.columns([3, 1])
    with head_left:
        st.header("Budget Management")
    with head_right:
        options = month_options()
        month_values = [v for v, _ in options]
        month_labels = dict(options)
        st.selectbox(
            "Month", month_values, key="selected_month", format_func=lambda v: month_labels.get(v, v)
        )

    comparisons = dashboard["comparisons"]
    if comparisons:
        df_cmp = pd.DataFrame([
            {"Category": c.category, "Kind": kind, "Amount": value}
            for c in comparisons
            for kind, value in (("Budget", c.budgeted), ("Spent", c.actual))
        ])
        fig = px.bar(
            df_cmp, x="Category", y="Amount", color="Kind", barmode="group",
            title=f"Budget vs Actual · {format_month_long(dashboard['month'])}", template="plotly_white",
        )
        st.plotly_chart(fig, use_container_width=True)

        cols = st.columns(3)
        for idx, c in enumerate(comparisons):
            with cols[idx % 3]:
                st.markdown(f"**{c.category}**")
                st.caption(f"Budget: {format_currency(c.budgeted)} · Spent: {format_currency(c.actual)}")
                st.progress(min(100.0, c.percentage) / 100)
                if c.remaining < 0:
                    st.caption(f"🔴 Over by {format_currency(-c.remaining)}")
                else:
                    st.caption(f"{format_currency(c.remaining)} remaining")
                if st.button("⚙️ Edit", key=f"btn_edit_budget_{c.budget_id}"):
                    found = find_budget_by_id(ledger.budgets, c.budget_id)
                    st.session_state.editing_budget = found.get_or_else(None)
                    st.rerun()
                if st.button("🗑 Delete", key=f"btn_delete_budget_{c.budget_id}"):
                    ledger.delete_budget(c.budget_id)
                    st.rerun()
    else:
        st.info(f"No budgets set for {format_month_long(dashboard['month'])}.")

with tab_insights:
    insights = dashboard["insights"]
    if insights:
        for insight in insights:
            text = f"{INSIGHT_ICONS[insight.kind]} **{insight.title}**  \n{insight.description}"
            if insight.severity == InsightSeverity.WARNING:
                st.warning(text)
            elif insight.severity == InsightSeverity.SUCCESS:
                st.success(text)
            else:
                st.info(text)
    else:
        st.info("Add some transactions this month to see insights.")

if not ledger.transactions:
    st.divider()
    st.subheader("👋 Welcome to Your Finance Dashboard!")
    st.write("Start by adding your first transaction to begin tracking your financial journey.")
