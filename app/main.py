import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from dataclasses import replace

import streamlit as st
import pandas as pd
import plotly.express as px

from budget_core.config import MAX_MEMBERS, configure_logging, ensure_data_directories
from budget_core.domain import MONTHS, Identity
from budget_core.errors import BudgetAppError
from budget_core.commitments import (
    add_group,
    add_item,
    remove_group,
    remove_item,
    rename_group,
    set_amount,
    set_paid_status,
    set_salary,
    toggle_group,
    update_item,
)
from budget_core.export import SUMMARY_KINDS, export_filename, ledger_csv, ledger_frame
from budget_core.lazy import top_commitments, unpaid_items
from budget_core.members import add_member, remove_member, rename_member
from budget_core.money import cents_to_decimal, format_money, to_cents
from budget_core.services import BudgetService
from budget_core.store import open_store
from budget_core.validation import (
    is_valid_amount,
    is_valid_budget_name,
    is_valid_commitment_name,
    is_valid_member_name,
    is_valid_month,
    is_valid_year,
    sanitize_string,
)

configure_logging()
ensure_data_directories()
logger = logging.getLogger("budget_app")

st.set_page_config(page_title="Household Budget", layout="wide")

if "service" not in st.session_state:
    st.session_state.service = BudgetService(open_store())
service: BudgetService = st.session_state.service

st.sidebar.markdown("### 👤 Profile")
email = st.sidebar.text_input("Email", value=st.session_state.get("email", ""))
display_name = st.sidebar.text_input("Name", value=st.session_state.get("display_name", ""))
st.session_state["email"] = email
st.session_state["display_name"] = display_name

if not email:
    st.title("💰 Household Budget")
    st.info("Enter your email in the sidebar to see your budgets.")
    st.stop()

identity = Identity(user_id=email.strip().lower(), email=email.strip().lower(), name=display_name or None)
st.sidebar.caption(f"Hello, {identity.display_name}!")

if "budget" not in st.session_state:
    st.session_state.budget = None


def current_budget():
    return st.session_state.budget


def commit(budget):
    st.session_state.budget = budget


def amount_input(label, cents, key):
    value = st.number_input(label, min_value=0.0, step=10.0, format="%.2f",
                            value=float(cents_to_decimal(cents)), key=key)
    if not is_valid_amount(value):
        st.warning("Amounts are capped at 999,999,999.99.")
    return to_cents(value)


menu = st.sidebar.radio("Menu", ["🏠 Dashboard", "📝 Edit Budget", "📊 Summary"])

if menu == "🏠 Dashboard":
    st.title("🏠 My Budgets")

    if st.button("➕ New Budget", key="btn_new_budget"):
        commit(service.new_budget(identity))
        st.success("New budget started. Open 📝 Edit Budget to fill it in.")

    try:
        budgets = service.list_for(identity)
    except BudgetAppError as e:
        logger.error("Listing budgets failed: %s", e)
        st.error(f"Failed to load budgets: {e.message}")
        budgets = []

    if not budgets:
        st.info("No budgets yet.")

    for b in budgets:
        with st.container(border=True):
            c1, c2, c3, c4 = st.columns([3, 3, 1, 1])
            with c1:
                st.subheader(b.name)
                st.caption(f"{b.month} {b.year} · {', '.join(b.members)}")
            with c2:
                for m in b.members:
                    st.write(f"**{m}**: balance {format_money(b.balance.get(m, 0))}")
            with c3:
                if st.button("Open", key=f"open_{b.id}"):
                    commit(b)
                    st.rerun()
            with c4:
                if st.button("🗑 Delete", key=f"delete_{b.id}"):
                    try:
                        service.delete(b.id)
                        if current_budget() is not None and current_budget().id == b.id:
                            commit(None)
                        st.success("Budget deleted.")
                        st.rerun()
                    except BudgetAppError as e:
                        st.error(f"Failed to delete budget: {e.message}")

elif menu == "📝 Edit Budget":
    budget = current_budget()
    if budget is None:
        st.info("Start a new budget or open one from the dashboard.")
        st.stop()

    st.title("📝 Edit Budget")

    col1, col2, col3 = st.columns([3, 2, 1])
    with col1:
        name = sanitize_string(st.text_input("Budget name", value=budget.name, key=f"name_{budget.id}"))
        if name and not is_valid_budget_name(name):
            st.warning("Budget names are at most 100 characters.")
        if name != budget.name:
            commit(replace(budget, name=name))
            budget = current_budget()
    with col2:
        month = st.selectbox("Month", MONTHS, index=MONTHS.index(budget.month) if budget.month in MONTHS else 0)
    with col3:
        year = st.number_input("Year", min_value=2000, max_value=2100, value=budget.year, step=1)
    if month != budget.month or year != budget.year:
        commit(replace(budget, month=month, year=int(year)))
        budget = current_budget()
    if not is_valid_month(budget.month) or not is_valid_year(int(budget.year)):
        st.warning("Pick a month and a year between this year and ten years ahead.")

    st.header("👥 Members & salaries")
    for idx, member in enumerate(budget.members):
        m1, m2, m3 = st.columns([3, 2, 1])
        with m1:
            new_name = sanitize_string(st.text_input(f"Member {idx + 1}", value=member, key=f"member_{budget.id}_{idx}"))
            if new_name and not is_valid_member_name(new_name):
                st.warning("Member names are 1-50 characters or an email address.")
            if new_name != member and new_name in budget.members:
                st.warning(f"'{new_name}' is already a member of this budget.")
            elif new_name != member:
                commit(rename_member(budget, idx, new_name))
                st.rerun()
        with m2:
            salary = amount_input("Salary", budget.salaries.get(member, 0), key=f"salary_{budget.id}_{idx}")
            if salary != budget.salaries.get(member, 0):
                commit(set_salary(budget, member, salary))
                st.rerun()
        with m3:
            if len(budget.members) > 1 and st.button("Remove", key=f"rm_member_{idx}"):
                commit(remove_member(budget, idx))
                st.rerun()
    if len(budget.members) < MAX_MEMBERS and st.button("➕ Add member", key="btn_add_member"):
        commit(add_member(budget))
        st.rerun()

    st.header("🧾 Commitments")
    for group in budget.commitments:
        with st.expander(group.name or "Unnamed group", expanded=group.is_expanded):
            g1, g2 = st.columns([4, 1])
            with g1:
                group_name = sanitize_string(st.text_input("Group name", value=group.name, key=f"group_{group.id}"))
                if group_name and not is_valid_commitment_name(group_name):
                    st.warning("Group names are at most 100 characters.")
                if group_name != group.name:
                    commit(rename_group(budget, group.id, group_name))
                    st.rerun()
            with g2:
                if st.button("🗑 Group", key=f"rm_{group.id}"):
                    commit(remove_group(budget, group.id))
                    st.rerun()
                if st.button("Collapse" if group.is_expanded else "Expand", key=f"toggle_{group.id}"):
                    commit(toggle_group(budget, group.id))
                    st.rerun()

            for item in group.items:
                cols = st.columns([3, 3] + [2] * len(budget.members) + [1])
                with cols[0]:
                    item_name = sanitize_string(st.text_input("Item", value=item.name, key=f"item_{item.id}"))
                with cols[1]:
                    remark = sanitize_string(st.text_input("Remark", value=item.remark, key=f"remark_{item.id}"))
                if item_name and not is_valid_commitment_name(item_name):
                    st.warning("Item names are at most 100 characters.")
                if item_name != item.name or remark != item.remark:
                    commit(update_item(budget, group.id, item.id, item_name, remark))
                    st.rerun()
                for offset, member in enumerate(budget.members):
                    with cols[2 + offset]:
                        cents = amount_input(member or f"Member {offset + 1}", item.amounts.get(member, 0),
                                             key=f"amt_{item.id}_{offset}")
                        if cents != item.amounts.get(member, 0):
                            commit(set_amount(budget, group.id, item.id, member, cents))
                            st.rerun()
                        paid = st.checkbox("Paid", value=item.paid_status.get(member, False),
                                           key=f"paid_{item.id}_{offset}")
                        if paid != item.paid_status.get(member, False):
                            commit(set_paid_status(budget, group.id, item.id, member, paid))
                            st.rerun()
                with cols[-1]:
                    if st.button("🗑", key=f"rm_{item.id}"):
                        commit(remove_item(budget, group.id, item.id))
                        st.rerun()

            if st.button("➕ Add item", key=f"add_item_{group.id}"):
                commit(add_item(budget, group.id))
                st.rerun()

    if st.button("➕ Add commitment group", key="btn_add_group"):
        commit(add_group(budget))
        st.rerun()

    st.divider()
    if st.button("💾 Save budget", type="primary", key="btn_save"):
        try:
            result = service.save(budget, identity)
        except BudgetAppError as e:
            logger.error("Saving budget %s failed: %s", budget.id, e)
            st.error(f"Failed to save budget: {e.message}")
        else:
            if result.is_left():
                for error in result.get_error():
                    st.error(error.message)
            else:
                commit(result.get_or_else(budget))
                alerts = service.alerts(current_budget())
                st.success("✅ Budget saved!")
                for alert in alerts:
                    st.warning(f"⚠️ {alert['alert']}")

elif menu == "📊 Summary":
    budget = current_budget()
    if budget is None:
        st.info("Open a budget from the dashboard first.")
        st.stop()

    report = service.summary(budget)
    totals = report["totals"]

    st.title(f"📊 {budget.name or 'Untitled'} · {budget.month} {budget.year}")
    for message in report["validation"]:
        st.caption(f"Not ready to save: {message}")

    cols = st.columns(max(1, len(budget.members)))
    for col, member in zip(cols, budget.members):
        with col:
            st.subheader(member or "Unnamed")
            st.metric("Salary", format_money(budget.salaries.get(member, 0)))
            st.metric("Total Commitments", format_money(totals.total_commitments[member]))
            st.metric("Balance", format_money(totals.balance[member]))
            st.caption(f"Paid {format_money(totals.paid_amounts[member])} · "
                       f"Unpaid {format_money(totals.unpaid_amounts[member])}")

    for alert in report["alerts"]:
        st.warning(f"⚠️ {alert['alert']}")

    if budget.members:
        df_chart = pd.DataFrame([
            {"Member": m, "Kind": kind, "Amount": float(cents_to_decimal(values[m]))}
            for m in budget.members
            for kind, values in (("Paid", totals.paid_amounts), ("Unpaid", totals.unpaid_amounts))
        ])
        fig = px.bar(df_chart, x="Member", y="Amount", color="Kind", barmode="stack",
                     title="Commitments by member", template="plotly_dark")
        st.plotly_chart(fig, use_container_width=True)

    top = list(top_commitments(budget, 5))
    if top:
        st.subheader("Largest commitments")
        st.table(pd.DataFrame([{"Item": n, "Amount": format_money(c)} for n, c in top]))

    for member in budget.members:
        outstanding = [f"{g.name} / {i.name}" for g, i in unpaid_items(budget, member)]
        if outstanding:
            st.write(f"**Outstanding for {member}:** " + ", ".join(outstanding))

    st.subheader("Ledger")
    kind = st.selectbox("Summary rows", SUMMARY_KINDS, index=0)
    st.dataframe(ledger_frame(budget, totals, kind), use_container_width=True, hide_index=True)
    st.download_button("⬇ Download CSV", ledger_csv(budget, totals, kind), file_name=export_filename(budget))
