"""
app.py
Streamlit Business Subscription Registry (session-local, no persistence).
Run: streamlit run app.py
"""

from __future__ import annotations

from datetime import datetime
import streamlit as st

import settings
import utils
from log_setup import configure_logging
from models import CATEGORIES, SUBSCRIPTION_TYPES
from registration import RegistrationFlow
from store import BusinessStore

st.set_page_config(page_title=settings.APP_TITLE, layout="wide")

PAGES = ["Dashboard", "Register", "Businesses", "Details", "Reports"]

FIELD_LABELS = {
    "name": "Business name",
    "category": "Category",
    "subscription_type": "Subscription type",
    "phone": "Phone number",
    "times_subscribed": "Times subscribed",
    "start_date": "Subscription start date",
    "end_date": "Subscription end date",
    "amount_paid": "Amount paid",
}


def init_once():
    configure_logging(settings.LOG_DIR, debug=settings.DEBUG)


def init_session():
    # One store + flow per browser session, handed to the pages explicitly
    if "store" not in st.session_state:
        store = BusinessStore()
        flow = RegistrationFlow(store)
        store.subscribe(lambda b: st.session_state.update(last_added_id=b.id))
        flow.on_complete(
            lambda b: st.session_state.update(
                flash=f"Business **{b.name}** registered (subscription #{b.subscription_count}).",
                selected_business_id=b.id,
                page="Businesses",
                registration_errors={},
            )
        )
        st.session_state.store = store
        st.session_state.flow = flow
    if "page" not in st.session_state:
        st.session_state.page = "Dashboard"
    if "registration_errors" not in st.session_state:
        st.session_state.registration_errors = {}


# ---------- Formatting helpers (view only) ----------

def fmt_money(amount: float) -> str:
    return f"{settings.CURRENCY_SYMBOL}{amount:,.2f}"


def fmt_date(d) -> str:
    return d.strftime("%A, %d %B %Y")


def fmt_phone(phone: str) -> str:
    digits = phone.strip()
    if len(digits) == 10 and digits.isdigit():
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    return phone


def show_flash():
    msg = st.session_state.pop("flash", None)
    if msg:
        st.success(msg)


# ---------- Pages ----------

def dashboard_page(store: BusinessStore):
    st.header("📊 Dashboard")

    now = datetime.now()
    stats = utils.aggregate_stats(store.list(), now)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Registered businesses", stats.total)
    c2.metric("Currently active", stats.active)
    c3.metric("Total revenue", fmt_money(stats.total_amount))
    c4.metric("Average payment", fmt_money(stats.average_amount))

    st.divider()

    st.subheader(f"Expiring soon (next {settings.EXPIRING_SOON_DAYS} days)")
    rows = utils.expiring_soon(store.list(), now)
    if rows:
        df = utils.businesses_to_dataframe(rows, now)
        st.dataframe(df[["name", "phone", "end_date", "days_remaining"]], use_container_width=True, hide_index=True)
    else:
        st.caption("No subscriptions expiring soon.")


def register_page(flow: RegistrationFlow):
    st.header("➕ Register Business")

    errors = st.session_state.registration_errors
    gen = flow.generation

    def track(name: str, value):
        # an edited field drops its error; either date also drops the range error
        if name in flow.buffer and flow.buffer[name] != value:
            errors.pop(name, None)
            if name in ("start_date", "end_date"):
                errors.pop("date_range", None)
        flow.update(name, value)
        if name in errors:
            st.error(errors[name])

    col1, col2 = st.columns(2)
    with col1:
        track("name", st.text_input(FIELD_LABELS["name"], key=f"name_{gen}"))
        track("category", st.selectbox(
            FIELD_LABELS["category"], options=list(CATEGORIES), index=None,
            placeholder="Select a category", key=f"category_{gen}",
        ))
        track("phone", st.text_input(FIELD_LABELS["phone"], key=f"phone_{gen}"))
        track("start_date", st.date_input(FIELD_LABELS["start_date"], value=None, key=f"start_date_{gen}"))

    with col2:
        track("amount_paid", st.text_input(FIELD_LABELS["amount_paid"], placeholder="0.00", key=f"amount_paid_{gen}"))
        track("subscription_type", st.selectbox(
            FIELD_LABELS["subscription_type"], options=list(SUBSCRIPTION_TYPES), index=None,
            placeholder="Select a type", key=f"subscription_type_{gen}",
        ))
        track("times_subscribed", st.text_input(
            FIELD_LABELS["times_subscribed"], placeholder="1", key=f"times_subscribed_{gen}",
        ))
        track("end_date", st.date_input(FIELD_LABELS["end_date"], value=None, key=f"end_date_{gen}"))

    if "date_range" in errors:
        st.error(errors["date_range"])

    if st.button("Register business", type="primary"):
        result = flow.submit()
        if not result.ok:
            st.session_state.registration_errors = result.errors
        # on success the flow's completion callback switches to the list
        st.rerun()


@st.fragment(run_every=settings.STATUS_REFRESH_SECONDS)
def business_table(store: BusinessStore):
    now = datetime.now()
    df = utils.businesses_to_dataframe(store.list(), now)
    df["phone"] = df["phone"].map(fmt_phone)
    st.dataframe(df.drop(columns=["id"]), use_container_width=True, hide_index=True)
    st.caption(f"Status as of {now:%Y-%m-%d %H:%M}")


def businesses_page(store: BusinessStore):
    st.header("🏢 Businesses")
    show_flash()

    if len(store) == 0:
        st.info("No businesses registered yet.")
        if st.button("Register the first business"):
            st.session_state.page = "Register"
            st.rerun()
        return

    st.caption(f"{len(store)} {'business' if len(store) == 1 else 'businesses'} registered")
    business_table(store)

    st.divider()

    options = {f"{b.name} ({b.start_date} → {b.end_date}) · {b.id[:8]}": b.id for b in store}
    labels = list(options.keys())
    current = st.session_state.get("selected_business_id") or st.session_state.get("last_added_id")
    index = list(options.values()).index(current) if current in options.values() else 0
    chosen = st.selectbox("Select business", labels, index=index)
    if st.button("View details"):
        st.session_state.selected_business_id = options[chosen]
        st.session_state.page = "Details"
        st.rerun()


def details_page(store: BusinessStore):
    business_id = st.session_state.get("selected_business_id")
    b = store.get_by_id(business_id) if business_id else None

    if b is None:
        st.header("Business not found")
        st.warning("The selected business does not exist in this session.")
        if st.button("Back to list"):
            st.session_state.page = "Businesses"
            st.rerun()
        return

    now = datetime.now()
    st.header(f"🏢 {b.name}")
    st.caption(f"{b.category} · {fmt_phone(b.phone)}")

    label = utils.status_label(b, now)
    active = utils.is_active(b, now)
    st.subheader("Subscription status")
    if active:
        st.success(f"Active · {label}")
    else:
        st.error(f"Inactive · {label}")

    c1, c2, c3 = st.columns(3)
    c1.metric("Subscription type", b.subscription_type)
    c2.metric("Amount paid", fmt_money(b.amount_paid))
    c3.metric("Times subscribed", utils.plural(b.subscription_count, "time", "times"))

    st.subheader("Subscription dates")
    d1, d2, d3 = st.columns(3)
    d1.write(f"**Start:** {fmt_date(b.start_date)}")
    d2.write(f"**End:** {fmt_date(b.end_date)}")
    d3.write(f"**Duration:** {utils.duration(b)}")

    days = utils.days_remaining(b, now)
    st.write(f"{utils.plural(days, 'day', 'days')} remaining" if days > 0 else "Expired")

    if st.button("Back to list"):
        st.session_state.page = "Businesses"
        st.rerun()


def reports_page(store: BusinessStore):
    st.header("🧾 Reports")

    now = datetime.now()

    st.subheader("Export businesses to CSV")
    if len(store):
        st.download_button(
            "Download businesses.csv",
            data=utils.businesses_to_csv_bytes(store.list(), now),
            file_name="businesses.csv",
            mime="text/csv",
        )
    else:
        st.caption("No businesses to export.")

    st.divider()

    st.subheader("Revenue by category")
    df = utils.revenue_by_category(store.list())
    if df.empty:
        st.caption("No revenue yet.")
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)

    st.divider()

    st.subheader("Sample data")
    st.caption("Insert 3 sample businesses for testing (adds new records each run).")
    if st.button("Insert sample data"):
        utils.insert_sample_data(store)
        st.success("Sample data inserted.")
        st.rerun()


def main_app():
    st.sidebar.title("🏢 " + settings.APP_TITLE)
    st.sidebar.caption("Session-only data: closing the tab clears it.")

    st.session_state.page = st.sidebar.radio("Navigate", PAGES, index=PAGES.index(st.session_state.page))
    if st.session_state.page != "Register":
        st.session_state.registration_errors = {}

    store = st.session_state.store
    flow = st.session_state.flow

    if st.session_state.page == "Dashboard":
        dashboard_page(store)
    elif st.session_state.page == "Register":
        register_page(flow)
    elif st.session_state.page == "Businesses":
        businesses_page(store)
    elif st.session_state.page == "Details":
        details_page(store)
    elif st.session_state.page == "Reports":
        reports_page(store)


# --------- App entry ---------

def run():
    init_once()
    init_session()
    main_app()


if __name__ == "__main__":
    run()
