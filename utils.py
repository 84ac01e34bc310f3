"""
utils.py
Dates, derived subscription status, statistics, exports, sample data.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

import pandas as pd

import settings
from models import Business, BusinessPayload

EXPIRING_SOON_DAYS = settings.EXPIRING_SOON_DAYS

DATAFRAME_COLUMNS = [
    "id",
    "name",
    "category",
    "phone",
    "subscription_type",
    "start_date",
    "end_date",
    "amount_paid",
    "subscription_count",
    "days_remaining",
    "status",
]


def today() -> date:
    return date.today()


def parse_iso(d: str) -> date:
    return date.fromisoformat(d)


def _as_date(now: date | datetime) -> date:
    # datetime is a subclass of date, check it first
    if isinstance(now, datetime):
        return now.date()
    return now


def plural(n: int, one: str, many: str) -> str:
    return f"{n} {one if n == 1 else many}"


def is_active(b: Business, now: date | datetime) -> bool:
    """True when `now` falls within [start_date, end_date], both inclusive."""
    d = _as_date(now)
    return b.start_date <= d <= b.end_date


def days_remaining(b: Business, now: date | datetime) -> int:
    """
    Whole days until end_date; negative once expired.

    Equal to ceil((end_date at midnight - now) / 1 day) for any time of day.
    """
    return (b.end_date - _as_date(now)).days


def status_label(b: Business, now: date | datetime) -> str:
    days = days_remaining(b, now)
    if days > EXPIRING_SOON_DAYS:
        return "Active"
    if days > 0:
        return "Expiring soon"
    return "Expired"


def duration(b: Business) -> str:
    """
    Human-readable span between start and end date.
    Days under 30, months (of 30 days) under 365, otherwise years + months.
    """
    days = abs((b.end_date - b.start_date).days)
    if days < 30:
        return plural(days, "day", "days")
    if days < 365:
        return plural(days // 30, "month", "months")

    years = days // 365
    months = (days % 365) // 30
    text = plural(years, "year", "years")
    if months > 0:
        text += " and " + plural(months, "month", "months")
    return text


@dataclass(frozen=True)
class SubscriptionStats:
    total: int
    active: int
    total_amount: float
    average_amount: float


def aggregate_stats(businesses: Iterable[Business], now: date | datetime) -> SubscriptionStats:
    items = list(businesses)
    total_amount = sum(b.amount_paid for b in items)
    return SubscriptionStats(
        total=len(items),
        active=sum(1 for b in items if is_active(b, now)),
        total_amount=total_amount,
        average_amount=(total_amount / len(items)) if items else 0.0,
    )


def expiring_soon(
    businesses: Iterable[Business], now: date | datetime, days: int = EXPIRING_SOON_DAYS
) -> list[Business]:
    rows = [b for b in businesses if is_active(b, now) and 0 < days_remaining(b, now) <= days]
    return sorted(rows, key=lambda b: b.end_date)


def businesses_to_dataframe(businesses: Iterable[Business], now: date | datetime) -> pd.DataFrame:
    rows = [
        {
            "id": b.id,
            "name": b.name,
            "category": b.category,
            "phone": b.phone,
            "subscription_type": b.subscription_type,
            "start_date": b.start_date.isoformat(),
            "end_date": b.end_date.isoformat(),
            "amount_paid": b.amount_paid,
            "subscription_count": b.subscription_count,
            "days_remaining": days_remaining(b, now),
            "status": status_label(b, now),
        }
        for b in businesses
    ]
    if not rows:
        return pd.DataFrame(columns=DATAFRAME_COLUMNS)
    return pd.DataFrame(rows, columns=DATAFRAME_COLUMNS)


def businesses_to_csv_bytes(businesses: Iterable[Business], now: date | datetime) -> bytes:
    df = businesses_to_dataframe(businesses, now)
    return df.to_csv(index=False).encode("utf-8")


def revenue_by_category(businesses: Iterable[Business]) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"category": b.category, "amount_paid": b.amount_paid} for b in businesses],
        columns=["category", "amount_paid"],
    )
    if df.empty:
        return pd.DataFrame(columns=["category", "businesses", "revenue"])

    summary = (
        df.groupby("category")
        .agg(businesses=("amount_paid", "size"), revenue=("amount_paid", "sum"))
        .reset_index()
        .sort_values("revenue", ascending=False, kind="stable")
        .reset_index(drop=True)
    )
    return summary


def insert_sample_data(store, today_: date | None = None) -> list[Business]:
    """
    Insert 3 businesses through the store (adds new records each time).
    Two share a name so the subscription count is visible.
    """
    base = today_ or today()

    payloads = [
        # Active, long annual plan
        BusinessPayload(
            name="Sunrise Hotel",
            start_date=base - timedelta(days=60),
            end_date=base + timedelta(days=305),
            amount_paid=1200.0,
            subscription_type="Annual",
            phone="5551234567",
            category="Lodging",
        ),
        # Expiring soon
        BusinessPayload(
            name="Harbor Tours",
            start_date=base - timedelta(days=20),
            end_date=base + timedelta(days=10),
            amount_paid=95.0,
            subscription_type="Monthly",
            phone="5559876543",
            category="Tourism",
        ),
        # Expired earlier subscription under the same name
        BusinessPayload(
            name="Harbor Tours",
            start_date=base - timedelta(days=90),
            end_date=base - timedelta(days=60),
            amount_paid=90.0,
            subscription_type="Monthly",
            phone="5559876543",
            category="Tourism",
        ),
    ]
    return [store.add(p) for p in payloads]
