"""
models.py
Domain constants and dataclasses (business records, subscription enums).
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date

SUBSCRIPTION_TYPES = ("Annual", "Monthly")

CATEGORIES = (
    "Trade",
    "Services",
    "Entertainment",
    "Lodging",
    "Tourism",
)


@dataclass(frozen=True)
class BusinessPayload:
    """Validated registration data, before the store assigns id and count."""

    name: str
    start_date: date
    end_date: date
    amount_paid: float
    subscription_type: str  # one of SUBSCRIPTION_TYPES
    phone: str
    category: str  # one of CATEGORIES


@dataclass(frozen=True)
class Business:
    id: str
    name: str
    start_date: date
    end_date: date
    amount_paid: float
    subscription_type: str
    phone: str
    subscription_count: int  # 1 + prior records with the same name, frozen at insert
    category: str
