"""
registration.py
Registration form validation and the submit flow that commits to the store.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Mapping

from models import CATEGORIES, SUBSCRIPTION_TYPES, Business, BusinessPayload
from store import BusinessStore
from utils import parse_iso

logger = logging.getLogger(__name__)

FORM_FIELDS = (
    "name",
    "start_date",
    "end_date",
    "amount_paid",
    "subscription_type",
    "phone",
    "times_subscribed",
    "category",
)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_date(value: Any) -> date | None:
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = _text(value)
    if not raw:
        return None
    try:
        return parse_iso(raw)
    except ValueError:
        return None


def _parse_amount(value: Any) -> float | None:
    try:
        amount = float(_text(value))
    except ValueError:
        return None
    if not math.isfinite(amount):
        return None
    return amount


def _parse_count(value: Any) -> int | None:
    try:
        return int(_text(value))
    except ValueError:
        return None


def validate_business_inputs(raw: Mapping[str, Any]) -> dict[str, str]:
    """
    Check every form field and return {field: message} for each failure.
    All rules run; an empty dict means the input is valid.
    """
    errors: dict[str, str] = {}

    if not _text(raw.get("name")):
        errors["name"] = "Business name is required."

    start = _parse_date(raw.get("start_date"))
    end = _parse_date(raw.get("end_date"))
    if start is None:
        errors["start_date"] = "Start date is required (YYYY-MM-DD)."
    if end is None:
        errors["end_date"] = "End date is required (YYYY-MM-DD)."
    if start is not None and end is not None and end <= start:
        errors["date_range"] = "Start date must be before the end date."

    amount = _parse_amount(raw.get("amount_paid"))
    if amount is None or amount <= 0:
        errors["amount_paid"] = "Amount paid must be a positive number."

    if not _text(raw.get("phone")):
        errors["phone"] = "Phone number is required."

    times = _parse_count(raw.get("times_subscribed"))
    if times is None or times <= 0:
        errors["times_subscribed"] = "Times subscribed must be a positive whole number."

    if _text(raw.get("category")) not in CATEGORIES:
        errors["category"] = "Select a category."

    if _text(raw.get("subscription_type")) not in SUBSCRIPTION_TYPES:
        errors["subscription_type"] = "Select a subscription type."

    return errors


@dataclass
class RegistrationResult:
    business: Business | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.business is not None and not self.errors


class RegistrationFlow:
    """
    Holds the registration form buffer and commits valid submissions.

    `times_subscribed` is validated but never stored: the store derives
    `subscription_count` from earlier registrations with the same name.
    """

    def __init__(self, store: BusinessStore) -> None:
        self.store = store
        self.buffer: dict[str, Any] = {}
        self.generation = 0
        self._on_complete: list[Callable[[Business], None]] = []

    def on_complete(self, callback: Callable[[Business], None]) -> None:
        self._on_complete.append(callback)

    def update(self, field_name: str, value: Any) -> None:
        if field_name not in FORM_FIELDS:
            raise KeyError(f"Unknown form field: {field_name}")
        self.buffer[field_name] = value

    def reset(self) -> None:
        self.buffer = {}
        self.generation += 1

    def submit(self, raw: Mapping[str, Any] | None = None) -> RegistrationResult:
        data = self.buffer if raw is None else raw
        errors = validate_business_inputs(data)
        if errors:
            logger.info("Registration rejected: %s", ", ".join(sorted(errors)))
            return RegistrationResult(errors=errors)

        payload = BusinessPayload(
            name=_text(data["name"]),
            start_date=_parse_date(data["start_date"]),
            end_date=_parse_date(data["end_date"]),
            amount_paid=_parse_amount(data["amount_paid"]),
            subscription_type=_text(data["subscription_type"]),
            phone=_text(data["phone"]),
            category=_text(data["category"]),
        )
        business = self.store.add(payload)

        self.reset()
        for callback in list(self._on_complete):
            callback(business)
        return RegistrationResult(business=business)
