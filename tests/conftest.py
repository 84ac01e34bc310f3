"""
Pytest configuration: repo root on sys.path plus shared fixtures.

The modules live flat at the repository root (`store.py`, `utils.py`, ...),
so tests import them directly:
    from store import BusinessStore
"""

import os
import sys
from datetime import date

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from models import BusinessPayload  # noqa: E402
from store import BusinessStore  # noqa: E402


@pytest.fixture
def store():
    return BusinessStore()


@pytest.fixture
def make_payload():
    def _make(**overrides):
        fields = dict(
            name="Acme",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
            amount_paid=120.0,
            subscription_type="Annual",
            phone="5551234567",
            category="Trade",
        )
        fields.update(overrides)
        return BusinessPayload(**fields)

    return _make


@pytest.fixture
def valid_form():
    return {
        "name": "  Acme  ",
        "start_date": "2025-05-01",
        "end_date": "2025-06-01",
        "amount_paid": "49.90",
        "subscription_type": "Monthly",
        "phone": " 5551234567 ",
        "times_subscribed": "1",
        "category": "Services",
    }
