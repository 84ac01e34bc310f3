"""
store.py
In-memory business store (one instance per session, passed to the pages).
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Iterator

from models import Business, BusinessPayload

logger = logging.getLogger(__name__)

Subscriber = Callable[[Business], None]


class BusinessStore:
    """
    Ordered collection of registered businesses.

    Records are append-only: there is no update or delete. Subscribers are
    called synchronously from `add`, so the new record is visible to every
    reader before `add` returns.
    """

    def __init__(self) -> None:
        self._businesses: list[Business] = []
        self._subscribers: list[Subscriber] = []

    def add(self, payload: BusinessPayload) -> Business:
        business = Business(
            id=str(uuid.uuid4()),
            name=payload.name,
            start_date=payload.start_date,
            end_date=payload.end_date,
            amount_paid=payload.amount_paid,
            subscription_type=payload.subscription_type,
            phone=payload.phone,
            subscription_count=self.count_by_name(payload.name) + 1,
            category=payload.category,
        )
        self._businesses.append(business)
        logger.info(
            "Registered business %s (%r, subscription #%d)",
            business.id,
            business.name,
            business.subscription_count,
        )

        for callback in list(self._subscribers):
            callback(business)
        return business

    def get_by_id(self, business_id: str) -> Business | None:
        for b in self._businesses:
            if b.id == business_id:
                return b
        return None

    def count_by_name(self, name: str) -> int:
        return sum(1 for b in self._businesses if b.name == name)

    def list(self) -> list[Business]:
        return list(self._businesses)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register an observer called with each newly added business.
        Returns a function that removes the observer again.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def __len__(self) -> int:
        return len(self._businesses)

    def __iter__(self) -> Iterator[Business]:
        return iter(list(self._businesses))
