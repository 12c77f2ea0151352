# price_comparator/services/alert_registry.py

"""Thread-safe in-memory registry of price-target alerts."""

import logging
import threading
import uuid
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal

from price_comparator.config.settings import Settings
from price_comparator.errors import InvalidArgument, NotFound
from price_comparator.models.alert import Alert
from price_comparator.pricing.price_resolver import PriceResolver
from price_comparator.storage.record_store import RecordStore

logger = logging.getLogger("price_comparator.alerts")


class AlertRegistry:
    """Owns the alerts of one process and serialises every access.

    An alert leaves the active state exactly once, either by triggering
    in :meth:`check_all` / :meth:`check_for_product` or through
    :meth:`deactivate`.  A single lock guards the whole collection, so
    two concurrent checks never report the same alert.
    """

    def __init__(
        self,
        records: RecordStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._records = records
        self._clock = clock
        self._alerts: list[Alert] = []
        self._lock = threading.Lock()

    def create(
        self,
        product_id: str,
        store_id: int,
        target_price: Decimal,
    ) -> Alert:
        """Register a new active alert for a product at a store."""
        if self._records.get_product(product_id) is None:
            msg = f"Product not found with id: {product_id}"
            raise NotFound(msg)
        if self._records.get_store(store_id) is None:
            msg = f"Store not found with id: {store_id}"
            raise NotFound(msg)
        if target_price is None or target_price < 0:
            msg = f"Target price must be non-negative, got {target_price}"
            raise InvalidArgument(msg)

        alert = Alert(
            id=str(uuid.uuid4()),
            product_id=product_id,
            store_id=store_id,
            target_price=target_price,
            active=True,
            created_at=self._clock(),
        )
        with self._lock:
            self._alerts.append(alert)
        logger.info(
            "Created alert %s: product %s at store %s <= %s",
            alert.id,
            product_id,
            store_id,
            target_price,
        )
        return alert

    def get(self, alert_id: str) -> Alert | None:
        """Alert by id, active or not."""
        with self._lock:
            for alert in self._alerts:
                if alert.id == alert_id:
                    return alert
        return None

    def active_alerts(self) -> list[Alert]:
        """Alerts that have neither triggered nor been deactivated."""
        with self._lock:
            return [a for a in self._alerts if a.active]

    def deactivate(self, alert_id: str) -> None:
        """Deactivate an alert; unknown or inactive ids are ignored."""
        with self._lock:
            for alert in self._alerts:
                if alert.id == alert_id:
                    if alert.active:
                        alert.active = False
                        logger.info("Deactivated alert %s", alert_id)
                    return
        logger.debug("Deactivate ignored for unknown alert %s", alert_id)

    def check_all(self, on: date | None = None) -> list[Alert]:
        """Trigger every active alert whose price reached its target."""
        return self._check(lambda _alert: True, on)

    def check_for_product(
        self, product_id: str, on: date | None = None,
    ) -> list[Alert]:
        """Trigger the active alerts of one product."""
        return self._check(lambda alert: alert.product_id == product_id, on)

    def _check(
        self,
        wanted: Callable[[Alert], bool],
        on: date | None,
    ) -> list[Alert]:
        """Evaluate, trigger and deactivate matching alerts atomically."""
        day = on or Settings.reference_date()
        triggered: list[Alert] = []
        with self._lock:
            resolver = PriceResolver(self._records.prices())
            for alert in self._alerts:
                if not alert.active or not wanted(alert):
                    continue
                price = resolver.current_price(
                    alert.product_id, alert.store_id, day,
                )
                if price is None or price > alert.target_price:
                    continue
                alert.active = False
                triggered.append(alert)

        for alert in triggered:
            logger.info(
                "Alert %s triggered: product %s at store %s reached %s",
                alert.id,
                alert.product_id,
                alert.store_id,
                alert.target_price,
            )
        return triggered
