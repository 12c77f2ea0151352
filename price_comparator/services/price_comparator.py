# price_comparator/services/price_comparator.py

"""Entry point the calling layer uses to reach the pricing engine."""

import logging
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from price_comparator.config.settings import Settings
from price_comparator.errors import NotFound
from price_comparator.models.alert import Alert
from price_comparator.models.basket import StoreBasket
from price_comparator.models.discount import Discount
from price_comparator.models.price_history import (
    PriceHistoryFilter,
    ProductTimeline,
)
from price_comparator.models.product import Product, Unit
from price_comparator.models.recommendation import Recommendation
from price_comparator.pricing.discount_index import DiscountIndex
from price_comparator.services.alert_registry import AlertRegistry
from price_comparator.services.basket_optimizer import BasketOptimizer
from price_comparator.services.price_history_builder import (
    PriceHistoryBuilder,
)
from price_comparator.services.recommendation_engine import (
    RecommendationEngine,
)
from price_comparator.storage.record_store import RecordStore

logger = logging.getLogger("price_comparator.service")


class PriceComparator:
    """Wires the engine components around one record set.

    Requests without a date are evaluated on the configured reference
    date; the components themselves always receive an explicit date.
    """

    def __init__(
        self,
        records: RecordStore,
        alerts: AlertRegistry | None = None,
    ) -> None:
        self.records = records
        self.alerts = alerts or AlertRegistry(records)
        self._basket = BasketOptimizer(records)
        self._history = PriceHistoryBuilder(records)
        self._recommendations = RecommendationEngine(records)
        logger.debug("PriceComparator ready over %r", records)

    @staticmethod
    def _day(on: date | None) -> date:
        """Explicit date, or the configured reference date."""
        return on if on is not None else Settings.reference_date()

    # ── Catalogue ────────────────────────────────────────

    def get_product(self, product_id: str) -> Product:
        """Product by id; raises :class:`NotFound` if unknown."""
        product = self.records.get_product(product_id)
        if product is None:
            msg = f"Product not found with id: {product_id}"
            raise NotFound(msg)
        return product

    def list_products(self) -> list[Product]:
        """Every product, ordered by id."""
        return self.records.products()

    # ── Pricing ──────────────────────────────────────────

    def optimize_basket(
        self, product_ids: Sequence[str] | None, on: date | None = None,
    ) -> list[StoreBasket]:
        """Cheapest store per product, grouped into store baskets."""
        return self._basket.optimize(product_ids, self._day(on))

    def get_price_history(
        self, history_filter: PriceHistoryFilter,
    ) -> list[ProductTimeline] | None:
        """Per-store segment timelines, or ``None`` if nothing matched."""
        return self._history.build(history_filter)

    def get_cheaper_alternatives(
        self,
        product_id: str,
        on: date | None = None,
        target_unit: Unit | None = None,
    ) -> list[Recommendation]:
        """Same-category products cheaper per unit."""
        return self._recommendations.cheaper_alternatives(
            product_id, self._day(on), target_unit,
        )

    # ── Discounts ────────────────────────────────────────

    def get_all_discounts(self) -> list[Discount]:
        """Every known discount."""
        return self.records.discounts()

    def get_active_discounts(self, on: date | None = None) -> list[Discount]:
        """Discounts active on ``on``."""
        return DiscountIndex.active(self.records.discounts(), self._day(on))

    def get_best_discounts(self, on: date | None = None) -> list[Discount]:
        """Highest active discount per product, best first."""
        return DiscountIndex.best_per_product(
            self.records.discounts(), self._day(on),
        )

    def get_new_discounts(
        self, on: date | None = None, days: int | None = None,
    ) -> list[Discount]:
        """Discounts that started in the last ``days`` days."""
        return DiscountIndex.new_discounts(
            self.records.discounts(), self._day(on), days,
        )

    def get_discounts_by_entry_date(self, entry_date: date) -> list[Discount]:
        """Discounts recorded on one day."""
        return DiscountIndex.by_entry_date(self.records.discounts(), entry_date)

    def get_discounts_by_store(self, store_id: int) -> list[Discount]:
        """Discounts of one store; raises :class:`NotFound` if unknown."""
        if self.records.get_store(store_id) is None:
            msg = f"Store not found with id: {store_id}"
            raise NotFound(msg)
        return DiscountIndex.by_store(self.records.discounts(), store_id)

    # ── Alerts ───────────────────────────────────────────

    def create_alert(
        self, product_id: str, store_id: int, target_price: Decimal,
    ) -> Alert:
        """Register a price-target alert."""
        return self.alerts.create(product_id, store_id, target_price)

    def get_active_alerts(self) -> list[Alert]:
        """Alerts still waiting to trigger."""
        return self.alerts.active_alerts()

    def deactivate_alert(self, alert_id: str) -> None:
        """Deactivate an alert; a no-op for unknown ids."""
        self.alerts.deactivate(alert_id)

    def check_alerts(self, on: date | None = None) -> list[Alert]:
        """Trigger every alert whose target price has been reached."""
        return self.alerts.check_all(self._day(on))

    def check_alerts_for_product(
        self, product_id: str, on: date | None = None,
    ) -> list[Alert]:
        """Trigger the reached alerts of one product."""
        return self.alerts.check_for_product(product_id, self._day(on))
