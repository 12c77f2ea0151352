# price_comparator/storage/record_store.py

"""In-memory record set handed to the pricing engine."""

import logging
from collections.abc import Iterable

from price_comparator.errors import NotFound
from price_comparator.models.discount import Discount
from price_comparator.models.price_observation import PriceObservation
from price_comparator.models.product import Product
from price_comparator.models.store import Store

logger = logging.getLogger("price_comparator.storage")


class RecordStore:
    """Flat, already-loaded products, stores, prices and discounts.

    Every price and discount must reference a product and a store that
    are already present; :meth:`add_price` and :meth:`add_discount`
    raise :class:`NotFound` otherwise.
    """

    def __init__(
        self,
        products: Iterable[Product] = (),
        stores: Iterable[Store] = (),
        prices: Iterable[PriceObservation] = (),
        discounts: Iterable[Discount] = (),
    ) -> None:
        self._products: dict[str, Product] = {}
        self._stores: dict[int, Store] = {}
        self._prices: list[PriceObservation] = []
        self._discounts: list[Discount] = []
        for product in products:
            self.add_product(product)
        for store in stores:
            self.add_store(store)
        for price in prices:
            self.add_price(price)
        for discount in discounts:
            self.add_discount(discount)

    # ── Loading ──────────────────────────────────────────

    def add_product(self, product: Product) -> None:
        """Register a product; the first record for an id wins."""
        self._products.setdefault(product.id, product)

    def add_store(self, store: Store) -> None:
        """Register a store; the first record for an id wins."""
        self._stores.setdefault(store.id, store)

    def add_price(self, price: PriceObservation) -> None:
        """Append a price observation for a known product and store."""
        self._check_refs(price.product_id, price.store_id)
        self._prices.append(price)

    def add_discount(self, discount: Discount) -> None:
        """Append a discount for a known product and store."""
        self._check_refs(discount.product_id, discount.store_id)
        self._discounts.append(discount)

    def _check_refs(self, product_id: str, store_id: int) -> None:
        """Raise unless both references resolve."""
        if product_id not in self._products:
            msg = f"Product not found with id: {product_id}"
            raise NotFound(msg)
        if store_id not in self._stores:
            msg = f"Store not found with id: {store_id}"
            raise NotFound(msg)

    # ── Lookups ──────────────────────────────────────────

    def get_product(self, product_id: str) -> Product | None:
        """Product by id, or ``None``."""
        return self._products.get(product_id)

    def get_store(self, store_id: int) -> Store | None:
        """Store by id, or ``None``."""
        return self._stores.get(store_id)

    def find_store_by_name(self, name: str) -> Store | None:
        """Store by exact name, or ``None``."""
        for store in self._stores.values():
            if store.name == name:
                return store
        return None

    def products(self) -> list[Product]:
        """All products, ordered by id."""
        return sorted(self._products.values(), key=lambda p: p.id)

    def stores(self) -> list[Store]:
        """All stores, ordered by id."""
        return sorted(self._stores.values(), key=lambda s: s.id)

    def products_in_category(self, category: str) -> list[Product]:
        """Products of one category, ordered by id."""
        return [p for p in self.products() if p.category == category]

    def prices(
        self,
        product_id: str | None = None,
        store_id: int | None = None,
    ) -> list[PriceObservation]:
        """Price observations, optionally narrowed by product and store."""
        return [
            p for p in self._prices
            if (product_id is None or p.product_id == product_id)
            and (store_id is None or p.store_id == store_id)
        ]

    def discounts(
        self,
        product_id: str | None = None,
        store_id: int | None = None,
    ) -> list[Discount]:
        """Discounts, optionally narrowed by product and store."""
        return [
            d for d in self._discounts
            if (product_id is None or d.product_id == product_id)
            and (store_id is None or d.store_id == store_id)
        ]

    def __repr__(self) -> str:
        return (
            f"RecordStore(products={len(self._products)}, "
            f"stores={len(self._stores)}, prices={len(self._prices)}, "
            f"discounts={len(self._discounts)})"
        )
