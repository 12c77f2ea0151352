# price_comparator/services/basket_optimizer.py

"""Splits a shopping list across stores at the lowest discounted prices."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from price_comparator.errors import InvalidArgument, NotFound
from price_comparator.models.basket import BasketItem, StoreBasket
from price_comparator.models.product import Product
from price_comparator.models.store import Store
from price_comparator.pricing.discount_index import DiscountIndex
from price_comparator.pricing.price_resolver import PriceResolver
from price_comparator.storage.record_store import RecordStore

logger = logging.getLogger("price_comparator.basket")


@dataclass(frozen=True)
class BestOffer:
    """The cheapest store found for one product."""

    product: Product
    store: Store
    original_price: Decimal
    discounted_price: Decimal
    discount_percentage: Decimal


class BasketOptimizer:
    """Picks, per product, the store with the lowest discounted price."""

    def __init__(self, records: RecordStore) -> None:
        self._records = records

    def best_offer(
        self,
        product: Product,
        on: date,
        resolver: PriceResolver | None = None,
    ) -> BestOffer | None:
        """Cheapest discounted offer for ``product`` on ``on``.

        Stores are tried in ascending id order and a later store must be
        strictly cheaper to replace an earlier one.  Returns ``None``
        when no store has a price on or before ``on``.
        """
        resolver = resolver or PriceResolver(
            self._records.prices(product_id=product.id)
        )
        discounts = self._records.discounts(product_id=product.id)

        best: BestOffer | None = None
        for store in self._records.stores():
            base_price = resolver.current_price(product.id, store.id, on)
            if base_price is None:
                continue

            discount = DiscountIndex.applicable(
                discounts, product.id, store.id, on,
            )
            if discount is not None:
                final_price = DiscountIndex.apply_discount(
                    base_price, discount.percentage,
                )
                percentage = discount.percentage
            else:
                final_price = base_price
                percentage = Decimal(0)

            if best is None or final_price < best.discounted_price:
                best = BestOffer(
                    product=product,
                    store=store,
                    original_price=base_price,
                    discounted_price=final_price,
                    discount_percentage=percentage,
                )

        logger.debug(
            "Best offer for product %s is at store %s: discounted price = %s",
            product.id,
            best.store.name if best else "N/A",
            best.discounted_price if best else "N/A",
        )
        return best

    def optimize(
        self, product_ids: Sequence[str] | None, on: date,
    ) -> list[StoreBasket]:
        """Group each product's best offer into per-store baskets.

        Raises :class:`InvalidArgument` for an empty request and
        :class:`NotFound` for an unknown product id.  Products that no
        store sells yet are left out.  Baskets are ordered by store id;
        items keep the request order.
        """
        if not product_ids:
            msg = "Product IDs list cannot be empty"
            raise InvalidArgument(msg)

        logger.info("Optimizing basket for product IDs: %s", list(product_ids))

        products: list[Product] = []
        seen: set[str] = set()
        for product_id in product_ids:
            product = self._records.get_product(product_id)
            if product is None:
                msg = f"Product not found with id: {product_id}"
                raise NotFound(msg)
            if product_id not in seen:
                seen.add(product_id)
                products.append(product)

        resolver = PriceResolver(self._records.prices())
        offers_by_store: dict[int, list[BestOffer]] = {}
        stores: dict[int, Store] = {}
        unavailable = 0
        for product in products:
            offer = self.best_offer(product, on, resolver)
            if offer is None:
                unavailable += 1
                continue
            offers_by_store.setdefault(offer.store.id, []).append(offer)
            stores[offer.store.id] = offer.store

        if unavailable:
            logger.info(
                "%d product(s) have no price on %s and were dropped",
                unavailable,
                on,
            )

        return [
            _to_store_basket(stores[store_id], offers_by_store[store_id])
            for store_id in sorted(offers_by_store)
        ]


def _to_store_basket(store: Store, offers: list[BestOffer]) -> StoreBasket:
    """Build the basket for one store and total its discounted prices."""
    items = [
        BasketItem(
            product_id=o.product.id,
            product_name=o.product.name,
            original_price=o.original_price,
            discounted_price=o.discounted_price,
            discount_percentage=o.discount_percentage,
        )
        for o in offers
    ]
    total = sum((i.discounted_price for i in items), Decimal(0))
    return StoreBasket(
        store_id=store.id,
        store_name=store.name,
        items=items,
        total=total,
    )
