# price_comparator/services/recommendation_engine.py

"""Finds same-category products that are cheaper per unit."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from price_comparator.errors import NotFound, UnsupportedConversion
from price_comparator.models.product import Product, Unit
from price_comparator.models.recommendation import Recommendation
from price_comparator.models.store import Store
from price_comparator.pricing.discount_index import DiscountIndex
from price_comparator.pricing.money import round_money
from price_comparator.pricing.price_resolver import PriceResolver
from price_comparator.pricing.unit_converter import UnitConverter
from price_comparator.storage.record_store import RecordStore

logger = logging.getLogger("price_comparator.recommendations")

_HUNDRED = Decimal(100)


@dataclass(frozen=True)
class _UnitPrice:
    """Lowest discounted price of a product and where it was found."""

    store: Store
    price: Decimal
    price_per_unit: Decimal


class RecommendationEngine:
    """Compares price-per-unit within a category.

    Only products packaged in exactly the same unit as the original are
    compared; weight is never compared against volume or pieces.
    """

    def __init__(self, records: RecordStore) -> None:
        self._records = records

    def cheaper_alternatives(
        self,
        product_id: str,
        on: date,
        target_unit: Unit | None = None,
    ) -> list[Recommendation]:
        """Alternatives strictly cheaper per unit than ``product_id``.

        Sorted by price per unit, then product id.  An original with no
        price anywhere yields an empty list.
        """
        original = self._records.get_product(product_id)
        if original is None:
            msg = f"Product not found with id: {product_id}"
            raise NotFound(msg)
        if target_unit is not None and not UnitConverter.can_convert(
            original.package_unit, target_unit
        ):
            msg = (
                f"Unsupported unit conversion: from "
                f"{original.package_unit.abbreviation} "
                f"to {target_unit.abbreviation}"
            )
            raise UnsupportedConversion(msg)

        resolver = PriceResolver(self._records.prices())
        baseline = self._best_unit_price(original, on, target_unit, resolver)
        if baseline is None:
            logger.info(
                "No price for product %s on %s, nothing to compare",
                product_id,
                on,
            )
            return []

        candidates = [
            p for p in self._records.products_in_category(original.category)
            if p.id != original.id
            and p.package_unit == original.package_unit
        ]

        recommendations: list[Recommendation] = []
        for candidate in candidates:
            offer = self._best_unit_price(candidate, on, target_unit, resolver)
            if offer is None or offer.price_per_unit >= baseline.price_per_unit:
                continue
            savings = round_money(
                (baseline.price_per_unit - offer.price_per_unit)
                * _HUNDRED
                / baseline.price_per_unit
            )
            unit = target_unit or candidate.package_unit
            recommendations.append(Recommendation(
                product_id=candidate.id,
                product_name=candidate.name,
                brand=candidate.brand,
                store_id=offer.store.id,
                store_name=offer.store.name,
                price=offer.price,
                unit=unit,
                package_quantity=UnitConverter.convert(
                    candidate.package_quantity,
                    candidate.package_unit,
                    unit,
                ),
                price_per_unit=offer.price_per_unit,
                savings_percentage=savings,
            ))

        recommendations.sort(key=lambda r: (r.price_per_unit, r.product_id))
        logger.debug(
            "%d cheaper alternatives for product %s out of %d candidates",
            len(recommendations),
            product_id,
            len(candidates),
        )
        return recommendations

    def _best_unit_price(
        self,
        product: Product,
        on: date,
        target_unit: Unit | None,
        resolver: PriceResolver,
    ) -> _UnitPrice | None:
        """Lowest discounted price across stores, normalised per unit."""
        discounts = self._records.discounts(product_id=product.id)
        best_store: Store | None = None
        best_price: Decimal | None = None
        for store_id in resolver.store_ids_for(product.id):
            price = resolver.current_price(product.id, store_id, on)
            if price is None:
                continue
            discount = DiscountIndex.applicable(
                discounts, product.id, store_id, on,
            )
            if discount is not None:
                price = DiscountIndex.apply_discount(price, discount.percentage)
            if best_price is None or price < best_price:
                best_price = price
                best_store = self._records.get_store(store_id)

        if best_price is None or best_store is None:
            return None
        return _UnitPrice(
            store=best_store,
            price=best_price,
            price_per_unit=UnitConverter.price_per_unit(
                best_price,
                product.package_quantity,
                product.package_unit,
                target_unit,
            ),
        )
