# price_comparator/pricing/price_resolver.py

"""Resolves the authoritative price of a product at a store on a date."""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from price_comparator.errors import InvalidArgument
from price_comparator.models.price_observation import PriceObservation


class PriceResolver:
    """Indexes price observations by (product, store) for date lookups.

    The newest observation whose ``entry_date`` is on or before the
    query date is authoritative.  Observations after the query date are
    never considered.  Same-day duplicates resolve to the one seen last.
    """

    def __init__(self, observations: Iterable[PriceObservation]) -> None:
        self._by_pair: dict[tuple[str, int], list[PriceObservation]] = {}
        for obs in observations:
            self._by_pair.setdefault(
                (obs.product_id, obs.store_id), []
            ).append(obs)

    def store_ids_for(self, product_id: str) -> list[int]:
        """Stores with at least one observation for ``product_id``."""
        return sorted(
            store_id
            for (pid, store_id) in self._by_pair
            if pid == product_id
        )

    def current_observation(
        self,
        product_id: str | None,
        store_id: int | None,
        on: date | None,
    ) -> PriceObservation | None:
        """The authoritative observation, or ``None`` if none qualifies."""
        if product_id is None or store_id is None or on is None:
            msg = "Product, store, and date must not be None"
            raise InvalidArgument(msg)

        latest: PriceObservation | None = None
        for obs in self._by_pair.get((product_id, store_id), []):
            if obs.entry_date > on:
                continue
            if latest is None or obs.entry_date >= latest.entry_date:
                latest = obs
        return latest

    def current_price(
        self,
        product_id: str | None,
        store_id: int | None,
        on: date | None,
    ) -> Decimal | None:
        """Price in force on ``on``, or ``None`` if not sold there yet."""
        obs = self.current_observation(product_id, store_id, on)
        return obs.price if obs is not None else None
