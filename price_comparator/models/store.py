# price_comparator/models/store.py

"""Store reference model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Store:
    """A retail chain prices are observed at."""

    id: int
    name: str
