"""Item: a named entry in the price store."""

from __future__ import annotations

from dataclasses import dataclass

from pricestore.domain.model.value_objects import Money


@dataclass(frozen=True)
class Item:
    """A stored item and its current price.

    Frozen: stores hand out snapshots, and a price change goes back
    through the store rather than mutating an Item in place.
    """

    name: str
    price: Money

    def __str__(self) -> str:
        return f"{self.name}: {self.price}"
