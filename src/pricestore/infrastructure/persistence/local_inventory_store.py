"""Process-local implementation of InventoryStore.

A plain dict guarded by a single lock. Reads take the lock too, so a
caller always observes its own completed writes.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from pricestore.domain.exceptions import ItemAlreadyExistsError, ItemNotFoundError
from pricestore.domain.model.item import Item
from pricestore.domain.model.value_objects import Money
from pricestore.domain.repository.inventory_store import InventoryStore


class LocalInventoryStore(InventoryStore):

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._lock = threading.Lock()
        self._prices: dict[str, Money] = {item.name: item.price for item in items}

    # --- InventoryStore interface ---------------------------------------------

    def get(self, name: str) -> Item:
        with self._lock:
            price = self._prices.get(name)
        if price is None:
            raise ItemNotFoundError(name)
        return Item(name, price)

    def list(self) -> list[Item]:
        with self._lock:
            snapshot = list(self._prices.items())
        return [Item(name, price) for name, price in snapshot]

    def create(self, name: str, price: Money) -> None:
        with self._lock:
            if name in self._prices:
                raise ItemAlreadyExistsError(name)
            self._prices[name] = price

    def update(self, name: str, price: Money) -> None:
        with self._lock:
            if name not in self._prices:
                raise ItemNotFoundError(name)
            self._prices[name] = price

    def delete(self, name: str) -> None:
        with self._lock:
            if name not in self._prices:
                raise ItemNotFoundError(name)
            del self._prices[name]

    def __len__(self) -> int:
        with self._lock:
            return len(self._prices)
