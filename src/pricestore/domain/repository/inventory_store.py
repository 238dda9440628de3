"""Abstract store for the Item collection.

Defined in the domain layer so the application never depends on
infrastructure. Concrete implementations (in-memory, MongoDB) live in
the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pricestore.domain.model.item import Item
from pricestore.domain.model.value_objects import Money


class InventoryStore(ABC):
    """Sole owner of the item collection.

    Implementations raise ItemNotFoundError, ItemAlreadyExistsError or
    StorageError; they never return a sentinel for a failed operation.
    """

    @abstractmethod
    def get(self, name: str) -> Item:
        """Return the item called ``name``."""

    @abstractmethod
    def list(self) -> list[Item]:
        """Return a snapshot of every stored item, in no particular order."""

    @abstractmethod
    def create(self, name: str, price: Money) -> None:
        """Store a new item; fails if ``name`` is already present."""

    @abstractmethod
    def update(self, name: str, price: Money) -> None:
        """Replace the price of an existing item; fails if absent."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove an existing item; fails if absent."""

    def close(self) -> None:
        """Release backend resources. Safe to call more than once."""
