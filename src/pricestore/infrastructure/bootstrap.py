"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from pricestore.application.base_handler import InventoryHandler
from pricestore.application.create_item import CreateItemHandler
from pricestore.application.list_items import ListItemsHandler
from pricestore.application.remove_item import RemoveItemHandler
from pricestore.application.show_price import ShowPriceHandler
from pricestore.application.update_item import UpdateItemHandler
from pricestore.domain.model.item import Item
from pricestore.domain.model.value_objects import Money
from pricestore.domain.repository.inventory_store import InventoryStore
from pricestore.infrastructure.config import AppConfig
from pricestore.infrastructure.persistence.local_inventory_store import (
    LocalInventoryStore,
)
from pricestore.infrastructure.persistence.mongo_inventory_store import (
    connect_mongo_store,
)

logger = logging.getLogger(__name__)

ROUTES: dict[str, type[InventoryHandler]] = {
    "/list": ListItemsHandler,
    "/price": ShowPriceHandler,
    "/create": CreateItemHandler,
    "/update": UpdateItemHandler,
    "/remove": RemoveItemHandler,
}


def local_store(seed_items: Mapping[str, str] | None = None) -> LocalInventoryStore:
    items = [Item(name, Money.parse(price)) for name, price in (seed_items or {}).items()]
    if items:
        logger.info("Seeding in-memory store with %d items", len(items))
    return LocalInventoryStore(items)


def inventory_store(config: AppConfig) -> InventoryStore:
    """Build the store selected by ``config.backend``.

    Raises:
        ConnectionEstablishError: If the MongoDB backend cannot be reached.
    """
    if config.backend == "mongo":
        return connect_mongo_store(config.mongo)
    return local_store(config.seed_items)


def build_handlers(store: InventoryStore) -> dict[str, InventoryHandler]:
    """Instantiate one handler per HTTP path, all sharing ``store``."""
    return {path: handler_cls(store) for path, handler_cls in ROUTES.items()}
