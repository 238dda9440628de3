"""Application service: Create Item use case."""

from __future__ import annotations

from collections.abc import Mapping

from pricestore.application.base_handler import InventoryHandler


class CreateItemHandler(InventoryHandler):

    verb = "creating"

    def _execute(self, params: Mapping[str, str]) -> str:
        """Add a new item; an existing name is left untouched."""
        name = self._item_name(params)
        price = self._price(params, name)
        self._store.create(name, price)
        return f"Created item: {name} at {price} price\n"
