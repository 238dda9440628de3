"""Application service: Remove Item use case."""

from __future__ import annotations

from collections.abc import Mapping

from pricestore.application.base_handler import InventoryHandler


class RemoveItemHandler(InventoryHandler):

    verb = "deleting"

    def _execute(self, params: Mapping[str, str]) -> str:
        name = self._item_name(params)
        self._store.delete(name)
        return f"Deleted item: {name}\n"
