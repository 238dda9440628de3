"""Application service: List Items use case (query)."""

from __future__ import annotations

from collections.abc import Mapping

from pricestore.application.base_handler import InventoryHandler


class ListItemsHandler(InventoryHandler):

    verb = "listing"

    def _execute(self, params: Mapping[str, str]) -> str:
        return "".join(f"{item}\n" for item in self._store.list())
