"""Application service: Show Price use case (query)."""

from __future__ import annotations

from collections.abc import Mapping

from pricestore.application.base_handler import InventoryHandler


class ShowPriceHandler(InventoryHandler):

    verb = "finding"

    def _execute(self, params: Mapping[str, str]) -> str:
        item = self._store.get(self._item_name(params))
        return f"{item.price}\n"
