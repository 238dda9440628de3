"""Application service: Update Item use case.

Only changes the price of an item that already exists; an unknown name
is reported as not found rather than created.
"""

from __future__ import annotations

from collections.abc import Mapping

from pricestore.application.base_handler import InventoryHandler


class UpdateItemHandler(InventoryHandler):

    verb = "updating"

    def _execute(self, params: Mapping[str, str]) -> str:
        name = self._item_name(params)
        price = self._price(params, name)
        self._store.update(name, price)
        return f"Updated {name} to {price.plain()}\n"
