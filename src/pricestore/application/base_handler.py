"""Shared request-handling contract for the five inventory operations.

Each operation subclasses InventoryHandler and implements ``_execute``;
``handle`` turns every domain error into exactly one status and body.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from http import HTTPStatus

from pricestore.application.dto import HandlerResponse
from pricestore.domain.exceptions import (
    ItemAlreadyExistsError,
    ItemNotFoundError,
    MissingParameterError,
    NegativePriceError,
    PriceParseError,
    StorageError,
)
from pricestore.domain.model.value_objects import Money
from pricestore.domain.repository.inventory_store import InventoryStore

logger = logging.getLogger(__name__)

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def quote(text: str) -> str:
    """Double-quote a name for an error body.

    Quotes, backslashes and non-printable characters are escaped
    (``\\x7f``, ``\\u2028``, ``\\U000e0001``); printable text, including
    non-ASCII letters, is kept as is.
    """
    out = []
    for ch in text:
        code = ord(ch)
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch == " " or ch.isprintable():
            out.append(ch)
        elif code < 0x80:
            out.append(f"\\x{code:02x}")
        elif code < 0x10000:
            out.append(f"\\u{code:04x}")
        else:
            out.append(f"\\U{code:08x}")
    return '"' + "".join(out) + '"'


class InventoryHandler(ABC):
    """Translate one parsed request into a store call and a response."""

    #: gerund used in backend error bodies, e.g. "error creating item: ..."
    verb: str = "handling"

    def __init__(self, store: InventoryStore) -> None:
        self._store = store

    def handle(self, params: Mapping[str, str]) -> HandlerResponse:
        try:
            return HandlerResponse.ok(self._execute(params))
        except MissingParameterError as exc:
            return HandlerResponse(HTTPStatus.BAD_REQUEST, f"{exc}\n")
        except PriceParseError:
            return HandlerResponse(
                HTTPStatus.BAD_REQUEST,
                f"could not convert price: {quote(params.get('item', ''))}\n",
            )
        except NegativePriceError as exc:
            return HandlerResponse(
                HTTPStatus.BAD_REQUEST, f"price cannot be negative: {quote(exc.name)}\n"
            )
        except ItemNotFoundError as exc:
            return HandlerResponse(
                HTTPStatus.NOT_FOUND, f"no such item: {quote(exc.name)}\n"
            )
        except ItemAlreadyExistsError as exc:
            return HandlerResponse(
                HTTPStatus.CONFLICT, f"item already exists: {quote(exc.name)}\n"
            )
        except StorageError as exc:
            logger.error("Backend failure while %s item: %s", self.verb, exc)
            return HandlerResponse(
                HTTPStatus.INTERNAL_SERVER_ERROR, f"error {self.verb} item: {exc}\n"
            )

    @abstractmethod
    def _execute(self, params: Mapping[str, str]) -> str:
        """Run the operation and return the success body."""

    # --- Parameter parsing ----------------------------------------------------

    @staticmethod
    def _item_name(params: Mapping[str, str]) -> str:
        name = params.get("item", "")
        if not name:
            raise MissingParameterError("item name")
        return name

    @staticmethod
    def _price(params: Mapping[str, str], name: str) -> Money:
        price = Money.parse(params.get("price", ""))
        if price.is_negative:
            raise NegativePriceError(name)
        return price
