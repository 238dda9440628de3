"""MongoDB-backed implementation of InventoryStore.

Each item is one document keyed by its ``item`` field. There is no
in-process lock; consistency is left to the server. Two concurrent
creates of the same name can both pass the existence check and both
insert, unless the collection carries a unique index on ``item``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pymongo
from bson import Decimal128, ObjectId
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from pricestore.domain.exceptions import (
    ItemAlreadyExistsError,
    ItemNotFoundError,
    PriceParseError,
    StorageError,
)
from pricestore.domain.model.item import Item
from pricestore.domain.model.value_objects import Money
from pricestore.domain.repository.inventory_store import InventoryStore
from pricestore.infrastructure.config import MongoConfig
from pricestore.infrastructure.retry import ConnectionEstablishError, ConnectionRetrier

logger = logging.getLogger(__name__)

_ALL_ITEMS = {"item": {"$exists": True}}


class MongoInventoryStore(InventoryStore):

    def __init__(
        self,
        collection: Collection,
        request_timeout: float = 5.0,
        client: MongoClient | None = None,
    ) -> None:
        self._collection = collection
        self._request_timeout = request_timeout
        self._client = client

    # --- InventoryStore interface ---------------------------------------------

    def get(self, name: str) -> Item:
        with self._request():
            doc = self._collection.find_one({"item": name})
        if doc is None:
            raise ItemNotFoundError(name)
        return self._to_domain(doc)

    def list(self) -> list[Item]:
        with self._request():
            docs = list(self._collection.find(_ALL_ITEMS))
        return [self._to_domain(doc) for doc in docs]

    def create(self, name: str, price: Money) -> None:
        now = datetime.now(timezone.utc)
        doc = {
            "_id": ObjectId(),
            "item": name,
            "price": self._to_bson_price(price),
            "tags": [],
            "comments": 0,
            "created_at": now,
            "updated_at": now,
        }
        with self._request():
            if self._collection.find_one({"item": name}) is not None:
                raise ItemAlreadyExistsError(name)
            try:
                result = self._collection.insert_one(doc)
            except DuplicateKeyError as exc:
                raise ItemAlreadyExistsError(name) from exc
        logger.info("Inserted item %r with id %s", name, result.inserted_id)

    def update(self, name: str, price: Money) -> None:
        patch = {
            "$set": {
                "price": self._to_bson_price(price),
                "updated_at": datetime.now(timezone.utc),
            }
        }
        with self._request():
            result = self._collection.update_one({"item": name}, patch)
        if result.matched_count == 0:
            raise ItemNotFoundError(name)

    def delete(self, name: str) -> None:
        with self._request():
            result = self._collection.delete_one({"item": name})
        if result.deleted_count == 0:
            raise ItemNotFoundError(name)

    def close(self) -> None:
        if self._client is not None:
            logger.info("Closing MongoDB client")
            self._client.close()
            self._client = None

    # --- Request scope --------------------------------------------------------

    @contextmanager
    def _request(self) -> Iterator[None]:
        """Bound one operation by the request timeout and translate driver errors."""
        try:
            with pymongo.timeout(self._request_timeout):
                yield
        except PyMongoError as exc:
            if exc.timeout:
                raise StorageError(
                    f"timed out after {self._request_timeout}s: {exc}"
                ) from exc
            raise StorageError(str(exc)) from exc

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_bson_price(price: Money) -> Decimal128:
        try:
            return Decimal128(price.amount)
        except (ArithmeticError, ValueError) as exc:
            raise PriceParseError(str(price.amount)) from exc

    @staticmethod
    def _to_domain(doc: dict[str, Any]) -> Item:
        name = doc["item"]
        raw = doc.get("price")
        try:
            if isinstance(raw, Decimal128):
                price = Money(raw.to_decimal())
            elif isinstance(raw, Decimal):
                price = Money(raw)
            else:
                # float, int or string prices written by older clients
                price = Money.parse(str(raw))
        except PriceParseError as exc:
            raise StorageError(f"stored price for {name!r} is unreadable: {raw!r}") from exc
        return Item(name=name, price=price)


def connect_mongo_store(
    config: MongoConfig,
    retrier: ConnectionRetrier | None = None,
    client_factory: Callable[..., MongoClient] = MongoClient,
) -> MongoInventoryStore:
    """Open a client and wait until the server answers ``ping``.

    Raises:
        ConnectionEstablishError: If the server is still unreachable once
            the retry budget or ``config.connect_timeout`` is used up.
    """
    if retrier is None:
        retrier = ConnectionRetrier(config.connect_attempts, config.connect_interval)
    deadline = time.monotonic() + config.connect_timeout

    try:
        client = client_factory(
            config.uri,
            serverSelectionTimeoutMS=int(config.request_timeout * 1000),
        )
    except PyMongoError as exc:
        raise ConnectionEstablishError(f"invalid MongoDB settings: {exc}") from exc

    def ping() -> None:
        client.admin.command("ping")

    logger.info(
        "Connecting to MongoDB (%s.%s), up to %d attempts",
        config.database,
        config.collection,
        retrier.max_attempts,
    )
    try:
        retrier.call(ping, deadline=deadline)
    except Exception as exc:
        client.close()
        raise ConnectionEstablishError(
            f"could not connect to MongoDB after {retrier.max_attempts} attempts: {exc}"
        ) from exc
    logger.info("Connected to MongoDB")

    collection = client[config.database][config.collection]
    return MongoInventoryStore(collection, config.request_timeout, client=client)
