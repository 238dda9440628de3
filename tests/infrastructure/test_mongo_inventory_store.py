"""Tests for the MongoDB-backed store.

Uses FakeCollection / FakeMongoClient; no MongoDB server needed.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from bson import Decimal128, ObjectId
from pymongo.errors import (
    AutoReconnect,
    ConfigurationError,
    DuplicateKeyError,
    ExecutionTimeout,
    ServerSelectionTimeoutError,
)

from pricestore.domain.exceptions import (
    ItemAlreadyExistsError,
    ItemNotFoundError,
    StorageError,
)
from pricestore.domain.model.item import Item
from pricestore.domain.model.value_objects import Money
from pricestore.infrastructure.config import MongoConfig
from pricestore.infrastructure.persistence.mongo_inventory_store import (
    MongoInventoryStore,
    connect_mongo_store,
)
from pricestore.infrastructure.retry import ConnectionEstablishError, ConnectionRetrier
from tests.fakes import FakeCollection, FakeMongoClient

CREATED = datetime(2024, 3, 1, tzinfo=timezone.utc)


def _doc(name: str, price, **extra) -> dict:
    doc = {"_id": ObjectId(), "item": name, "price": price, "created_at": CREATED}
    doc.update(extra)
    return doc


def _setup(docs: list[dict] | None = None) -> tuple[MongoInventoryStore, FakeCollection]:
    collection = FakeCollection(docs)
    return MongoInventoryStore(collection, request_timeout=1.0), collection


class TestGet:

    def test_found(self):
        store, _ = _setup([_doc("shoes", Decimal128("50"))])
        assert store.get("shoes") == Item("shoes", Money.parse("50"))

    def test_absent_is_not_found(self):
        store, _ = _setup()
        with pytest.raises(ItemNotFoundError):
            store.get("shoes")

    def test_driver_error_is_storage_error_not_not_found(self):
        collection = FakeCollection(error=AutoReconnect("connection reset"))
        store = MongoInventoryStore(collection)
        with pytest.raises(StorageError, match="connection reset"):
            store.get("shoes")

    def test_timeout_reported_as_storage_error(self):
        collection = FakeCollection(error=ExecutionTimeout("operation exceeded time limit"))
        store = MongoInventoryStore(collection, request_timeout=0.5)
        with pytest.raises(StorageError, match="timed out after 0.5s"):
            store.get("shoes")

    @pytest.mark.parametrize("legacy_price", [49.99, 50, "7", Decimal("3.10")])
    def test_legacy_price_types_readable(self, legacy_price):
        store, _ = _setup([_doc("shoes", legacy_price)])
        assert store.get("shoes").price == Money.of(legacy_price)

    def test_unreadable_stored_price_is_storage_error(self):
        store, _ = _setup([_doc("shoes", "fifty")])
        with pytest.raises(StorageError, match="unreadable"):
            store.get("shoes")


class TestList:

    def test_lists_every_item(self):
        store, _ = _setup([_doc("shoes", Decimal128("50")), _doc("socks", Decimal128("5"))])
        assert set(store.list()) == {
            Item("shoes", Money.parse("50")),
            Item("socks", Money.parse("5")),
        }

    def test_skips_documents_without_item_field(self):
        store, _ = _setup([_doc("shoes", Decimal128("50")), {"_id": ObjectId(), "note": "x"}])
        assert [item.name for item in store.list()] == ["shoes"]

    def test_driver_error(self):
        store = MongoInventoryStore(FakeCollection(error=AutoReconnect("down")))
        with pytest.raises(StorageError):
            store.list()


class TestCreate:

    def test_inserts_document_with_metadata(self):
        store, collection = _setup()
        store.create("hat", Money.parse("12.5"))

        [doc] = collection.docs
        assert doc["item"] == "hat"
        assert doc["price"] == Decimal128("12.5")
        assert isinstance(doc["_id"], ObjectId)
        assert doc["created_at"].tzinfo is not None
        assert doc["tags"] == [] and doc["comments"] == 0

    def test_create_then_get(self):
        store, _ = _setup()
        store.create("hat", Money.parse("12.5"))
        assert store.get("hat") == Item("hat", Money.parse("12.5"))

    def test_existing_is_rejected_without_insert(self):
        store, collection = _setup([_doc("shoes", Decimal128("50"))])
        with pytest.raises(ItemAlreadyExistsError):
            store.create("shoes", Money.parse("1"))
        assert "insert_one" not in collection.calls
        assert store.get("shoes").price == Money.parse("50")

    def test_unique_index_violation_is_already_exists(self):
        collection = FakeCollection(insert_error=DuplicateKeyError("E11000 duplicate key"))
        store = MongoInventoryStore(collection)
        with pytest.raises(ItemAlreadyExistsError):
            store.create("shoes", Money.parse("1"))


class TestUpdate:

    def test_sets_price_and_keeps_metadata(self):
        store, collection = _setup([_doc("shoes", Decimal128("50"), tags=["feet"], comments=3)])
        store.update("shoes", Money.parse("60"))

        [doc] = collection.docs
        assert doc["price"] == Decimal128("60")
        assert doc["tags"] == ["feet"]
        assert doc["comments"] == 3
        assert doc["created_at"] == CREATED
        assert doc["updated_at"] > CREATED

    def test_absent_is_not_found_and_not_created(self):
        store, collection = _setup()
        with pytest.raises(ItemNotFoundError):
            store.update("shoes", Money.parse("60"))
        assert collection.docs == []


class TestDelete:

    def test_removes_document(self):
        store, _ = _setup([_doc("shoes", Decimal128("50"))])
        store.delete("shoes")
        with pytest.raises(ItemNotFoundError):
            store.get("shoes")

    def test_repeat_delete_is_not_found(self):
        store, _ = _setup([_doc("shoes", Decimal128("50"))])
        store.delete("shoes")
        with pytest.raises(ItemNotFoundError):
            store.delete("shoes")


class TestConnect:

    def _config(self, **overrides) -> MongoConfig:
        return MongoConfig(database="inventory", collection="items", **overrides)

    def test_connects_after_transient_failures(self):
        client = FakeMongoClient(ping_failures=2)
        store = connect_mongo_store(
            self._config(),
            retrier=ConnectionRetrier(3, 0.0),
            client_factory=lambda uri, **kwargs: client,
        )

        assert client.commands == ["ping", "ping", "ping"]
        assert client.databases == ["inventory"]
        assert client.collections == ["items"]
        store.create("shoes", Money.parse("50"))
        assert client.collection.docs[0]["item"] == "shoes"

    def test_exhausted_attempts_are_fatal(self):
        client = FakeMongoClient(ping_failures=10)

        with pytest.raises(ConnectionEstablishError, match="after 3 attempts") as exc_info:
            connect_mongo_store(
                self._config(),
                retrier=ConnectionRetrier(3, 0.0),
                client_factory=lambda uri, **kwargs: client,
            )

        assert len(client.commands) == 3
        assert client.closed
        assert isinstance(exc_info.value.__cause__, ServerSelectionTimeoutError)

    def test_connect_deadline_is_fatal(self):
        client = FakeMongoClient(ping_failures=10)
        with pytest.raises(ConnectionEstablishError):
            connect_mongo_store(
                self._config(connect_timeout=0.05),
                retrier=ConnectionRetrier(100, 0.02),
                client_factory=lambda uri, **kwargs: client,
            )
        assert client.closed

    def test_bad_settings_are_fatal(self):
        def factory(uri, **kwargs):
            raise ConfigurationError("invalid URI scheme")

        with pytest.raises(ConnectionEstablishError, match="invalid URI scheme"):
            connect_mongo_store(self._config(uri="bogus://"), client_factory=factory)

    def test_request_timeout_bounds_server_selection(self):
        seen = {}

        def factory(uri, **kwargs):
            seen.update(kwargs, uri=uri)
            return FakeMongoClient()

        connect_mongo_store(
            self._config(uri="mongodb://db:27017", request_timeout=2.5),
            client_factory=factory,
        )
        assert seen == {"uri": "mongodb://db:27017", "serverSelectionTimeoutMS": 2500}

    def test_close_closes_client_once(self):
        client = FakeMongoClient()
        store = connect_mongo_store(
            self._config(), client_factory=lambda uri, **kwargs: client
        )
        store.close()
        store.close()
        assert client.closed
