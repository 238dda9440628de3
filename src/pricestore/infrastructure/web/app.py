"""FastAPI adapter exposing the inventory handlers over HTTP."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from pricestore.application.base_handler import InventoryHandler
from pricestore.domain.repository.inventory_store import InventoryStore
from pricestore.infrastructure.bootstrap import build_handlers

logger = logging.getLogger(__name__)


def create_app(store: InventoryStore) -> FastAPI:
    """Build the application around an already-constructed store.

    The store is closed when the application shuts down.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Shutting down, closing inventory store")
        store.close()

    app = FastAPI(
        title="Inventory Price Store",
        description="List, price, create, update and remove inventory items",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.store = store

    for path, handler in build_handlers(store).items():
        app.add_api_route(
            path,
            _endpoint(handler),
            methods=["GET"],
            response_class=PlainTextResponse,
            name=path.strip("/"),
        )
    return app


def _endpoint(handler: InventoryHandler) -> Callable[[Request], PlainTextResponse]:
    # Sync endpoint: FastAPI runs it in the threadpool, one worker per request.
    def endpoint(request: Request) -> PlainTextResponse:
        response = handler.handle(request.query_params)
        return PlainTextResponse(response.body, status_code=response.status)

    return endpoint
