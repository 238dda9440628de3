"""CLI commands for running the price store server."""

from __future__ import annotations

import logging

import click
import uvicorn

from pricestore.domain.exceptions import DomainException
from pricestore.infrastructure.bootstrap import inventory_store
from pricestore.infrastructure.config import BACKENDS, AppConfig, ConfigError
from pricestore.infrastructure.persistence.mongo_inventory_store import (
    connect_mongo_store,
)
from pricestore.infrastructure.retry import ConnectionEstablishError
from pricestore.infrastructure.web.app import create_app

logger = logging.getLogger(__name__)


def _load_config() -> AppConfig:
    try:
        return AppConfig.from_env()
    except ConfigError as exc:
        raise click.ClickException(str(exc))


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.command("serve")
@click.option("--backend", type=click.Choice(BACKENDS), default=None, help="Storage backend.")
@click.option("--host", default=None, help="Interface to bind (default from HTTP_HOST).")
@click.option("--port", type=int, default=None, help="Port to bind (default from HTTP_PORT).")
def serve(backend: str | None, host: str | None, port: int | None) -> None:
    """Run the HTTP server until interrupted."""
    config = _load_config()
    if backend is not None:
        config.backend = backend
    _configure_logging(config.log_level)

    try:
        store = inventory_store(config)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    bind_host = host or config.host
    bind_port = port or config.port
    click.echo(f"Serving {config.backend} inventory on http://{bind_host}:{bind_port}")
    try:
        uvicorn.run(create_app(store), host=bind_host, port=bind_port, log_level="info")
    finally:
        store.close()


@click.command("ping")
def ping() -> None:
    """Check that the configured MongoDB server is reachable."""
    config = _load_config()
    _configure_logging(config.log_level)

    try:
        store = connect_mongo_store(config.mongo)
    except ConnectionEstablishError as exc:
        raise click.ClickException(str(exc))

    store.close()
    click.echo(f"MongoDB reachable ({config.mongo.database}.{config.mongo.collection})")
