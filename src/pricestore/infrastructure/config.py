"""Price store configuration.

Loads settings from environment variables (and a ``.env`` file when
present) with defaults suitable for a local development server.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from dotenv import load_dotenv

BACKENDS = ("memory", "mongo")

DEFAULT_SEED_ITEMS = "shoes=50,socks=5"


class ConfigError(ValueError):
    """An environment variable holds an unusable value."""


@dataclass
class MongoConfig:
    """Connection settings for the MongoDB backend."""

    uri: str = "mongodb://localhost:27017"
    database: str = "inventory"
    collection: str = "items"
    connect_attempts: int = 4
    connect_interval: float = 1.0  # seconds between connection attempts
    connect_timeout: float = 100.0  # overall start-up deadline, seconds
    request_timeout: float = 5.0  # per-operation deadline, seconds


@dataclass
class AppConfig:
    """Root application configuration."""

    backend: str = "memory"
    host: str = "localhost"
    port: int = 8000
    log_level: str = "INFO"
    seed_items: dict[str, str] = field(default_factory=dict)
    mongo: MongoConfig = field(default_factory=MongoConfig)

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigError(
                f"Unknown backend {self.backend!r}; expected one of {', '.join(BACKENDS)}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Build configuration from environment variables.

        Optional (with defaults):
        - INVENTORY_BACKEND: ``memory`` or ``mongo`` (default: memory)
        - HTTP_HOST / HTTP_PORT: listen address (default: localhost:8000)
        - LOG_LEVEL: logging verbosity (default: INFO)
        - SEED_ITEMS: ``name=price`` pairs loaded into the memory backend
        - MONGODB_URI, MONGODB_DATABASE, MONGODB_COLLECTION
        - MONGODB_CONNECT_ATTEMPTS, MONGODB_CONNECT_INTERVAL,
          MONGODB_CONNECT_TIMEOUT, MONGODB_REQUEST_TIMEOUT

        Raises:
            ConfigError: If a value cannot be converted.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        return cls(
            backend=environ.get("INVENTORY_BACKEND", "memory").lower(),
            host=environ.get("HTTP_HOST", "localhost"),
            port=_int(environ, "HTTP_PORT", 8000),
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
            seed_items=parse_seed_items(environ.get("SEED_ITEMS", DEFAULT_SEED_ITEMS)),
            mongo=MongoConfig(
                uri=environ.get("MONGODB_URI", "mongodb://localhost:27017"),
                database=environ.get("MONGODB_DATABASE", "inventory"),
                collection=environ.get("MONGODB_COLLECTION", "items"),
                connect_attempts=_int(environ, "MONGODB_CONNECT_ATTEMPTS", 4),
                connect_interval=_float(environ, "MONGODB_CONNECT_INTERVAL", 1.0),
                connect_timeout=_float(environ, "MONGODB_CONNECT_TIMEOUT", 100.0),
                request_timeout=_float(environ, "MONGODB_REQUEST_TIMEOUT", 5.0),
            ),
        )


def parse_seed_items(raw: str) -> dict[str, str]:
    """Parse 'shoes=50,socks=5' into {name: price text}."""
    seeds: dict[str, str] = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if "=" not in pair:
            raise ConfigError(
                f"Invalid seed item '{pair}'. Expected 'name=price'."
            )
        name, price = pair.rsplit("=", 1)
        seeds[name.strip()] = price.strip()
    return seeds


def _int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc


def _float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from exc
