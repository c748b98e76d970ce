"""Adapter factory — builds the store client, existence cache and adapter.

The connection URL decides the backend: ``mongodb://`` and
``mongodb+srv://`` use the native driver, ``https://`` uses the Atlas
Data API (which additionally needs ``atlas`` settings).

Usage::

    settings = Settings(url="mongodb://127.0.0.1:27017")
    adapter = await create_adapter(settings)
    await adapter.create_database("movies")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from hypermongo.adapters.base.exceptions import ConfigurationError
from hypermongo.adapters.mongodb.adapter import MongoDataAdapter
from hypermongo.adapters.mongodb.meta import MetaDb
from hypermongo.clients.atlas.client import AtlasDataClient
from hypermongo.clients.base.client import StoreClient
from hypermongo.clients.base.registry import ClientRegistry
from hypermongo.clients.native.client import NativeClient
from hypermongo.config.settings import Settings
from hypermongo.observability.logging import bind_store_context, setup_logging

logger = logging.getLogger(__name__)


@dataclass
class AdapterEnv:
    """Everything the adapter needs, created once per process."""

    client: StoreClient
    meta: MetaDb


def default_registry() -> ClientRegistry:
    """Registry with the built-in native and Atlas clients."""
    registry = ClientRegistry()
    registry.register("mongodb", NativeClient)
    registry.register("mongodb+srv", NativeClient)
    registry.register("https", AtlasDataClient)
    return registry


def _client_kwargs(client_class: type[StoreClient], settings: Settings) -> dict[str, Any]:
    if client_class is not AtlasDataClient:
        return {}
    atlas = settings.atlas
    if not atlas.data_source:
        raise ConfigurationError("atlas.data_source is required when using an Atlas Data url")
    return {"data_source": atlas.data_source, "auth": atlas.auth(), "timeout": atlas.timeout}


async def load(settings: Settings, registry: ClientRegistry | None = None) -> AdapterEnv:
    """Create and initialize the store client and its ``MetaDb``.

    Raises:
        ConfigurationError: If the URL scheme is unsupported or Atlas
            options are missing or invalid.
        ConnectionError: If the native client cannot reach MongoDB.
    """
    registry = registry or default_registry()
    client_class = registry.resolve(settings.url)
    client = await registry.initialize_client(settings.url, **_client_kwargs(client_class, settings))
    return AdapterEnv(client=client, meta=MetaDb(client, meta_db_name=settings.meta_db_name))


def link(env: AdapterEnv) -> MongoDataAdapter:
    """Bind a data adapter to a loaded environment."""
    return MongoDataAdapter(client=env.client, meta=env.meta)


async def create_adapter(settings: Settings | None = None) -> MongoDataAdapter:
    """Configure logging, load the environment and return a ready adapter."""
    settings = settings or Settings()
    setup_logging(settings)
    env = await load(settings)
    bind_store_context(env.client, env.meta.meta_db_name)
    adapter = link(env)
    logger.info("MongoDB data adapter ready (%s)", adapter.name)
    return adapter
