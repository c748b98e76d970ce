"""Client Registry — Selects a store client class from a connection URL.

Native MongoDB connection strings (``mongodb://``, ``mongodb+srv://``)
and Atlas Data API endpoints (``https://``) need different clients. The
registry maps URL schemes to client classes so the factory can pick one
from configuration alone.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

from hypermongo.adapters.base.exceptions import ConfigurationError
from hypermongo.clients.base.client import StoreClient

logger = logging.getLogger(__name__)


class ClientRegistry:
    """Registry of store client classes keyed by URL scheme.

    Example:
        >>> registry = ClientRegistry()
        >>> registry.register("mongodb", NativeClient)
        >>> registry.resolve("mongodb://localhost:27017")
        <class 'NativeClient'>
    """

    def __init__(self) -> None:
        self._classes: dict[str, type[StoreClient]] = {}

    def register(self, scheme: str, client_class: type[StoreClient]) -> None:
        """Register a client class for a URL scheme.

        Args:
            scheme: URL scheme without ``://`` (e.g., ``"mongodb+srv"``).
            client_class: The client class to register.
        """
        scheme = scheme.lower()
        if scheme in self._classes:
            logger.warning("Overwriting existing client registration: %s", scheme)
        self._classes[scheme] = client_class
        logger.info("Registered client for scheme: %s", scheme)

    def resolve(self, url: str) -> type[StoreClient]:
        """Return the client class registered for ``url``'s scheme.

        Raises:
            ConfigurationError: If the URL has no registered scheme.
        """
        scheme = urlparse(url).scheme.lower()
        if scheme not in self._classes:
            raise ConfigurationError(
                "provided url is not a valid MongoDB connection string or Atlas Data url. "
                f"Supported schemes: {self.registered_schemes}"
            )
        return self._classes[scheme]

    async def initialize_client(self, url: str, **kwargs: Any) -> StoreClient:
        """Create and initialize the client for ``url``.

        Args:
            url: Connection string or Data API endpoint.
            **kwargs: Extra constructor arguments for the client class.

        Returns:
            The initialized client instance.
        """
        client_class = self.resolve(url)
        client = client_class(url, **kwargs)
        await client.initialize()
        logger.info("Initialized %s client", client.name)
        return client

    @property
    def registered_schemes(self) -> list[str]:
        """List all registered URL schemes."""
        return list(self._classes.keys())
