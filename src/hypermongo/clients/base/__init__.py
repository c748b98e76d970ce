"""Base client interface — Abstract classes for store backends."""

from hypermongo.clients.base.client import StoreClient, StoreCollection, StoreDatabase
from hypermongo.clients.base.registry import ClientRegistry

__all__ = ["ClientRegistry", "StoreClient", "StoreCollection", "StoreDatabase"]
