"""Native client — Direct MongoDB wire-protocol connector.

Talks to a MongoDB deployment through ``motor``, the asyncio driver built
on ``pymongo``. Used for ``mongodb://`` and ``mongodb+srv://`` URLs.

Usage::

    client = NativeClient("mongodb://127.0.0.1:27017")
    await client.initialize()
    movies = client.database("movies").collection("movies")
    await movies.insert_one({"_id": "1-ghostbusters", "title": "Ghostbusters"})
"""

from __future__ import annotations

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import DeleteOne, InsertOne, ReplaceOne
from pymongo.errors import PyMongoError

from hypermongo.adapters.base.exceptions import ConfigurationError, ConnectionError
from hypermongo.clients.base.client import (
    DeleteResult,
    Document,
    ReplaceResult,
    StoreClient,
    StoreCollection,
    StoreDatabase,
)

logger = logging.getLogger(__name__)


class NativeCollection(StoreCollection):
    """``StoreCollection`` backed by a motor collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._collection = collection

    async def insert_one(self, doc: Document) -> Any:
        res = await self._collection.insert_one(doc)
        return res.inserted_id

    async def find_one(self, filter: Document, projection: Document | None = None) -> Document | None:
        return await self._collection.find_one(filter, projection)

    async def find(
        self,
        filter: Document | None = None,
        *,
        projection: Document | None = None,
        sort: dict[str, int] | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[Document]:
        cursor = self._collection.find(filter or {}, projection)
        if sort:
            cursor = cursor.sort(list(sort.items()))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list(length=None)

    async def replace_one(self, filter: Document, replacement: Document, *, upsert: bool = False) -> ReplaceResult:
        res = await self._collection.replace_one(filter, replacement, upsert=upsert)
        return ReplaceResult(
            matched_count=res.matched_count,
            modified_count=res.modified_count,
            upserted_id=res.upserted_id,
        )

    async def delete_one(self, filter: Document) -> DeleteResult:
        res = await self._collection.delete_one(filter)
        return DeleteResult(deleted_count=res.deleted_count)

    async def create_index(
        self,
        keys: dict[str, int],
        *,
        name: str,
        partial_filter_expression: Document | None = None,
    ) -> str:
        options: dict[str, Any] = {"name": name}
        if partial_filter_expression:
            options["partialFilterExpression"] = partial_filter_expression
        return await self._collection.create_index(list(keys.items()), **options)

    async def bulk_write(self, operations: list[Document]) -> bool:
        await self._collection.bulk_write([self._to_write_model(op) for op in operations], ordered=True)
        return True

    @staticmethod
    def _to_write_model(operation: Document) -> InsertOne | ReplaceOne | DeleteOne:
        """Convert a ``{"replaceOne": {...}}`` style descriptor to a pymongo request."""
        if "replaceOne" in operation:
            spec = operation["replaceOne"]
            return ReplaceOne(spec["filter"], spec["replacement"], upsert=spec.get("upsert", False))
        if "deleteOne" in operation:
            return DeleteOne(operation["deleteOne"]["filter"])
        if "insertOne" in operation:
            return InsertOne(operation["insertOne"]["document"])
        raise ValueError(f"Unsupported bulk operation: {list(operation)}")


class NativeDatabase(StoreDatabase):
    def __init__(self, client: AsyncIOMotorClient, name: str) -> None:
        self._client = client
        self._name = name

    async def drop_database(self) -> None:
        await self._client.drop_database(self._name)

    def collection(self, name: str) -> NativeCollection:
        return NativeCollection(self._client[self._name][name])


class NativeClient(StoreClient):
    """Store client for a MongoDB deployment reachable over the wire protocol.

    Args:
        url: MongoDB connection string, e.g. ``"mongodb://127.0.0.1:27017"``.
        motor_client: Pre-built motor client to use instead of connecting to ``url``.
        **kwargs: Extra keyword arguments passed to ``AsyncIOMotorClient``.
    """

    def __init__(
        self,
        url: str = "mongodb://127.0.0.1:27017",
        *,
        motor_client: AsyncIOMotorClient | None = None,
        **kwargs: Any,
    ) -> None:
        if not url.startswith("mongodb"):
            raise ConfigurationError(f"Not a MongoDB connection string: {url}")
        self._url = url
        self._client_kwargs = kwargs
        self._client: AsyncIOMotorClient | None = motor_client

    @property
    def name(self) -> str:
        return "native"

    async def initialize(self) -> None:
        """Create the motor client and verify the deployment answers ``ping``."""
        if self._client is None:
            self._client = AsyncIOMotorClient(self._url, **self._client_kwargs)
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            raise ConnectionError(f"Failed to connect to MongoDB: {e}") from e
        logger.info("Connected to MongoDB via native driver")

    async def shutdown(self) -> None:
        """Close the motor client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def database(self, name: str) -> NativeDatabase:
        if self._client is None:
            raise ConnectionError("Native client not initialized.")
        return NativeDatabase(self._client, name)
