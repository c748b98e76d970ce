"""Base store client — Capability interface over a MongoDB deployment.

The data adapter only needs a narrow slice of the driver API. Each
backend (native wire protocol, Atlas Data API) implements these three
classes so the adapter stays agnostic to which one is injected:

  - ``StoreClient``: lifecycle and database selection
  - ``StoreDatabase``: drop and collection selection
  - ``StoreCollection``: the document and index operations
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

Document = dict[str, Any]


class ReplaceResult(BaseModel):
    """Outcome of a ``replace_one`` call."""

    matched_count: int = Field(default=0, description="Documents matched by the filter")
    modified_count: int = Field(default=0, description="Documents actually changed")
    upserted_id: Any = Field(default=None, description="Id of the inserted document, if the replace upserted")


class DeleteResult(BaseModel):
    """Outcome of a ``delete_one`` call."""

    deleted_count: int = Field(default=0, description="Documents removed")


class StoreCollection(ABC):
    """A single collection."""

    @abstractmethod
    async def insert_one(self, doc: Document) -> Any:
        """Insert ``doc`` and return its id."""

    @abstractmethod
    async def find_one(self, filter: Document, projection: Document | None = None) -> Document | None:
        """Return the first matching document or ``None``."""

    @abstractmethod
    async def find(
        self,
        filter: Document | None = None,
        *,
        projection: Document | None = None,
        sort: dict[str, int] | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[Document]:
        """Return every matching document."""

    @abstractmethod
    async def replace_one(self, filter: Document, replacement: Document, *, upsert: bool = False) -> ReplaceResult:
        """Replace the first matching document."""

    @abstractmethod
    async def delete_one(self, filter: Document) -> DeleteResult:
        """Delete the first matching document."""

    @abstractmethod
    async def create_index(
        self,
        keys: dict[str, int],
        *,
        name: str,
        partial_filter_expression: Document | None = None,
    ) -> str:
        """Create an index and return its name."""

    @abstractmethod
    async def bulk_write(self, operations: list[Document]) -> bool:
        """Run ``replaceOne``/``deleteOne``/``insertOne`` descriptors as one batch."""


class StoreDatabase(ABC):
    """A single database."""

    @abstractmethod
    async def drop_database(self) -> None:
        """Drop the database and everything in it."""

    @abstractmethod
    def collection(self, name: str) -> StoreCollection:
        """Select a collection (created lazily by the store)."""


class StoreClient(ABC):
    """Abstract base class for store clients.

    Clients hold the connection (pool) and are shared by every
    database and collection handle they hand out.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique client name (e.g., 'native', 'atlas')."""

    @abstractmethod
    async def initialize(self) -> None:
        """Open connections. Called once during startup."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Close connections and release resources."""

    @abstractmethod
    def database(self, name: str) -> StoreDatabase:
        """Select a database (created lazily by the store)."""
