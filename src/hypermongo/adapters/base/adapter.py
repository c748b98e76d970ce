"""Base data adapter — the generic hyper data-port contract.

Every backing store must implement this interface to be mounted as a
hyper data service. Operations never raise for data errors: each one
resolves to a success payload or a ``HyperErr`` and callers branch on
``ok``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from hypermongo.models.query import ListArgs, QueryArgs
from hypermongo.models.response import (
    BulkResponse,
    DocsResponse,
    HyperErr,
    IdResponse,
    OkResponse,
)


class DataAdapter(ABC):
    """Abstract base class for data-port adapters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name (e.g., 'mongodb')."""

    @abstractmethod
    async def create_database(self, name: str) -> OkResponse | HyperErr:
        """Create a logical database. 409 if it already exists."""

    @abstractmethod
    async def remove_database(self, name: str) -> OkResponse | HyperErr:
        """Remove a logical database and its documents. 404 if absent."""

    @abstractmethod
    async def create_document(self, db: str, id: str, doc: dict[str, Any]) -> IdResponse | HyperErr:
        """Insert a new document under ``id``.

        Returns:
            ``IdResponse`` on success; 400 for an empty document, 409 for
            a duplicate id, 404 if the database does not exist.
        """

    @abstractmethod
    async def retrieve_document(self, db: str, id: str) -> dict[str, Any] | HyperErr:
        """Return the stored document, or a 404 ``HyperErr``."""

    @abstractmethod
    async def update_document(self, db: str, id: str, doc: dict[str, Any]) -> IdResponse | HyperErr:
        """Replace (or create) the document stored under ``id``."""

    @abstractmethod
    async def remove_document(self, db: str, id: str) -> IdResponse | HyperErr:
        """Delete the document stored under ``id``. 404 if nothing was deleted."""

    @abstractmethod
    async def query_documents(self, db: str, query: QueryArgs | dict[str, Any]) -> DocsResponse | HyperErr:
        """Find documents matching ``query.selector``."""

    @abstractmethod
    async def index_documents(
        self,
        db: str,
        name: str,
        fields: list[Any],
        partial_filter: dict[str, Any] | None = None,
    ) -> OkResponse | HyperErr:
        """Create a named index over ``fields``."""

    @abstractmethod
    async def list_documents(self, db: str, args: ListArgs | dict[str, Any] | None = None) -> DocsResponse | HyperErr:
        """List documents by id range or explicit ids."""

    @abstractmethod
    async def bulk_documents(self, db: str, docs: list[dict[str, Any]]) -> BulkResponse | HyperErr:
        """Upsert or delete many documents in a single batch."""
