"""Atlas Data API client — HTTPS connector for MongoDB Atlas.

The Atlas Data API exposes collection actions as ``POST`` endpoints that
take and return Extended JSON. This client speaks it with ``httpx`` and
``bson.json_util``, so no driver connection is needed.

Usage::

    client = AtlasDataClient(
        "https://data.mongodb-api.com/app/<app-id>/endpoint/data/v1",
        data_source="Cluster0",
        auth={"api_key": "secret"},
    )
    await client.initialize()
    doc = await client.database("movies").collection("movies").find_one({"_id": "1"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from bson import json_util
from pydantic import BaseModel, Field

from hypermongo.adapters.base.exceptions import (
    ConfigurationError,
    ConnectionError,
    HyperError,
    StoreRequestError,
)
from hypermongo.clients.base.client import (
    DeleteResult,
    Document,
    ReplaceResult,
    StoreClient,
    StoreCollection,
    StoreDatabase,
)

logger = logging.getLogger(__name__)

EJSON_CONTENT_TYPE = "application/ejson"


class AtlasAuth(BaseModel):
    """Credentials for the Data API. Exactly one scheme must be set."""

    api_key: str | None = Field(default=None, description="Data API key")
    jwt_token_string: str | None = Field(default=None, description="Custom JWT bearer token")
    email: str | None = Field(default=None, description="Email/password user")
    password: str | None = Field(default=None, description="Email/password secret")

    def to_headers(self) -> dict[str, str]:
        """Render the configured scheme as request headers.

        Raises:
            ConfigurationError: If no scheme, an incomplete email/password
                pair, or more than one scheme is configured.
        """
        schemes: list[dict[str, str]] = []
        if self.api_key:
            schemes.append({"api-key": self.api_key})
        if self.jwt_token_string:
            schemes.append({"jwtTokenString": self.jwt_token_string})
        if self.email or self.password:
            if not (self.email and self.password):
                raise ConfigurationError("Invalid auth options: email and password must be provided together")
            schemes.append({"email": self.email, "password": self.password})

        if len(schemes) != 1:
            raise ConfigurationError(
                "Invalid auth options: provide exactly one of api_key, jwt_token_string or email/password"
            )
        return schemes[0]


class AtlasCollection(StoreCollection):
    """``StoreCollection`` that posts Data API actions."""

    def __init__(self, client: AtlasDataClient, database: str, name: str) -> None:
        self._client = client
        self._database = database
        self._name = name

    async def insert_one(self, doc: Document) -> Any:
        result = await self._api("insertOne", {"document": doc})
        return result.get("insertedId")

    async def find_one(self, filter: Document, projection: Document | None = None) -> Document | None:
        result = await self._api("findOne", {"filter": filter, "projection": projection})
        return result.get("document") or None

    async def find(
        self,
        filter: Document | None = None,
        *,
        projection: Document | None = None,
        sort: dict[str, int] | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[Document]:
        result = await self._api(
            "find",
            {"filter": filter, "projection": projection, "sort": sort, "limit": limit, "skip": skip},
        )
        return result.get("documents", [])

    async def replace_one(self, filter: Document, replacement: Document, *, upsert: bool = False) -> ReplaceResult:
        result = await self._api("replaceOne", {"filter": filter, "replacement": replacement, "upsert": upsert})
        return ReplaceResult(
            matched_count=result.get("matchedCount", 0),
            modified_count=result.get("modifiedCount", 0),
            upserted_id=result.get("upsertedId"),
        )

    async def delete_one(self, filter: Document) -> DeleteResult:
        result = await self._api("deleteOne", {"filter": filter})
        return DeleteResult(deleted_count=result.get("deletedCount", 0))

    async def create_index(
        self,
        keys: dict[str, int],
        *,
        name: str,
        partial_filter_expression: Document | None = None,
    ) -> str:
        raise HyperError(
            501,
            "Atlas Data API does not expose creating indexes. Create indexes via the Atlas Console",
        )

    async def bulk_write(self, operations: list[Document]) -> bool:
        await self._api("bulkWrite", {"operations": operations})
        return True

    async def _api(self, action: str, params: Mapping[str, Any]) -> dict[str, Any]:
        body = {
            "collection": self._name,
            "database": self._database,
            "dataSource": self._client.data_source,
            **{k: v for k, v in params.items() if v is not None},
        }
        return await self._client.post_action(action, body)


class AtlasDatabase(StoreDatabase):
    def __init__(self, client: AtlasDataClient, name: str) -> None:
        self._client = client
        self._name = name

    async def drop_database(self) -> None:
        raise HyperError(
            501,
            "Atlas Data API does not expose dropping a database. Drop databases via the Atlas Console",
        )

    def collection(self, name: str) -> AtlasCollection:
        return AtlasCollection(self._client, self._name, name)


class AtlasDataClient(StoreClient):
    """Store client for the MongoDB Atlas Data API.

    Args:
        endpoint: Data API base URL, ending in ``/endpoint/data/v1``.
        data_source: Atlas cluster name the requests target.
        auth: Credentials, as ``AtlasAuth`` or a mapping of its fields.
        timeout: HTTP request timeout in seconds.
        transport: Optional ``httpx`` transport (used for testing).

    Raises:
        ConfigurationError: If the endpoint is not HTTPS, ``data_source``
            is empty, or ``auth`` does not hold exactly one scheme.
    """

    def __init__(
        self,
        endpoint: str,
        data_source: str = "",
        auth: AtlasAuth | Mapping[str, Any] | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not endpoint.startswith("https"):
            raise ConfigurationError(f"Atlas Data API endpoint must be an https url: {endpoint}")
        if not data_source:
            raise ConfigurationError("data_source is required when using an Atlas Data url")
        if not isinstance(auth, AtlasAuth):
            auth = AtlasAuth.model_validate(auth or {})

        self._endpoint = endpoint.rstrip("/")
        self.data_source = data_source
        self._timeout = timeout
        self._transport = transport
        self.headers: dict[str, str] = {
            "Content-Type": EJSON_CONTENT_TYPE,
            "Accept": EJSON_CONTENT_TYPE,
            **auth.to_headers(),
        }
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "atlas"

    async def initialize(self) -> None:
        """Create the ``httpx.AsyncClient``.

        The Data API has no ping action, so connectivity is only proven by
        the first real request.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers=self.headers,
                transport=self._transport,
            )
        logger.info("Using Atlas Data API at %s (data source: %s)", self._endpoint, self.data_source)

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def database(self, name: str) -> AtlasDatabase:
        return AtlasDatabase(self, name)

    async def post_action(self, action: str, body: Mapping[str, Any]) -> dict[str, Any]:
        """POST ``body`` as Extended JSON to ``/action/{action}`` and decode the reply.

        Raises:
            ConnectionError: If the client is not initialized or the request fails in transit.
            StoreRequestError: If the Data API answers with a non-2xx status.
        """
        if not self._client:
            raise ConnectionError("Atlas Data API client not initialized.")

        url = f"{self._endpoint}/action/{action}"
        try:
            resp = await self._client.post(
                url,
                content=json_util.dumps(body, json_options=json_util.RELAXED_JSON_OPTIONS),
            )
        except httpx.HTTPError as e:
            raise ConnectionError(f"Atlas Data API request failed: {e}") from e

        text = resp.text
        if not resp.is_success:
            raise StoreRequestError(f"{resp.reason_phrase}: {text}", status=resp.status_code)
        return json_util.loads(text) if text else {}
