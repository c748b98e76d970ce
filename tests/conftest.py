"""Shared test fixtures and an in-memory store client."""

from __future__ import annotations

import copy
from typing import Any

import pytest
from pymongo.errors import DuplicateKeyError, OperationFailure

from hypermongo.adapters.mongodb.adapter import MongoDataAdapter
from hypermongo.adapters.mongodb.meta import MetaDb
from hypermongo.clients.base.client import (
    DeleteResult,
    Document,
    ReplaceResult,
    StoreClient,
    StoreCollection,
    StoreDatabase,
)
from hypermongo.config.settings import Settings

MOVIES_DB = "hyper~movies"

MOVIES: list[dict[str, Any]] = [
    {"_id": "10-caddyshack", "title": "Caddyshack", "year": "1978", "genre": ["comedy"]},
    {"_id": "12-ghostbusters", "title": "Ghostbusters", "year": "1980", "genre": ["comedy"]},
    {"_id": "15-starwars", "title": "Star Wars", "year": "1976", "genre": ["sci-fi"]},
    {"_id": "17-jaws", "title": "Jaws", "year": "1977", "genre": ["drama"]},
]


# ── In-memory store ──────────────────────────────────────────────────────────


def _matches(doc: Document, filter: Document | None) -> bool:
    for field, cond in (filter or {}).items():
        value = doc.get(field)
        if isinstance(cond, dict) and cond and all(k.startswith("$") for k in cond):
            for op, arg in cond.items():
                if op == "$eq" and not value == arg:
                    return False
                if op == "$in" and value not in arg:
                    return False
                if op in ("$gte", "$lte", "$gt", "$lt") and value is None:
                    return False
                if op == "$gte" and not value >= arg:
                    return False
                if op == "$lte" and not value <= arg:
                    return False
                if op == "$gt" and not value > arg:
                    return False
                if op == "$lt" and not value < arg:
                    return False
        elif value != cond:
            return False
    return True


def _project(doc: Document, projection: Document | None) -> Document:
    if not projection:
        return copy.deepcopy(doc)
    included = [f for f, v in projection.items() if v]
    if included:
        fields = set(included)
        if projection.get("_id", 1):
            fields.add("_id")
        return {k: copy.deepcopy(v) for k, v in doc.items() if k in fields}
    return {k: copy.deepcopy(v) for k, v in doc.items() if projection.get(k, 1)}


class InMemoryCollection(StoreCollection):
    """Enough of a MongoDB collection to drive the adapter."""

    def __init__(self) -> None:
        self.docs: list[Document] = []
        self.indexes: dict[str, dict[str, int]] = {}
        self.find_calls = 0
        self.fail_next_find: Exception | None = None

    def _first(self, filter: Document) -> Document | None:
        return next((d for d in self.docs if _matches(d, filter)), None)

    async def insert_one(self, doc: Document) -> Any:
        if any(d["_id"] == doc.get("_id") for d in self.docs):
            raise DuplicateKeyError(f"E11000 duplicate key error dup key: {{ _id: {doc.get('_id')!r} }}", 11000)
        self.docs.append(copy.deepcopy(doc))
        return doc.get("_id")

    async def find_one(self, filter: Document, projection: Document | None = None) -> Document | None:
        doc = self._first(filter)
        return _project(doc, projection) if doc is not None else None

    async def find(
        self,
        filter: Document | None = None,
        *,
        projection: Document | None = None,
        sort: dict[str, int] | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[Document]:
        self.find_calls += 1
        if self.fail_next_find is not None:
            err, self.fail_next_find = self.fail_next_find, None
            raise err
        docs = [d for d in self.docs if _matches(d, filter)]
        for field, direction in reversed(list((sort or {}).items())):
            docs.sort(key=lambda d: d.get(field), reverse=direction == -1)
        docs = docs[skip or 0 :]
        if limit:
            docs = docs[:limit]
        return [_project(d, projection) for d in docs]

    async def replace_one(self, filter: Document, replacement: Document, *, upsert: bool = False) -> ReplaceResult:
        doc = self._first(filter)
        if doc is not None:
            new = {**replacement, "_id": doc["_id"]}
            modified = int(new != doc)
            self.docs[self.docs.index(doc)] = copy.deepcopy(new)
            return ReplaceResult(matched_count=1, modified_count=modified)
        if upsert:
            new = {**replacement, "_id": filter.get("_id")}
            self.docs.append(copy.deepcopy(new))
            return ReplaceResult(upserted_id=new["_id"])
        return ReplaceResult()

    async def delete_one(self, filter: Document) -> DeleteResult:
        doc = self._first(filter)
        if doc is None:
            return DeleteResult()
        self.docs.remove(doc)
        return DeleteResult(deleted_count=1)

    async def create_index(
        self,
        keys: dict[str, int],
        *,
        name: str,
        partial_filter_expression: Document | None = None,
    ) -> str:
        if name in self.indexes and self.indexes[name] != keys:
            raise OperationFailure(f"Index with name: {name} already exists with different options", 86)
        self.indexes[name] = dict(keys)
        return name

    async def bulk_write(self, operations: list[Document]) -> bool:
        for op in operations:
            if "replaceOne" in op:
                spec = op["replaceOne"]
                await self.replace_one(spec["filter"], spec["replacement"], upsert=spec["upsert"])
            elif "deleteOne" in op:
                await self.delete_one(op["deleteOne"]["filter"])
        return True


class InMemoryDatabase(StoreDatabase):
    def __init__(self, store: InMemoryStoreClient, name: str) -> None:
        self._store = store
        self._name = name

    async def drop_database(self) -> None:
        self._store.dropped.append(self._name)
        for key in [k for k in self._store.collections if k[0] == self._name]:
            del self._store.collections[key]

    def collection(self, name: str) -> InMemoryCollection:
        return self._store.collections.setdefault((self._name, name), InMemoryCollection())


class InMemoryStoreClient(StoreClient):
    def __init__(self) -> None:
        self.collections: dict[tuple[str, str], InMemoryCollection] = {}
        self.dropped: list[str] = []

    @property
    def name(self) -> str:
        return "memory"

    async def initialize(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    def database(self, name: str) -> InMemoryDatabase:
        return InMemoryDatabase(self, name)


# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def store_client() -> InMemoryStoreClient:
    return InMemoryStoreClient()


@pytest.fixture
def meta(store_client: InMemoryStoreClient) -> MetaDb:
    return MetaDb(store_client, meta_db_name="foobar")


@pytest.fixture
def adapter(store_client: InMemoryStoreClient, meta: MetaDb) -> MongoDataAdapter:
    return MongoDataAdapter(client=store_client, meta=meta)


@pytest.fixture
async def movies_db(adapter: MongoDataAdapter) -> str:
    """An existing, empty movies database."""
    res = await adapter.create_database(MOVIES_DB)
    assert res.ok
    return MOVIES_DB


@pytest.fixture
async def seeded_movies_db(adapter: MongoDataAdapter, movies_db: str) -> str:
    """The movies database holding the four ``MOVIES`` documents."""
    for movie in MOVIES:
        doc = {k: v for k, v in movie.items() if k != "_id"}
        res = await adapter.create_document(movies_db, movie["_id"], doc)
        assert res.ok
    return movies_db
