"""Integration test fixtures — a real MongoDB reachable at ``MONGO_URL``.

Start one with:
    docker run --rm -p 27017:27017 mongo:7

Tests are skipped when the server cannot be reached.
"""

from __future__ import annotations

import os
import uuid

import pytest

from hypermongo.adapters.base.exceptions import ConnectionError
from hypermongo.adapters.mongodb.adapter import MongoDataAdapter
from hypermongo.adapters.mongodb.meta import MetaDb
from hypermongo.clients.native.client import NativeClient

MONGO_URL = os.environ.get("MONGO_URL", "mongodb://127.0.0.1:27017")


@pytest.fixture
async def native_client():
    client = NativeClient(MONGO_URL, serverSelectionTimeoutMS=2000)
    try:
        await client.initialize()
    except ConnectionError:
        pytest.skip(f"MongoDB not reachable at {MONGO_URL}")
    yield client
    await client.shutdown()


@pytest.fixture
async def live_adapter(native_client: NativeClient):
    """Adapter with a throwaway control collection, dropped afterwards."""
    meta_name = f"meta-test-{uuid.uuid4().hex[:8]}"
    yield MongoDataAdapter(client=native_client, meta=MetaDb(native_client, meta_db_name=meta_name))
    await native_client.database(meta_name).drop_database()


@pytest.fixture
async def live_db(live_adapter: MongoDataAdapter):
    name = f"hyper~movies-{uuid.uuid4().hex[:8]}"
    res = await live_adapter.create_database(name)
    assert res.ok
    yield name
    await live_adapter.remove_database(name)
