"""Shared fixtures: an in-memory stand-in for the Motor client surface used by the store."""

import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from pymongo.errors import DuplicateKeyError
from pymongo.results import DeleteResult, InsertOneResult

from oauth2_mongo.oauth.models import EXPIRED_AT_FIELD, TokenInfo
from oauth2_mongo.oauth.mongo_token_store import MongoTokenStore


class FakeCollection:
    """Keeps documents by _id and records declared indexes."""

    def __init__(self, name: str):
        self.name = name
        self.documents: Dict[Any, Dict[str, Any]] = {}
        self.indexes: List[Dict[str, Any]] = []
        # Operation name -> exception raised on the next call
        self.failures: Dict[str, Exception] = {}

    def _maybe_fail(self, operation: str) -> None:
        error = self.failures.pop(operation, None)
        if error is not None:
            raise error

    async def insert_one(self, document: Dict[str, Any]) -> InsertOneResult:
        self._maybe_fail("insert_one")
        if document["_id"] in self.documents:
            raise DuplicateKeyError(f"duplicate key: {document['_id']}", code=11000)
        self.documents[document["_id"]] = copy.deepcopy(document)
        return InsertOneResult(document["_id"], True)

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self._maybe_fail("find_one")
        document = self.documents.get(query["_id"])
        return copy.deepcopy(document) if document is not None else None

    async def delete_one(self, query: Dict[str, Any]) -> DeleteResult:
        self._maybe_fail("delete_one")
        removed = self.documents.pop(query["_id"], None)
        return DeleteResult({"n": 1 if removed is not None else 0}, True)

    async def create_index(self, keys, **kwargs) -> str:
        self._maybe_fail("create_index")
        self.indexes.append({"keys": list(keys), **kwargs})
        return kwargs["name"]

    def purge_expired(self, now: datetime) -> None:
        """Do what MongoDB's TTL monitor would do at ``now``."""
        self.documents = {
            key: doc for key, doc in self.documents.items()
            if doc[EXPIRED_AT_FIELD] > now
        }


class FakeDatabase:
    def __init__(self, name: str):
        self.name = name
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


class FakeMotorClient:
    def __init__(self):
        self.databases: Dict[str, FakeDatabase] = {}
        self.closed = False
        self.admin = MagicMock()
        self.admin.command = AsyncMock(return_value={"ok": 1})

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self.databases:
            self.databases[name] = FakeDatabase(name)
        return self.databases[name]

    def close(self) -> None:
        self.closed = True


TEST_DB_NAME = "oauth2_test"


@pytest.fixture
def fake_client() -> FakeMotorClient:
    return FakeMotorClient()


@pytest.fixture
def db(fake_client) -> FakeDatabase:
    return fake_client[TEST_DB_NAME]


@pytest_asyncio.fixture
async def store(fake_client) -> MongoTokenStore:
    token_store = MongoTokenStore(fake_client, TEST_DB_NAME)
    await token_store.initialize()
    yield token_store
    await token_store.teardown()


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture
def make_token_info(now):
    """Build token infos for the usual grant shapes, all created at ``now``."""

    def _make(
        code: str = "",
        access: str = "",
        refresh: str = "",
        code_ttl: timedelta = timedelta(minutes=10),
        access_ttl: timedelta = timedelta(hours=1),
        refresh_ttl: timedelta = timedelta(hours=24),
    ) -> TokenInfo:
        return TokenInfo(
            client_id="client-1",
            user_id="user-1",
            redirect_uri="http://localhost/callback",
            scope="read write",
            code=code,
            code_create_at=now if code else None,
            code_expires_in=code_ttl if code else timedelta(0),
            access=access,
            access_create_at=now if access else None,
            access_expires_in=access_ttl if access else timedelta(0),
            refresh=refresh,
            refresh_create_at=now if refresh else None,
            refresh_expires_in=refresh_ttl if refresh else timedelta(0),
        )

    return _make
