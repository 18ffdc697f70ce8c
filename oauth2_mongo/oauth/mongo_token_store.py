# oauth2_mongo/oauth/mongo_token_store.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, TYPE_CHECKING

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from .errors import (
    TokenSerializationError,
    TokenStoreInitializationError,
    TokenStoreNotInitializedError,
)
from .expiry import compute_token_expiry
from .models import (
    EXPIRED_AT_FIELD,
    ID_FIELD,
    BasicRecord,
    TokenCollectionConfig,
    TokenInfo,
    TokenRecord,
)
from .storage_interfaces import AbstractTokenStore
from ..storage.mongo_base import (
    close_mongo_client,
    create_mongo_client,
    ensure_ttl_index,
    ping_mongo,
    resolve_db_name,
)

if TYPE_CHECKING:
    from ..settings import Settings

logger = logging.getLogger(__name__)


class MongoTokenStore(AbstractTokenStore):
    """
    MongoDB storage for OAuth 2.0 token information.

    Three collections share a join key:

    * basic: the serialized token info, keyed by authorization code or by a
      generated ObjectId hex string
    * access: access token -> ``basic_id``
    * refresh: refresh token -> ``basic_id``

    Expired records are purged by MongoDB's TTL monitor, never by this class.
    Writes in ``create`` are independent round-trips with no transaction, so a
    reference may briefly exist before (or outlive) the basic record it points
    to; lookups treat a dangling reference as not found.
    """

    def __init__(
        self,
        client: AsyncIOMotorClient,
        db_name: str,
        collections: Optional[TokenCollectionConfig] = None,
        expire_after_seconds: int = 1,
        owns_client: bool = False,
    ):
        self._client: Optional[AsyncIOMotorClient] = client
        self.db_name = db_name
        self.collections = collections or TokenCollectionConfig()
        self.expire_after_seconds = expire_after_seconds
        self._owns_client = owns_client

    @classmethod
    def from_settings(cls, settings: Optional["Settings"] = None) -> "MongoTokenStore":
        """Build a store that owns a new client created from settings."""
        if settings is None:
            from ..settings import settings as global_settings
            settings = global_settings
        return cls(
            create_mongo_client(settings),
            resolve_db_name(settings),
            collections=settings.token_collection_config(),
            expire_after_seconds=settings.token_ttl_expire_after_seconds,
            owns_client=True,
        )

    async def __aenter__(self) -> "MongoTokenStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.teardown()

    async def initialize(self) -> None:
        """Declare the TTL index on each record collection."""
        indexes = (
            (self.collections.basic, "basic_expired_at_ttl"),
            (self.collections.access, "access_expired_at_ttl"),
            (self.collections.refresh, "refresh_expired_at_ttl"),
        )
        for collection_name, index_name in indexes:
            try:
                await ensure_ttl_index(
                    self._collection(collection_name),
                    EXPIRED_AT_FIELD,
                    index_name,
                    self.expire_after_seconds,
                )
            except PyMongoError as e:
                logger.critical(
                    f"MongoTokenStore: TTL index creation failed on '{collection_name}': {e}",
                    exc_info=True
                )
                raise TokenStoreInitializationError(collection_name, str(e)) from e
        logger.info(f"MongoTokenStore initialized on database '{self.db_name}'.")

    async def teardown(self) -> None:
        """Close the client if this store created it."""
        if self._owns_client and self._client is not None:
            close_mongo_client(self._client)
            self._client = None
        logger.info("MongoTokenStore teardown.")

    def _collection(self, name: str) -> AsyncIOMotorCollection:
        if self._client is None:
            raise TokenStoreNotInitializedError("MongoTokenStore client has been closed.")
        return self._client[self.db_name][name]

    async def create(self, info: TokenInfo) -> None:
        """
        Store the token info and its lookup records.

        The first failing write raises and skips the remaining ones; records
        already written are left for the TTL monitor.
        """
        try:
            payload = info.model_dump_json()
        except (ValueError, TypeError) as e:
            raise TokenSerializationError(f"Could not serialize token info: {e}") from e

        expiry = compute_token_expiry(info)

        if info.code:
            code_record = BasicRecord(id=info.code, data=payload, expired_at=expiry.code_expires_at)
            await self._collection(self.collections.basic).insert_one(code_record.to_document())
            logger.debug(f"Stored code record expiring at {expiry.code_expires_at.isoformat()}.")

        basic_id = str(ObjectId())
        basic_record = BasicRecord(id=basic_id, data=payload, expired_at=expiry.basic_expires_at)
        await self._collection(self.collections.basic).insert_one(basic_record.to_document())

        if info.access:
            access_record = TokenRecord(
                id=info.access,
                basic_id=basic_id,
                expired_at=expiry.access_expires_at,
            )
            await self._collection(self.collections.access).insert_one(access_record.to_document())

        if info.refresh:
            refresh_record = TokenRecord(
                id=info.refresh,
                basic_id=basic_id,
                expired_at=expiry.refresh_expires_at,
            )
            await self._collection(self.collections.refresh).insert_one(refresh_record.to_document())

        logger.debug(
            f"Stored token records for basic id {basic_id} "
            f"(access until {expiry.access_expires_at.isoformat()}, "
            f"refresh until {expiry.refresh_expires_at.isoformat()}, "
            f"basic until {expiry.basic_expires_at.isoformat()})."
        )

    async def _delete_by_id(self, collection_name: str, record_id: str) -> None:
        result = await self._collection(collection_name).delete_one({ID_FIELD: record_id})
        logger.debug(f"Deleted {result.deleted_count} record(s) from '{collection_name}'.")

    async def remove_by_code(self, code: str) -> None:
        """Delete the code-keyed basic record only."""
        await self._delete_by_id(self.collections.basic, code)

    async def remove_by_access(self, access: str) -> None:
        """Delete the access record only; its basic and refresh records remain until expiry."""
        await self._delete_by_id(self.collections.access, access)

    async def remove_by_refresh(self, refresh: str) -> None:
        """Delete the refresh record only; its basic and access records remain until expiry."""
        await self._delete_by_id(self.collections.refresh, refresh)

    async def _get_data(self, basic_id: str) -> Optional[TokenInfo]:
        document = await self._collection(self.collections.basic).find_one({ID_FIELD: basic_id})
        if document is None:
            return None
        try:
            record = BasicRecord.from_document(document)
            return TokenInfo.model_validate_json(record.data)
        except ValidationError as e:
            raise TokenSerializationError(
                f"Could not deserialize token info for record '{basic_id}': {e}",
                record_id=basic_id,
            ) from e

    async def _get_basic_id(self, collection_name: str, token: str) -> Optional[str]:
        document = await self._collection(collection_name).find_one({ID_FIELD: token})
        if document is None:
            return None
        try:
            return TokenRecord.from_document(document).basic_id
        except ValidationError as e:
            raise TokenSerializationError(
                f"Malformed reference record '{token}' in '{collection_name}': {e}",
                record_id=token,
            ) from e

    async def get_by_code(self, code: str) -> Optional[TokenInfo]:
        return await self._get_data(code)

    async def get_by_access(self, access: str) -> Optional[TokenInfo]:
        basic_id = await self._get_basic_id(self.collections.access, access)
        if basic_id is None:
            return None
        return await self._get_data(basic_id)

    async def get_by_refresh(self, refresh: str) -> Optional[TokenInfo]:
        basic_id = await self._get_basic_id(self.collections.refresh, refresh)
        if basic_id is None:
            return None
        return await self._get_data(basic_id)


@asynccontextmanager
async def open_mongo_token_store(
    settings: Optional["Settings"] = None,
) -> AsyncIterator[MongoTokenStore]:
    """Build a store from settings, check the server, declare its indexes, and close it on exit."""
    store = MongoTokenStore.from_settings(settings)
    try:
        await ping_mongo(store._client)
        await store.initialize()
        yield store
    finally:
        await store.teardown()
