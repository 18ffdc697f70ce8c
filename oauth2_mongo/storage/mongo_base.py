# oauth2_mongo/storage/mongo_base.py
import logging
from typing import Optional, Tuple, TYPE_CHECKING
from urllib.parse import quote_plus

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING

if TYPE_CHECKING:
    from ..settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "oauth2"


def build_mongo_url(
    mongo_uri: str,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> Tuple[str, Optional[str]]:
    """
    Split a ``mongodb://host:port/dbname`` URI into a connection URL and a database name.

    Credentials, when both are given, are escaped and inserted after the scheme.

    Returns:
        Tuple of (connection URL, database name from the URI path or None)
    """
    base_uri = mongo_uri
    db_name = None
    scheme, sep, rest = mongo_uri.partition("://")
    if sep and "/" in rest:
        hosts, _, path = rest.partition("/")
        # Connection options after '?' belong to the URL, not to the database name
        path_db, qsep, options = path.partition("?")
        db_name = path_db or None
        base_uri = f"{scheme}://{hosts}/{qsep}{options}" if qsep else f"{scheme}://{hosts}"

    if username and password:
        scheme, _, rest = base_uri.partition("://")
        base_uri = f"{scheme}://{quote_plus(username)}:{quote_plus(password)}@{rest}"
    return base_uri, db_name


def resolve_db_name(settings: "Settings") -> str:
    """Configured database name, else the one in the URI path, else the default."""
    if settings.mongo_db_name:
        return settings.mongo_db_name
    _, uri_db_name = build_mongo_url(settings.mongo_uri)
    return uri_db_name or DEFAULT_DB_NAME


def create_mongo_client(settings: "Settings") -> AsyncIOMotorClient:
    """
    Create a Motor client with connection pooling from settings.

    The driver owns pooling and is safe to share across concurrent calls.
    The client connects lazily; use ``ping_mongo`` to verify reachability.
    """
    mongodb_url, _ = build_mongo_url(
        settings.mongo_uri,
        settings.mongodb_username,
        settings.mongodb_password,
    )
    client = AsyncIOMotorClient(
        mongodb_url,
        maxPoolSize=settings.mongo_max_pool_size,
        minPoolSize=settings.mongo_min_pool_size,
        connectTimeoutMS=settings.mongo_connect_timeout_ms,
        serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
        tz_aware=True,
    )
    logger.info(f"Created MongoDB client (max pool size {settings.mongo_max_pool_size}).")
    return client


async def ping_mongo(client: AsyncIOMotorClient) -> None:
    """Round-trip to the server; raises the driver error when it is unreachable."""
    await client.admin.command("ping")


async def ensure_ttl_index(
    collection: AsyncIOMotorCollection,
    field_name: str,
    index_name: str,
    expire_after_seconds: int,
) -> str:
    """
    Declare an ascending index on the expiry field with a TTL policy.

    MongoDB's TTL monitor then deletes each document once its expiry
    timestamp is older than ``expire_after_seconds``.
    """
    created_name = await collection.create_index(
        [(field_name, ASCENDING)],
        name=index_name,
        expireAfterSeconds=expire_after_seconds,
    )
    logger.info(f"Ensured TTL index '{created_name}' on collection '{collection.name}'.")
    return created_name


def close_mongo_client(client: Optional[AsyncIOMotorClient]) -> None:
    """Close a Motor client and release its pooled connections."""
    if client is not None:
        logger.info("Closing MongoDB client.")
        client.close()
