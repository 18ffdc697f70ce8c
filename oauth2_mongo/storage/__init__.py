# oauth2_mongo/storage/__init__.py

"""Storage module initialization.

MongoDB client creation, TTL index declaration and shutdown helpers.
"""

from .mongo_base import (
    build_mongo_url,
    resolve_db_name,
    create_mongo_client,
    ping_mongo,
    ensure_ttl_index,
    close_mongo_client,
)

__all__ = [
    "build_mongo_url",
    "resolve_db_name",
    "create_mongo_client",
    "ping_mongo",
    "ensure_ttl_index",
    "close_mongo_client",
]
