# OAuth 2.0 token storage on MongoDB

# Token info and persisted document models
from .models import (
    TokenInfo,
    TokenCollectionConfig,
    BasicRecord,
    TokenRecord,
)

# Record expiration scheme
from .expiry import TokenExpiry, compute_token_expiry

# Error types
from .errors import (
    TokenStoreError,
    TokenSerializationError,
    TokenStoreInitializationError,
    TokenStoreNotInitializedError,
)

# Abstract storage interface expected by the OAuth2 server
from .storage_interfaces import AbstractTokenStore

# MongoDB implementation
from .mongo_token_store import MongoTokenStore, open_mongo_token_store

__all__ = [
    # Models
    "TokenInfo",
    "TokenCollectionConfig",
    "BasicRecord",
    "TokenRecord",

    # Expiration
    "TokenExpiry",
    "compute_token_expiry",

    # Error handling
    "TokenStoreError",
    "TokenSerializationError",
    "TokenStoreInitializationError",
    "TokenStoreNotInitializedError",

    # Storage
    "AbstractTokenStore",
    "MongoTokenStore",
    "open_mongo_token_store",
]
