# oauth2_mongo/oauth/errors.py
from typing import Optional


class TokenStoreError(Exception):
    """Base class for errors raised by the token store itself."""


class TokenSerializationError(TokenStoreError):
    """
    The token info could not be encoded to, or decoded from, its stored payload.
    Raised before any write on create, and on reads of a corrupt payload.
    """

    def __init__(self, message: str, record_id: Optional[str] = None):
        self.record_id = record_id
        super().__init__(message)


class TokenStoreInitializationError(TokenStoreError):
    """
    The expiry (TTL) indexes could not be declared. A store without them would
    never have its records purged, so startup is expected to abort.
    """

    def __init__(self, collection_name: str, detail: str):
        self.collection_name = collection_name
        self.detail = detail
        super().__init__(f"Failed to create TTL index on '{collection_name}': {detail}")


class TokenStoreNotInitializedError(TokenStoreError):
    """The store was used after its MongoDB client had been closed."""
