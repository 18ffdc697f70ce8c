# oauth2_mongo/oauth/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any
from datetime import datetime, timedelta, timezone

# Field names shared by every persisted token document
ID_FIELD = "_id"
DATA_FIELD = "data"
BASIC_ID_FIELD = "basic_id"
EXPIRED_AT_FIELD = "expired_at"


def as_utc(value: Optional[datetime]) -> datetime:
    """Normalize a creation timestamp; a missing value means now, naive values are UTC."""
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TokenInfo(BaseModel):
    """
    Token information handed to the store by the OAuth2 server.

    Any of code, access and refresh may be empty depending on the grant type.
    The store only reads these values and serializes the whole object as the
    opaque payload of its basic records.
    """
    client_id: str = ""
    user_id: str = ""
    redirect_uri: str = ""
    scope: str = ""

    code: str = ""
    code_challenge: str = ""
    code_challenge_method: str = ""
    code_create_at: Optional[datetime] = None
    code_expires_in: timedelta = timedelta(0)

    access: str = ""
    access_create_at: Optional[datetime] = None
    access_expires_in: timedelta = timedelta(0)

    refresh: str = ""
    refresh_create_at: Optional[datetime] = None
    refresh_expires_in: timedelta = timedelta(0)

    def code_expires_at(self) -> datetime:
        return as_utc(self.code_create_at) + self.code_expires_in

    def access_expires_at(self) -> datetime:
        return as_utc(self.access_create_at) + self.access_expires_in

    def refresh_expires_at(self) -> datetime:
        return as_utc(self.refresh_create_at) + self.refresh_expires_in


class TokenCollectionConfig(BaseModel):
    """Names of the collections backing the token store."""
    txn: str = Field(
        default="oauth2_txn",
        description="Reserved transaction collection name. Declared for compatibility, never written."
    )
    basic: str = Field(default="oauth2_basic", description="Serialized token payloads.")
    access: str = Field(default="oauth2_access", description="Access token -> basic record references.")
    refresh: str = Field(default="oauth2_refresh", description="Refresh token -> basic record references.")


class BasicRecord(BaseModel):
    """A serialized token payload keyed by authorization code or generated id."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias=ID_FIELD)
    data: str
    expired_at: datetime

    def to_document(self) -> Dict[str, Any]:
        return {ID_FIELD: self.id, DATA_FIELD: self.data, EXPIRED_AT_FIELD: self.expired_at}

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "BasicRecord":
        return cls.model_validate(document)


class TokenRecord(BaseModel):
    """An access or refresh token pointing at the basic record that holds its payload."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias=ID_FIELD)
    basic_id: str
    expired_at: datetime

    def to_document(self) -> Dict[str, Any]:
        return {ID_FIELD: self.id, BASIC_ID_FIELD: self.basic_id, EXPIRED_AT_FIELD: self.expired_at}

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "TokenRecord":
        return cls.model_validate(document)
