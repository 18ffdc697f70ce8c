# oauth2_mongo/oauth/expiry.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .models import TokenInfo


class TokenExpiry(BaseModel):
    """Expiration timestamps assigned to the records written for one token info."""
    model_config = ConfigDict(frozen=True)

    code_expires_at: Optional[datetime] = None
    access_expires_at: datetime
    refresh_expires_at: datetime
    basic_expires_at: datetime


def compute_token_expiry(info: TokenInfo) -> TokenExpiry:
    """
    Compute record expirations for a token info.

    Without a refresh token every record shares the access token expiry.
    With a refresh token the access record is clamped to the earlier of the
    two expiries, the refresh record keeps the refresh token's own expiry,
    and the basic record uses the later one so the payload outlives every
    reference.
    """
    code_expires_at = info.code_expires_at() if info.code else None

    access_expires_at = info.access_expires_at()
    if not info.refresh:
        return TokenExpiry(
            code_expires_at=code_expires_at,
            access_expires_at=access_expires_at,
            refresh_expires_at=access_expires_at,
            basic_expires_at=access_expires_at,
        )

    refresh_expires_at = info.refresh_expires_at()
    return TokenExpiry(
        code_expires_at=code_expires_at,
        access_expires_at=min(access_expires_at, refresh_expires_at),
        refresh_expires_at=refresh_expires_at,
        basic_expires_at=max(access_expires_at, refresh_expires_at),
    )
