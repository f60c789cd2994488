"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field


class TokenData(BaseModel):
    access_token: str = Field(min_length=1)
    expires_in: int = Field(gt=0)
    token_type: str = "bearer"


class TokenResponse(BaseModel):
    """Response from the OAuth2 password-grant endpoint ({"data": {...}})."""
    data: TokenData


class CachedToken(BaseModel):
    """A bearer token and the epoch-millisecond instant it stops being valid."""
    tenant_id: str
    token: str
    expires_at_ms: int

    model_config = {"frozen": True}

    def is_valid(self, now_ms: int) -> bool:
        return self.expires_at_ms > now_ms


class TokenStatus(BaseModel):
    """Current state of a tenant's cached access token."""
    tenant_id: str
    has_token: bool
    is_expired: bool
    expires_at: datetime | None = None
    seconds_remaining: int | None = None
