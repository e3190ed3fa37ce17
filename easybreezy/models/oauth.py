"""
Domain models for the OAuth authorization flow and token lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, slots=True)
class AuthorizationState:
    """A pending authorization request awaiting the provider redirect."""

    state_token: str
    provider: str
    user_id: str
    created_at: datetime


class ProviderConfig(BaseModel):
    """Static OAuth client configuration for a single provider."""

    model_config = ConfigDict(frozen=True)

    auth_url: str
    token_url: str
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    scope: str
    redirect_uri: str

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)


class TokenResponse(BaseModel):
    """Token endpoint reply for an authorization-code grant."""

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: int = Field(..., ge=0)
    token_type: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TokenResponse":
        return cls.model_validate(dict(payload))


class OAuthTokenRecord(BaseModel):
    """Represents a token record held for a (user, provider) pair.

    Token values are stored encrypted; ``TokenLifecycleStore`` decrypts them
    on the way out.
    """

    user_id: str
    provider: str
    access_token_encrypted: str
    refresh_token_encrypted: Optional[str] = None
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


__all__ = [
    "AuthorizationState",
    "OAuthTokenRecord",
    "ProviderConfig",
    "TokenResponse",
]
