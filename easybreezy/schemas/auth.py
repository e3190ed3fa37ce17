"""Schemas related to OAuth flows."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

EpochMillis = Annotated[
    datetime,
    PlainSerializer(
        lambda value: round(value.timestamp() * 1000), return_type=int, when_used="json"
    ),
]


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys for the client app."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthorizationStartResponse(CamelModel):
    """Returned when a client starts the OAuth flow for a provider."""

    success: bool = True
    auth_url: str = Field(..., description="Provider consent URL to open.")
    state: str = Field(..., description="Opaque state token bound to this request.")
    provider: str


class ConnectionStatus(CamelModel):
    """Connection projection of the stored token for a user and provider."""

    connected: bool
    provider: str
    connected_at: Optional[EpochMillis] = None
    expires_at: Optional[EpochMillis] = None
    needs_refresh: bool = False


class CallbackResult(CamelModel):
    """JSON rendition of a completed OAuth callback."""

    success: bool = True
    status: str = "connected"
    provider: str
    user_id: str
    expires_at: EpochMillis


class DisconnectResponse(CamelModel):
    success: bool = True
    message: str
    was_connected: bool


__all__ = [
    "AuthorizationStartResponse",
    "CallbackResult",
    "CamelModel",
    "ConnectionStatus",
    "DisconnectResponse",
    "EpochMillis",
]
