"""
Application configuration models and helpers.

Centralizes settings management so the HTTP layer, the OAuth flow and the
provider adapters share one configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class _EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")


class SmartThingsSettings(_EnvSettings):
    """OAuth client and API endpoints for Samsung SmartThings."""

    client_id: Optional[str] = Field(None, validation_alias="SMARTTHINGS_CLIENT_ID")
    client_secret: Optional[str] = Field(
        None, validation_alias="SMARTTHINGS_CLIENT_SECRET"
    )
    auth_url: str = Field(
        "https://account.smartthings.com/oauth/authorize",
        validation_alias="SMARTTHINGS_AUTH_URL",
    )
    token_url: str = Field(
        "https://auth-global.api.smartthings.com/oauth/token",
        validation_alias="SMARTTHINGS_TOKEN_URL",
    )
    api_base_url: str = Field(
        "https://api.smartthings.com/v1",
        validation_alias="SMARTTHINGS_API_URL",
    )
    scope: str = Field("r:devices:* w:devices:*", validation_alias="SMARTTHINGS_SCOPE")


class GoogleHomeSettings(_EnvSettings):
    """OAuth client configuration for Google Home (HomeGraph)."""

    client_id: Optional[str] = Field(None, validation_alias="GOOGLE_CLIENT_ID")
    client_secret: Optional[str] = Field(None, validation_alias="GOOGLE_CLIENT_SECRET")
    auth_url: str = Field(
        "https://accounts.google.com/o/oauth2/v2/auth",
        validation_alias="GOOGLE_AUTH_URL",
    )
    token_url: str = Field(
        "https://oauth2.googleapis.com/token",
        validation_alias="GOOGLE_TOKEN_URL",
    )
    scope: str = Field(
        "https://www.googleapis.com/auth/homegraph",
        validation_alias="GOOGLE_HOME_SCOPE",
    )


class OAuthSettings(_EnvSettings):
    """OAuth flow configuration."""

    state_ttl_seconds: int = Field(600, validation_alias="OAUTH_STATE_TTL")


class HttpSettings(_EnvSettings):
    """Outbound HTTP behaviour for provider calls."""

    timeout_seconds: float = Field(10.0, validation_alias="UPSTREAM_TIMEOUT_SECONDS")


class SecuritySettings(_EnvSettings):
    """Security-related configuration."""

    token_encryption_secret: Optional[str] = Field(
        None,
        validation_alias="TOKEN_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for encrypting held tokens."
        ),
    )


class AppSettings(_EnvSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        populate_by_name=True,
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    base_url: str = Field(
        "http://localhost:3000",
        validation_alias="BASE_URL",
        description="Public URL of this service; OAuth redirect URIs hang off it.",
    )
    frontend_url: str = Field(
        "http://localhost:8080",
        validation_alias=AliasChoices("FRONTEND_URL", "FRONTEND_BASE_URL"),
        description="Origin of the client application allowed by CORS.",
    )
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    smartthings: SmartThingsSettings = Field(default_factory=SmartThingsSettings)
    googlehome: GoogleHomeSettings = Field(default_factory=GoogleHomeSettings)

    @field_validator("base_url", "frontend_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Redirect URIs are built by appending paths to these URLs."""
        return value.rstrip("/")

    def redirect_uri_for(self, provider: str) -> str:
        return f"{self.base_url}/auth/{provider}/callback"


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "GoogleHomeSettings",
    "HttpSettings",
    "OAuthSettings",
    "SecuritySettings",
    "SmartThingsSettings",
    "get_settings",
]
