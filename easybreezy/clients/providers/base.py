"""
Provider-agnostic adapter contract for home-automation integrations.

Every provider implements the same surface: building the consent URL,
exchanging an authorization code, listing climate devices, reading their
status and sending ordered command batches. The OAuth half is shared here
because both supported providers speak the plain authorization-code grant;
device control is provider-specific.
"""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from typing import Any, Iterator, Sequence
from urllib.parse import urlencode

from pydantic import ValidationError as PydanticValidationError

from easybreezy.core.errors import (
    ProviderConfigurationError,
    ProviderExchangeError,
)
from easybreezy.models.oauth import ProviderConfig, TokenResponse
from easybreezy.schemas.devices import DeviceCommand, NormalizedDevice, NormalizedStatus
from easybreezy.utils.http import RequestConfig, response_payload, send_request


class ProviderAdapter(ABC):
    """Base class translating the normalized device model to one provider."""

    key: str
    display_name: str

    def __init__(
        self, config: ProviderConfig, *, request_config: RequestConfig | None = None
    ) -> None:
        self._config = config
        self._request_config = request_config or RequestConfig()

    @property
    def config(self) -> ProviderConfig:
        return self._config

    def require_credentials(self) -> None:
        if not self._config.has_credentials:
            raise ProviderConfigurationError(
                f"{self.key} OAuth credentials not configured", provider=self.key
            )

    def _error(self, error_cls: type[Exception]) -> Any:
        return functools.partial(error_cls, provider=self.key)

    def build_authorization_url(self, state_token: str) -> str:
        """Construct the provider consent URL carrying ``state_token``."""
        self.require_credentials()
        params = {
            "client_id": self._config.client_id,
            "redirect_uri": self._config.redirect_uri,
            "response_type": "code",
            "scope": self._config.scope,
            "state": state_token,
        }
        separator = "&" if "?" in self._config.auth_url else "?"
        return f"{self._config.auth_url}{separator}{urlencode(params)}"

    async def exchange_code(self, code: str) -> TokenResponse:
        """Exchange an authorization code for tokens at the token endpoint."""
        self.require_credentials()
        payload = {
            "grant_type": "authorization_code",
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
            "code": code,
            "redirect_uri": self._config.redirect_uri,
        }
        response = await send_request(
            "POST",
            self._config.token_url,
            data=payload,
            headers={"Accept": "application/json"},
            request_config=self._request_config,
            error_factory=self._error(ProviderExchangeError),
            failure_message="Failed to exchange authorization code for tokens",
        )

        token_payload = response_payload(response)
        if not isinstance(token_payload, dict):
            raise ProviderExchangeError(
                "Token endpoint returned a non-JSON payload.",
                provider=self.key,
                details=token_payload,
            )
        try:
            return TokenResponse.from_payload(token_payload)
        except PydanticValidationError as exc:
            raise ProviderExchangeError(
                f"Incomplete token payload returned from {self.display_name}.",
                provider=self.key,
                details=token_payload,
            ) from exc

    @abstractmethod
    async def list_devices(self, access_token: str) -> Iterator[NormalizedDevice]:
        """Fetch the inventory and yield climate-capable devices once."""

    @abstractmethod
    async def fetch_status(self, access_token: str, device_id: str) -> NormalizedStatus:
        """Read the provider status of ``device_id`` in normalized form."""

    @abstractmethod
    async def send_command(
        self,
        access_token: str,
        device_id: str,
        commands: Sequence[DeviceCommand],
    ) -> Any:
        """Send ``commands`` in order and return the provider acknowledgement."""


__all__ = ["ProviderAdapter"]
