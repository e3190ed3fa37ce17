"""Lookup table from provider key to its adapter, built once at startup."""

from __future__ import annotations

from typing import Iterable, Optional

import httpx

from easybreezy.clients.providers.base import ProviderAdapter
from easybreezy.clients.providers.googlehome import GoogleHomeAdapter
from easybreezy.clients.providers.smartthings import SmartThingsAdapter
from easybreezy.core.config import AppSettings
from easybreezy.core.errors import ValidationError
from easybreezy.models.oauth import ProviderConfig
from easybreezy.utils.http import RequestConfig


class ProviderRegistry:
    def __init__(self, adapters: Iterable[ProviderAdapter]) -> None:
        self._adapters = {adapter.key: adapter for adapter in adapters}

    def keys(self) -> list[str]:
        return list(self._adapters)

    def __contains__(self, provider: object) -> bool:
        return provider in self._adapters

    def get(self, provider: str) -> ProviderAdapter:
        adapter = self._adapters.get(provider)
        if adapter is None:
            raise ValidationError(
                f"Invalid provider. Supported: {', '.join(self.keys())}",
                provider=provider,
            )
        return adapter


def build_provider_registry(
    settings: AppSettings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProviderRegistry:
    """Create one adapter per configured provider."""
    request_config = RequestConfig(
        timeout_seconds=settings.http.timeout_seconds, transport=transport
    )
    smartthings = settings.smartthings
    googlehome = settings.googlehome

    return ProviderRegistry(
        [
            SmartThingsAdapter(
                ProviderConfig(
                    auth_url=smartthings.auth_url,
                    token_url=smartthings.token_url,
                    client_id=smartthings.client_id,
                    client_secret=smartthings.client_secret,
                    scope=smartthings.scope,
                    redirect_uri=settings.redirect_uri_for(SmartThingsAdapter.key),
                ),
                api_base_url=smartthings.api_base_url,
                request_config=request_config,
            ),
            GoogleHomeAdapter(
                ProviderConfig(
                    auth_url=googlehome.auth_url,
                    token_url=googlehome.token_url,
                    client_id=googlehome.client_id,
                    client_secret=googlehome.client_secret,
                    scope=googlehome.scope,
                    redirect_uri=settings.redirect_uri_for(GoogleHomeAdapter.key),
                ),
                request_config=request_config,
            ),
        ]
    )


__all__ = ["ProviderRegistry", "build_provider_registry"]
