"""
Factory functions to provide shared stores and services as FastAPI dependencies.

Each factory is cached so the state and token maps are process-wide; tests
swap them out through ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from easybreezy.clients import InMemoryKeyValueStore, ProviderRegistry, build_provider_registry
from easybreezy.core.config import get_settings
from easybreezy.services import (
    AuthorizationStateManager,
    CommandDispatcher,
    TokenCipherService,
    TokenLifecycleStore,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_provider_registry() -> ProviderRegistry:
    """Build every provider adapter once per process."""
    return build_provider_registry(_settings())


@lru_cache()
def get_authorization_state_manager() -> AuthorizationStateManager:
    """Provide the process-wide OAuth state tracker."""
    settings = _settings()
    return AuthorizationStateManager(
        InMemoryKeyValueStore(),
        ttl_seconds=settings.oauth.state_ttl_seconds,
    )


@lru_cache()
def get_token_cipher_service() -> TokenCipherService:
    """Provide symmetric encryption helper for held tokens."""
    settings = _settings()
    return TokenCipherService(secret=settings.security.token_encryption_secret)


@lru_cache()
def get_token_store() -> TokenLifecycleStore:
    """Provide the process-wide token store."""
    return TokenLifecycleStore(InMemoryKeyValueStore(), get_token_cipher_service())


def get_command_dispatcher(
    token_store: Annotated[TokenLifecycleStore, Depends(get_token_store)],
    registry: Annotated[ProviderRegistry, Depends(get_provider_registry)],
) -> CommandDispatcher:
    """Build a dispatcher over the shared token store and registry."""
    return CommandDispatcher(token_store, registry)


__all__ = [
    "get_authorization_state_manager",
    "get_command_dispatcher",
    "get_provider_registry",
    "get_token_cipher_service",
    "get_token_store",
]
