"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_authorization_state_manager,
    get_command_dispatcher,
    get_provider_registry,
    get_token_cipher_service,
    get_token_store,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
    "get_authorization_state_manager",
    "get_command_dispatcher",
    "get_provider_registry",
    "get_token_cipher_service",
    "get_token_store",
]
