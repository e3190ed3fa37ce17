"""Service layer exports."""

from .authorization_state import AuthorizationStateManager
from .command_dispatcher import CommandDispatcher
from .token_cipher import TokenCipherService
from .token_store import TokenLifecycleStore

__all__ = [
    "AuthorizationStateManager",
    "CommandDispatcher",
    "TokenCipherService",
    "TokenLifecycleStore",
]
