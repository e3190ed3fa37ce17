"""Expose constructed client wrappers."""

from .memory_store import InMemoryKeyValueStore, KeyValueStore
from .providers import (
    GoogleHomeAdapter,
    ProviderAdapter,
    ProviderRegistry,
    SmartThingsAdapter,
    build_provider_registry,
)

__all__ = [
    "GoogleHomeAdapter",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "ProviderAdapter",
    "ProviderRegistry",
    "SmartThingsAdapter",
    "build_provider_registry",
]
