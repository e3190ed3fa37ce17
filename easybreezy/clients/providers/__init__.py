"""Provider adapters and their registry."""

from .base import ProviderAdapter
from .googlehome import GoogleHomeAdapter
from .registry import ProviderRegistry, build_provider_registry
from .smartthings import CLIMATE_CAPABILITIES, SmartThingsAdapter

__all__ = [
    "CLIMATE_CAPABILITIES",
    "GoogleHomeAdapter",
    "ProviderAdapter",
    "ProviderRegistry",
    "SmartThingsAdapter",
    "build_provider_registry",
]
