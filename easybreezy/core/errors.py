"""
Typed failures raised by the OAuth and device-control core.

Each error carries a stable ``kind`` and HTTP status so the API layer can
render one envelope for every failure. Upstream payloads travel unmodified in
``details``.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Optional


class BrokerError(Exception):
    """Base class for every failure the broker reports to clients."""

    kind = "internal_error"
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        provider: Optional[str] = None,
        details: Any = None,
    ) -> None:
        self.message = message or self.default_message
        self.provider = provider
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "kind": self.kind,
        }
        if self.provider is not None:
            payload["provider"] = self.provider
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(BrokerError):
    """Required input was missing or malformed."""

    kind = "validation_error"
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid request."


class InvalidStateError(BrokerError):
    """OAuth state token is unknown, expired or bound to another provider."""

    kind = "invalid_state"
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid or expired state parameter"


class UnauthenticatedError(BrokerError):
    """No live token exists for the user and provider."""

    kind = "unauthenticated"
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "User not connected to provider or token expired"

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["needsAuth"] = True
        return payload


class ProviderExchangeError(BrokerError):
    """The provider's token endpoint rejected the authorization code."""

    kind = "provider_exchange_error"
    status_code = HTTPStatus.BAD_GATEWAY
    default_message = "Failed to exchange authorization code for tokens"


class ProviderCommandError(BrokerError):
    """A device API call against the provider failed."""

    kind = "provider_command_error"
    status_code = HTTPStatus.BAD_GATEWAY
    default_message = "Provider request failed"


class UnsupportedOperationError(BrokerError):
    """The provider adapter does not implement the requested operation."""

    kind = "unsupported_operation"
    status_code = HTTPStatus.NOT_IMPLEMENTED
    default_message = "Operation not supported by provider"


class ProviderConfigurationError(BrokerError):
    """OAuth credentials for the provider are not configured."""

    kind = "provider_configuration_error"
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "Provider OAuth credentials not configured"


class InternalError(BrokerError):
    """Unexpected fault; clients only see a generic message."""


__all__ = [
    "BrokerError",
    "InternalError",
    "InvalidStateError",
    "ProviderCommandError",
    "ProviderConfigurationError",
    "ProviderExchangeError",
    "UnauthenticatedError",
    "UnsupportedOperationError",
    "ValidationError",
]
