"""Public schema exports."""

from .auth import (
    AuthorizationStartResponse,
    CallbackResult,
    ConnectionStatus,
    DisconnectResponse,
)
from .devices import (
    CommandResult,
    DeviceCommand,
    DeviceListResponse,
    DeviceStatusResponse,
    NormalizedDevice,
    NormalizedStatus,
    SetTemperatureRequest,
    TurnOffRequest,
    TurnOnRequest,
)

__all__ = [
    "AuthorizationStartResponse",
    "CallbackResult",
    "CommandResult",
    "ConnectionStatus",
    "DeviceCommand",
    "DeviceListResponse",
    "DeviceStatusResponse",
    "DisconnectResponse",
    "NormalizedDevice",
    "NormalizedStatus",
    "SetTemperatureRequest",
    "TurnOffRequest",
    "TurnOnRequest",
]
