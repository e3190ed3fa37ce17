"""Provider-independent device, command and result schemas."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional, Union

from pydantic import Field

from .auth import CamelModel

UNKNOWN = "unknown"


class DeviceCommand(CamelModel):
    """Atomic command sent to a provider; batches keep their order."""

    component: str = "main"
    capability: str
    action: str
    arguments: List[Any] = Field(default_factory=list)


class NormalizedDevice(CamelModel):
    id: str
    name: Optional[str] = None
    type: str = "air_conditioner"
    provider: str
    capabilities: List[str] = Field(default_factory=list)
    status: str = UNKNOWN


class NormalizedStatus(CamelModel):
    """Device status with every missing field set to an explicit sentinel."""

    device_id: str
    provider: str
    power: str = UNKNOWN
    mode: str = UNKNOWN
    thermostat_mode: str = UNKNOWN
    fan_mode: str = UNKNOWN
    temperature: Optional[Union[int, float]] = None
    cooling_setpoint: Optional[float] = None
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CommandResult(CamelModel):
    success: bool = True
    action: Literal["turn_on", "turn_off", "set_temperature"]
    device_id: str
    provider: str
    settings: dict[str, Any]
    timestamp: datetime
    provider_ack: Any = None


class TurnOnRequest(CamelModel):
    """Body for ``POST /devices/{id}/turn-on``."""

    user_id: Optional[str] = None
    provider: str = "smartthings"
    temperature: Union[int, float] = 22
    fan_mode: Optional[str] = "auto"


class TurnOffRequest(CamelModel):
    user_id: Optional[str] = None
    provider: str = "smartthings"


class SetTemperatureRequest(CamelModel):
    user_id: Optional[str] = None
    provider: str = "smartthings"
    temperature: Optional[Union[int, float]] = None


class DeviceListResponse(CamelModel):
    success: bool = True
    devices: List[NormalizedDevice]
    provider: str
    count: int


class DeviceStatusResponse(CamelModel):
    success: bool = True
    device_status: NormalizedStatus
    provider: str


__all__ = [
    "CommandResult",
    "DeviceCommand",
    "DeviceListResponse",
    "DeviceStatusResponse",
    "NormalizedDevice",
    "NormalizedStatus",
    "SetTemperatureRequest",
    "TurnOffRequest",
    "TurnOnRequest",
    "UNKNOWN",
]
