"""
Translate abstract air-conditioner actions into provider command batches.

The dispatcher resolves a live token, builds the ordered command list and
hands it to the provider adapter. Failures propagate as typed errors and are
never retried.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from easybreezy.clients.providers import ProviderAdapter, ProviderRegistry
from easybreezy.core.errors import ValidationError
from easybreezy.schemas.devices import (
    CommandResult,
    DeviceCommand,
    NormalizedDevice,
    NormalizedStatus,
)
from easybreezy.services.authorization_state import Clock, utc_now
from easybreezy.services.token_store import TokenLifecycleStore

logger = logging.getLogger(__name__)

Temperature = Union[int, float]

DEFAULT_TEMPERATURE = 22
DEFAULT_FAN_MODE = "auto"


def build_turn_on_commands(
    temperature: Temperature, fan_mode: Optional[str]
) -> list[DeviceCommand]:
    # Order is significant: power on precedes mode and setpoint commands.
    commands = [
        DeviceCommand(capability="switch", action="on"),
        DeviceCommand(
            capability="airConditionerMode",
            action="setAirConditionerMode",
            arguments=["cool"],
        ),
        DeviceCommand(
            capability="thermostatCoolingSetpoint",
            action="setCoolingSetpoint",
            arguments=[temperature],
        ),
    ]
    if fan_mode:
        commands.append(
            DeviceCommand(
                capability="airConditionerFanMode",
                action="setAirConditionerFanMode",
                arguments=[fan_mode],
            )
        )
    return commands


def build_turn_off_commands() -> list[DeviceCommand]:
    return [DeviceCommand(capability="switch", action="off")]


def build_set_temperature_commands(temperature: Temperature) -> list[DeviceCommand]:
    return [
        DeviceCommand(
            capability="thermostatCoolingSetpoint",
            action="setCoolingSetpoint",
            arguments=[temperature],
        )
    ]


class CommandDispatcher:
    """Runs device queries and actions on behalf of a connected user."""

    def __init__(
        self,
        token_store: TokenLifecycleStore,
        registry: ProviderRegistry,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._tokens = token_store
        self._registry = registry
        self._clock = clock

    def _resolve(self, user_id: Optional[str], provider: str) -> tuple[ProviderAdapter, str]:
        if not user_id:
            raise ValidationError("userId is required", provider=provider)
        adapter = self._registry.get(provider)
        return adapter, self._tokens.get(user_id, provider)

    async def list_devices(
        self, user_id: Optional[str], provider: str
    ) -> list[NormalizedDevice]:
        adapter, access_token = self._resolve(user_id, provider)
        return list(await adapter.list_devices(access_token))

    async def device_status(
        self, user_id: Optional[str], device_id: str, provider: str
    ) -> NormalizedStatus:
        adapter, access_token = self._resolve(user_id, provider)
        return await adapter.fetch_status(access_token, device_id)

    async def _dispatch(
        self,
        *,
        action: str,
        user_id: Optional[str],
        device_id: str,
        provider: str,
        commands: list[DeviceCommand],
        settings: dict[str, Any],
    ) -> CommandResult:
        adapter, access_token = self._resolve(user_id, provider)
        ack = await adapter.send_command(access_token, device_id, commands)
        return CommandResult(
            action=action,
            device_id=device_id,
            provider=provider,
            settings=settings,
            timestamp=self._clock(),
            provider_ack=ack,
        )

    async def turn_on(
        self,
        user_id: Optional[str],
        device_id: str,
        provider: str,
        temperature: Temperature = DEFAULT_TEMPERATURE,
        fan_mode: Optional[str] = DEFAULT_FAN_MODE,
    ) -> CommandResult:
        result = await self._dispatch(
            action="turn_on",
            user_id=user_id,
            device_id=device_id,
            provider=provider,
            commands=build_turn_on_commands(temperature, fan_mode),
            settings={
                "mode": "cool",
                "temperature": temperature,
                "fanMode": fan_mode,
                "power": "on",
            },
        )
        logger.info("AC turned ON for device %s by user %s", device_id, user_id)
        return result

    async def turn_off(
        self, user_id: Optional[str], device_id: str, provider: str
    ) -> CommandResult:
        result = await self._dispatch(
            action="turn_off",
            user_id=user_id,
            device_id=device_id,
            provider=provider,
            commands=build_turn_off_commands(),
            settings={"power": "off"},
        )
        logger.info("AC turned OFF for device %s by user %s", device_id, user_id)
        return result

    async def set_temperature(
        self,
        user_id: Optional[str],
        device_id: str,
        provider: str,
        temperature: Optional[Temperature],
    ) -> CommandResult:
        if temperature is None:
            raise ValidationError("userId and temperature are required", provider=provider)

        result = await self._dispatch(
            action="set_temperature",
            user_id=user_id,
            device_id=device_id,
            provider=provider,
            commands=build_set_temperature_commands(temperature),
            settings={"temperature": temperature},
        )
        logger.info(
            "AC temperature set to %s for device %s by user %s",
            temperature,
            device_id,
            user_id,
        )
        return result


__all__ = [
    "CommandDispatcher",
    "build_set_temperature_commands",
    "build_turn_off_commands",
    "build_turn_on_commands",
]
