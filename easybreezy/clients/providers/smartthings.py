"""SmartThings adapter for air conditioners and thermostats."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

from easybreezy.clients.providers.base import ProviderAdapter
from easybreezy.core.errors import ProviderCommandError
from easybreezy.models.oauth import ProviderConfig
from easybreezy.schemas.devices import (
    UNKNOWN,
    DeviceCommand,
    NormalizedDevice,
    NormalizedStatus,
)
from easybreezy.utils.http import RequestConfig, response_payload, send_request

logger = logging.getLogger(__name__)

CLIMATE_CAPABILITIES = frozenset(
    {"airConditionerMode", "thermostatMode", "airConditionerFanMode"}
)

# (capability, attribute) lookups per normalized field, first hit wins.
_STATUS_ATTRIBUTES: dict[str, tuple[tuple[str, str], ...]] = {
    "power": (("switch", "switch"),),
    "mode": (("airConditionerMode", "airConditionerMode"),),
    "thermostat_mode": (("thermostatMode", "thermostatMode"),),
    "fan_mode": (
        ("airConditionerFanMode", "fanMode"),
        ("thermostatFanMode", "thermostatFanMode"),
    ),
    "temperature": (
        ("temperatureMeasurement", "temperature"),
        ("temperature", "temperature"),
    ),
    "cooling_setpoint": (("thermostatCoolingSetpoint", "coolingSetpoint"),),
}


def _attribute(main: Mapping[str, Any], capability: str, attribute: str) -> Any:
    """Read ``main.<capability>.<attribute>.value`` or the flat ``<capability>.value``."""
    section = main.get(capability)
    if not isinstance(section, Mapping):
        return None
    nested = section.get(attribute)
    if isinstance(nested, Mapping) and "value" in nested:
        return nested["value"]
    return section.get("value")


def _first_value(main: Mapping[str, Any], field: str) -> Any:
    for capability, attribute in _STATUS_ATTRIBUTES[field]:
        value = _attribute(main, capability, attribute)
        if value is not None:
            return value
    return None


def _main_capabilities(device: Mapping[str, Any]) -> list[str]:
    """Capability ids of the ``main`` component.

    SmartThings returns ``components`` as a list of ``{"id", "capabilities":
    [{"id", "version"}]}``; a keyed ``{"main": {"capabilities": [...]}}`` form
    is accepted as well.
    """
    components = device.get("components") or []
    main: Any = None
    if isinstance(components, Mapping):
        main = components.get("main")
    else:
        main = next(
            (c for c in components if isinstance(c, Mapping) and c.get("id") == "main"),
            None,
        )
    if not isinstance(main, Mapping):
        return []

    capabilities: list[str] = []
    for capability in main.get("capabilities") or []:
        if isinstance(capability, Mapping):
            capability = capability.get("id")
        if isinstance(capability, str):
            capabilities.append(capability)
    return capabilities


class SmartThingsAdapter(ProviderAdapter):
    key = "smartthings"
    display_name = "SmartThings"

    def __init__(
        self,
        config: ProviderConfig,
        *,
        api_base_url: str = "https://api.smartthings.com/v1",
        request_config: RequestConfig | None = None,
    ) -> None:
        super().__init__(config, request_config=request_config)
        self._api_base_url = api_base_url.rstrip("/")

    async def _call(
        self,
        method: str,
        path: str,
        access_token: str,
        *,
        failure_message: str,
        json: Optional[Any] = None,
    ) -> Any:
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        try:
            response = await send_request(
                method,
                f"{self._api_base_url}{path}",
                headers=headers,
                json=json,
                request_config=self._request_config,
                error_factory=self._error(ProviderCommandError),
                failure_message=failure_message,
            )
        except ProviderCommandError as exc:
            logger.error("%s (%s %s): %s", failure_message, method, path, exc.details)
            raise
        return response_payload(response)

    async def list_devices(self, access_token: str) -> Iterator[NormalizedDevice]:
        payload = await self._call(
            "GET", "/devices", access_token, failure_message="Failed to retrieve devices"
        )
        items = payload.get("items", []) if isinstance(payload, Mapping) else []
        return self._climate_devices(items)

    def _climate_devices(self, items: Iterable[Any]) -> Iterator[NormalizedDevice]:
        for device in items:
            if not isinstance(device, Mapping):
                continue
            capabilities = _main_capabilities(device)
            if not CLIMATE_CAPABILITIES.intersection(capabilities):
                continue
            if not device.get("deviceId"):
                logger.warning(
                    "Skipping SmartThings device without deviceId: %s",
                    device.get("label") or device.get("name"),
                )
                continue
            yield self._normalize_device(device, capabilities)

    def _normalize_device(
        self, device: Mapping[str, Any], capabilities: list[str]
    ) -> NormalizedDevice:
        return NormalizedDevice(
            id=device.get("deviceId"),
            name=device.get("label") or device.get("name"),
            provider=self.key,
            capabilities=capabilities,
        )

    async def fetch_status(self, access_token: str, device_id: str) -> NormalizedStatus:
        payload = await self._call(
            "GET",
            f"/devices/{device_id}/status",
            access_token,
            failure_message="Failed to get device status",
        )
        components = payload.get("components") if isinstance(payload, Mapping) else None
        main = (components or {}).get("main") or {}

        values = {field: _first_value(main, field) for field in _STATUS_ATTRIBUTES}
        return NormalizedStatus(
            device_id=device_id,
            provider=self.key,
            power=values["power"] or UNKNOWN,
            mode=values["mode"] or UNKNOWN,
            thermostat_mode=values["thermostat_mode"] or UNKNOWN,
            fan_mode=values["fan_mode"] or UNKNOWN,
            temperature=values["temperature"],
            cooling_setpoint=values["cooling_setpoint"],
        )

    async def send_command(
        self,
        access_token: str,
        device_id: str,
        commands: Sequence[DeviceCommand],
    ) -> Any:
        native = []
        for command in commands:
            entry: dict[str, Any] = {
                "component": command.component,
                "capability": command.capability,
                "command": command.action,
            }
            if command.arguments:
                entry["arguments"] = list(command.arguments)
            native.append(entry)

        return await self._call(
            "POST",
            f"/devices/{device_id}/commands",
            access_token,
            failure_message="Failed to send device commands",
            json={"commands": native},
        )


__all__ = ["CLIMATE_CAPABILITIES", "SmartThingsAdapter"]
