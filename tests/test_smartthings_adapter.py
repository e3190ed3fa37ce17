try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from easybreezy.clients.providers import SmartThingsAdapter
from easybreezy.core.errors import (
    ProviderCommandError,
    ProviderConfigurationError,
    ProviderExchangeError,
)
from easybreezy.models.oauth import ProviderConfig
from easybreezy.schemas.devices import DeviceCommand
from easybreezy.utils.http import RequestConfig

API = "https://api.smartthings.example/v1"
TOKEN_URL = "https://auth.smartthings.example/oauth/token"


class RecordingHandler:
    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _config(**overrides) -> ProviderConfig:
    values = {
        "auth_url": "https://account.smartthings.example/oauth/authorize",
        "token_url": TOKEN_URL,
        "client_id": "client",
        "client_secret": "secret",
        "scope": "r:devices:* w:devices:*",
        "redirect_uri": "https://broker.example.com/auth/smartthings/callback",
    }
    values.update(overrides)
    return ProviderConfig(**values)


def _adapter(handler: RecordingHandler, **overrides) -> SmartThingsAdapter:
    return SmartThingsAdapter(
        _config(**overrides),
        api_base_url=API,
        request_config=RequestConfig(
            timeout_seconds=5, transport=httpx.MockTransport(handler)
        ),
    )


def _device(device_id: str, *capabilities: str) -> dict:
    return {
        "deviceId": device_id,
        "name": f"raw-{device_id}",
        "label": f"Device {device_id}",
        "components": [
            {"id": "main", "capabilities": [{"id": c, "version": 1} for c in capabilities]}
        ],
    }


def test_authorization_url_carries_oauth_parameters() -> None:
    adapter = _adapter(RecordingHandler(httpx.Response(200)))

    url = adapter.build_authorization_url("state-123")

    parts = urlsplit(url)
    params = {key: values[0] for key, values in parse_qs(parts.query).items()}
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == _config().auth_url
    assert params == {
        "client_id": "client",
        "redirect_uri": "https://broker.example.com/auth/smartthings/callback",
        "response_type": "code",
        "scope": "r:devices:* w:devices:*",
        "state": "state-123",
    }


def test_authorization_url_requires_credentials() -> None:
    adapter = _adapter(RecordingHandler(httpx.Response(200)), client_secret=None)

    with pytest.raises(ProviderConfigurationError):
        adapter.build_authorization_url("state-123")


@pytest.mark.asyncio
async def test_exchange_code_posts_form_encoded_grant() -> None:
    handler = RecordingHandler(
        httpx.Response(
            200,
            json={
                "access_token": "access",
                "refresh_token": "refresh",
                "expires_in": 3600,
                "token_type": "bearer",
            },
        )
    )
    adapter = _adapter(handler)

    tokens = await adapter.exchange_code("abc")

    assert tokens.access_token == "access"
    assert tokens.refresh_token == "refresh"
    assert tokens.expires_in == 3600

    request = handler.requests[0]
    assert str(request.url) == TOKEN_URL
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    form = {key: values[0] for key, values in parse_qs(request.content.decode()).items()}
    assert form["grant_type"] == "authorization_code"
    assert form["code"] == "abc"
    assert form["client_id"] == "client"
    assert form["client_secret"] == "secret"
    assert form["redirect_uri"] == "https://broker.example.com/auth/smartthings/callback"


@pytest.mark.asyncio
async def test_exchange_error_passes_provider_payload_through() -> None:
    upstream = {"error": "invalid_grant", "error_description": "Invalid authorization code"}
    adapter = _adapter(RecordingHandler(httpx.Response(400, json=upstream)))

    with pytest.raises(ProviderExchangeError) as excinfo:
        await adapter.exchange_code("stale-code")

    assert excinfo.value.details == upstream
    assert excinfo.value.provider == "smartthings"


@pytest.mark.asyncio
async def test_exchange_rejects_incomplete_token_payload() -> None:
    adapter = _adapter(RecordingHandler(httpx.Response(200, json={"token_type": "bearer"})))

    with pytest.raises(ProviderExchangeError) as excinfo:
        await adapter.exchange_code("abc")

    assert excinfo.value.details == {"token_type": "bearer"}


@pytest.mark.asyncio
async def test_list_devices_keeps_only_climate_devices() -> None:
    handler = RecordingHandler(
        httpx.Response(
            200,
            json={
                "items": [
                    _device("plug", "switch"),
                    _device("ac", "airConditionerMode", "switch"),
                    _device("sensor", "temperatureMeasurement"),
                ]
            },
        )
    )
    adapter = _adapter(handler)

    devices = await adapter.list_devices("token-1")

    listed = list(devices)
    assert [device.id for device in listed] == ["ac"]
    assert listed[0].name == "Device ac"
    assert listed[0].capabilities == ["airConditionerMode", "switch"]
    assert listed[0].type == "air_conditioner"
    assert list(devices) == []

    request = handler.requests[0]
    assert str(request.url) == f"{API}/devices"
    assert request.headers["authorization"] == "Bearer token-1"


@pytest.mark.asyncio
async def test_list_devices_accepts_keyed_components() -> None:
    handler = RecordingHandler(
        httpx.Response(
            200,
            json={
                "items": [
                    {
                        "deviceId": "thermo",
                        "name": "Hallway",
                        "components": {"main": {"capabilities": ["thermostatMode"]}},
                    },
                    {"deviceId": "bare"},
                    {
                        "label": "No id",
                        "components": [
                            {"id": "main", "capabilities": [{"id": "airConditionerMode"}]}
                        ],
                    },
                ]
            },
        )
    )

    devices = list(await _adapter(handler).list_devices("token"))

    assert [(device.id, device.name) for device in devices] == [("thermo", "Hallway")]


@pytest.mark.asyncio
async def test_fetch_status_normalizes_capability_attributes() -> None:
    handler = RecordingHandler(
        httpx.Response(
            200,
            json={
                "components": {
                    "main": {
                        "switch": {"switch": {"value": "on"}},
                        "airConditionerMode": {"airConditionerMode": {"value": "cool"}},
                        "airConditionerFanMode": {"fanMode": {"value": "high"}},
                        "temperatureMeasurement": {
                            "temperature": {"value": 24, "unit": "C"}
                        },
                        "thermostatCoolingSetpoint": {
                            "coolingSetpoint": {"value": 21, "unit": "C"}
                        },
                    }
                }
            },
        )
    )

    status = await _adapter(handler).fetch_status("token", "dev1")

    assert str(handler.requests[0].url) == f"{API}/devices/dev1/status"
    assert status.device_id == "dev1"
    assert status.power == "on"
    assert status.mode == "cool"
    assert status.fan_mode == "high"
    assert status.temperature == 24
    assert status.cooling_setpoint == 21
    assert status.thermostat_mode == "unknown"


@pytest.mark.asyncio
async def test_fetch_status_defaults_missing_fields() -> None:
    status = await _adapter(RecordingHandler(httpx.Response(200, json={}))).fetch_status(
        "token", "dev1"
    )

    assert status.power == "unknown"
    assert status.mode == "unknown"
    assert status.thermostat_mode == "unknown"
    assert status.fan_mode == "unknown"
    assert status.temperature is None
    assert status.cooling_setpoint is None


@pytest.mark.asyncio
async def test_fetch_status_falls_back_to_thermostat_fan_mode() -> None:
    payload = {
        "components": {
            "main": {"thermostatFanMode": {"thermostatFanMode": {"value": "circulate"}}}
        }
    }

    status = await _adapter(RecordingHandler(httpx.Response(200, json=payload))).fetch_status(
        "token", "dev1"
    )

    assert status.fan_mode == "circulate"


@pytest.mark.asyncio
async def test_send_command_preserves_order_and_native_shape() -> None:
    handler = RecordingHandler(
        httpx.Response(200, json={"results": [{"id": "1", "status": "ACCEPTED"}]})
    )
    commands = [
        DeviceCommand(capability="switch", action="on"),
        DeviceCommand(
            capability="airConditionerMode",
            action="setAirConditionerMode",
            arguments=["cool"],
        ),
    ]

    ack = await _adapter(handler).send_command("token", "dev1", commands)

    assert ack == {"results": [{"id": "1", "status": "ACCEPTED"}]}
    request = handler.requests[0]
    assert request.method == "POST"
    assert str(request.url) == f"{API}/devices/dev1/commands"
    assert json.loads(request.content) == {
        "commands": [
            {"component": "main", "capability": "switch", "command": "on"},
            {
                "component": "main",
                "capability": "airConditionerMode",
                "command": "setAirConditionerMode",
                "arguments": ["cool"],
            },
        ]
    }


@pytest.mark.asyncio
async def test_send_command_failure_keeps_upstream_error() -> None:
    upstream = {"requestId": "r1", "error": {"code": "ConstraintViolationError"}}
    adapter = _adapter(RecordingHandler(httpx.Response(422, json=upstream)))

    with pytest.raises(ProviderCommandError) as excinfo:
        await adapter.send_command(
            "token", "dev1", [DeviceCommand(capability="switch", action="off")]
        )

    assert excinfo.value.details == upstream


@pytest.mark.asyncio
async def test_timeout_becomes_command_error_without_retry() -> None:
    handler = RecordingHandler(httpx.ReadTimeout("read timed out"))

    with pytest.raises(ProviderCommandError) as excinfo:
        await _adapter(handler).list_devices("token")

    assert "timed out" in excinfo.value.message
    assert len(handler.requests) == 1
