"""
FastAPI routes for the OAuth flow and air-conditioner control.
"""

from __future__ import annotations

import html
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from easybreezy.core.errors import ProviderExchangeError, ValidationError
from easybreezy.dependencies import (
    get_app_settings,
    get_authorization_state_manager,
    get_command_dispatcher,
    get_provider_registry,
    get_token_store,
)
from easybreezy.schemas import (
    AuthorizationStartResponse,
    CallbackResult,
    CommandResult,
    ConnectionStatus,
    DeviceListResponse,
    DeviceStatusResponse,
    DisconnectResponse,
    SetTemperatureRequest,
    TurnOffRequest,
    TurnOnRequest,
)

router = APIRouter()
logger = logging.getLogger(__name__)

UserIdQuery = Annotated[
    Optional[str], Query(alias="userId", description="User identifier.")
]
ProviderQuery = Annotated[
    str, Query(description="Provider key, e.g. 'smartthings'.")
]

_SUCCESS_PAGE = """
<html>
  <body style="font-family: Arial, sans-serif; text-align: center; padding: 50px;">
    <h2>&#9989; Successfully Connected!</h2>
    <p>Your {provider_name} account has been connected.</p>
    <p>You can now close this window and return to the Easy Breezy app.</p>
    <script>
      setTimeout(() => {{ window.close(); }}, 3000);
    </script>
  </body>
</html>
"""


def _require_user_id(user_id: Optional[str], provider: str) -> str:
    if not user_id:
        raise ValidationError("userId is required", provider=provider)
    return user_id


def _prefers_json(request: Request) -> bool:
    accept = request.headers.get("accept", "").lower()
    return "application/json" in accept and "text/html" not in accept


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck(settings: Annotated[Any, Depends(get_app_settings)]) -> dict:
    """Simple health endpoint for monitoring."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
    }


@router.get("/api", status_code=HTTPStatus.OK)
async def describe_api(
    registry: Annotated[Any, Depends(get_provider_registry)],
) -> dict:
    """Describe the public endpoints and supported providers."""
    providers = ", ".join(registry.keys())
    return {
        "name": "Easy Breezy API",
        "description": "OAuth2 and device control API for Easy Breezy smart home app",
        "endpoints": {
            "auth": {
                "GET /auth/{provider}/start": f"Start OAuth flow (providers: {providers})",
                "GET /auth/{provider}/callback": "OAuth callback",
                "GET /auth/{provider}/status": "Check connection status",
                "DELETE /auth/{provider}/disconnect": "Disconnect provider",
            },
            "devices": {
                "GET /devices": "Get user devices",
                "GET /devices/{id}/status": "Get device status",
                "POST /devices/{id}/turn-on": "Turn on AC",
                "POST /devices/{id}/turn-off": "Turn off AC",
                "POST /devices/{id}/temperature": "Set AC temperature",
            },
        },
    }


@router.get("/auth/{provider}/start", response_model=AuthorizationStartResponse)
async def start_oauth_flow(
    provider: str,
    registry: Annotated[Any, Depends(get_provider_registry)],
    state_manager: Annotated[Any, Depends(get_authorization_state_manager)],
    user_id: UserIdQuery = None,
    redirect: bool = Query(
        default=False,
        description="When true, respond with a redirect to the provider consent screen.",
    ),
) -> Any:
    """Issue a state token and return the provider authorization URL."""
    adapter = registry.get(provider)
    user_id = _require_user_id(user_id, provider)
    adapter.require_credentials()

    state = state_manager.issue(provider, user_id)
    authorization_url = adapter.build_authorization_url(state)
    logger.info("Starting OAuth flow for %s with user %s", provider, user_id)

    if redirect:
        return RedirectResponse(
            url=authorization_url, status_code=HTTPStatus.TEMPORARY_REDIRECT
        )
    return AuthorizationStartResponse(
        auth_url=authorization_url, state=state, provider=provider
    )


@router.get("/auth/{provider}/callback")
async def handle_oauth_callback(
    provider: str,
    request: Request,
    registry: Annotated[Any, Depends(get_provider_registry)],
    state_manager: Annotated[Any, Depends(get_authorization_state_manager)],
    token_store: Annotated[Any, Depends(get_token_store)],
    code: Optional[str] = Query(default=None, description="Authorization code."),
    state: Optional[str] = Query(default=None, description="OAuth state token."),
    error: Optional[str] = Query(default=None, description="Provider error code."),
) -> Response:
    """Exchange the authorization code, store the tokens and consume the state."""
    if error:
        logger.error("OAuth error for %s: %s", provider, error)
        raise ValidationError(f"OAuth error: {error}", provider=provider)
    if not code or not state:
        raise ValidationError(
            "Missing authorization code or state parameter", provider=provider
        )

    adapter = registry.get(provider)
    pending = state_manager.claim(state, provider)

    try:
        tokens = await adapter.exchange_code(code)
    except ProviderExchangeError as exc:
        logger.error("Token exchange failed for %s: %s", provider, exc.details)
        state_manager.release(pending)
        raise

    record = token_store.store(pending.user_id, provider, tokens)

    if _prefers_json(request):
        result = CallbackResult(
            provider=provider, user_id=pending.user_id, expires_at=record.expires_at
        )
        return JSONResponse(content=result.model_dump(mode="json", by_alias=True))

    return HTMLResponse(
        _SUCCESS_PAGE.format(provider_name=html.escape(adapter.display_name))
    )


@router.get("/auth/{provider}/status", response_model=ConnectionStatus)
async def get_connection_status(
    provider: str,
    registry: Annotated[Any, Depends(get_provider_registry)],
    token_store: Annotated[Any, Depends(get_token_store)],
    user_id: UserIdQuery = None,
) -> ConnectionStatus:
    registry.get(provider)
    user_id = _require_user_id(user_id, provider)
    return token_store.status(user_id, provider)


@router.delete("/auth/{provider}/disconnect", response_model=DisconnectResponse)
async def disconnect_provider(
    provider: str,
    registry: Annotated[Any, Depends(get_provider_registry)],
    token_store: Annotated[Any, Depends(get_token_store)],
    user_id: UserIdQuery = None,
) -> DisconnectResponse:
    """Forget the stored tokens for a user; safe to repeat."""
    registry.get(provider)
    user_id = _require_user_id(user_id, provider)
    was_connected = token_store.delete(user_id, provider)
    return DisconnectResponse(
        message=f"{provider} disconnected successfully", was_connected=was_connected
    )


@router.get("/devices", response_model=DeviceListResponse)
async def list_devices(
    dispatcher: Annotated[Any, Depends(get_command_dispatcher)],
    user_id: UserIdQuery = None,
    provider: ProviderQuery = "smartthings",
) -> DeviceListResponse:
    """List the user's air conditioners and thermostats."""
    devices = await dispatcher.list_devices(user_id, provider)
    return DeviceListResponse(devices=devices, provider=provider, count=len(devices))


@router.get("/devices/{device_id}/status", response_model=DeviceStatusResponse)
async def get_device_status(
    device_id: str,
    dispatcher: Annotated[Any, Depends(get_command_dispatcher)],
    user_id: UserIdQuery = None,
    provider: ProviderQuery = "smartthings",
) -> DeviceStatusResponse:
    status = await dispatcher.device_status(user_id, device_id, provider)
    return DeviceStatusResponse(device_status=status, provider=provider)


@router.post("/devices/{device_id}/turn-on", response_model=CommandResult)
async def turn_on_device(
    device_id: str,
    payload: TurnOnRequest,
    dispatcher: Annotated[Any, Depends(get_command_dispatcher)],
) -> CommandResult:
    """Power on in cooling mode with the requested setpoint and fan mode."""
    return await dispatcher.turn_on(
        payload.user_id,
        device_id,
        payload.provider,
        temperature=payload.temperature,
        fan_mode=payload.fan_mode,
    )


@router.post("/devices/{device_id}/turn-off", response_model=CommandResult)
async def turn_off_device(
    device_id: str,
    payload: TurnOffRequest,
    dispatcher: Annotated[Any, Depends(get_command_dispatcher)],
) -> CommandResult:
    return await dispatcher.turn_off(payload.user_id, device_id, payload.provider)


@router.post("/devices/{device_id}/temperature", response_model=CommandResult)
async def set_device_temperature(
    device_id: str,
    payload: SetTemperatureRequest,
    dispatcher: Annotated[Any, Depends(get_command_dispatcher)],
) -> CommandResult:
    return await dispatcher.set_temperature(
        payload.user_id, device_id, payload.provider, payload.temperature
    )
