"""HTTP utilities for bounded, single-attempt provider calls."""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx

ErrorFactory = Callable[..., Exception]


class RequestConfig:
    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.transport = transport


def response_payload(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text or None


async def send_request(
    method: str,
    url: str,
    *,
    request_config: RequestConfig | None = None,
    error_factory: ErrorFactory,
    failure_message: str,
    **kwargs: Any,
) -> httpx.Response:
    """
    Issue one request and convert any failure with ``error_factory``.

    Transport errors and timeouts raise immediately; non-2xx responses raise
    with the upstream body as ``details``. Nothing is retried.
    """
    config = request_config or RequestConfig()
    try:
        async with httpx.AsyncClient(
            timeout=config.timeout_seconds, transport=config.transport
        ) as client:
            response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as exc:
        raise error_factory(
            f"{failure_message}: upstream timed out", details=str(exc) or None
        ) from exc
    except httpx.HTTPError as exc:
        raise error_factory(failure_message, details=str(exc) or None) from exc

    if response.is_error:
        raise error_factory(failure_message, details=response_payload(response))
    return response


__all__ = ["RequestConfig", "response_payload", "send_request"]
