"""
Exception handlers rendering every failure in one JSON envelope.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from easybreezy.core.errors import BrokerError, InternalError, ValidationError

logger = logging.getLogger(__name__)


def _render(error: BrokerError) -> JSONResponse:
    payload = error.to_payload()
    payload["timestamp"] = datetime.now(timezone.utc).isoformat()
    return JSONResponse(
        status_code=int(error.status_code), content=jsonable_encoder(payload)
    )


async def handle_broker_error(request: Request, exc: BrokerError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s: %s", request.url.path, exc.message)
        return _render(InternalError(provider=exc.provider))
    if exc.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error("%s on %s: %s", exc.kind, request.url.path, exc.message)
    return _render(exc)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _render(
        ValidationError("Invalid request.", details=jsonable_encoder(exc.errors()))
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _render(InternalError())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BrokerError, handle_broker_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


__all__ = ["register_exception_handlers"]
