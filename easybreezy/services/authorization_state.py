"""
Issue and validate single-use OAuth state tokens.

A state token binds a pending authorization request to the provider and user
that started it. It is consumed exactly once when the provider redirects back
and is discarded after the TTL otherwise.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable

from easybreezy.clients.memory_store import KeyValueStore
from easybreezy.core.errors import InvalidStateError, ValidationError
from easybreezy.models.oauth import AuthorizationState

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_STATE_TOKEN_BYTES = 32


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuthorizationStateManager:
    """Tracks pending authorization requests keyed by their state token."""

    def __init__(
        self,
        store: KeyValueStore[str, AuthorizationState],
        *,
        ttl_seconds: int = 600,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def _is_expired(self, state: AuthorizationState, now: datetime) -> bool:
        return now - state.created_at > self._ttl

    def issue(self, provider: str, user_id: str) -> str:
        """Create a fresh state token for ``user_id`` authorizing ``provider``."""
        if not user_id:
            raise ValidationError("userId is required", provider=provider)

        now = self._clock()
        while True:
            token = secrets.token_hex(_STATE_TOKEN_BYTES)
            state = AuthorizationState(
                state_token=token,
                provider=provider,
                user_id=user_id,
                created_at=now,
            )
            if self._store.put_if_absent(token, state):
                break

        self.sweep()
        logger.info("Issued OAuth state for provider %s and user %s", provider, user_id)
        return token

    def validate(self, state_token: str, provider: str) -> AuthorizationState:
        """Return the pending request for ``state_token`` or raise InvalidStateError."""
        state = self._store.get(state_token) if state_token else None
        if state is None:
            raise InvalidStateError(provider=provider)

        if self._is_expired(state, self._clock()):
            self._store.delete(state_token)
            raise InvalidStateError(provider=provider)

        if state.provider != provider:
            logger.warning(
                "State token presented for %s but was issued for %s",
                provider,
                state.provider,
            )
            raise InvalidStateError(provider=provider)

        return state

    def claim(self, state_token: str, provider: str) -> AuthorizationState:
        """Atomically take the pending request for ``state_token`` out of the store.

        Only one caller can claim a given state; concurrent deliveries of the same
        redirect see InvalidStateError. A state presented for the wrong provider is
        put back untouched.
        """
        state = self._store.delete(state_token) if state_token else None
        if state is None:
            raise InvalidStateError(provider=provider)

        if self._is_expired(state, self._clock()):
            raise InvalidStateError(provider=provider)

        if state.provider != provider:
            self._store.put_if_absent(state_token, state)
            logger.warning(
                "State token presented for %s but was issued for %s",
                provider,
                state.provider,
            )
            raise InvalidStateError(provider=provider)

        return state

    def release(self, state: AuthorizationState) -> bool:
        """Return a claimed state to the store so the flow can be retried."""
        return self._store.put_if_absent(state.state_token, state)

    def consume(self, state_token: str) -> bool:
        """Delete the state so it can never be replayed."""
        return self._store.delete(state_token) is not None

    def sweep(self) -> int:
        """Drop every state older than the TTL."""
        now = self._clock()
        removed = self._store.sweep(lambda _, state: self._is_expired(state, now))
        if removed:
            logger.debug("Swept %d expired OAuth states", removed)
        return removed


__all__ = ["AuthorizationStateManager", "Clock", "utc_now"]
