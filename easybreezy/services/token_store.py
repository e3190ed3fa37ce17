"""
Per-(user, provider) OAuth token lifecycle.

Expiry is lazy: records are never evicted, but an expired record is treated
exactly like a missing one when a caller asks for an access token. There is
no refresh; an expired connection must be re-authorized.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from easybreezy.clients.memory_store import KeyValueStore
from easybreezy.core.errors import UnauthenticatedError
from easybreezy.models.oauth import OAuthTokenRecord, TokenResponse
from easybreezy.schemas.auth import ConnectionStatus
from easybreezy.services.authorization_state import Clock, utc_now
from easybreezy.services.token_cipher import TokenCipherService

logger = logging.getLogger(__name__)

TokenKey = tuple[str, str]


class TokenLifecycleStore:
    """Stores, looks up and invalidates OAuth tokens per user and provider."""

    def __init__(
        self,
        store: KeyValueStore[TokenKey, OAuthTokenRecord],
        cipher: TokenCipherService,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._cipher = cipher
        self._clock = clock

    def store(
        self, user_id: str, provider: str, token_response: TokenResponse
    ) -> OAuthTokenRecord:
        """Persist tokens from a fresh exchange, replacing any previous record."""
        now = self._clock()
        record = OAuthTokenRecord(
            user_id=user_id,
            provider=provider,
            access_token_encrypted=self._cipher.seal(token_response.access_token),
            refresh_token_encrypted=self._cipher.seal_optional(
                token_response.refresh_token
            ),
            expires_at=now + timedelta(seconds=token_response.expires_in),
            created_at=now,
        )
        self._store.put((user_id, provider), record)
        logger.info("Stored %s tokens for user %s", provider, user_id)
        return record

    def get(self, user_id: str, provider: str) -> str:
        """Return a live access token or raise UnauthenticatedError."""
        record = self._store.get((user_id, provider))
        if record is None:
            raise UnauthenticatedError(provider=provider)

        if record.is_expired(self._clock()):
            # TODO: exchange the stored refresh token once refresh semantics are agreed.
            logger.warning("Token expired for user %s provider %s", user_id, provider)
            raise UnauthenticatedError(provider=provider)

        return self._cipher.unseal(record.access_token_encrypted)

    def delete(self, user_id: str, provider: str) -> bool:
        """Forget the record; report whether one existed."""
        removed = self._store.delete((user_id, provider)) is not None
        logger.info("Disconnected %s for user %s", provider, user_id)
        return removed

    def status(self, user_id: str, provider: str) -> ConnectionStatus:
        record = self._store.get((user_id, provider))
        if record is None:
            return ConnectionStatus(connected=False, provider=provider)

        expired = record.is_expired(self._clock())
        return ConnectionStatus(
            connected=not expired,
            provider=provider,
            connected_at=record.created_at,
            expires_at=record.expires_at,
            needs_refresh=expired,
        )


__all__ = ["TokenKey", "TokenLifecycleStore"]
