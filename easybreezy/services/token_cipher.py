"""Symmetric encryption for OAuth tokens held by the token store."""

from __future__ import annotations

import base64
import hashlib
import secrets
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from easybreezy.core.errors import InternalError


class TokenCipherService:
    """Seal and unseal provider tokens using a Fernet key derived from a secret.

    Without a configured secret a random one is drawn, which is enough for
    tokens that only live as long as the process.
    """

    def __init__(self, *, secret: Optional[str] = None) -> None:
        secret = secret or secrets.token_urlsafe(32)
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    def seal(self, token: str) -> str:
        return self._fernet.encrypt(token.encode("utf-8")).decode("utf-8")

    def seal_optional(self, token: Optional[str]) -> Optional[str]:
        return self.seal(token) if token else None

    def unseal(self, sealed: str) -> str:
        try:
            plaintext = self._fernet.decrypt(sealed.encode("utf-8"))
        except InvalidToken as exc:
            raise InternalError("Stored token could not be decrypted.") from exc
        return plaintext.decode("utf-8")


__all__ = ["TokenCipherService"]
