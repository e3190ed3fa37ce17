try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from easybreezy.core.errors import InternalError
from easybreezy.services.token_cipher import TokenCipherService


def test_seal_and_unseal_access_token() -> None:
    cipher = TokenCipherService(secret="super-secret-key")

    sealed = cipher.seal("sensitive-token")

    assert sealed != "sensitive-token"
    assert cipher.unseal(sealed) == "sensitive-token"


def test_seal_optional_skips_missing_refresh_token() -> None:
    cipher = TokenCipherService(secret="super-secret-key")

    assert cipher.seal_optional(None) is None
    assert cipher.unseal(cipher.seal_optional("refresh")) == "refresh"


def test_unseal_rejects_foreign_ciphertext() -> None:
    sealed = TokenCipherService(secret="one-secret").seal("token")

    with pytest.raises(InternalError):
        TokenCipherService(secret="another-secret").unseal(sealed)


def test_random_secret_when_unconfigured() -> None:
    cipher = TokenCipherService()

    assert cipher.unseal(cipher.seal("token")) == "token"
