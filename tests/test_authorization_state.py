try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from easybreezy.clients.memory_store import InMemoryKeyValueStore
from easybreezy.core.errors import InvalidStateError, ValidationError
from easybreezy.services import authorization_state
from easybreezy.services.authorization_state import AuthorizationStateManager


@pytest.fixture()
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def manager(store, clock) -> AuthorizationStateManager:
    return AuthorizationStateManager(store, ttl_seconds=600, clock=clock)


def test_issued_states_are_unique_hex_tokens(manager) -> None:
    tokens = {manager.issue("smartthings", f"user-{index}") for index in range(500)}

    assert len(tokens) == 500
    for token in tokens:
        assert len(token) == 64
        int(token, 16)


def test_validate_returns_pending_request(manager, clock) -> None:
    token = manager.issue("smartthings", "u1")

    state = manager.validate(token, "smartthings")

    assert state.user_id == "u1"
    assert state.provider == "smartthings"
    assert state.created_at == clock.now


def test_consumed_state_cannot_be_replayed(manager) -> None:
    token = manager.issue("smartthings", "u1")
    manager.validate(token, "smartthings")

    assert manager.consume(token) is True

    with pytest.raises(InvalidStateError):
        manager.validate(token, "smartthings")
    with pytest.raises(InvalidStateError):
        manager.validate(token, "smartthings")
    assert manager.consume(token) is False


def test_state_bound_to_other_provider_is_rejected(manager) -> None:
    token = manager.issue("smartthings", "u1")

    with pytest.raises(InvalidStateError):
        manager.validate(token, "googlehome")

    assert manager.validate(token, "smartthings").user_id == "u1"


def test_unknown_or_empty_state_is_rejected(manager) -> None:
    with pytest.raises(InvalidStateError):
        manager.validate("deadbeef", "smartthings")
    with pytest.raises(InvalidStateError):
        manager.validate("", "smartthings")


def test_state_expires_after_ten_minutes_without_consume(manager, store, clock) -> None:
    token = manager.issue("smartthings", "u1")

    clock.advance(minutes=10, seconds=1)

    with pytest.raises(InvalidStateError):
        manager.validate(token, "smartthings")
    assert store.get(token) is None


def test_state_is_valid_until_ttl(manager, clock) -> None:
    token = manager.issue("smartthings", "u1")

    clock.advance(minutes=9, seconds=59)

    assert manager.validate(token, "smartthings").user_id == "u1"


def test_issue_sweeps_expired_states(manager, store, clock) -> None:
    stale = manager.issue("smartthings", "u1")
    clock.advance(minutes=11)

    fresh = manager.issue("googlehome", "u2")

    assert len(store) == 1
    assert store.get(stale) is None
    assert store.get(fresh) is not None


def test_issue_requires_user_id(manager, store) -> None:
    with pytest.raises(ValidationError):
        manager.issue("smartthings", "")
    assert len(store) == 0


def test_issue_draws_again_on_collision(manager, monkeypatch) -> None:
    draws = iter(["a" * 64, "a" * 64, "b" * 64])
    monkeypatch.setattr(authorization_state.secrets, "token_hex", lambda _: next(draws))

    first = manager.issue("smartthings", "u1")
    second = manager.issue("smartthings", "u2")

    assert first == "a" * 64
    assert second == "b" * 64
    assert manager.validate(first, "smartthings").user_id == "u1"


def test_claim_hands_state_to_a_single_caller(manager, store) -> None:
    token = manager.issue("smartthings", "u1")

    claimed = manager.claim(token, "smartthings")

    assert claimed.user_id == "u1"
    assert store.get(token) is None
    with pytest.raises(InvalidStateError):
        manager.claim(token, "smartthings")


def test_claim_for_other_provider_puts_state_back(manager) -> None:
    token = manager.issue("smartthings", "u1")

    with pytest.raises(InvalidStateError):
        manager.claim(token, "googlehome")

    assert manager.claim(token, "smartthings").user_id == "u1"


def test_expired_state_cannot_be_claimed(manager, store, clock) -> None:
    token = manager.issue("smartthings", "u1")
    clock.advance(minutes=10, seconds=1)

    with pytest.raises(InvalidStateError):
        manager.claim(token, "smartthings")
    assert store.get(token) is None


def test_released_state_can_be_claimed_again(manager) -> None:
    token = manager.issue("smartthings", "u1")
    claimed = manager.claim(token, "smartthings")

    assert manager.release(claimed) is True
    assert manager.release(claimed) is False
    assert manager.claim(token, "smartthings") is claimed
