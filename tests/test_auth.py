"""Tests for the unlock state machine and the post-unlock load."""

import asyncio

import pytest

from vaultsession import (
    ALL_CATEGORIES,
    AuthMode,
    AuthState,
    AuthenticationFailed,
    InvalidSessionState,
    LoadPartialFailure,
    NotAuthenticated,
    SecretMismatch,
    VaultSession,
)
from vaultsession.auth import Session


class TestInitialState:

    def test_starts_locked(self, vault):
        assert vault.state == AuthState.LOCKED
        assert vault.is_authenticated is False
        assert vault.auth.session is None

    @pytest.mark.asyncio
    async def test_load_requires_unlock(self, vault, backend):
        with pytest.raises(NotAuthenticated):
            await vault.load()
        assert backend.calls == []


class TestFirstRun:
    """Registration (vault initialization)."""

    @pytest.mark.asyncio
    async def test_mismatch_never_calls_backend(self, backend):
        vault = VaultSession(backend)
        with pytest.raises(SecretMismatch) as exc_info:
            await vault.unlock("abc", confirm_secret="xyz", is_registering=True)

        assert exc_info.value.kind == "SecretMismatch"
        assert backend.count("initialize_vault") == 0
        assert backend.calls == []
        assert vault.state == AuthState.FAILED
        assert vault.auth.failure_reason == "mismatch"
        assert vault.auth.mode == AuthMode.FIRST_RUN

    @pytest.mark.asyncio
    async def test_initialize_then_load(self, backend):
        backend.master_password = None
        vault = VaultSession(backend)
        session = await vault.unlock("hunter2", confirm_secret="hunter2", is_registering=True)

        assert backend.count("initialize_vault") == 1
        assert backend.count("get_passwords") == 1
        assert backend.count("get_categories") == 1
        assert vault.state == AuthState.UNLOCKED
        assert session.master_secret == "hunter2"
        assert vault.cache.loaded is True
        assert vault.cache.credentials == []

    @pytest.mark.asyncio
    async def test_initialize_rejected(self, backend):
        backend.accept = False
        vault = VaultSession(backend)
        with pytest.raises(AuthenticationFailed) as exc_info:
            await vault.unlock("pw", confirm_secret="pw", is_registering=True)

        assert exc_info.value.reason == "init_failed"
        assert vault.state == AuthState.FAILED
        assert backend.count("get_passwords") == 0

    @pytest.mark.asyncio
    async def test_initialize_raises(self, backend):
        backend.fail.add("initialize_vault")
        vault = VaultSession(backend)
        with pytest.raises(AuthenticationFailed) as exc_info:
            await vault.unlock("pw", confirm_secret="pw", is_registering=True)

        assert exc_info.value.reason == "init_failed"
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestReturningUser:
    """Unlocking an existing vault."""

    @pytest.mark.asyncio
    async def test_correct_password_unlocks_and_loads(self, vault, backend):
        backend.seed_category("Work")
        backend.seed_credential("GitHub", "Work")

        await vault.unlock("hunter2")

        assert vault.state == AuthState.UNLOCKED
        assert vault.auth.mode == AuthMode.RETURNING_USER
        assert backend.calls.count("verify_master_password") == 1
        assert [c.title for c in vault.cache.credentials] == ["GitHub"]
        assert [c.name for c in vault.cache.categories] == ["Work"]

    @pytest.mark.asyncio
    async def test_wrong_password(self, vault, backend):
        with pytest.raises(AuthenticationFailed) as exc_info:
            await vault.unlock("wrong")

        assert exc_info.value.kind == "AuthenticationFailed"
        assert exc_info.value.reason == "invalid_credentials"
        assert vault.state == AuthState.FAILED
        assert vault.auth.session is None
        assert backend.count("get_passwords") == 0

    @pytest.mark.asyncio
    async def test_backend_error_is_authentication_failure(self, vault, backend):
        backend.fail.add("verify_master_password")
        with pytest.raises(AuthenticationFailed) as exc_info:
            await vault.unlock("hunter2")
        assert exc_info.value.reason == "invalid_credentials"

    @pytest.mark.asyncio
    async def test_failure_is_not_sticky(self, vault, backend):
        with pytest.raises(AuthenticationFailed):
            await vault.unlock("wrong")

        await vault.unlock("hunter2")
        assert vault.state == AuthState.UNLOCKED
        assert vault.auth.failure_reason is None

    @pytest.mark.asyncio
    async def test_submit_while_unlocked_is_rejected(self, vault, backend):
        await vault.unlock("hunter2")
        backend.calls.clear()

        with pytest.raises(InvalidSessionState):
            await vault.unlock("hunter2")
        assert backend.calls == []
        assert vault.state == AuthState.UNLOCKED

    @pytest.mark.asyncio
    async def test_submit_while_authenticating_is_rejected(self, vault, backend):
        gate = asyncio.Event()
        original = backend.verify_master_password

        async def slow_verify(master_password):
            await gate.wait()
            return await original(master_password)

        backend.verify_master_password = slow_verify
        first = asyncio.create_task(vault.unlock("hunter2"))
        await asyncio.sleep(0)
        assert vault.state == AuthState.AUTHENTICATING

        with pytest.raises(InvalidSessionState):
            await vault.unlock("hunter2")

        gate.set()
        await first
        assert vault.state == AuthState.UNLOCKED


class TestInitialLoad:
    """The combined post-unlock fetch."""

    @pytest.mark.asyncio
    async def test_reads_are_issued_concurrently(self, vault, backend):
        started = []
        both_started = asyncio.Event()
        get_passwords, get_categories = backend.get_passwords, backend.get_categories

        async def track(name, call, *args):
            started.append(name)
            if len(started) == 2:
                both_started.set()
            await asyncio.wait_for(both_started.wait(), timeout=1)
            return await call(*args)

        backend.get_passwords = lambda mp: track("passwords", get_passwords, mp)
        backend.get_categories = lambda: track("categories", get_categories)

        await vault.unlock("hunter2")
        assert sorted(started) == ["categories", "passwords"]
        assert vault.cache.loaded is True

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_authentication(self, vault, backend):
        backend.seed_credential("Bank", "Finance")
        backend.fail.add("get_categories")

        with pytest.raises(LoadPartialFailure) as exc_info:
            await vault.unlock("hunter2")

        assert set(exc_info.value.failed) == {"get_categories"}
        assert vault.state == AuthState.UNLOCKED
        assert vault.is_authenticated is True
        assert vault.cache.loaded is False
        assert vault.cache.credentials == []
        assert vault.load_error is exc_info.value

    @pytest.mark.asyncio
    async def test_both_fetches_failing(self, vault, backend):
        backend.fail.update({"get_passwords", "get_categories"})
        with pytest.raises(LoadPartialFailure) as exc_info:
            await vault.unlock("hunter2")
        assert set(exc_info.value.failed) == {"get_passwords", "get_categories"}
        assert vault.is_authenticated is True

    @pytest.mark.asyncio
    async def test_reload_after_partial_failure(self, vault, backend):
        backend.seed_credential("Bank", "Finance")
        backend.fail.add("get_passwords")
        with pytest.raises(LoadPartialFailure):
            await vault.unlock("hunter2")

        backend.fail.clear()
        await vault.reload()
        assert vault.cache.loaded is True
        assert [c.title for c in vault.cache.credentials] == ["Bank"]
        assert vault.load_error is None


class TestLogout:

    @pytest.mark.asyncio
    async def test_logout_clears_session(self, unlocked):
        session = unlocked.auth.session
        unlocked.select_category("Work")

        unlocked.logout()

        assert unlocked.state == AuthState.LOCKED
        assert unlocked.auth.session is None
        assert session.authenticated is False
        assert unlocked.cache.categories == []
        assert unlocked.cache.loaded is False
        assert unlocked.filter_state.category == ALL_CATEGORIES

    @pytest.mark.asyncio
    async def test_can_unlock_again_after_logout(self, unlocked):
        unlocked.logout()
        await unlocked.unlock("hunter2")
        assert unlocked.is_authenticated is True

    def test_destroyed_session_refuses_secret(self):
        session = Session("pw")
        session.destroy()
        with pytest.raises(InvalidSessionState):
            session.master_secret
        assert "pw" not in repr(session)
