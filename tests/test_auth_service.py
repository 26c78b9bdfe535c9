# tests/test_auth_service.py
import asyncio

import pytest
from supabase import AuthApiError

from conftest import api_error, make_session, make_user
from storefront.core.auth import is_expired
from storefront.services.auth_service import AuthFailure, AuthSuccess, SessionState


def toasts(notifier):
    return [(n.kind, n.message) for n in notifier.drain()]


class TestSignIn:
    @pytest.mark.asyncio
    async def test_success_sets_session_and_toast(self, auth, supabase, notifier, profile_row):
        user = make_user("ana@example.com", "user-1")
        supabase.auth.users[user.email] = user
        supabase.respond("profiles", profile_row("user-1", username="ana"))

        result = await auth.sign_in("ana@example.com", "secret")

        assert isinstance(result, AuthSuccess)
        assert auth.user_id == "user-1"
        assert auth.session.email == "ana@example.com"
        assert auth.loading is False
        assert toasts(notifier) == [("success", "Signed in successfully")]
        assert supabase.queries("profiles", "insert") == []

    @pytest.mark.asyncio
    async def test_invalid_credentials_returns_failure(self, auth, supabase, notifier):
        supabase.auth.errors["sign_in_with_password"] = AuthApiError(
            "Invalid login credentials", 400, "invalid_credentials"
        )

        result = await auth.sign_in("ana@example.com", "wrong")

        assert result == AuthFailure(
            message="Invalid login credentials", code="invalid_credentials"
        )
        assert auth.session is None
        assert auth.loading is False
        assert toasts(notifier) == [("error", "Failed to sign in")]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_reported_not_raised(self, auth, supabase, notifier):
        supabase.auth.errors["sign_in_with_password"] = RuntimeError("connection reset")

        result = await auth.sign_in("ana@example.com", "secret")

        assert isinstance(result, AuthFailure)
        assert result.message == "connection reset"
        assert auth.loading is False
        assert toasts(notifier) == [("error", "Failed to sign in")]

    @pytest.mark.asyncio
    async def test_loading_is_true_while_request_is_outstanding(self, auth, supabase):
        seen = []
        supabase.auth.observer = lambda: seen.append(auth.loading)
        supabase.auth.errors["sign_in_with_password"] = AuthApiError(
            "Invalid login credentials", 400, "invalid_credentials"
        )

        assert auth.loading is False
        await auth.sign_in("ana@example.com", "wrong")

        assert seen == [True]
        assert auth.loading is False

    @pytest.mark.asyncio
    async def test_loading_holds_until_overlapping_calls_finish(
        self, auth, supabase, profile_row
    ):
        user = make_user("ana@example.com", "user-1")
        supabase.auth.users[user.email] = user
        supabase.respond("profiles", profile_row("user-1"))
        release = asyncio.Event()
        supabase.auth.holds["sign_in_with_password"] = release

        sign_in = asyncio.create_task(auth.sign_in("ana@example.com", "secret"))
        await asyncio.sleep(0)
        assert auth.loading is True

        await auth.sign_out()

        assert not sign_in.done()
        assert auth.loading is True

        release.set()
        assert isinstance(await sign_in, AuthSuccess)
        assert auth.loading is False

    @pytest.mark.asyncio
    async def test_rejects_token_with_bad_signature(self, auth, supabase, notifier, monkeypatch):
        from storefront.core.config import get_settings

        monkeypatch.setenv("SUPABASE_JWT_SECRET", "a-different-secret")
        get_settings.cache_clear()
        try:
            result = await auth.sign_in("ana@example.com", "secret")
        finally:
            monkeypatch.delenv("SUPABASE_JWT_SECRET")
            get_settings.cache_clear()

        assert isinstance(result, AuthFailure)
        assert auth.session is None
        assert toasts(notifier) == [("error", "Failed to sign in")]

    @pytest.mark.asyncio
    async def test_accepts_token_signed_with_configured_secret(self, auth, jwt_secret, profile_row):
        user = make_user("ana@example.com", "user-1")
        auth.client.auth.users[user.email] = user
        auth.client.respond("profiles", profile_row("user-1"))

        result = await auth.sign_in("ana@example.com", "secret")

        assert isinstance(result, AuthSuccess)
        assert auth.user_id == "user-1"


class TestSignUp:
    @pytest.mark.asyncio
    async def test_creates_profile_exactly_once(self, auth, supabase, notifier):
        # listener and sign_up both ask for the profile
        auth.subscribe()

        result = await auth.sign_up("new@example.com", "secret")

        assert isinstance(result, AuthSuccess)
        inserts = supabase.queries("profiles", "insert")
        assert len(inserts) == 1
        payload = inserts[0].payload
        assert payload["profile_id"] == auth.user_id
        assert payload["username"] == ""
        assert payload["avatar_url"] == ""
        assert len(supabase.queries("profiles", "select")) == 1
        assert toasts(notifier) == [("success", "Signed up successfully")]

    @pytest.mark.asyncio
    async def test_pending_confirmation_still_creates_profile(self, auth, supabase):
        supabase.auth.confirm_email = True

        result = await auth.sign_up("new@example.com", "secret")

        assert result == AuthSuccess(session=None)
        assert auth.session is None
        assert len(supabase.queries("profiles", "insert")) == 1

    @pytest.mark.asyncio
    async def test_failure(self, auth, supabase, notifier):
        supabase.auth.errors["sign_up"] = AuthApiError(
            "User already registered", 422, "user_already_exists"
        )

        result = await auth.sign_up("taken@example.com", "secret")

        assert result == AuthFailure(message="User already registered", code="user_already_exists")
        assert auth.loading is False
        assert toasts(notifier) == [("error", "Failed to sign up")]


class TestSignOut:
    @pytest.mark.asyncio
    async def test_clears_session(self, auth, supabase, notifier, profile_row):
        user = make_user("ana@example.com", "user-1")
        supabase.auth.users[user.email] = user
        supabase.respond("profiles", profile_row("user-1"))
        await auth.sign_in("ana@example.com", "secret")
        notifier.drain()

        result = await auth.sign_out()

        assert result == AuthSuccess(session=None)
        assert auth.session is None
        assert toasts(notifier) == [("success", "Signed out successfully")]

    @pytest.mark.asyncio
    async def test_failure_keeps_session(self, auth, supabase, notifier, profile_row):
        user = make_user("ana@example.com", "user-1")
        supabase.auth.users[user.email] = user
        supabase.respond("profiles", profile_row("user-1"))
        await auth.sign_in("ana@example.com", "secret")
        notifier.drain()
        supabase.auth.errors["sign_out"] = RuntimeError("network down")

        result = await auth.sign_out()

        assert isinstance(result, AuthFailure)
        assert auth.user_id == "user-1"
        assert auth.loading is False
        assert toasts(notifier) == [("error", "Failed to sign out")]


class TestSessionTracking:
    @pytest.mark.asyncio
    async def test_restore_picks_up_persisted_session(self, auth, supabase, profile_row):
        user = make_user("ana@example.com", "user-1")
        supabase.auth.session = make_session(user)
        supabase.respond("profiles", profile_row("user-1"))

        session = await auth.restore_session()

        assert session.user_id == "user-1"
        assert auth.loading is False

    @pytest.mark.asyncio
    async def test_restore_ignores_expired_session(self, auth, supabase):
        supabase.auth.session = make_session(make_user(), expires_in=-60)

        assert await auth.restore_session() is None
        assert supabase.queries("profiles") == []

    @pytest.mark.asyncio
    async def test_restore_survives_auth_error(self, auth, supabase):
        supabase.auth.errors["get_session"] = AuthApiError("Invalid Refresh Token", 400, None)

        assert await auth.restore_session() is None
        assert auth.loading is False

    def test_session_expires_while_held(self, auth):
        auth._session = SessionState(
            user_id="user-1",
            email=None,
            access_token="token",
            expires_at=1,
        )

        assert auth.session is None
        assert auth.user_id is None

    @pytest.mark.asyncio
    async def test_remote_sign_out_clears_session(self, auth, supabase, profile_row):
        auth.subscribe()
        user = make_user("ana@example.com", "user-1")
        supabase.auth.users[user.email] = user
        supabase.respond("profiles", profile_row("user-1"))
        await auth.sign_in("ana@example.com", "secret")

        supabase.auth.emit("SIGNED_OUT", None)

        assert auth.session is None

    @pytest.mark.asyncio
    async def test_unusable_session_event_keeps_current_session(
        self, auth, supabase, profile_row
    ):
        auth.subscribe()
        user = make_user("ana@example.com", "user-1")
        supabase.auth.users[user.email] = user
        supabase.respond("profiles", profile_row("user-1"))
        await auth.sign_in("ana@example.com", "secret")

        stale = make_session(make_user("bo@example.com", "user-2"), expires_in=-60)
        supabase.auth.emit("TOKEN_REFRESHED", stale)

        assert auth.user_id == "user-1"
        assert supabase.queries("profiles", "insert") == []

    @pytest.mark.asyncio
    async def test_close_unsubscribes(self, auth, supabase):
        auth.subscribe()
        assert len(supabase.auth.listeners) == 1

        await auth.close()

        assert supabase.auth.listeners == []


class TestEnsureProfile:
    @pytest.mark.asyncio
    async def test_existing_profile_is_not_recreated(self, auth, supabase, profile_row):
        supabase.respond("profiles", profile_row("user-1", username="ana"))

        outcome = await auth.ensure_profile("user-1")

        assert outcome.ok and not outcome.created
        assert outcome.profile.username == "ana"
        assert supabase.queries("profiles", "insert") == []

    @pytest.mark.asyncio
    async def test_rls_on_read_also_triggers_create(self, auth, supabase):
        supabase.respond("profiles", api_error("42501", "permission denied for table profiles"))

        outcome = await auth.ensure_profile("user-1")

        assert outcome.created
        assert len(supabase.queries("profiles", "insert")) == 1

    @pytest.mark.asyncio
    async def test_other_read_error_does_not_create(self, auth, supabase):
        supabase.respond("profiles", api_error("08006", "connection failure"))

        outcome = await auth.ensure_profile("user-1")

        assert not outcome.ok
        assert outcome.stage == "fetch"
        assert outcome.error.code == "08006"
        assert supabase.queries("profiles", "insert") == []

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_create(self, auth, supabase):
        first = auth.ensure_profile("user-1")
        second = auth.ensure_profile("user-1")

        assert first is second
        await first
        assert len(supabase.queries("profiles", "insert")) == 1


def test_is_expired():
    assert is_expired(None) is False
    assert is_expired(100, now=100) is True
    assert is_expired(101, now=100) is False
