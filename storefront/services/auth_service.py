# storefront/services/auth_service.py
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

from jose import JWTError
from supabase import AsyncClient, AuthError

from storefront.core.auth import decode_access_token, is_expired
from storefront.core.errors import RemoteError
from storefront.core.notifications import Notifier
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.auth import SessionRead
from storefront.schemas.profile import ProfileRead

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """The signed-in identity and its Supabase access token."""

    user_id: str
    email: str | None
    access_token: str
    expires_at: int | None = None

    def to_read(self) -> SessionRead:
        expires = (
            datetime.fromtimestamp(self.expires_at, tz=timezone.utc)
            if self.expires_at is not None
            else None
        )
        return SessionRead(
            user_id=self.user_id,
            email=self.email,
            access_token=self.access_token,
            expires_at=expires,
        )


@dataclass
class AuthSuccess:
    # None after sign-out, or after a sign-up that still awaits email confirmation
    session: SessionState | None


@dataclass
class AuthFailure:
    message: str
    code: str | None = None


AuthResult = AuthSuccess | AuthFailure


@dataclass
class ProfileOutcome:
    """
    Result of ensure_profile.

    stage tells which step failed: "fetch" (reading the profile) or
    "create" (inserting the default one).
    """

    profile: ProfileRead | None = None
    created: bool = False
    error: RemoteError | None = None
    stage: Literal["fetch", "create"] | None = None

    @property
    def ok(self) -> bool:
        return self.profile is not None


class AuthService:
    """
    Session/identity state for the current shopper.

    Responsibilities:
      - sign up / sign in / sign out through Supabase Auth
      - follow remote session changes (restore, refresh, sign-out)
      - make sure every signed-in user has a profile row
      - expose `loading` while an auth call is outstanding

    Auth operations never raise: they return AuthSuccess or AuthFailure
    after emitting a toast.
    """

    def __init__(
        self,
        client: AsyncClient,
        profiles: ProfileRepository,
        notifier: Notifier,
    ):
        self.client = client
        self.profiles = profiles
        self.notifier = notifier
        # auth calls in flight; overlapping calls each hold `loading` up
        self._pending = 0
        self._session: SessionState | None = None
        self._subscription: Any = None
        self._profile_tasks: dict[str, asyncio.Task[ProfileOutcome]] = {}

    # ---- session state ----

    @property
    def loading(self) -> bool:
        return self._pending > 0

    @property
    def session(self) -> SessionState | None:
        if self._session is not None and is_expired(self._session.expires_at):
            logger.info("Session for %s expired", self._session.user_id)
            self._session = None
        return self._session

    @property
    def user_id(self) -> str | None:
        session = self.session
        return session.user_id if session else None

    def _session_from_remote(self, remote: Any) -> SessionState | None:
        """
        Convert a Supabase session into SessionState.

        Returns None for an absent or already expired session, or one whose
        token does not decode (bad signature when verification is enabled).
        """
        if remote is None or getattr(remote, "user", None) is None:
            return None

        try:
            claims = decode_access_token(remote.access_token)
        except JWTError as e:
            logger.warning("Rejected session for %s: %s", remote.user.id, e)
            return None

        expires_at = claims.get("exp") or getattr(remote, "expires_at", None)
        if is_expired(expires_at):
            logger.info("Ignoring expired session for %s", remote.user.id)
            return None

        return SessionState(
            user_id=str(remote.user.id),
            email=remote.user.email,
            access_token=remote.access_token,
            expires_at=expires_at,
        )

    # ---- remote session tracking ----

    def subscribe(self) -> None:
        """Listen to Supabase session changes (sign-in elsewhere, refresh, expiry)."""
        if self._subscription is None:
            self._subscription = self.client.auth.on_auth_state_change(
                self._on_auth_state_change
            )

    def _on_auth_state_change(self, event: str, remote_session: Any) -> None:
        logger.info("Auth state changed: %s", event)
        if event == "SIGNED_OUT":
            self._session = None
            return

        session = self._session_from_remote(remote_session)
        if session is None:
            # an unusable token never replaces the current session
            return

        self._session = session
        try:
            self.ensure_profile(session.user_id)
        except RuntimeError:
            logger.warning(
                "No running event loop; profile check for %s skipped",
                session.user_id,
            )

    async def restore_session(self) -> SessionState | None:
        """
        Pick up a session persisted by Supabase (startup).
        """
        self._pending += 1
        try:
            try:
                remote = await self.client.auth.get_session()
            except AuthError as e:
                logger.error("Error restoring session: %r", e)
                remote = None

            self._session = self._session_from_remote(remote)
            if self._session is not None:
                await self.ensure_profile(self._session.user_id)
            return self._session
        finally:
            self._pending -= 1

    async def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        pending = list(self._profile_tasks.values())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # ---- auth operations ----

    def _failure(self, toast: str, error: Exception) -> AuthFailure:
        self.notifier.error(toast)
        if isinstance(error, AuthError):
            logger.error("%s: %s", toast, error)
            code = getattr(error, "code", None)
            return AuthFailure(message=error.message, code=str(code) if code else None)

        logger.exception("%s: unexpected error", toast)
        return AuthFailure(message=str(error) or toast)

    async def sign_up(self, email: str, password: str) -> AuthResult:
        self._pending += 1
        try:
            try:
                response = await self.client.auth.sign_up(
                    {"email": email, "password": password}
                )
            except Exception as e:
                return self._failure("Failed to sign up", e)

            session = self._session_from_remote(response.session)
            if session is not None:
                self._session = session

            # Sign-up may return no session until the email is confirmed,
            # but the user exists and can own a profile already.
            if response.user is not None:
                await self.ensure_profile(str(response.user.id))

            self.notifier.success("Signed up successfully")
            return AuthSuccess(session=session)
        finally:
            self._pending -= 1

    async def sign_in(self, email: str, password: str) -> AuthResult:
        self._pending += 1
        try:
            try:
                response = await self.client.auth.sign_in_with_password(
                    {"email": email, "password": password}
                )
            except Exception as e:
                return self._failure("Failed to sign in", e)

            session = self._session_from_remote(response.session)
            if session is None:
                self.notifier.error("Failed to sign in")
                logger.error("Sign-in for %s returned no usable session", email)
                return AuthFailure(message="Sign-in returned no usable session")

            self._session = session
            await self.ensure_profile(session.user_id)

            self.notifier.success("Signed in successfully")
            return AuthSuccess(session=session)
        finally:
            self._pending -= 1

    async def sign_out(self) -> AuthResult:
        self._pending += 1
        try:
            try:
                await self.client.auth.sign_out()
            except Exception as e:
                return self._failure("Failed to sign out", e)

            self._session = None
            self.notifier.success("Signed out successfully")
            return AuthSuccess(session=None)
        finally:
            self._pending -= 1

    # ---- profile reconciliation ----

    def ensure_profile(self, user_id: str) -> "asyncio.Task[ProfileOutcome]":
        """
        Make sure a profile row exists for `user_id`.

        Concurrent callers for the same user share one in-flight task, so
        a sign-up and the session-change notification it triggers create
        the profile once.

        Must be called from a running event loop; await the returned task
        for the outcome.
        """
        task = self._profile_tasks.get(user_id)
        if task is None:
            loop = asyncio.get_running_loop()
            task = loop.create_task(self._ensure_profile(user_id))
            self._profile_tasks[user_id] = task
            task.add_done_callback(lambda _t: self._profile_tasks.pop(user_id, None))
        return task

    async def _ensure_profile(self, user_id: str) -> ProfileOutcome:
        try:
            return ProfileOutcome(profile=await self.profiles.get_profile(user_id))
        except RemoteError as e:
            if not e.is_profile_access_error:
                logger.error("Error checking profile for %s: %r", user_id, e)
                return ProfileOutcome(error=e, stage="fetch")

        logger.info("Profile not found or RLS error, creating new profile for %s", user_id)
        try:
            created = await self.profiles.create_profile(user_id)
        except RemoteError as e:
            if e.is_rls_violation:
                logger.error("RLS policy violation when creating profile: %r", e)
            else:
                logger.error("Error creating user profile: %r", e)
            return ProfileOutcome(error=e, stage="create")

        return ProfileOutcome(profile=created, created=True)
