from typing import Any, Callable, Optional

from pydantic import BaseModel
from supabase import AsyncClient

from smartfix.core.errors import AuthError
from smartfix.core.logger import logger


class AuthUser(BaseModel):
    id: str
    email: Optional[str] = None

    @classmethod
    def from_supabase(cls, user: Any) -> Optional["AuthUser"]:
        if user is None:
            return None
        return cls(id=str(user.id), email=getattr(user, "email", None))


def _user_from_session(session: Any) -> Optional[AuthUser]:
    if session is None:
        return None
    return AuthUser.from_supabase(getattr(session, "user", None))


class AuthService:
    """Thin wrapper over Supabase auth. Backend failures on sign-in, sign-up and sign-out raise AuthError."""

    def __init__(self, client: Optional[AsyncClient]):
        self.client = client

    def _require_client(self) -> AsyncClient:
        if not self.client:
            raise AuthError("Authentication backend is not configured")
        return self.client

    async def get_session_user(self) -> Optional[AuthUser]:
        client = self._require_client()
        session = await client.auth.get_session()
        return _user_from_session(session)

    async def get_current_user(self) -> Optional[AuthUser]:
        client = self._require_client()
        try:
            response = await client.auth.get_user()
        except Exception as e:
            logger.warning(f"⚠️ Could not fetch current user: {e}")
            return None
        if not response:
            return None
        return AuthUser.from_supabase(response.user)

    async def sign_in(self, email: str, password: str) -> AuthUser:
        client = self._require_client()
        try:
            response = await client.auth.sign_in_with_password({"email": email.strip(), "password": password})
        except Exception as e:
            logger.warning(f"⚠️ Sign-in failed for {email.strip()}: {e}")
            raise AuthError(getattr(e, "message", None) or str(e)) from e

        user = AuthUser.from_supabase(response.user)
        if user is None:
            raise AuthError("Sign-in returned no user")
        logger.info(f"🔑 Signed in {user.email or user.id}")
        return user

    async def sign_up(self, email: str, password: str) -> Optional[AuthUser]:
        """
        Registers an account. The user may need to confirm their email first,
        in which case no session exists yet.
        """
        client = self._require_client()
        try:
            response = await client.auth.sign_up({"email": email.strip(), "password": password})
        except Exception as e:
            logger.warning(f"⚠️ Sign-up failed for {email.strip()}: {e}")
            raise AuthError(getattr(e, "message", None) or str(e)) from e

        logger.info(f"🆕 Registered {email.strip()}")
        return AuthUser.from_supabase(response.user)

    async def sign_out(self) -> None:
        client = self._require_client()
        try:
            await client.auth.sign_out()
        except Exception as e:
            logger.warning(f"⚠️ Sign-out failed: {e}")
            raise AuthError(getattr(e, "message", None) or str(e)) from e
        logger.info("👋 Signed out")

    def on_auth_state_change(self, callback: Callable[[str, Any], None]):
        client = self._require_client()
        return client.auth.on_auth_state_change(callback)


class SessionState:
    """
    Process-wide session.

    Lifecycle: `restore()` once at start-up from the stored session,
    `subscribe()` to follow sign-in/sign-out events, `clear()` on sign-out.
    Booking operations get `user_id` from here and never look it up themselves.
    """

    def __init__(self):
        self.user: Optional[AuthUser] = None
        self._subscription = None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def set_user(self, user: Optional[AuthUser]) -> None:
        self.user = user

    def clear(self) -> None:
        self.user = None

    async def restore(self, auth: AuthService) -> Optional[AuthUser]:
        try:
            self.user = await auth.get_session_user()
        except Exception as e:
            logger.warning(f"⚠️ No stored session restored: {e}")
            self.user = None
        if self.user:
            logger.info(f"🔓 Session restored for {self.user.email or self.user.id}")
        return self.user

    def handle_auth_event(self, event: Any, session: Any) -> None:
        self.user = _user_from_session(session)
        logger.info(f"🔔 Auth event {event}: {'signed in' if self.user else 'signed out'}")

    def subscribe(self, auth: AuthService) -> None:
        try:
            self._subscription = auth.on_auth_state_change(self.handle_auth_event)
        except Exception as e:
            logger.warning(f"⚠️ Auth state subscription unavailable: {e}")
            self._subscription = None

    def unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def sign_in(self, auth: AuthService, email: str, password: str) -> AuthUser:
        user = await auth.sign_in(email, password)
        self.set_user(user)
        return user

    async def sign_out(self, auth: AuthService) -> None:
        try:
            await auth.sign_out()
        finally:
            self.clear()
