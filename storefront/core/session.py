# storefront/core/session.py
"""
Auth/session provider.

One AuthSession is constructed at application start around the Supabase
client and handed to every store that needs to know the current user.
There is no module-level "current user".
"""
import logging
from collections.abc import Callable
from typing import Any, Literal

from supabase import AsyncClient, AuthError

from storefront.core.activity import ActivityLogger, ActivityType
from storefront.core.errors import REMOTE_ERRORS
from storefront.schemas.user import AuthUser

logger = logging.getLogger(__name__)

SignupRole = Literal["seller", "buyer"]
UserListener = Callable[[AuthUser | None], None]


def _auth_user(session: Any) -> AuthUser | None:
    user = getattr(session, "user", None) if session is not None else None
    if user is None:
        return None
    return AuthUser(id=str(user.id), email=getattr(user, "email", None))


class AuthSession:
    """
    Current user/session plus sign-in/out.

    Listeners registered with add_listener() are called whenever the user
    identity changes (sign-in, sign-out, different account). Token refreshes
    for the same user do not notify.
    """

    def __init__(self, client: AsyncClient, activity: ActivityLogger | None = None):
        self.client = client
        self.activity = activity
        self.user: AuthUser | None = None
        self.access_token: str | None = None
        self.loading = True
        self._listeners: list[UserListener] = []
        self._subscription = None

    @classmethod
    def for_user(cls, client: AsyncClient, user: AuthUser, access_token: str | None = None) -> "AuthSession":
        """Fixed session for one request; never listens for auth events."""
        session = cls(client)
        session.user = user
        session.access_token = access_token
        session.loading = False
        return session

    # ---- lifecycle ----

    async def start(self) -> None:
        # listener first, then the stored session, so no event is missed
        self._subscription = self.client.auth.on_auth_state_change(self._on_auth_event)
        current = await self.client.auth.get_session()
        self._apply(current)

    async def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._listeners.clear()

    def add_listener(self, listener: UserListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ---- events ----

    def _apply(self, session: Any) -> None:
        previous = self.user.id if self.user else None
        self.user = _auth_user(session)
        self.access_token = getattr(session, "access_token", None) if session else None
        self.loading = False

        current = self.user.id if self.user else None
        if current != previous:
            for listener in list(self._listeners):
                listener(self.user)

    def _on_auth_event(self, event: str, session: Any) -> None:
        self._apply(session)

        if event == "SIGNED_IN" and self.user and self.activity:
            self.activity.log_in_background(
                self.user.id,
                ActivityType.LOGIN,
                "auth",
                "User signed in",
                {"method": "email", "event": event},
            )
        elif event == "SIGNED_OUT":
            logger.info("User signed out")

    # ---- operations ----
    # Each returns the error message, or None on success.

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: str | None = None,
        role: SignupRole = "buyer",
        redirect_to: str | None = None,
    ) -> str | None:
        options: dict[str, Any] = {"data": {"full_name": full_name, "role": role}}
        if redirect_to:
            options["email_redirect_to"] = redirect_to
        try:
            resp = await self.client.auth.sign_up(
                {"email": email, "password": password, "options": options}
            )
        except AuthError as e:
            return e.message

        if resp.user is None:
            return None

        user_id = str(resp.user.id)
        # A trigger assigns the default role; make sure the chosen one sticks.
        try:
            await self.client.table("user_roles").update({"role": role}).eq("user_id", user_id).execute()
        except REMOTE_ERRORS as e:
            logger.error("Error updating user role: %s", e)

        if self.activity:
            await self.activity.log_activity(
                user_id,
                ActivityType.SIGNUP,
                "auth",
                "New user account created",
                {"email": email, "role": role},
            )
        return None

    async def sign_in(self, email: str, password: str) -> str | None:
        try:
            await self.client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            return e.message
        return None

    async def sign_in_with_oauth(self, provider: str = "google", redirect_to: str | None = None) -> str:
        """Returns the provider URL the user must be sent to."""
        options = {"redirect_to": redirect_to} if redirect_to else {}
        resp = await self.client.auth.sign_in_with_oauth({"provider": provider, "options": options})
        return resp.url

    async def sign_out(self) -> None:
        if self.user and self.activity:
            await self.activity.log_activity(
                self.user.id, ActivityType.LOGOUT, "auth", "User signed out"
            )
        await self.client.auth.sign_out()

    async def resend_verification_email(self, email: str, redirect_to: str | None = None) -> str | None:
        params: dict[str, Any] = {"type": "signup", "email": email}
        if redirect_to:
            params["options"] = {"email_redirect_to": redirect_to}
        try:
            await self.client.auth.resend(params)
        except AuthError as e:
            return e.message
        return None

    async def update_password(self, new_password: str) -> str | None:
        try:
            await self.client.auth.update_user({"password": new_password})
        except AuthError as e:
            return e.message

        if self.user and self.activity:
            self.activity.log_in_background(
                self.user.id, ActivityType.PASSWORD_CHANGE, "security", "Password updated"
            )
        return None
