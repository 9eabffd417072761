# app/client/session.py
import logging
from collections.abc import Awaitable, Callable

from pydantic import ValidationError

from app.client.api import StorefrontAPI
from app.client.exceptions import ApiError, AuthenticationError
from app.client.models import UserProfile
from app.client.storage import LocalStorage

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"

IdentityListener = Callable[[UserProfile | None, UserProfile | None], Awaitable[None]]


class Session:
    """
    Authentication state shared by the storefront client.

    The token and profile are persisted under the "token" / "user" keys.
    `is_authenticated` only becomes true once the profile is known, so
    nothing reads the cart as signed-in before the token has been stored
    and verified.

    Listeners registered with `subscribe` are awaited with
    (previous_user, current_user) whenever the signed-in identity changes.
    """

    def __init__(self, api: StorefrontAPI, storage: LocalStorage):
        self.api = api
        self.storage = storage
        self.token: str | None = None
        self.user: UserProfile | None = None
        self.loading = False
        self._listeners: list[IdentityListener] = []
        api.use_token(self.get_token)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def get_token(self) -> str | None:
        return self.token

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify(self, previous: UserProfile | None, current: UserProfile | None) -> None:
        previous_id = previous.id if previous else None
        current_id = current.id if current else None
        if previous_id == current_id:
            return
        for listener in list(self._listeners):
            await listener(previous, current)

    def _store_token(self, token: str) -> None:
        self.token = token
        self.storage.set_item(TOKEN_KEY, token)

    def _store_user(self, user: UserProfile) -> None:
        self.user = user
        self.storage.set_item(USER_KEY, user.model_dump_json())

    def _clear_credentials(self) -> None:
        self.token = None
        self.user = None
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_KEY)

    async def initialize(self) -> None:
        """
        Restore a persisted session and re-validate it against the backend.

        A rejected token clears the stored credentials. A network failure
        keeps the stored profile so the app works offline.
        """
        previous = self.user
        self.loading = True
        try:
            stored_token = self.storage.get_item(TOKEN_KEY)
            if not stored_token:
                self._clear_credentials()
                return

            self.token = stored_token
            stored_user = self.storage.get_json(USER_KEY)
            if stored_user is not None:
                try:
                    self.user = UserProfile.model_validate(stored_user)
                except ValidationError:
                    logger.warning("Discarding malformed stored profile")

            try:
                profile = await self.api.get_profile()
            except AuthenticationError as e:
                logger.info("Stored token rejected (%s), signing out", e.status_code)
                self._clear_credentials()
            except ApiError as e:
                logger.warning("Could not validate stored session: %s", e.message)
            else:
                self._store_user(profile)
        finally:
            self.loading = False

        await self._notify(previous, self.user)

    async def login(self, email: str, password: str) -> UserProfile:
        """
        Verify credentials, persist the token, then fetch the profile.

        Raises AuthenticationError with the backend's message on failure;
        the stored credentials are cleared in that case.
        """
        previous = self.user
        self.loading = True
        try:
            self.user = None
            result = await self.api.login(email, password)
            self._store_token(result.token)
            profile = await self.api.get_profile()
            self._store_user(profile)
        except ApiError as e:
            self._clear_credentials()
            self.loading = False
            await self._notify(previous, None)
            if isinstance(e, AuthenticationError):
                raise
            raise AuthenticationError(
                e.message or "Could not sign in", e.status_code, e.detail
            ) from e
        finally:
            self.loading = False

        logger.info("Signed in as user %s", profile.id)
        await self._notify(previous, profile)
        return profile

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        phone: str | None = None,
    ) -> UserProfile:
        """Create an account. Does not sign in."""
        return await self.api.register(username, email, password, phone)

    async def logout(self) -> None:
        previous = self.user
        self._clear_credentials()
        logger.info("Signed out")
        await self._notify(previous, None)

    async def invalidate(self) -> None:
        """Drop credentials the backend no longer accepts."""
        if self.token is None and self.user is None:
            return
        logger.warning("Session rejected by the server, signing out")
        await self.logout()

    async def refresh_profile(self) -> UserProfile | None:
        if self.token is None:
            return None
        try:
            profile = await self.api.get_profile()
        except AuthenticationError:
            await self.invalidate()
            return None
        except ApiError as e:
            logger.warning("Profile refresh failed: %s", e.message)
            return self.user
        previous = self.user
        self._store_user(profile)
        await self._notify(previous, profile)
        return profile
