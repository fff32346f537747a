"""Identity session: who is playing right now."""

import logging
from enum import Enum
from typing import Callable, Optional

from pydantic import ValidationError

from ..errors import AuthenticationError
from .backend import AuthBackend
from .models import GUEST_IDENTITY, Identity, LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


class IdentityState(str, Enum):
    """Observable resolution state."""

    LOADING = "loading"
    RESOLVED = "resolved"
    ANONYMOUS = "anonymous"


def _validation_message(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        message = str(error.get("msg", "invalid value"))
        messages.append(message.removeprefix("Value error, "))
    return "; ".join(messages) or "Invalid request data"


class IdentitySession:
    """Resolves and changes the current learner identity.

    Every operation that changes the identity takes a new request number;
    a resolution that finishes after a newer one started is discarded, so
    the last request wins.
    """

    def __init__(
        self,
        backend: Optional[AuthBackend] = None,
        on_change: Optional[Callable[[Optional[Identity]], None]] = None,
    ):
        self._backend = backend
        self.on_change = on_change
        self._identity: Optional[Identity] = None
        self._state = IdentityState.LOADING
        self._request = 0

    @property
    def state(self) -> IdentityState:
        return self._state

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    @property
    def is_guest(self) -> bool:
        return self._identity is not None and self._identity.is_guest

    async def resolve(self) -> Optional[Identity]:
        """Ask the backend who the current learner is.

        Never raises: any failure resolves to no identity.
        """
        request = self._next_request()
        self._state = IdentityState.LOADING

        identity: Optional[Identity] = None
        if self._backend is not None:
            try:
                identity = await self._backend.me()
            except Exception as exc:
                logger.warning("Identity resolution failed, continuing anonymously: %s", exc)
                identity = None

        if request != self._request:
            logger.debug("Discarding superseded identity resolution #%d", request)
            return self._identity

        self._apply(identity)
        return identity

    async def get_current_identity(self) -> Optional[Identity]:
        """Return the identity, resolving first if nothing has resolved yet."""
        if self._state == IdentityState.LOADING:
            return await self.resolve()
        return self._identity

    async def login(self, email: str, password: str) -> Identity:
        """Log in with email and password.

        Raises:
            AuthenticationError: If the input is invalid or the server refuses
        """
        try:
            request_data = LoginRequest(email=email, password=password)
        except ValidationError as exc:
            raise AuthenticationError(_validation_message(exc)) from exc

        backend = self._require_backend()
        request = self._next_request()
        identity = await backend.login(request_data.email, request_data.password)
        if request == self._request:
            self._apply(identity)
        return identity

    async def register(self, username: str, email: str, password: str) -> Identity:
        """Create an account and log in as it.

        Raises:
            AuthenticationError: If the input is invalid or the server refuses
        """
        try:
            request_data = RegisterRequest(username=username, email=email, password=password)
        except ValidationError as exc:
            raise AuthenticationError(_validation_message(exc)) from exc

        backend = self._require_backend()
        request = self._next_request()
        identity = await backend.register(request_data.username, request_data.email, request_data.password)
        if request == self._request:
            self._apply(identity)
        return identity

    async def logout(self) -> None:
        """End the session. The local identity is always cleared."""
        self._next_request()
        try:
            if self._backend is not None and self._identity is not None and not self._identity.is_guest:
                await self._backend.logout()
        except Exception as exc:
            logger.warning("Logout request failed: %s", exc)
        finally:
            self._apply(None)

    def continue_as_guest(self) -> Identity:
        """Play without an account. No network call."""
        self._next_request()
        self._apply(GUEST_IDENTITY)
        return GUEST_IDENTITY

    def _require_backend(self) -> AuthBackend:
        if self._backend is None:
            raise AuthenticationError("No auth server configured; continue as guest instead")
        return self._backend

    def _next_request(self) -> int:
        self._request += 1
        return self._request

    def _apply(self, identity: Optional[Identity]) -> None:
        self._identity = identity
        self._state = IdentityState.RESOLVED if identity is not None else IdentityState.ANONYMOUS
        if self.on_change is not None:
            try:
                self.on_change(identity)
            except Exception:
                logger.exception("Identity change callback failed")

    async def close(self) -> None:
        """Release the backend's resources, if it holds any."""
        close = getattr(self._backend, "close", None)
        if close is not None:
            await close()
