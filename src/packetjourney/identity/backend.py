"""Auth server client."""

import logging
from typing import Any, Optional, Protocol

import httpx

from ..errors import AuthenticationError, IdentityError
from .models import Identity, IdentityRole

logger = logging.getLogger(__name__)


class AuthBackend(Protocol):
    """What the identity session needs from an auth server."""

    async def me(self) -> Optional[Identity]: ...

    async def login(self, email: str, password: str) -> Identity: ...

    async def register(self, username: str, email: str, password: str) -> Identity: ...

    async def logout(self) -> None: ...


def identity_from_payload(user: Any) -> Identity:
    """Build an identity from a ``user`` object returned by the server."""
    if not isinstance(user, dict) or not user.get("id"):
        raise IdentityError("Auth server returned a malformed user")
    role = str(user.get("role") or IdentityRole.PLAYER.value).upper()
    if role not in IdentityRole.__members__:
        role = IdentityRole.PLAYER.value
    return Identity(
        id=str(user["id"]),
        username=str(user.get("username") or ""),
        email=str(user.get("email") or ""),
        role=IdentityRole(role),
    )


def _envelope(response: httpx.Response) -> dict:
    """Decode the ``{"success", "data", "error"}`` envelope."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _error_message(data: dict, default: str) -> str:
    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return default


class HttpAuthBackend:
    """Auth backend speaking to the web app's ``/api/auth`` routes.

    The session cookie is kept in the underlying client's cookie jar.
    """

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        """Initialize the backend.

        Args:
            base_url: Root URL of the web app
            client: Preconfigured client, mainly for tests
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def me(self) -> Optional[Identity]:
        """Return the identity behind the current session cookie, if any."""
        response = await self._client.get("/api/auth/me")
        data = _envelope(response)
        if response.status_code != 200 or not data.get("success"):
            return None
        return identity_from_payload((data.get("data") or {}).get("user"))

    async def login(self, email: str, password: str) -> Identity:
        return await self._post_credentials(
            "/api/auth/login",
            {"email": email, "password": password},
            "Login failed",
        )

    async def register(self, username: str, email: str, password: str) -> Identity:
        return await self._post_credentials(
            "/api/auth/register",
            {"username": username, "email": email, "password": password},
            "Registration failed",
        )

    async def logout(self) -> None:
        await self._client.post("/api/auth/logout")

    async def close(self) -> None:
        await self._client.aclose()

    async def _post_credentials(self, path: str, body: dict, failure: str) -> Identity:
        try:
            response = await self._client.post(path, json=body)
        except httpx.HTTPError as exc:
            logger.warning("%s: %s", failure, exc)
            raise AuthenticationError(failure) from exc

        data = _envelope(response)
        if response.is_error or not data.get("success"):
            raise AuthenticationError(_error_message(data, failure))
        return identity_from_payload((data.get("data") or {}).get("user"))
