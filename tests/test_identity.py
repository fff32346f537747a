"""Tests for identity resolution and the auth backend."""

import asyncio
import json
import logging

import httpx
import pytest

from packetjourney.errors import AuthenticationError, IdentityError
from packetjourney.identity.backend import HttpAuthBackend, identity_from_payload
from packetjourney.identity.models import GUEST_IDENTITY, Identity, IdentityRole
from packetjourney.identity.session import IdentitySession, IdentityState

USER = {"id": "u1", "username": "ada", "email": "ada@example.com", "role": "PLAYER"}


def ok(user=USER):
    return httpx.Response(200, json={"success": True, "data": {"user": user}})


def fail(status, message):
    return httpx.Response(status, json={"success": False, "error": {"message": message}})


def make_backend(handler) -> HttpAuthBackend:
    client = httpx.AsyncClient(base_url="http://auth.test", transport=httpx.MockTransport(handler))
    return HttpAuthBackend("http://auth.test", client=client)


class TestHttpAuthBackend:
    async def test_me_returns_identity(self):
        backend = make_backend(lambda request: ok())

        identity = await backend.me()

        assert identity == Identity(id="u1", username="ada", email="ada@example.com", role=IdentityRole.PLAYER)

    async def test_me_without_session_is_none(self):
        backend = make_backend(lambda request: fail(401, "Not authenticated"))

        assert await backend.me() is None

    async def test_login_posts_credentials(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return ok()

        backend = make_backend(handler)

        identity = await backend.login("ada@example.com", "secret")

        assert identity.username == "ada"
        assert seen == {
            "path": "/api/auth/login",
            "body": {"email": "ada@example.com", "password": "secret"},
        }

    async def test_login_refused_carries_server_message(self):
        backend = make_backend(lambda request: fail(401, "Invalid email or password"))

        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            await backend.login("ada@example.com", "wrong")

    async def test_register_conflict(self):
        backend = make_backend(lambda request: fail(409, "Email already registered"))

        with pytest.raises(AuthenticationError, match="already registered"):
            await backend.register("ada", "ada@example.com", "Secret123")

    async def test_network_error_becomes_authentication_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        backend = make_backend(handler)

        with pytest.raises(AuthenticationError, match="Login failed"):
            await backend.login("ada@example.com", "secret")


def test_identity_from_payload_defaults_unknown_role():
    identity = identity_from_payload({"id": 7, "username": "bob", "role": "superuser"})

    assert identity.id == "7"
    assert identity.role == IdentityRole.PLAYER


def test_identity_from_payload_rejects_malformed_user():
    with pytest.raises(IdentityError):
        identity_from_payload({"username": "no id"})


class FakeBackend:
    """Backend whose answers are controlled by the test."""

    def __init__(self):
        self.me_result = None
        self.me_error = None
        self.me_gate = None
        self.logged_out = False

    async def me(self):
        if self.me_gate is not None:
            await self.me_gate.wait()
        if self.me_error is not None:
            raise self.me_error
        return self.me_result

    async def login(self, email, password):
        if password != "right":
            raise AuthenticationError("Invalid email or password")
        return Identity(id="u1", username="ada", email=email)

    async def register(self, username, email, password):
        return Identity(id="u2", username=username, email=email)

    async def logout(self):
        self.logged_out = True


class TestIdentitySession:
    def test_starts_loading(self):
        session = IdentitySession(FakeBackend())

        assert session.state == IdentityState.LOADING
        assert session.identity is None

    async def test_resolve_success(self):
        backend = FakeBackend()
        backend.me_result = Identity(id="u1", username="ada")
        changes = []
        session = IdentitySession(backend, on_change=changes.append)

        identity = await session.resolve()

        assert identity.id == "u1"
        assert session.state == IdentityState.RESOLVED
        assert session.is_authenticated is True
        assert changes == [identity]

    async def test_resolve_failure_is_anonymous(self, caplog):
        backend = FakeBackend()
        backend.me_error = httpx.ConnectError("down")
        session = IdentitySession(backend)

        with caplog.at_level(logging.WARNING, logger="packetjourney.identity.session"):
            identity = await session.resolve()

        assert identity is None
        assert session.state == IdentityState.ANONYMOUS
        assert "continuing anonymously" in caplog.text

    async def test_resolve_without_backend_is_anonymous(self):
        session = IdentitySession()

        assert await session.get_current_identity() is None
        assert session.state == IdentityState.ANONYMOUS

    async def test_failing_change_callback_does_not_escape_resolve(self, caplog):
        def broken(identity):
            raise RuntimeError("screen not ready")

        session = IdentitySession(on_change=broken)

        with caplog.at_level(logging.ERROR, logger="packetjourney.identity.session"):
            identity = await session.resolve()

        assert identity is None
        assert session.state == IdentityState.ANONYMOUS
        assert "callback failed" in caplog.text

    async def test_superseded_resolution_is_discarded(self):
        backend = FakeBackend()
        backend.me_gate = asyncio.Event()
        backend.me_result = Identity(id="stale", username="stale")
        session = IdentitySession(backend)

        pending = asyncio.create_task(session.resolve())
        await asyncio.sleep(0)
        session.continue_as_guest()
        backend.me_gate.set()
        await pending

        assert session.identity == GUEST_IDENTITY
        assert session.is_guest is True

    async def test_login_applies_identity(self):
        session = IdentitySession(FakeBackend())

        identity = await session.login("ada@example.com", "right")

        assert session.identity == identity
        assert session.state == IdentityState.RESOLVED

    async def test_login_refused(self):
        session = IdentitySession(FakeBackend())

        with pytest.raises(AuthenticationError):
            await session.login("ada@example.com", "wrong")

        assert session.identity is None

    async def test_login_validates_email_before_calling_backend(self):
        session = IdentitySession(FakeBackend())

        with pytest.raises(AuthenticationError, match="Invalid email format"):
            await session.login("not-an-email", "right")

    async def test_register_validates_password(self):
        session = IdentitySession(FakeBackend())

        with pytest.raises(AuthenticationError, match="uppercase"):
            await session.register("ada_l", "ada@example.com", "lowercase1")

        with pytest.raises(AuthenticationError, match="letters, numbers"):
            await session.register("ada-l", "ada@example.com", "Secret123")

        identity = await session.register("ada_l", "ada@example.com", "Secret123")
        assert identity.username == "ada_l"

    async def test_login_without_backend_raises(self):
        session = IdentitySession()

        with pytest.raises(AuthenticationError, match="guest"):
            await session.login("ada@example.com", "right")

    async def test_logout_always_clears(self):
        backend = FakeBackend()
        session = IdentitySession(backend)
        await session.login("ada@example.com", "right")

        await session.logout()

        assert backend.logged_out is True
        assert session.identity is None
        assert session.state == IdentityState.ANONYMOUS

    async def test_guest_logout_skips_backend(self):
        backend = FakeBackend()
        session = IdentitySession(backend)
        session.continue_as_guest()

        await session.logout()

        assert backend.logged_out is False
        assert session.identity is None
