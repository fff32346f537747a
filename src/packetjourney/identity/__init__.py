"""Learner identity: authenticated, registered or guest."""

from .backend import AuthBackend, HttpAuthBackend
from .models import GUEST_IDENTITY, Identity, IdentityRole
from .session import IdentitySession, IdentityState

__all__ = [
    "AuthBackend",
    "GUEST_IDENTITY",
    "HttpAuthBackend",
    "Identity",
    "IdentityRole",
    "IdentitySession",
    "IdentityState",
]
