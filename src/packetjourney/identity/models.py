"""Learner identity models and credential validation."""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")


class IdentityRole(str, Enum):
    """Role attached to an identity."""

    PLAYER = "PLAYER"
    CREATOR = "CREATOR"
    ADMIN = "ADMIN"
    GUEST = "GUEST"


class Identity(BaseModel):
    """The acting learner."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    username: str
    email: str = Field(default="")
    role: IdentityRole = Field(default=IdentityRole.PLAYER)

    @property
    def is_guest(self) -> bool:
        return self.role == IdentityRole.GUEST

    @property
    def is_persistent(self) -> bool:
        """Whether progress for this identity should be stored."""
        return not self.is_guest


GUEST_IDENTITY = Identity(id="guest", username="Guest", email="", role=IdentityRole.GUEST)


class LoginRequest(BaseModel):
    """Credentials for logging in."""

    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email format")
        return value


class RegisterRequest(LoginRequest):
    """Details for creating an account."""

    username: str = Field(min_length=3, max_length=20)
    password: str = Field(min_length=8)

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        if not USERNAME_PATTERN.match(value):
            raise ValueError("Username can only contain letters, numbers, and underscores")
        return value

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain uppercase letter")
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must contain a number")
        return value
