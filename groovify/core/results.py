from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from groovify.core.models import Client


class RegistrationError(Enum):
    INVALID_USERNAME = "invalid_username"
    USERNAME_TAKEN = "username_taken"
    INVALID_PASSWORD = "invalid_password"
    PERSISTENCE_ERROR = "persistence_error"

    @property
    def message(self) -> str:
        return _REGISTRATION_MESSAGES[self]


_REGISTRATION_MESSAGES = {
    RegistrationError.INVALID_USERNAME: "Username must be between 3 and 32 characters.",
    RegistrationError.USERNAME_TAKEN: "Username already exists.",
    RegistrationError.INVALID_PASSWORD: "Password cannot be empty.",
    RegistrationError.PERSISTENCE_ERROR: "An error occurred while saving your account. Please try again.",
}


class MembershipError(Enum):
    PLAYLIST_NOT_FOUND = "playlist_not_found"
    SONG_NOT_FOUND = "song_not_found"

    @property
    def message(self) -> str:
        if self is MembershipError.PLAYLIST_NOT_FOUND:
            return "playlist not found"
        return "song not found"


class ProfileUpdateError(Enum):
    CLIENT_NOT_FOUND = "client_not_found"
    INVALID_USERNAME = "invalid_username"
    USERNAME_TAKEN = "username_taken"
    PERSISTENCE_ERROR = "persistence_error"

    @property
    def message(self) -> str:
        return {
            ProfileUpdateError.CLIENT_NOT_FOUND: "user not found",
            ProfileUpdateError.INVALID_USERNAME: "Username must be between 3 and 32 characters.",
            ProfileUpdateError.USERNAME_TAKEN: "Username already exists.",
            ProfileUpdateError.PERSISTENCE_ERROR: "Could not update profile.",
        }[self]


@dataclass(frozen=True)
class RegistrationResult:
    client: Optional[Client] = None
    error: Optional[RegistrationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, client: Client) -> "RegistrationResult":
        return cls(client=client)

    @classmethod
    def failure(cls, error: RegistrationError) -> "RegistrationResult":
        return cls(error=error)


@dataclass(frozen=True)
class MembershipResult:
    error: Optional[MembershipError] = None
    changed: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, changed: bool = False) -> "MembershipResult":
        return cls(changed=changed)

    @classmethod
    def failure(cls, error: MembershipError) -> "MembershipResult":
        return cls(error=error)


@dataclass(frozen=True)
class ProfileUpdateResult:
    client: Optional[Client] = None
    error: Optional[ProfileUpdateError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
