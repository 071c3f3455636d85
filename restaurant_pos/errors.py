"""Error taxonomy for the point-of-sale app."""

from __future__ import annotations


class PosError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str = "Something went wrong") -> None:
        super().__init__(message)
        self.message = message


class AuthError(PosError):
    """Invalid credentials or missing user profile."""


class ValidationError(PosError):
    """A requested change breaks a business rule."""


class CollaboratorError(PosError):
    """The data store failed to complete a request."""
