"""
Error taxonomy.

Fatal failures are exceptions. Failures that were swallowed and replaced by
a fallback are described by a ``Recovered`` value attached to the result of
the operation, so callers can tell "it worked" from "it fell back".
"""
from typing import Optional
from pydantic import BaseModel


class SmartFixError(Exception):
    """Base class for every error raised by the booking core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SmartFixError):
    """A form was rejected before any I/O happened."""

    def __init__(self, reason: str, message: Optional[str] = None):
        super().__init__(message or reason)
        self.reason = reason


class RemoteStoreError(SmartFixError):
    """The remote store could not complete a write or read."""


class AuthError(SmartFixError):
    """Sign-in or sign-up was refused by the auth provider."""


class NotAuthenticatedError(SmartFixError):
    def __init__(self, message: str = "User not logged in"):
        super().__init__(message)


class Recovered(BaseModel):
    source: str  # e.g. "local_cache.read", "remote.delete", "catalog"
    detail: str
