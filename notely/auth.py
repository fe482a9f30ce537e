"""Extraction of the API key from request headers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class AuthError(Exception):
    """Base class for authorization header problems."""


class NoAuthHeaderError(AuthError):
    """Raised when the request carries no Authorization header."""

    def __init__(self) -> None:
        super().__init__("no authorization header included")


class MalformedAuthHeaderError(AuthError):
    """Raised when the Authorization header is not of the form 'ApiKey <key>'."""

    def __init__(self) -> None:
        super().__init__("malformed authorization header")


def get_api_key(headers: Mapping[str, Any]) -> str:
    """Return the API key from an 'Authorization: ApiKey <key>' header."""
    value = headers.get("Authorization")
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if not value:
        raise NoAuthHeaderError()
    parts = value.split(" ")
    if len(parts) < 2 or parts[0] != "ApiKey":
        raise MalformedAuthHeaderError()
    return parts[1]