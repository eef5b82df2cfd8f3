"""Authentication header providers.

Each provider validates its input up front and renders a single
"Name: Value" header line that the request builder appends last.
"""

import re
from abc import ABC, abstractmethod
from typing import Optional

from .exceptions import ValidationError

_WHITESPACE = re.compile(r"\s")
_BAD_HEADER_NAME = re.compile(r"[\s:]")


class AuthProvider(ABC):
    """Base class for all authentication providers."""

    @abstractmethod
    def header_line(self) -> str:
        """Return the header line to send."""
        pass


class BearerAuth(AuthProvider):
    """Bearer token authentication provider."""

    def __init__(self, token: str):
        if not token or _WHITESPACE.search(token):
            raise ValidationError(
                "Invalid Bearer token: Token cannot be empty or contain spaces.", field="token"
            )
        self.token = token

    def header_line(self) -> str:
        return f"Authorization: Bearer {self.token}"


class ApiKeyAuth(AuthProvider):
    """API key sent in a custom header."""

    def __init__(self, api_key: str, header_name: str = "X-API-Key"):
        if not header_name or not api_key:
            raise ValidationError(
                "Invalid API Key: Header name and value cannot be empty.", field="api_key"
            )
        if _BAD_HEADER_NAME.search(header_name):
            raise ValidationError(
                f"Invalid header name: '{header_name}'. It cannot contain spaces or colons.",
                field="header_name",
            )
        self.api_key = api_key
        self.header_name = header_name

    def header_line(self) -> str:
        return f"{self.header_name}: {self.api_key}"

    @classmethod
    def from_pair(cls, pair: str) -> "ApiKeyAuth":
        """Parse ``NAME=VALUE``."""
        if "=" not in pair:
            raise ValidationError(
                f"Invalid API key: {pair}. Expected format: NAME=VALUE", field="api_key"
            )
        name, value = pair.split("=", 1)
        return cls(value, header_name=name)


def resolve_auth_header(
    bearer: Optional[str] = None, api_key: Optional[str] = None
) -> Optional[str]:
    """
    Build the auth header line from CLI-style inputs.

    At most one scheme may be given.
    """
    if bearer is not None and api_key is not None:
        raise ValidationError("Choose either a Bearer token or an API key, not both.")
    if bearer is not None:
        return BearerAuth(bearer).header_line()
    if api_key is not None:
        return ApiKeyAuth.from_pair(api_key).header_line()
    return None
