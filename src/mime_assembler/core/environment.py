"""Default environment adapter and boundary generation."""

from __future__ import annotations

import base64
import secrets
import string
from collections.abc import Callable
from dataclasses import dataclass

from .config import MessageSettings

_BOUNDARY_ALPHABET = string.ascii_letters + string.digits


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


@dataclass(frozen=True, slots=True)
class DefaultEnvironment:
    """Environment adapter backed by the standard ``base64`` module."""

    eol: str = "\r\n"

    @classmethod
    def from_settings(cls, settings: MessageSettings) -> DefaultEnvironment:
        """Build an adapter using the configured line ending."""
        return cls(eol=settings.eol)

    def to_base64(self, value: str | bytes) -> str:
        """Return standard base64 for ``value``."""
        return base64.b64encode(_as_bytes(value)).decode("ascii")

    def to_base64_web_safe(self, value: str | bytes) -> str:
        """Return URL-safe base64 without ``=`` padding."""
        encoded = base64.urlsafe_b64encode(_as_bytes(value)).decode("ascii")
        return encoded.rstrip("=")

    def validate_content_type(self, value: str) -> str | None:
        """Accept any non-empty content type."""
        return value if value else None


def random_boundary_generator(length: int = 24) -> Callable[[], str]:
    """Return a generator of alphanumeric boundary tokens of ``length`` chars."""

    def _generate() -> str:
        return "".join(secrets.choice(_BOUNDARY_ALPHABET) for _ in range(length))

    return _generate


__all__ = ["DefaultEnvironment", "random_boundary_generator"]
