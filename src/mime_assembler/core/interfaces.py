"""Protocol interfaces for decoupling components."""

from __future__ import annotations

from typing import Protocol


class EnvironmentContext(Protocol):
    """Host services the assembler relies on for encoding and validation."""

    eol: str

    def to_base64(self, value: str | bytes) -> str:
        """Return standard base64 for ``value`` (text is encoded as UTF-8)."""
        raise NotImplementedError

    def to_base64_web_safe(self, value: str | bytes) -> str:
        """Return URL-safe base64 for ``value``."""
        raise NotImplementedError

    def validate_content_type(self, value: str) -> str | None:
        """Return ``value`` when acceptable as a content type, else ``None``."""
        raise NotImplementedError


class BoundaryGenerator(Protocol):
    """Produces a fresh multipart boundary token on every call."""

    def __call__(self) -> str:
        """Return a new alphanumeric token."""
        raise NotImplementedError


__all__ = ["BoundaryGenerator", "EnvironmentContext"]
