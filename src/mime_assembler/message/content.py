"""Single content part of a MIME message."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.interfaces import EnvironmentContext
from ..core.models import PartKind
from .header import ContentHeader


class MimeMessageContent:
    """One body or attachment with its own headers and an encoded payload.

    Instances are created by :class:`MimeMessage`; ``data`` must already be
    encoded according to the part's Content-Transfer-Encoding.
    """

    def __init__(
        self,
        envctx: EnvironmentContext,
        data: str,
        headers: Mapping[str, Any] | None = None,
    ) -> None:
        self.envctx = envctx
        self.headers = ContentHeader(envctx)
        self._data = data
        self.set_headers(headers or {})

    @property
    def data(self) -> str:
        """Encoded payload as given at creation."""
        return self._data

    def dump(self) -> str:
        """Return the part headers, a blank line and the payload."""
        eol = self.envctx.eol
        return self.headers.dump() + eol + eol + self._data

    def classify(self) -> PartKind:
        """Derive the part kind from the current Content-Disposition."""
        if self.is_attachment():
            return PartKind.ATTACHMENT
        if self.is_inline_attachment():
            return PartKind.INLINE_ATTACHMENT
        return PartKind.BODY

    def is_attachment(self) -> bool:
        disposition = self.headers.get("Content-Disposition")
        return isinstance(disposition, str) and "attachment" in disposition

    def is_inline_attachment(self) -> bool:
        disposition = self.headers.get("Content-Disposition")
        return isinstance(disposition, str) and "inline" in disposition

    def set_header(self, name: str, value: Any) -> str:
        """Set a part header; plain values must not contain line breaks."""
        self.headers.set(name, value)
        return name

    def get_header(self, name: str) -> Any:
        return self.headers.get(name)

    def set_headers(self, values: Mapping[str, Any]) -> list[str]:
        return [self.set_header(name, value) for name, value in values.items()]

    def get_headers(self) -> dict[str, Any]:
        return self.headers.to_object()

    def __repr__(self) -> str:
        return (
            f"MimeMessageContent(type={self.get_header('Content-Type')!r}, "
            f"kind={self.classify().value!r})"
        )


__all__ = ["MimeMessageContent"]
