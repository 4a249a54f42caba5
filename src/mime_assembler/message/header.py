"""Ordered header stores for messages and content parts."""

from __future__ import annotations

import logging
import re
import secrets
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import format_datetime
from typing import Any

from ..core.errors import (
    InvalidHeaderFieldError,
    InvalidHeaderValueError,
    MissingHeaderError,
)
from ..core.interfaces import EnvironmentContext
from ..core.models import HeaderField
from .mailbox import Mailbox

LOGGER = logging.getLogger(__name__)

# UTF-8 bytes per encoded word; RFC 2047 caps a word at 75 characters.
_ENCODED_WORD_BYTES = 45
_LINE_BREAKS = re.compile(r"[\r\n]")
_INVALID_FIELD_NAME = re.compile(r"[\s:]")


def _dump_plain(value: Any) -> str:
    return value if isinstance(value, str) else ""


class MessageHeader:
    """Header collection for the top level of a message.

    Built-in fields are kept in a fixed order; anything else set on the store
    is appended as a custom field in insertion order.
    """

    def __init__(
        self,
        envctx: EnvironmentContext,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.envctx = envctx
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self.fields: list[HeaderField] = self._default_fields()

    def _default_fields(self) -> list[HeaderField]:
        return [
            HeaderField(name="Date", generator=self._generate_date),
            HeaderField(
                name="From",
                required=True,
                validate=self._validate_mailbox_single,
                dump=self._dump_mailbox_single,
            ),
            HeaderField(
                name="Sender",
                validate=self._validate_mailbox_single,
                dump=self._dump_mailbox_single,
            ),
            HeaderField(
                name="Reply-To",
                validate=self._validate_mailbox_single,
                dump=self._dump_mailbox_single,
            ),
            HeaderField(
                name="To",
                validate=self._validate_mailbox_multi,
                dump=self._dump_mailbox_multi,
            ),
            HeaderField(
                name="Cc",
                validate=self._validate_mailbox_multi,
                dump=self._dump_mailbox_multi,
            ),
            HeaderField(
                name="Bcc",
                validate=self._validate_mailbox_multi,
                dump=self._dump_mailbox_multi,
            ),
            HeaderField(name="Message-ID", generator=self._generate_message_id),
            HeaderField(name="Subject", required=True, dump=self._dump_encoded_word),
            HeaderField(name="MIME-Version", generator=lambda: "1.0"),
        ]

    def _find(self, name: str) -> HeaderField | None:
        lowered = name.lower()
        for field in self.fields:
            if field.name.lower() == lowered:
                return field
        return None

    def get(self, name: str) -> Any:
        """Return the stored value for ``name`` (case-insensitive) or ``None``."""
        field = self._find(name)
        return field.value if field is not None else None

    def set(self, name: str, value: Any) -> HeaderField:
        """Store ``value`` under ``name``, adding a custom field if unknown."""
        field = self._find(name)
        if field is None:
            return self.set_custom(
                HeaderField(name=name, value=value, custom=True, dump=_dump_plain)
            )
        if field.validate is not None and not field.validate(value):
            LOGGER.debug("Rejected value for header %s", field.name)
            raise InvalidHeaderValueError(
                f'The value for the header "{name}" is invalid.'
            )
        if field.custom and not isinstance(value, str):
            raise InvalidHeaderFieldError("Custom header must have a value.")
        if field.dump in (None, _dump_plain):
            _reject_line_breaks(field.name, value)
        field.value = value
        return field

    def set_custom(self, field: HeaderField) -> HeaderField:
        """Append a fully described custom field."""
        if not isinstance(field, HeaderField):
            raise InvalidHeaderFieldError(
                "Invalid input for custom header. It must be a HeaderField."
            )
        if not field.name or _INVALID_FIELD_NAME.search(field.name):
            raise InvalidHeaderFieldError(f'"{field.name}" is not a valid header name.')
        if not isinstance(field.value, str):
            raise InvalidHeaderFieldError("Custom header must have a value.")
        if field.dump in (None, _dump_plain):
            _reject_line_breaks(field.name, field.value)
        self.fields.append(field)
        return field

    def disable(self, name: str) -> None:
        """Exclude a field from dumps without discarding its value."""
        self._toggle(name, disabled=True)

    def enable(self, name: str) -> None:
        """Re-include a previously disabled field."""
        self._toggle(name, disabled=False)

    def _toggle(self, name: str, *, disabled: bool) -> None:
        field = self._find(name)
        if field is None:
            raise InvalidHeaderFieldError(f'Unknown header "{name}".')
        field.disabled = disabled

    def to_object(self) -> dict[str, Any]:
        """Return a name to value mapping in field order."""
        return {field.name: field.value for field in self.fields}

    def dump(self) -> str:
        """Render all enabled fields as header lines joined by the EOL token.

        Generated values are stored on first use so that repeated dumps are
        identical.
        """
        lines: list[str] = []
        for field in self.fields:
            if field.disabled:
                continue
            if field.value is None:
                if field.required:
                    raise MissingHeaderError(f'The "{field.name}" header is required.')
                if field.generator is None:
                    continue
                field.value = field.generator()
            text = field.dump(field.value) if field.dump else _dump_plain(field.value)
            lines.append(f"{field.name}: {text}")
        return self.envctx.eol.join(lines)

    def _generate_date(self) -> str:
        return format_datetime(self._clock().astimezone(UTC))

    def _generate_message_id(self) -> str:
        sender = self.get("From")
        domain = sender.get_addr_domain() if isinstance(sender, Mailbox) else ""
        return f"<{secrets.token_hex(12)}@{domain}>"

    def _encoded_word(self, text: str) -> str:
        """Encode ``text`` as RFC 2047 words, folding onto new lines as needed."""
        words = (
            f"=?utf-8?B?{self.envctx.to_base64(chunk)}?="
            for chunk in _split_utf8(text, _ENCODED_WORD_BYTES)
        )
        return f"{self.envctx.eol} ".join(words)

    def _dump_encoded_word(self, value: Any) -> str:
        return self._encoded_word(value) if isinstance(value, str) else ""

    def _dump_mailbox(self, mailbox: Mailbox) -> str:
        if not mailbox.name:
            return mailbox.dump()
        return f"{self._encoded_word(mailbox.name)} <{mailbox.addr}>"

    def _dump_mailbox_single(self, value: Any) -> str:
        return self._dump_mailbox(value) if isinstance(value, Mailbox) else ""

    def _dump_mailbox_multi(self, value: Any) -> str:
        if isinstance(value, Mailbox):
            return self._dump_mailbox(value)
        if _is_mailbox_list(value):
            return f",{self.envctx.eol} ".join(self._dump_mailbox(item) for item in value)
        return ""

    @staticmethod
    def _validate_mailbox_single(value: Any) -> bool:
        return isinstance(value, Mailbox)

    @staticmethod
    def _validate_mailbox_multi(value: Any) -> bool:
        return isinstance(value, Mailbox) or _is_mailbox_list(value)


class ContentHeader(MessageHeader):
    """Header collection for a single content part."""

    def _default_fields(self) -> list[HeaderField]:
        return [
            HeaderField(name="Content-ID"),
            HeaderField(name="Content-Type"),
            HeaderField(name="Content-Transfer-Encoding"),
            HeaderField(name="Content-Disposition"),
        ]


def _reject_line_breaks(name: str, value: Any) -> None:
    if isinstance(value, str) and _LINE_BREAKS.search(value):
        LOGGER.debug("Rejected line break in header %s", name)
        raise InvalidHeaderValueError(
            f'The value for the header "{name}" must not contain line breaks.'
        )


def _split_utf8(text: str, limit: int) -> list[str]:
    """Split ``text`` into chunks of at most ``limit`` UTF-8 bytes each.

    Characters are never divided between chunks. An empty string yields a
    single empty chunk.
    """
    chunks: list[str] = []
    current: list[str] = []
    size = 0
    for char in text:
        width = len(char.encode("utf-8"))
        if current and size + width > limit:
            chunks.append("".join(current))
            current, size = [], 0
        current.append(char)
        size += width
    chunks.append("".join(current))
    return chunks


def _is_mailbox_list(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(item, Mailbox) for item in value)
    )


__all__ = ["ContentHeader", "MessageHeader"]
