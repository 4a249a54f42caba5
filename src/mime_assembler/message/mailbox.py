"""Mailbox value type for address headers."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from email.utils import getaddresses
from typing import Any, TypeAlias

from ..core.errors import InvalidMailboxError
from ..core.models import MailboxType

LOGGER = logging.getLogger(__name__)

_LINE_BREAKS = re.compile(r"[\r\n]")
_INVALID_ADDR_CHARS = re.compile(r"[\s<>,;\"]")
_QUOTES = "\"'"

MailboxInput: TypeAlias = "str | Mapping[str, Any] | Mailbox"


class Mailbox:
    """A single ``display-name <address>`` entity.

    Accepts a bare address (``user@example.com``), a name-addr form
    (``Jane <user@example.com>`` or ``"Jane" <user@example.com>``), a mapping
    with ``addr`` and optional ``name``/``type`` keys, or another mailbox.
    Addresses must contain ``@``; line breaks are never accepted.
    """

    __slots__ = ("addr", "name", "type")

    def __init__(self, value: MailboxInput, mailbox_type: MailboxType = "To") -> None:
        self.addr = ""
        self.name = ""
        self.type: MailboxType = mailbox_type
        self._parse(value)

    def _parse(self, value: Any) -> None:
        if isinstance(value, Mailbox):
            self.addr, self.name = value.addr, value.name
            return
        if isinstance(value, Mapping) and "addr" in value:
            addr = value["addr"]
            if not isinstance(addr, str):
                raise InvalidMailboxError("The mailbox address must be a string.")
            name = value.get("name")
            if isinstance(name, str):
                _reject_line_breaks(name)
                self.name = name
            if isinstance(value.get("type"), str):
                self.type = value["type"]
            self.addr = _validated_addr(addr.strip())
            return
        if isinstance(value, str):
            self.name, self.addr = _parse_text(value)
            return
        LOGGER.debug("Rejected mailbox input of type %s", type(value).__name__)
        raise InvalidMailboxError("Couldn't recognize the input.")

    def get_addr_domain(self) -> str:
        """Return the part of the address after ``@``."""
        return self.addr.rpartition("@")[2]

    def dump(self) -> str:
        """Return the mailbox formatted for a header."""
        if self.name:
            return f'"{self.name}" <{self.addr}>'
        return f"<{self.addr}>"

    def __str__(self) -> str:
        return self.dump()

    def __repr__(self) -> str:
        return f"Mailbox(addr={self.addr!r}, name={self.name!r}, type={self.type!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mailbox):
            return NotImplemented
        return (self.addr, self.name, self.type) == (other.addr, other.name, other.type)

    def __hash__(self) -> int:
        return hash((self.addr, self.name, self.type))


def _reject_line_breaks(text: str) -> None:
    if _LINE_BREAKS.search(text):
        LOGGER.debug("Rejected mailbox input containing a line break")
        raise InvalidMailboxError("Mailbox input must not contain line breaks.")


def _validated_addr(addr: str) -> str:
    _reject_line_breaks(addr)
    local, sep, domain = addr.rpartition("@")
    if not sep or not local or not domain or _INVALID_ADDR_CHARS.search(addr):
        raise InvalidMailboxError(f'"{addr}" is not a valid mailbox address.')
    return addr


def _parse_text(text: str) -> tuple[str, str]:
    """Split ``Name <addr>`` or a bare address into ``(name, addr)``."""
    _reject_line_breaks(text)
    stripped = text.strip()
    if stripped.count("<") != stripped.count(">") or stripped.count("<") > 1:
        raise InvalidMailboxError(f'Unbalanced angle brackets in "{text}".')
    if "<" in stripped and not stripped.endswith(">"):
        raise InvalidMailboxError(f'Unexpected text after the address in "{text}".')

    parsed = [pair for pair in getaddresses([stripped]) if any(pair)]
    if len(parsed) != 1:
        raise InvalidMailboxError(f'Expected exactly one mailbox in "{text}".')
    name, addr = parsed[0]
    return name.strip().strip(_QUOTES), _validated_addr(addr)


def normalize_mailboxes(
    value: MailboxInput | Sequence[MailboxInput], mailbox_type: MailboxType
) -> list[Mailbox]:
    """Turn one or many mailbox inputs into a list of :class:`Mailbox`."""
    if isinstance(value, (str, Mapping, Mailbox)):
        items: Sequence[Any] = [value]
    elif isinstance(value, Sequence):
        items = value
    else:
        raise InvalidMailboxError("Couldn't recognize the input.")
    return [Mailbox(item, mailbox_type) for item in items]


__all__ = ["Mailbox", "MailboxInput", "normalize_mailboxes"]
