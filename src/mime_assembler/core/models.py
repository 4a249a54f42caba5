"""Core value types shared across the assembler."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

MailboxType = Literal["To", "From", "Cc", "Bcc", "Sender", "Reply-To"]

VALID_TEXT_TYPES = ("text/html", "text/plain")
VALID_TRANSFER_ENCODINGS = ("7bit", "8bit", "binary", "quoted-printable", "base64")


@dataclass(frozen=True, slots=True)
class Boundaries:
    """Boundary tokens for the three multipart groupings."""

    mixed: str
    alt: str
    related: str


class PartKind(str, Enum):
    """Classification of a content part derived from its disposition."""

    BODY = "body"
    ATTACHMENT = "attachment"
    INLINE_ATTACHMENT = "inline-attachment"


class MessageStructure(str, Enum):
    """Multipart layout selected for a message."""

    MIXED_RELATED = "mixed+related"
    MIXED = "mixed"
    RELATED = "related"
    ALTERNATIVE = "alternative"
    NONE = "none"


# pylint: disable=too-many-instance-attributes
@dataclass(slots=True)
class HeaderField:
    """One header entry and the hooks controlling how it is stored and dumped.

    Attributes:
        name: Header name as emitted.
        value: Stored value; ``None`` until set or generated.
        dump: Converts the stored value to its header text.
        validate: Returns ``False`` to reject a value passed to ``set``.
        required: Dumping fails when no value is present.
        disabled: Field is skipped entirely when dumping.
        generator: Supplies a value at dump time when none was set.
        custom: Field was added by the caller rather than built in.
    """

    name: str
    value: Any = None
    dump: Callable[[Any], str] | None = None
    validate: Callable[[Any], bool] | None = None
    required: bool = False
    disabled: bool = False
    generator: Callable[[], str] | None = None
    custom: bool = False


__all__ = [
    "Boundaries",
    "HeaderField",
    "MailboxType",
    "MessageStructure",
    "PartKind",
    "VALID_TEXT_TYPES",
    "VALID_TRANSFER_ENCODINGS",
]
