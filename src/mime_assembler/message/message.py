"""Message assembler choosing the multipart layout and rendering it."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, cast

from ..core.config import MessageSettings
from ..core.environment import random_boundary_generator
from ..core.errors import (
    InvalidMessageTypeError,
    MissingBodyError,
    MissingFilenameError,
)
from ..core.interfaces import BoundaryGenerator, EnvironmentContext
from ..core.models import (
    VALID_TEXT_TYPES,
    VALID_TRANSFER_ENCODINGS,
    Boundaries,
    MailboxType,
    MessageStructure,
)
from .content import MimeMessageContent
from .header import MessageHeader
from .mailbox import Mailbox, MailboxInput, normalize_mailboxes

LOGGER = logging.getLogger(__name__)

_FALLBACK_TYPE = "application/octet-stream"


def _lookup(headers: Mapping[str, Any], name: str) -> Any:
    """Case-insensitive lookup in a caller supplied header mapping."""
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def _with_overrides(headers: Mapping[str, Any], overrides: dict[str, str]) -> dict[str, Any]:
    """Copy ``headers`` dropping any key that an override replaces."""
    replaced = {key.lower() for key in overrides}
    merged = {key: value for key, value in headers.items() if key.lower() not in replaced}
    merged.update(overrides)
    return merged


class MimeMessage:
    """Assemble a MIME message from bodies and attachments.

    The multipart layout is decided at render time from the parts present:

    * attachments and inline attachments: ``multipart/mixed`` wrapping a
      ``multipart/related`` section,
    * attachments only: ``multipart/mixed``,
    * inline attachments only: ``multipart/related``,
    * plain text and HTML bodies only: ``multipart/alternative``,
    * a single body: no multipart wrapper.

    Boundaries are assumed not to occur inside any part payload; this is not
    checked.

    Example:
        >>> msg = create_mime_message()
        >>> msg.set_sender("sender@example.com")
        >>> msg.set_to("user@example.com")
        >>> msg.set_subject("Hello")
        >>> msg.add_message("Hi there", "text/plain")
        >>> raw = msg.as_raw()
    """

    def __init__(
        self,
        envctx: EnvironmentContext,
        *,
        settings: MessageSettings | None = None,
        boundary_generator: BoundaryGenerator | None = None,
        headers: MessageHeader | None = None,
    ) -> None:
        self.envctx = envctx
        self.settings = settings or MessageSettings(eol=envctx.eol)
        self.headers = headers or MessageHeader(envctx)
        self.messages: list[MimeMessageContent] = []
        self._boundary_generator = boundary_generator or random_boundary_generator(
            self.settings.boundary_length
        )
        self.boundaries = self._new_boundaries()

    def _new_boundaries(self) -> Boundaries:
        return Boundaries(
            mixed=self._boundary_generator(),
            alt=self._boundary_generator(),
            related=self._boundary_generator(),
        )

    def generate_boundaries(self) -> Boundaries:
        """Replace all three boundaries; earlier renders no longer match."""
        self.boundaries = self._new_boundaries()
        LOGGER.debug("Regenerated multipart boundaries")
        return self.boundaries

    # Rendering

    def as_raw(self) -> str:
        """Render the complete message text.

        Raises:
            MissingBodyError: If neither a plain text nor an HTML body exists.
        """
        eol = self.envctx.eol
        plaintext = self.get_message_by_type("text/plain")
        html = self.get_message_by_type("text/html")
        structure = self._select_structure(plaintext, html)
        lines = self.headers.dump()
        mixed, alt, related = (
            self.boundaries.mixed,
            self.boundaries.alt,
            self.boundaries.related,
        )
        LOGGER.debug(
            "Rendering message with %s structure",
            structure.value,
            extra={"structure": structure.value},
        )

        if structure is MessageStructure.MIXED_RELATED:
            return (
                lines + eol
                + f"Content-Type: multipart/mixed; boundary={mixed}" + eol
                + eol
                + f"--{mixed}" + eol
                + f"Content-Type: multipart/related; boundary={related}" + eol
                + eol
                + self.dump_text_content(plaintext, html, related) + eol
                + eol
                + self._dump_siblings(self.get_inline_attachments(), related)
                + f"--{related}--" + eol
                + self._dump_siblings(self.get_attachments(), mixed)
                + f"--{mixed}--"
            )
        if structure is MessageStructure.MIXED:
            return (
                lines + eol
                + f"Content-Type: multipart/mixed; boundary={mixed}" + eol
                + eol
                + self.dump_text_content(plaintext, html, mixed) + eol
                + ("" if plaintext and html else eol)
                + self._dump_siblings(self.get_attachments(), mixed)
                + f"--{mixed}--"
            )
        if structure is MessageStructure.RELATED:
            return (
                lines + eol
                + f"Content-Type: multipart/related; boundary={related}" + eol
                + eol
                + self.dump_text_content(plaintext, html, related) + eol
                + eol
                + self._dump_siblings(self.get_inline_attachments(), related)
                + f"--{related}--"
            )
        if structure is MessageStructure.ALTERNATIVE:
            return (
                lines + eol
                + f"Content-Type: multipart/alternative; boundary={alt}" + eol
                + eol
                + self.dump_text_content(plaintext, html, alt) + eol
                + eol
                + f"--{alt}--"
            )

        primary = cast(MimeMessageContent, html or plaintext)
        return lines + eol + primary.dump()

    def as_encoded(self) -> str:
        """Return :meth:`as_raw` as URL-safe base64."""
        return self.envctx.to_base64_web_safe(self.as_raw())

    def structure(self) -> MessageStructure:
        """Return the multipart layout the current parts would render with."""
        return self._select_structure(
            self.get_message_by_type("text/plain"),
            self.get_message_by_type("text/html"),
        )

    def _select_structure(
        self,
        plaintext: MimeMessageContent | None,
        html: MimeMessageContent | None,
    ) -> MessageStructure:
        if plaintext is None and html is None:
            LOGGER.debug("Render requested without a text body")
            raise MissingBodyError("No content added to the message.")

        has_attachments = self.has_attachments()
        has_inline_attachments = self.has_inline_attachments()
        if has_attachments and has_inline_attachments:
            return MessageStructure.MIXED_RELATED
        if has_attachments:
            return MessageStructure.MIXED
        if has_inline_attachments:
            return MessageStructure.RELATED
        if plaintext and html:
            return MessageStructure.ALTERNATIVE
        return MessageStructure.NONE

    def dump_text_content(
        self,
        plaintext: MimeMessageContent | None,
        html: MimeMessageContent | None,
        boundary: str,
    ) -> str:
        """Render the text body section placed under ``boundary``.

        When both bodies exist alongside inline attachments only the HTML body
        is emitted: inline resources are referenced from the HTML rendering.
        """
        eol = self.envctx.eol
        alt = self.boundaries.alt

        if plaintext and html and not self.has_inline_attachments() and self.has_attachments():
            return (
                f"--{boundary}" + eol
                + f"Content-Type: multipart/alternative; boundary={alt}" + eol
                + eol
                + f"--{alt}" + eol
                + plaintext.dump() + eol
                + eol
                + f"--{alt}" + eol
                + html.dump() + eol
                + eol
                + f"--{alt}--"
            )
        if plaintext and html and self.has_inline_attachments():
            return f"--{boundary}" + eol + html.dump()
        if plaintext and html:
            return (
                f"--{boundary}" + eol
                + plaintext.dump() + eol
                + eol
                + f"--{boundary}" + eol
                + html.dump()
            )

        primary = html or plaintext
        if primary is None:
            raise MissingBodyError("No content added to the message.")
        return f"--{boundary}" + eol + primary.dump()

    def _dump_siblings(self, parts: Iterable[MimeMessageContent], boundary: str) -> str:
        eol = self.envctx.eol
        joined = "".join(f"--{boundary}" + eol + part.dump() + eol + eol for part in parts)
        return joined[: -len(eol)] if joined else joined

    # Part queries

    def has_attachments(self) -> bool:
        return any(part.is_attachment() for part in self.messages)

    def has_inline_attachments(self) -> bool:
        return any(part.is_inline_attachment() for part in self.messages)

    def get_attachments(self) -> list[MimeMessageContent]:
        return [part for part in self.messages if part.is_attachment()]

    def get_inline_attachments(self) -> list[MimeMessageContent]:
        return [part for part in self.messages if part.is_inline_attachment()]

    def get_message_by_type(self, content_type: str) -> MimeMessageContent | None:
        """Return the first body part whose Content-Type contains ``content_type``."""
        for part in self.messages:
            if part.is_attachment() or part.is_inline_attachment():
                continue
            declared = part.get_header("Content-Type")
            if isinstance(declared, str) and content_type in declared:
                return part
        return None

    # Adding parts

    def add_message(
        self,
        data: str,
        content_type: str | None = None,
        *,
        encoding: str | None = None,
        charset: str | None = None,
        headers: Mapping[str, Any] | None = None,
    ) -> MimeMessageContent:
        """Add a ``text/plain`` or ``text/html`` body.

        Raises:
            InvalidMessageTypeError: If the content type is not a text body type.
        """
        headers = headers or {}
        declared = _lookup(headers, "Content-Type") or content_type or "none"
        if declared not in VALID_TEXT_TYPES:
            LOGGER.debug("Rejected body content type %s", declared)
            raise InvalidMessageTypeError(
                f"Valid content types are {', '.join(VALID_TEXT_TYPES)} "
                f'but you specified "{declared}".'
            )

        transfer_encoding = (
            _lookup(headers, "Content-Transfer-Encoding")
            or encoding
            or self.settings.text_encoding
        )
        if transfer_encoding not in VALID_TRANSFER_ENCODINGS:
            declared = _FALLBACK_TYPE

        body_charset = charset or self.settings.default_charset
        merged = _with_overrides(
            headers,
            {
                "Content-Type": f"{declared}; charset={body_charset}",
                "Content-Transfer-Encoding": transfer_encoding,
            },
        )
        return self._add_part(data, merged)

    def add_attachment(
        self,
        data: str,
        filename: str | None = None,
        *,
        content_type: str | None = None,
        encoding: str | None = None,
        headers: Mapping[str, Any] | None = None,
        inline: bool = False,
    ) -> MimeMessageContent:
        """Add an attachment, or an inline part when ``inline`` is set.

        ``data`` must already be encoded (base64 unless ``encoding`` says
        otherwise).

        Raises:
            MissingFilenameError: If ``filename`` is not a string.
            InvalidMessageTypeError: If the environment rejects the content type.
        """
        headers = headers or {}
        if not isinstance(filename, str):
            LOGGER.debug("Rejected attachment without filename")
            raise MissingFilenameError(
                "The property filename must exist while adding attachments."
            )

        declared = _lookup(headers, "Content-Type") or content_type or "none"
        if not self.envctx.validate_content_type(declared):
            LOGGER.debug("Rejected attachment content type %s", declared)
            raise InvalidMessageTypeError(
                f'You specified an invalid content type "{declared}".'
            )

        transfer_encoding = (
            _lookup(headers, "Content-Transfer-Encoding")
            or encoding
            or self.settings.attachment_encoding
        )
        if transfer_encoding not in VALID_TRANSFER_ENCODINGS:
            declared = _FALLBACK_TYPE

        overrides: dict[str, str] = {}
        content_id = _lookup(headers, "Content-ID")
        if (
            isinstance(content_id, str)
            and len(content_id) > 2
            and not content_id.startswith("<")
            and not content_id.endswith(">")
        ):
            overrides["Content-ID"] = f"<{content_id}>"

        disposition = "inline" if inline else "attachment"
        overrides.update(
            {
                "Content-Type": f'{declared}; name="{filename}"',
                "Content-Transfer-Encoding": transfer_encoding,
                "Content-Disposition": f'{disposition}; filename="{filename}"',
            }
        )
        return self._add_part(data, _with_overrides(headers, overrides))

    def _add_part(self, data: str, headers: Mapping[str, Any]) -> MimeMessageContent:
        part = MimeMessageContent(self.envctx, data, headers)
        self.messages.append(part)
        kind = part.classify().value
        LOGGER.debug(
            "Added %s part (%s)",
            kind,
            part.get_header("Content-Type"),
            extra={"part_kind": kind},
        )
        return part

    # Addresses and headers

    def set_sender(
        self, value: MailboxInput, mailbox_type: MailboxType = "From"
    ) -> Mailbox:
        """Store a single mailbox under ``From`` (or ``Sender``/``Reply-To``)."""
        mailbox = Mailbox(value, mailbox_type)
        self.set_header(mailbox_type, mailbox)
        return mailbox

    def get_sender(self) -> Mailbox | None:
        """Return the ``From`` mailbox, if set."""
        return self.get_header("From")

    def set_recipients(
        self,
        value: MailboxInput | Sequence[MailboxInput],
        mailbox_type: MailboxType = "To",
    ) -> list[Mailbox]:
        """Store one or many recipients under the ``mailbox_type`` header."""
        recipients = normalize_mailboxes(value, mailbox_type)
        self.set_header(mailbox_type, recipients)
        return recipients

    def get_recipients(self, mailbox_type: MailboxType = "To") -> Any:
        """Return the mailboxes stored under ``mailbox_type``."""
        return self.get_header(mailbox_type)

    def set_recipient(self, value: MailboxInput | Sequence[MailboxInput]) -> list[Mailbox]:
        """Alias of :meth:`set_to`."""
        return self.set_recipients(value, "To")

    def set_to(self, value: MailboxInput | Sequence[MailboxInput]) -> list[Mailbox]:
        """Replace the ``To`` recipients."""
        return self.set_recipients(value, "To")

    def set_cc(self, value: MailboxInput | Sequence[MailboxInput]) -> list[Mailbox]:
        """Replace the ``Cc`` recipients."""
        return self.set_recipients(value, "Cc")

    def set_bcc(self, value: MailboxInput | Sequence[MailboxInput]) -> list[Mailbox]:
        """Replace the ``Bcc`` recipients."""
        return self.set_recipients(value, "Bcc")

    def set_subject(self, value: str) -> str:
        """Set the subject; it is rendered as UTF-8 encoded words."""
        self.set_header("Subject", value)
        return value

    def get_subject(self) -> str | None:
        """Return the subject, if set."""
        return self.get_header("Subject")

    def set_header(self, name: str, value: Any) -> str:
        """Set a top-level header and return its name.

        Raises:
            InvalidHeaderValueError: If the value fails the field's validation
                or a plain value contains a line break.
        """
        self.headers.set(name, value)
        return name

    def get_header(self, name: str) -> Any:
        """Return a top-level header value (case-insensitive) or ``None``."""
        return self.headers.get(name)

    def set_headers(self, values: Mapping[str, Any]) -> list[str]:
        """Set several headers in mapping order."""
        return [self.set_header(name, value) for name, value in values.items()]

    def get_headers(self) -> dict[str, Any]:
        """Return all top-level header values keyed by name."""
        return self.headers.to_object()

    def to_base64(self, value: str | bytes) -> str:
        """Standard base64 via the environment."""
        return self.envctx.to_base64(value)

    def to_base64_web_safe(self, value: str | bytes) -> str:
        """Unpadded URL-safe base64 via the environment."""
        return self.envctx.to_base64_web_safe(value)


__all__ = ["MimeMessage"]
