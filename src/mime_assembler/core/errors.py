"""Exception hierarchy raised while assembling messages."""

from __future__ import annotations


class MimeTextError(ValueError):
    """Base error carrying a machine-readable ``kind`` and a description.

    Every failure raised by the assembler is a programmer error caused by bad
    call-site input; none of them are transient.
    """

    kind = "MIMETEXT_ERROR"

    def __init__(self, description: str = "") -> None:
        super().__init__(description)
        self.description = description

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, description={self.description!r})"


class MissingBodyError(MimeTextError):
    """Raised when rendering a message without a plain text or HTML body."""

    kind = "MIMETEXT_MISSING_BODY"


class MissingFilenameError(MimeTextError):
    """Raised when an attachment is added without a filename."""

    kind = "MIMETEXT_MISSING_FILENAME"


class InvalidMessageTypeError(MimeTextError):
    """Raised when a body or attachment declares an unacceptable content type."""

    kind = "MIMETEXT_INVALID_MESSAGE_TYPE"


class MissingHeaderError(MimeTextError):
    """Raised when a required header has no value at dump time."""

    kind = "MIMETEXT_MISSING_HEADER"


class InvalidHeaderValueError(MimeTextError):
    """Raised when a header value fails its field validator."""

    kind = "MIMETEXT_INVALID_HEADER_VALUE"


class InvalidHeaderFieldError(MimeTextError):
    """Raised when a custom header cannot be stored."""

    kind = "MIMETEXT_INVALID_HEADER_FIELD"


class InvalidMailboxError(MimeTextError):
    """Raised when mailbox input is not recognised."""

    kind = "MIMETEXT_INVALID_MAILBOX"


__all__ = [
    "InvalidHeaderFieldError",
    "InvalidHeaderValueError",
    "InvalidMailboxError",
    "InvalidMessageTypeError",
    "MimeTextError",
    "MissingBodyError",
    "MissingFilenameError",
    "MissingHeaderError",
]
