"""Build MIME email messages from bodies and attachments."""

from .core import (
    InvalidMessageTypeError,
    MessageSettings,
    MessageStructure,
    MimeTextError,
    MissingBodyError,
    MissingFilenameError,
    PartKind,
)
from .message import Mailbox, MimeMessage, MimeMessageContent, create_mime_message

__all__ = [
    "InvalidMessageTypeError",
    "Mailbox",
    "MessageSettings",
    "MessageStructure",
    "MimeMessage",
    "MimeMessageContent",
    "MimeTextError",
    "MissingBodyError",
    "MissingFilenameError",
    "PartKind",
    "create_mime_message",
]
