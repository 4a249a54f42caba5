"""Message assembly components."""

from .content import MimeMessageContent
from .factory import create_mime_message
from .header import ContentHeader, MessageHeader
from .mailbox import Mailbox, normalize_mailboxes
from .message import MimeMessage

__all__ = [
    "ContentHeader",
    "Mailbox",
    "MessageHeader",
    "MimeMessage",
    "MimeMessageContent",
    "create_mime_message",
    "normalize_mailboxes",
]
