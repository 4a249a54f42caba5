"""Factory wiring a default environment into new messages."""

from __future__ import annotations

from ..core.config import MessageSettings
from ..core.environment import DefaultEnvironment
from ..core.interfaces import BoundaryGenerator, EnvironmentContext
from .message import MimeMessage


def create_mime_message(
    settings: MessageSettings | None = None,
    *,
    environment: EnvironmentContext | None = None,
    boundary_generator: BoundaryGenerator | None = None,
) -> MimeMessage:
    """Return an empty :class:`MimeMessage` ready for headers and parts."""
    message_settings = settings or MessageSettings()
    envctx = environment or DefaultEnvironment.from_settings(message_settings)
    return MimeMessage(
        envctx,
        settings=message_settings,
        boundary_generator=boundary_generator,
    )


__all__ = ["create_mime_message"]
