"""Core utilities for configuration, logging, errors and shared types."""

from .config import AppSettings, LoggingSettings, MessageSettings, load_app_settings
from .environment import DefaultEnvironment, random_boundary_generator
from .errors import (
    InvalidHeaderFieldError,
    InvalidHeaderValueError,
    InvalidMailboxError,
    InvalidMessageTypeError,
    MimeTextError,
    MissingBodyError,
    MissingFilenameError,
    MissingHeaderError,
)
from .interfaces import BoundaryGenerator, EnvironmentContext
from .logging import configure_logging
from .models import Boundaries, HeaderField, MessageStructure, PartKind

__all__ = [
    "AppSettings",
    "Boundaries",
    "BoundaryGenerator",
    "DefaultEnvironment",
    "EnvironmentContext",
    "HeaderField",
    "InvalidHeaderFieldError",
    "InvalidHeaderValueError",
    "InvalidMailboxError",
    "InvalidMessageTypeError",
    "LoggingSettings",
    "MessageSettings",
    "MessageStructure",
    "MimeTextError",
    "MissingBodyError",
    "MissingFilenameError",
    "MissingHeaderError",
    "PartKind",
    "configure_logging",
    "load_app_settings",
    "random_boundary_generator",
]
