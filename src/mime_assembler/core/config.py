"""Application configuration models and loader utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import BaseModel, Field, field_validator

_EOL_ALIASES = {"crlf": "\r\n", "lf": "\n", "\\r\\n": "\r\n", "\\n": "\n"}


class MessageSettings(BaseModel):
    """Defaults applied while assembling MIME messages."""

    eol: str = Field(default="\r\n", description="Line ending used in output")
    default_charset: str = Field(
        default="UTF-8", description="Charset declared on text bodies"
    )
    text_encoding: str = Field(
        default="7bit", description="Transfer encoding assumed for text bodies"
    )
    attachment_encoding: str = Field(
        default="base64", description="Transfer encoding assumed for attachments"
    )
    boundary_length: int = Field(
        default=24,
        ge=8,
        le=70,
        description="Length of generated multipart boundary tokens",
    )

    @field_validator("eol", mode="before")
    @classmethod
    def _resolve_eol_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = _EOL_ALIASES.get(value.lower(), value)
            if value not in ("\r\n", "\n"):
                raise ValueError("eol must be CRLF or LF")
        return value


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    message: MessageSettings = Field(default_factory=MessageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


ENV_PREFIX = "MIME_ASSEMBLER_"


def _normalize_key(raw_key: str) -> list[str]:
    """Convert an environment variable key into a nested attribute path."""
    trimmed = raw_key.removeprefix(ENV_PREFIX)
    return [segment.lower() for segment in trimmed.split("__") if segment]


def _merge_into_tree(tree: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a value to a nested dictionary given a path."""
    cursor = tree
    for segment in path[:-1]:
        next_node = cursor.setdefault(segment, {})
        cursor = cast(dict[str, Any], next_node)
    cursor[path[-1]] = value


def _collect_env_values(
    env_file: Path | str | None, *, include_environment: bool = True
) -> dict[str, Any]:
    """Load configuration values from environment variables and optional file."""
    collected: dict[str, Any] = {}

    file_values = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if key and key.startswith(ENV_PREFIX)
            }

    env_values = {}
    if include_environment:
        env_values = {
            key: value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    combined: dict[str, Any] = {**file_values, **env_values}

    for key, value in combined.items():
        path = _normalize_key(key)
        if not path:
            continue
        normalized_value: Any = value
        if isinstance(value, str) and value == "":
            normalized_value = None
        elif isinstance(value, str):
            lowercase_value = value.lower()
            if lowercase_value == "true":
                normalized_value = True
            elif lowercase_value == "false":
                normalized_value = False
        _merge_into_tree(collected, path, normalized_value)

    return collected


@lru_cache(maxsize=1)
def load_app_settings(
    env_file: Path | str | None = None,
    *,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load application settings, applying env files and overrides."""
    collected = _collect_env_values(env_file, include_environment=include_environment)
    if overrides:
        collected.update(overrides)
    return AppSettings.model_validate(collected)


__all__ = [
    "AppSettings",
    "LoggingSettings",
    "MessageSettings",
    "load_app_settings",
]
