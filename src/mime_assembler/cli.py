"""Command-line entry point for composing MIME messages."""

from __future__ import annotations

import argparse
import logging
import mimetypes
import sys
from collections.abc import Sequence
from pathlib import Path

from mime_assembler.core import (
    AppSettings,
    MimeTextError,
    configure_logging,
    load_app_settings,
)
from mime_assembler.message import MimeMessage, create_mime_message

LOGGER = logging.getLogger(__name__)

BASE64_LINE_LENGTH = 76


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Compose a MIME email message from files."
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    parser.add_argument(
        "--from", dest="sender", required=True, help="Sender mailbox."
    )
    parser.add_argument(
        "--to", action="append", default=[], help="Recipient mailbox (repeatable)."
    )
    parser.add_argument(
        "--cc", action="append", default=[], help="Carbon copy mailbox (repeatable)."
    )
    parser.add_argument(
        "--bcc",
        action="append",
        default=[],
        help="Blind carbon copy mailbox (repeatable).",
    )
    parser.add_argument("--reply-to", dest="reply_to", default=None)
    parser.add_argument("--subject", required=True, help="Message subject.")
    parser.add_argument("--text", type=Path, default=None, help="Plain text body file.")
    parser.add_argument("--html", type=Path, default=None, help="HTML body file.")
    parser.add_argument(
        "--attach",
        type=Path,
        action="append",
        default=[],
        help="File to attach (repeatable).",
    )
    parser.add_argument(
        "--inline",
        type=Path,
        action="append",
        default=[],
        help="File to embed inline; referenced from HTML as cid:<file name>.",
    )
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        help='Extra header in "Name: value" form (repeatable).',
    )
    parser.add_argument(
        "--encoded",
        action="store_true",
        help="Emit the message as URL-safe base64 instead of raw text.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the result to this file instead of stdout.",
    )
    return parser


def build_message(args: argparse.Namespace, settings: AppSettings) -> MimeMessage:
    """Create a message from parsed CLI arguments."""
    message = create_mime_message(settings.message)
    message.set_sender(args.sender)
    if args.reply_to:
        message.set_sender(args.reply_to, "Reply-To")
    if args.to:
        message.set_to(args.to)
    if args.cc:
        message.set_cc(args.cc)
    if args.bcc:
        message.set_bcc(args.bcc)
    message.set_subject(args.subject)

    for raw_header in args.header:
        name, sep, value = raw_header.partition(":")
        if not sep or not name.strip():
            raise MimeTextError(f'Header "{raw_header}" must look like "Name: value".')
        message.set_header(name.strip(), value.strip())

    if args.text is not None:
        _add_text_body(message, args.text, "text/plain")
    if args.html is not None:
        _add_text_body(message, args.html, "text/html")
    for path in args.inline:
        _add_file(message, path, inline=True)
    for path in args.attach:
        _add_file(message, path, inline=False)
    return message


def execute(args: argparse.Namespace, settings: AppSettings) -> int:
    """Build and emit the message; return the process exit status."""
    try:
        message = build_message(args, settings)
        output = message.as_encoded() if args.encoded else message.as_raw()
    except MimeTextError as exc:
        print(f"Could not build message: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Could not read input file: {exc}", file=sys.stderr)
        return 1

    if args.output is not None:
        args.output.write_text(output, encoding="utf-8", newline="")
        LOGGER.info("Wrote %d characters to %s", len(output), args.output)
    else:
        sys.stdout.write(output)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_app_settings(env_file=args.env_file)
    configure_logging(settings.logging)
    sys.exit(execute(args, settings))


def _add_text_body(message: MimeMessage, path: Path, content_type: str) -> None:
    body = path.read_text(encoding="utf-8")
    encoding = "7bit" if body.isascii() else "8bit"
    message.add_message(body, content_type, encoding=encoding)


def _add_file(message: MimeMessage, path: Path, *, inline: bool) -> None:
    content_type, _ = mimetypes.guess_type(path.name)
    encoded = message.to_base64(path.read_bytes())
    headers = {"Content-ID": path.name} if inline else None
    message.add_attachment(
        _fold(encoded, message.envctx.eol),
        path.name,
        content_type=content_type or "application/octet-stream",
        encoding="base64",
        headers=headers,
        inline=inline,
    )


def _fold(encoded: str, eol: str) -> str:
    """Split base64 text into lines no longer than RFC 2045 allows."""
    return eol.join(
        encoded[index : index + BASE64_LINE_LENGTH]
        for index in range(0, len(encoded), BASE64_LINE_LENGTH)
    )


if __name__ == "__main__":
    main()
