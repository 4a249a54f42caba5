"""Tests for the command-line interface."""

from __future__ import annotations

import base64
from email import message_from_string, policy
from pathlib import Path

import pytest

from mime_assembler.cli import build_parser, execute
from mime_assembler.core.config import AppSettings


def _run(argv: list[str]) -> int:
    args = build_parser().parse_args(argv)
    return execute(args, AppSettings())


def test_cli_builds_message_with_bodies_and_attachment(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    text = tmp_path / "body.txt"
    text.write_text("Hello there", encoding="utf-8")
    html = tmp_path / "body.html"
    html.write_text('<p>Hello <img src="cid:logo.png"></p>', encoding="utf-8")
    logo = tmp_path / "logo.png"
    logo.write_bytes(b"\x89PNG\r\n\x1a\n" + bytes(range(120)))
    report = tmp_path / "report.pdf"
    report.write_bytes(b"%PDF-1.4 report")

    status = _run(
        [
            "--from", "Sender <sender@example.com>",
            "--to", "a@example.com",
            "--to", "b@example.com",
            "--subject", "Report",
            "--header", "X-Campaign: spring",
            "--text", str(text),
            "--html", str(html),
            "--inline", str(logo),
            "--attach", str(report),
        ]
    )

    raw = capsys.readouterr().out
    assert status == 0
    parsed = message_from_string(raw, policy=policy.default)
    assert parsed.get_content_type() == "multipart/mixed"
    assert parsed["X-Campaign"] == "spring"
    related, attachment = parsed.get_payload()
    html_part, logo_part = related.get_payload()
    assert html_part.get_content_type() == "text/html"
    assert logo_part["Content-ID"] == "<logo.png>"
    assert logo_part.get_payload(decode=True) == logo.read_bytes()
    assert attachment.get_content_type() == "application/pdf"
    assert attachment.get_payload(decode=True) == b"%PDF-1.4 report"


def test_cli_folds_base64_payloads(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    body = tmp_path / "body.txt"
    body.write_text("Hi", encoding="utf-8")
    blob = tmp_path / "blob.bin"
    blob.write_bytes(bytes(300))

    status = _run(
        [
            "--from", "sender@example.com",
            "--subject", "Blob",
            "--text", str(body),
            "--attach", str(blob),
        ]
    )

    raw = capsys.readouterr().out
    assert status == 0
    assert max(len(line) for line in raw.split("\r\n")) <= 76
    assert 'Content-Type: application/octet-stream; name="blob.bin"' in raw


def test_cli_marks_non_ascii_text_as_8bit(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    body = tmp_path / "body.txt"
    body.write_text("Grüße", encoding="utf-8")

    _run(["--from", "sender@example.com", "--subject", "Hi", "--text", str(body)])

    assert "Content-Transfer-Encoding: 8bit" in capsys.readouterr().out


def test_cli_writes_encoded_output_to_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    body = tmp_path / "body.html"
    body.write_text("<p>Hi</p>", encoding="utf-8")
    output = tmp_path / "message.b64"

    status = _run(
        [
            "--from", "sender@example.com",
            "--subject", "Hi",
            "--html", str(body),
            "--encoded",
            "--output", str(output),
        ]
    )

    assert status == 0
    assert capsys.readouterr().out == ""
    encoded = output.read_text(encoding="utf-8")
    decoded = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4))
    assert decoded.decode("utf-8").endswith("\r\n\r\n<p>Hi</p>")


def test_cli_reports_missing_body(capsys: pytest.CaptureFixture[str]) -> None:
    status = _run(["--from", "sender@example.com", "--subject", "Empty"])

    assert status == 1
    assert "No content added to the message." in capsys.readouterr().err


def test_cli_reports_malformed_header(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    body = tmp_path / "body.txt"
    body.write_text("Hi", encoding="utf-8")

    status = _run(
        [
            "--from", "sender@example.com",
            "--subject", "Hi",
            "--text", str(body),
            "--header", "no separator",
        ]
    )

    assert status == 1
    assert "Name: value" in capsys.readouterr().err


def test_cli_reports_unreadable_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    status = _run(
        [
            "--from", "sender@example.com",
            "--subject", "Hi",
            "--text", str(tmp_path / "missing.txt"),
        ]
    )

    assert status == 1
    assert "Could not read input file" in capsys.readouterr().err
