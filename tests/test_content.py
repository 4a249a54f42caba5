"""Tests for individual content parts."""

from __future__ import annotations

from mime_assembler.core.environment import DefaultEnvironment
from mime_assembler.core.models import PartKind
from mime_assembler.message.content import MimeMessageContent


def _part(headers: dict[str, str], data: str = "payload") -> MimeMessageContent:
    return MimeMessageContent(DefaultEnvironment(), data, headers)


def test_dump_joins_headers_blank_line_and_data_verbatim() -> None:
    part = _part(
        {"Content-Type": "text/plain; charset=UTF-8", "Content-Transfer-Encoding": "7bit"},
        data="line one\r\nline two",
    )

    assert part.dump() == (
        "Content-Type: text/plain; charset=UTF-8\r\n"
        "Content-Transfer-Encoding: 7bit\r\n"
        "\r\n"
        "line one\r\nline two"
    )


def test_classification_follows_disposition() -> None:
    body = _part({"Content-Type": "text/html"})
    attachment = _part({"Content-Disposition": 'attachment; filename="a.pdf"'})
    inline = _part({"Content-Disposition": 'inline; filename="logo.png"'})

    assert body.classify() is PartKind.BODY
    assert not body.is_attachment() and not body.is_inline_attachment()
    assert attachment.classify() is PartKind.ATTACHMENT
    assert attachment.is_attachment()
    assert inline.classify() is PartKind.INLINE_ATTACHMENT
    assert inline.is_inline_attachment()


def test_classification_reflects_later_header_changes() -> None:
    part = _part({"Content-Disposition": 'attachment; filename="logo.png"'})

    part.set_header("Content-Disposition", 'inline; filename="logo.png"')

    assert part.classify() is PartKind.INLINE_ATTACHMENT


def test_header_passthrough() -> None:
    part = _part({"Content-Type": "text/plain", "X-Trace": "abc"})

    assert part.get_header("content-type") == "text/plain"
    assert part.get_headers()["X-Trace"] == "abc"
    assert part.set_headers({"Content-ID": "<logo>"}) == ["Content-ID"]
    assert part.dump().startswith("Content-ID: <logo>\r\n")
    assert part.data == "payload"
