"""Tests for the upload policy and the delivery sink."""

from __future__ import annotations

import pytest

from doc_assembler.delivery import FileSink, output_filename
from doc_assembler.models import MediaKind
from doc_assembler.upload import UNSUPPORTED_MESSAGE, validate_upload


@pytest.mark.parametrize(
    "filename,content_type,kind",
    [
        ("essay.pdf", "application/pdf", MediaKind.PDF),
        ("essay.docx", None, MediaKind.DOCX),
        ("upload", "application/msword", MediaKind.DOC),
    ],
)
def test_allowed_formats_are_accepted(pipeline_settings, filename, content_type, kind):
    decision = validate_upload(filename, content_type, 2048, pipeline_settings)

    assert decision.accepted
    assert decision.media_kind is kind
    assert decision.message is None


def test_other_formats_are_rejected(pipeline_settings):
    decision = validate_upload("slides.pptx", "application/vnd.ms-powerpoint", 10, pipeline_settings)

    assert not decision.accepted
    assert decision.message == UNSUPPORTED_MESSAGE


def test_oversized_upload_is_rejected(pipeline_settings):
    too_big = pipeline_settings.max_upload_bytes + 1
    decision = validate_upload("big.pdf", "application/pdf", too_big, pipeline_settings)

    assert not decision.accepted
    assert decision.message == "File size must be less than 10MB."


def test_upload_at_the_limit_is_accepted(pipeline_settings):
    limit = pipeline_settings.max_upload_bytes
    assert validate_upload("edge.pdf", None, limit, pipeline_settings).accepted


@pytest.mark.parametrize(
    "original,expected",
    [
        ("essay.docx", "report_essay.pdf"),
        ("archive.tar.gz", "report_archive.tar.pdf"),
        ("no_extension", "report_no_extension.pdf"),
        ("/uploads/user/paper.pdf", "report_paper.pdf"),
    ],
)
def test_output_filename(original, expected):
    assert output_filename(original, "report") == expected


def test_file_sink_writes_without_leftovers(tmp_path):
    sink = FileSink(tmp_path / "out")

    path = sink.deliver(b"%PDF-1.7 final", "report_essay.pdf")

    assert path == tmp_path / "out" / "report_essay.pdf"
    assert path.read_bytes() == b"%PDF-1.7 final"
    assert [p.name for p in path.parent.iterdir()] == ["report_essay.pdf"]


def test_file_sink_overwrites_previous_delivery(tmp_path):
    sink = FileSink(tmp_path)
    sink.deliver(b"first", "report_a.pdf")

    path = sink.deliver(b"second", "report_a.pdf")

    assert path.read_bytes() == b"second"
