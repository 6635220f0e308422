"""Shared fixtures: small PDFs and DOCX files built in memory."""

from __future__ import annotations

import io
import logging
import random

import docx
import pymupdf
import pytest

from doc_assembler.config.settings import (
    CoverServiceSettings,
    HighlightSettings,
    LayoutSettings,
    PipelineSettings,
)
from doc_assembler.models import CoordinateOrigin, TextFragment

A4 = (595.0, 842.0)
LETTER = (612.0, 792.0)


def make_pdf(pages, size=A4, fontsize=12.0) -> bytes:
    """Build a PDF; *pages* is a list of pages, each a list of (x, baseline_y, text).

    Positions are pymupdf coordinates (top-left origin).
    """
    doc = pymupdf.open()
    for lines in pages:
        page = doc.new_page(width=size[0], height=size[1])
        for x, y, text in lines:
            page.insert_text((x, y), text, fontname="helv", fontsize=fontsize)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(paragraphs) -> bytes:
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def one_word_per_line_pdf(word_count: int = 100) -> bytes:
    """A single A4 page with one distinct word on each line."""
    lines = [(50.0, 20.0 + 8.0 * i, f"word{i}") for i in range(word_count)]
    return make_pdf([lines], fontsize=6.0)


def fragment(text="alpha", page_index=0, x=0.0, y=0.0, width=10.0, height=12.0,
             origin=CoordinateOrigin.BOTTOM_LEFT) -> TextFragment:
    return TextFragment(text, page_index, x, y, width, height, origin)


@pytest.fixture
def layout_settings() -> LayoutSettings:
    return LayoutSettings(
        page_width=595, page_height=842, margin=50, font_name="cour",
        font_size=11, line_height=14, extraction_method="pymupdf",
    )


@pytest.fixture
def highlight_settings() -> HighlightSettings:
    return HighlightSettings(
        chunk_min_size=3, chunk_max_size=10, random_percent_min=20,
        random_percent_max=50, color=(1.0, 1.0, 0.0), opacity=0.4,
        padding=1.0, stamp_page_numbers=False,
    )


@pytest.fixture
def pipeline_settings(tmp_path) -> PipelineSettings:
    return PipelineSettings(
        max_upload_bytes=10 * 1024 * 1024,
        output_dir=str(tmp_path / "out"),
        output_prefix="report",
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def cover_settings() -> CoverServiceSettings:
    return CoverServiceSettings(
        base_url="http://cover.test", cover_path="/api/cover-pdf",
        timeout_seconds=5, max_attempts=1,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def cover_pdf() -> bytes:
    return make_pdf([[(72, 100, "Cover page one")], [(72, 100, "Cover page two")]])


@pytest.fixture
def body_pdf() -> bytes:
    return one_word_per_line_pdf(100)


@pytest.fixture
def restore_root_logger():
    """Put the root logger back after a test that calls setup_logging()."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
