"""Format normalization: any supported upload to PDF bytes.

PDF input passes through untouched (the returned object *is* the input
bytes).  Word-processor input is reduced to plain text and re-flowed onto
fixed-size pages in a monospace font.
"""

from __future__ import annotations

import logging
from functools import partial

from doc_assembler.config.settings import LayoutSettings
from doc_assembler.errors import MalformedDocument, UnsupportedFormat
from doc_assembler.models import MediaKind, SourceDocument
from doc_assembler.normalizer.fonts import text_width
from doc_assembler.normalizer.reflow import layout_lines, page_count_for, render_pdf
from doc_assembler.normalizer.word_text import extract_plain_text

logger = logging.getLogger(__name__)

__all__ = ["normalize", "text_to_pdf"]

_PDF_HEADER = b"%PDF"


def text_to_pdf(text: str, settings: LayoutSettings) -> bytes:
    """Lay out plain *text* on pages and render it as a PDF."""
    measure = partial(
        text_width, fontname=settings.font_name, fontsize=settings.font_size
    )
    placed = layout_lines(text, measure, settings)
    logger.info(
        "Reflowed %d lines onto %d pages", len(placed), page_count_for(placed)
    )
    return render_pdf(placed, settings)


def normalize(source: SourceDocument, settings: LayoutSettings) -> bytes:
    """Convert *source* into PDF bytes.

    Args:
        source: The uploaded document.
        settings: Reflow geometry for word-processor input.

    Returns:
        PDF bytes.  For PDF input, ``source.data`` itself.

    Raises:
        UnsupportedFormat: ``source.media_kind`` is not a known kind.
        MalformedDocument: PDF input lacks a PDF header, or word-processor
            input cannot be read.
    """
    if source.media_kind is MediaKind.PDF:
        if not source.data[:1024].lstrip().startswith(_PDF_HEADER):
            logger.error(
                "Rejected %s: not a PDF (header %r)",
                source.filename or "<upload>",
                source.data[:8],
            )
            raise MalformedDocument(
                f"Not a valid PDF file (header: {source.data[:8]!r})"
            )
        logger.info("PDF input passed through: %s", source.filename or "<upload>")
        return source.data

    if not isinstance(source.media_kind, MediaKind) or not source.media_kind.is_word_processor:
        raise UnsupportedFormat(f"Unsupported media kind: {source.media_kind!r}")

    logger.info(
        "Converting %s (%s) to PDF",
        source.filename or "<upload>",
        source.media_kind.name,
    )
    text = extract_plain_text(source)
    return text_to_pdf(text, settings)
