"""Async assembly pipeline for a single submitted document.

Stages run strictly in sequence, each on the previous stage's full output:

    normalize -> extract layout -> sample -> highlight -> (cover) -> merge

Library-bound stages run in worker threads via ``asyncio.to_thread`` so one
event loop can serve many submissions at once.  Submissions share no
mutable state; abandoning the coroutine abandons the submission.

Public API:
    assemble_document(source, cover_provider, ...) -> AssemblyResult
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field

from doc_assembler.backend import DocumentBackend, PdfBackend
from doc_assembler.config.settings import HighlightSettings, PipelineSettings
from doc_assembler.cover import CoverProvider, CoverRequest, format_file_size
from doc_assembler.delivery import output_filename
from doc_assembler.highlighter.sampler import count_words, select_fragments
from doc_assembler.models import (
    HighlightResult,
    Percentage,
    SourceDocument,
    TextFragment,
    resolve_percentage,
)

logger = logging.getLogger(__name__)

__all__ = ["AssemblyResult", "assemble_document"]


@dataclass
class AssemblyResult:
    """Everything produced for one submission.

    ``body_pdf`` is the normalized body before highlighting; ``highlight``
    reports whether highlighting actually happened.
    """

    pdf_bytes: bytes
    filename: str
    body_pdf: bytes
    highlight: HighlightResult
    highlight_percent: int
    total_words: int
    cover_page_count: int
    body_page_count: int
    selection: list[TextFragment] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return self.cover_page_count + self.body_page_count

    @property
    def selected_words(self) -> int:
        return count_words(self.selection)


async def assemble_document(
    source: SourceDocument,
    cover_provider: CoverProvider,
    *,
    title: str | None = None,
    highlight_percent: Percentage = 0,
    secondary_percent: int = 0,
    backend: DocumentBackend | None = None,
    highlight_settings: HighlightSettings | None = None,
    pipeline_settings: PipelineSettings | None = None,
    rng: random.Random | None = None,
) -> AssemblyResult:
    """Build the final document: cover pages, then the highlighted body.

    Args:
        source: The validated upload.
        cover_provider: Produces the cover PDF from a CoverRequest.
        title: Cover title; defaults to ``pipeline_settings.default_title``.
        highlight_percent: 0-100, or ``"*"`` for a random share. Resolved
            once and used for both the cover and the highlighting.
        secondary_percent: Passed through to the cover service.
        backend: Document library binding; defaults to PdfBackend.
        highlight_settings: Sampling bounds and stamping options.
        pipeline_settings: Output naming and default title.
        rng: Random source for the sentinel and sampling.

    Raises:
        UnsupportedFormat: ``source`` is not PDF, DOC or DOCX.
        MalformedDocument: Body or cover cannot be parsed.
        DependencyFailure: The cover service failed.
        ValueError: A percentage is out of range.
    """
    highlight_settings = highlight_settings or HighlightSettings()
    pipeline_settings = pipeline_settings or PipelineSettings()
    backend = backend or PdfBackend(highlight=highlight_settings)
    rng = rng or random.Random()

    percent = resolve_percentage(
        highlight_percent,
        rng,
        highlight_settings.random_percent_min,
        highlight_settings.random_percent_max,
    )
    logger.info(
        "Assembling %s (%s, %d bytes) at %d%% highlight",
        source.filename or "<upload>",
        source.media_kind,
        source.size,
        percent,
    )

    # 1. Normalize
    body_pdf = await asyncio.to_thread(backend.normalize, source)

    # 2. Extract layout
    fragments = await asyncio.to_thread(backend.extract_layout, body_pdf)
    total_words = count_words(fragments)

    # 3. Sample
    selection = select_fragments(fragments, percent, rng, highlight_settings)

    # 4. Highlight (best effort, never raises)
    highlight = await asyncio.to_thread(backend.draw_highlights, body_pdf, selection)
    if not highlight.highlighted:
        logger.info("Body left unhighlighted: %s", highlight.reason)

    body_pages = await asyncio.to_thread(backend.page_count, body_pdf)

    # 5. Cover document
    cover_request = CoverRequest(
        title=title or pipeline_settings.default_title,
        file_name=source.filename or "document",
        word_count=total_words,
        char_count=len(" ".join(f.text for f in fragments)),
        highlight_percent=percent,
        secondary_percent=secondary_percent,
        file_size=format_file_size(source.size),
        page_count=body_pages,
    )
    cover_pdf = await cover_provider(cover_request)
    cover_pages = await asyncio.to_thread(backend.page_count, cover_pdf)

    body_final = highlight.pdf_bytes
    if highlight_settings.stamp_page_numbers:
        body_final = await asyncio.to_thread(
            backend.stamp_page_numbers,
            body_final,
            cover_pages + 1,
            cover_pages + body_pages,
        )

    # 6. Merge
    merged = await asyncio.to_thread(backend.copy_pages, cover_pdf, body_final)

    filename = output_filename(
        source.filename or "document", pipeline_settings.output_prefix
    )
    logger.info(
        "Assembled %s: %d cover + %d body pages, %d/%d words highlighted",
        filename,
        cover_pages,
        body_pages,
        count_words(selection),
        total_words,
    )

    return AssemblyResult(
        pdf_bytes=merged,
        filename=filename,
        body_pdf=body_pdf,
        highlight=highlight,
        highlight_percent=percent,
        total_words=total_words,
        cover_page_count=cover_pages,
        body_page_count=body_pages,
        selection=selection,
    )
