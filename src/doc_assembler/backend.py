"""Document capability interface and its PDF implementation.

The pipeline talks to document libraries only through ``DocumentBackend``.
``PdfBackend`` binds the interface to this package's stages: pymupdf /
pdfplumber for reading and reflow, pikepdf for drawing and page copying.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from doc_assembler.config.settings import HighlightSettings, LayoutSettings
from doc_assembler.extractor import extract_layout
from doc_assembler.highlighter import draw_highlights, stamp_page_numbers
from doc_assembler.merger import merge_documents, page_count
from doc_assembler.models import HighlightResult, SourceDocument, TextFragment
from doc_assembler.normalizer import normalize


class DocumentBackend(Protocol):
    """Operations the assembly pipeline needs from a document library."""

    def normalize(self, source: SourceDocument) -> bytes: ...

    def extract_layout(self, pdf_bytes: bytes) -> list[TextFragment]: ...

    def draw_highlights(
        self, pdf_bytes: bytes, selection: Sequence[TextFragment]
    ) -> HighlightResult: ...

    def copy_pages(self, cover_bytes: bytes, body_bytes: bytes) -> bytes: ...

    def page_count(self, pdf_bytes: bytes) -> int: ...

    def stamp_page_numbers(
        self, pdf_bytes: bytes, start_page: int, total_pages: int
    ) -> bytes: ...


class PdfBackend:
    """DocumentBackend over PDF bytes."""

    def __init__(
        self,
        layout: LayoutSettings | None = None,
        highlight: HighlightSettings | None = None,
    ) -> None:
        self.layout = layout or LayoutSettings()
        self.highlight = highlight or HighlightSettings()

    def normalize(self, source: SourceDocument) -> bytes:
        return normalize(source, self.layout)

    def extract_layout(self, pdf_bytes: bytes) -> list[TextFragment]:
        return extract_layout(pdf_bytes, self.layout)

    def draw_highlights(
        self, pdf_bytes: bytes, selection: Sequence[TextFragment]
    ) -> HighlightResult:
        return draw_highlights(pdf_bytes, selection, self.highlight)

    def copy_pages(self, cover_bytes: bytes, body_bytes: bytes) -> bytes:
        return merge_documents(cover_bytes, body_bytes)

    def page_count(self, pdf_bytes: bytes) -> int:
        return page_count(pdf_bytes)

    def stamp_page_numbers(
        self, pdf_bytes: bytes, start_page: int, total_pages: int
    ) -> bytes:
        return stamp_page_numbers(pdf_bytes, start_page, total_pages, self.highlight)
