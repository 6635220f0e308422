"""Shared types for the assembly pipeline.

Defines the values that flow between stages: the received SourceDocument,
positioned TextFragments, and the HighlightResult variant reported by the
compositor.  PDF documents themselves travel between stages as plain
``bytes`` -- every stage returns new bytes and never mutates its input.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Union

from doc_assembler.errors import UnsupportedFormat

# A highlight percentage: 0-100, or "*" for a random value chosen per submission
Percentage = Union[int, str]
RANDOM_PERCENTAGE = "*"


class MediaKind(Enum):
    """Supported input formats, keyed by MIME type."""

    PDF = "application/pdf"
    DOC = "application/msword"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    @property
    def extension(self) -> str:
        return "." + self.name.lower()

    @property
    def is_word_processor(self) -> bool:
        return self is not MediaKind.PDF

    @classmethod
    def detect(cls, filename: str, content_type: str | None = None) -> MediaKind:
        """Resolve the media kind from the MIME type, then the file extension.

        Raises:
            UnsupportedFormat: Neither the MIME type nor the extension is
                one of PDF, DOC, DOCX.
        """
        if content_type:
            mime = content_type.split(";", 1)[0].strip().lower()
            for kind in cls:
                if kind.value == mime:
                    return kind

        suffix = PurePath(filename).suffix.lower()
        for kind in cls:
            if kind.extension == suffix:
                return kind

        raise UnsupportedFormat(
            f"Unsupported document type: {filename!r} ({content_type or 'no content type'})"
        )


@dataclass(frozen=True)
class SourceDocument:
    """An uploaded document exactly as received."""

    data: bytes
    media_kind: MediaKind
    filename: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


class CoordinateOrigin(Enum):
    """Corner of the page that a fragment's (x, y) is measured from."""

    TOP_LEFT = "top_left"  # y grows downward (pymupdf)
    BOTTOM_LEFT = "bottom_left"  # y grows upward (PDF user space, pikepdf, pdfplumber y0)


@dataclass(frozen=True)
class TextFragment:
    """A single positioned run of text extracted from one page.

    ``(x, y)`` is the corner of the fragment's box nearest to ``origin``.
    The coordinates are only meaningful against the PDF the fragment was
    extracted from; use :func:`doc_assembler.geometry.to_origin` before
    drawing it in another coordinate model.
    """

    text: str
    page_index: int
    x: float
    y: float
    width: float
    height: float
    origin: CoordinateOrigin = CoordinateOrigin.BOTTOM_LEFT

    @property
    def word_count(self) -> int:
        return len(self.text.split())


class HighlightOutcome(Enum):
    HIGHLIGHTED = "highlighted"
    UNCHANGED = "unchanged"


@dataclass
class HighlightResult:
    """Result of the best-effort highlight compositor.

    Attributes:
        pdf_bytes: The highlighted document, or the original bytes object
            when ``outcome`` is UNCHANGED.
        outcome: Whether any highlight was actually drawn.
        reason: Why the document was left unchanged (None when highlighted).
        highlighted_count: Rectangles drawn.
        skipped_count: Fragments whose page index was out of range.
    """

    pdf_bytes: bytes
    outcome: HighlightOutcome
    reason: str | None = None
    highlighted_count: int = 0
    skipped_count: int = 0

    @property
    def highlighted(self) -> bool:
        return self.outcome is HighlightOutcome.HIGHLIGHTED

    @classmethod
    def unchanged(cls, pdf_bytes: bytes, reason: str, skipped_count: int = 0) -> HighlightResult:
        return cls(
            pdf_bytes=pdf_bytes,
            outcome=HighlightOutcome.UNCHANGED,
            reason=reason,
            skipped_count=skipped_count,
        )


def resolve_percentage(
    value: Percentage,
    rng: random.Random | None = None,
    low: int = 20,
    high: int = 50,
) -> int:
    """Turn a requested percentage into a concrete integer.

    ``"*"`` draws uniformly from ``[low, high)``; integers (or integer
    strings, as submitted from a form) must lie in ``[0, 100]``.

    Raises:
        ValueError: Value is neither "*" nor an integer in range.
    """
    if value == RANDOM_PERCENTAGE:
        return (rng or random.Random()).randrange(low, high)

    percent = int(value)
    if not 0 <= percent <= 100:
        raise ValueError(f"Percentage must be between 0 and 100, got {percent}")
    return percent
