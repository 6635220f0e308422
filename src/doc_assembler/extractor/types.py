"""Shared types for the layout extraction backends.

Each backend reduces a PDF to a flat list of TextOperation records -- one
per text-drawing run, in page then draw order -- and the common
:func:`doc_assembler.extractor.operations.fragments_from_operations` turns
those into TextFragments with uniform size rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from doc_assembler.models import CoordinateOrigin


class ExtractionMethod(Enum):
    """Library used to read text positions from a PDF."""

    PYMUPDF = "pymupdf"
    PDFPLUMBER = "pdfplumber"

    @property
    def origin(self) -> CoordinateOrigin:
        """Native coordinate model of the backend's fragments."""
        if self is ExtractionMethod.PYMUPDF:
            return CoordinateOrigin.TOP_LEFT
        return CoordinateOrigin.BOTTOM_LEFT


@dataclass(frozen=True)
class TextOperation:
    """A single text-drawing run as reported by a backend.

    Attributes:
        text: The run's text, unstripped.
        transform: Text rendering matrix ``(a, b, c, d, e, f)``; ``a``/``b``
            carry the horizontal glyph scale, ``d`` the vertical one.
        x: Left edge in the backend's native coordinates.
        y: Box edge nearest the backend's origin.
        width: Measured run width, or None when the backend has none.
        page_index: Zero-based page the run was drawn on.
        height: Measured box height, or None to derive it from the matrix.
    """

    text: str
    transform: tuple[float, float, float, float, float, float]
    x: float
    y: float
    width: float | None
    page_index: int
    height: float | None = None
