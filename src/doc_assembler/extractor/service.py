"""Layout extraction service with backend fallback.

Runs the configured backend first and falls back to the other one when it
raises:

1. **pymupdf** -- span-level, top-left origin (default).
2. **pdfplumber** -- line-level, bottom-left origin.

Every fragment records the backend's origin so downstream drawing can
reconcile it.  Finding no text at all is a valid, empty result; only a
document neither backend can parse is an error.
"""

from __future__ import annotations

import logging

from doc_assembler.config.settings import LayoutSettings
from doc_assembler.errors import MalformedDocument
from doc_assembler.extractor.operations import fragments_from_operations
from doc_assembler.extractor.pdfplumber_extractor import read_pdfplumber_operations
from doc_assembler.extractor.pymupdf_extractor import read_pymupdf_operations
from doc_assembler.extractor.types import ExtractionMethod
from doc_assembler.models import TextFragment

logger = logging.getLogger(__name__)

__all__ = ["ExtractionMethod", "extract_layout", "extract_with"]

_READERS = {
    ExtractionMethod.PYMUPDF: read_pymupdf_operations,
    ExtractionMethod.PDFPLUMBER: read_pdfplumber_operations,
}


def extract_with(method: ExtractionMethod, pdf_bytes: bytes) -> list[TextFragment]:
    """Extract fragments with one specific backend, letting errors propagate."""
    operations = _READERS[method](pdf_bytes)
    return fragments_from_operations(operations, method.origin)


def extract_layout(
    pdf_bytes: bytes,
    settings: LayoutSettings | None = None,
) -> list[TextFragment]:
    """Extract positioned text fragments from a PDF.

    Args:
        pdf_bytes: The PDF to read.
        settings: Provides ``extraction_method`` (the first backend tried).

    Returns:
        Fragments ordered by page index, then draw order.  May be empty.

    Raises:
        MalformedDocument: No backend could parse the document.
    """
    settings = settings or LayoutSettings()
    primary = ExtractionMethod(settings.extraction_method)
    order = [primary] + [m for m in ExtractionMethod if m is not primary]

    errors: list[str] = []
    for method in order:
        try:
            fragments = extract_with(method, pdf_bytes)
        except Exception as e:
            logger.warning("%s extraction failed: %s", method.value, e)
            errors.append(f"{method.value}: {e}")
            continue

        logger.info(
            "Extracted %d fragments via %s (%s origin)",
            len(fragments),
            method.value,
            method.origin.value,
        )
        return fragments

    logger.error("All extraction methods failed: %s", "; ".join(errors))
    raise MalformedDocument("Cannot read PDF layout: " + "; ".join(errors))
