"""Primary layout extraction using PyMuPDF text spans.

Reads ``page.get_text("dict")`` without re-sorting, so spans come back in
content-stream draw order.  Coordinates are pymupdf page coordinates:
origin at the top-left, y growing downward, ``y`` = top of the span box.
"""

from __future__ import annotations

import logging

import pymupdf

from doc_assembler.extractor.types import TextOperation

logger = logging.getLogger(__name__)


def _span_transform(
    span: dict, direction: tuple[float, float]
) -> tuple[float, float, float, float, float, float]:
    """Rebuild a span's text matrix from its font size and line direction."""
    size = float(span.get("size", 0.0))
    cos, sin = direction
    ox, oy = span.get("origin", (0.0, 0.0))
    return (size * cos, size * sin, -size * sin, size * cos, float(ox), float(oy))


def read_pymupdf_operations(pdf_bytes: bytes) -> list[TextOperation]:
    """Return one TextOperation per text span, in page then draw order.

    Raises whatever PyMuPDF raises for unreadable input (typically
    ``pymupdf.FileDataError``); the extraction service translates it.
    """
    operations: list[TextOperation] = []

    with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:
        if doc.needs_pass:
            raise ValueError("encrypted")

        for page_index, page in enumerate(doc):
            text_dict = page.get_text("dict", sort=False)
            for block in text_dict.get("blocks", []):
                if block.get("type") != 0:  # 1 = image block
                    continue
                for line in block.get("lines", []):
                    direction = tuple(line.get("dir", (1.0, 0.0)))
                    for span in line.get("spans", []):
                        x0, y0, x1, _y1 = span["bbox"]
                        operations.append(
                            TextOperation(
                                text=span.get("text", ""),
                                transform=_span_transform(span, direction),
                                x=float(x0),
                                y=float(y0),
                                width=float(x1 - x0),
                                page_index=page_index,
                            )
                        )

        logger.debug(
            "pymupdf read %d text spans from %d pages",
            len(operations),
            doc.page_count,
        )

    return operations
