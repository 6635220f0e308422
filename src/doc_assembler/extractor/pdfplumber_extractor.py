"""Fallback layout extraction using pdfplumber text lines.

pdfplumber groups characters into lines and exposes each character's text
matrix.  Its line boxes live in the displayed page frame: /Rotate is applied
and the MediaBox corner is folded in.  They are mapped back to PDF user
space (origin bottom-left, y growing upward, unrotated) so the fragments
line up with the compositor without a flip: ``y`` is the bottom edge of
the line box.
"""

from __future__ import annotations

import io
import logging

import pdfplumber

from doc_assembler.extractor.types import TextOperation

logger = logging.getLogger(__name__)

_IDENTITY = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)
_DEGENERATE = (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


def _line_transform(line: dict) -> tuple[float, float, float, float, float, float]:
    """Rendering matrix of the first character in *line*, or a degenerate one.

    pdfminer's per-char ``matrix`` excludes the font size, so the linear
    part is scaled by the char's ``size`` to give glyph-space units.
    """
    chars = line.get("chars") or []
    if not chars:
        return _DEGENERATE
    a, b, c, d, e, f = (float(v) for v in (chars[0].get("matrix") or _IDENTITY))
    size = float(chars[0].get("size", 0.0))
    return (a * size, b * size, c * size, d * size, e, f)


def display_to_user(
    point: tuple[float, float],
    rotation: int,
    mediabox: tuple[float, float, float, float],
) -> tuple[float, float]:
    """Undo pdfminer's page matrix for a point in the displayed frame.

    pdfminer places the rotated page with its lower-left corner at the
    origin; *mediabox* is the raw ``(x0, y0, x1, y1)`` it was built from.
    """
    px, py = point
    x0, y0, x1, y1 = mediabox
    if rotation == 90:
        return x1 - py, y0 + px
    if rotation == 180:
        return x1 - px, y1 - py
    if rotation == 270:
        return x0 + py, y1 - px
    return x0 + px, y0 + py


def _user_space_box(page, line: dict) -> tuple[float, float, float, float]:
    """``(x, y, width, height)`` of a pdfplumber line in PDF user space."""
    mb_x0, mb_top = float(page.mediabox[0]), float(page.mediabox[1])
    height = float(page.height)

    # Back to pdfminer's frame: origin bottom-left of the displayed page
    left = float(line["x0"]) - mb_x0
    right = float(line["x1"]) - mb_x0
    low = height + mb_top - float(line["bottom"])
    high = height + mb_top - float(line["top"])

    raw_box = tuple(float(v) for v in page.page_obj.mediabox)
    corners = [
        display_to_user((px, py), page.rotation, raw_box)
        for px in (left, right)
        for py in (low, high)
    ]
    xs = [x for x, _ in corners]
    ys = [y for _, y in corners]
    return min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys)


def read_pdfplumber_operations(pdf_bytes: bytes) -> list[TextOperation]:
    """Return one TextOperation per detected text line, page by page."""
    operations: list[TextOperation] = []

    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        for page_index, page in enumerate(pdf.pages):
            if page.rotation:
                logger.debug("Page %d is rotated %d degrees", page_index, page.rotation)
            for line in page.extract_text_lines(return_chars=True, strip=False):
                x, y, width, height = _user_space_box(page, line)
                operations.append(
                    TextOperation(
                        text=line.get("text", ""),
                        transform=_line_transform(line),
                        x=x,
                        y=y,
                        width=width,
                        page_index=page_index,
                        height=height,
                    )
                )

        logger.debug(
            "pdfplumber read %d text lines from %d pages",
            len(operations),
            len(pdf.pages),
        )

    return operations
