"""Coordinate reconciliation between top-left and bottom-left page models.

pymupdf reports text boxes with the origin at the top-left corner of the
page and y growing downward; PDF user space (pikepdf, pdfplumber's ``y0``)
puts the origin at the bottom-left with y growing upward.  A fragment must
be flipped on the vertical axis whenever it crosses from one model into
the other.
"""

from __future__ import annotations

import dataclasses

from doc_assembler.models import CoordinateOrigin, TextFragment


def flip_y(y: float, height: float, page_height: float) -> float:
    """Mirror a box's near-origin y across the page's horizontal midline."""
    return page_height - y - height


def to_origin(
    fragment: TextFragment,
    origin: CoordinateOrigin,
    page_height: float,
) -> TextFragment:
    """Return *fragment* expressed relative to *origin*.

    The fragment is returned as-is when it already uses *origin*; otherwise
    a copy with a flipped ``y`` is returned.  The input is never modified.
    """
    if fragment.origin is origin:
        return fragment
    return dataclasses.replace(
        fragment,
        y=flip_y(fragment.y, fragment.height, page_height),
        origin=origin,
    )
