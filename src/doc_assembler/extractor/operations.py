"""Backend-independent conversion of text operations into fragments."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from doc_assembler.extractor.types import TextOperation
from doc_assembler.models import CoordinateOrigin, TextFragment

logger = logging.getLogger(__name__)

# Average glyph advance as a fraction of font size, for runs without a width
WIDTH_ESTIMATE_FACTOR = 0.6
DEFAULT_HEIGHT = 12.0


def horizontal_scale(transform: tuple[float, ...]) -> float:
    """Magnitude of the matrix's x basis vector (the effective font size)."""
    return math.hypot(transform[0], transform[1])


def fragments_from_operations(
    operations: Iterable[TextOperation],
    origin: CoordinateOrigin,
) -> list[TextFragment]:
    """Build fragments from *operations*, preserving their order.

    Runs with blank text or a degenerate (non-positive) horizontal scale
    are dropped.  Width falls back to ``len(text) * |scale_x| * 0.6`` when
    the backend did not measure it.  Height is the measured height when the
    backend has one, else ``|d|``, or 12 when that is zero.
    """
    fragments: list[TextFragment] = []
    skipped = 0

    for op in operations:
        scale_x = horizontal_scale(op.transform)
        if not op.text.strip() or scale_x <= 0:
            skipped += 1
            continue

        if op.width is not None and op.width > 0:
            width = op.width
        else:
            width = len(op.text) * abs(scale_x) * WIDTH_ESTIMATE_FACTOR

        if op.height is not None and op.height > 0:
            height = op.height
        else:
            height = abs(op.transform[3]) or DEFAULT_HEIGHT

        fragments.append(
            TextFragment(
                text=op.text,
                page_index=op.page_index,
                x=op.x,
                y=op.y,
                width=width,
                height=height,
                origin=origin,
            )
        )

    if skipped:
        logger.debug("Skipped %d blank or degenerate text runs", skipped)
    return fragments
