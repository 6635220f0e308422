"""Greedy word-wrap of plain text onto fixed-size PDF pages.

Layout is split from rendering: :func:`layout_lines` decides where every
line goes using only a width-measuring callable, and :func:`render_pdf`
writes those placements with pymupdf.

Positions are pymupdf page coordinates (top-left origin); ``y`` is the
text baseline.  The cursor starts at the top margin and moves down one
line height per flushed line.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import pymupdf

from doc_assembler.config.settings import LayoutSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacedLine:
    """One line of text at its baseline position on a page."""

    page_index: int
    x: float
    y: float
    text: str


def layout_lines(
    text: str,
    measure: Callable[[str], float],
    settings: LayoutSettings,
) -> list[PlacedLine]:
    """Wrap *text* into placed lines.

    Each source line is wrapped independently.  A word is appended to the
    current line unless that would exceed ``settings.max_line_width`` and
    the line already has content, in which case the line is flushed and the
    word starts the next one.  A single word wider than the page is placed
    on its own line unbroken.  Blank source lines produce no output and do
    not advance the cursor.

    Args:
        text: Plain text with ``\\n`` separating source lines.
        measure: Returns the rendered width of a string in points.
        settings: Page size, margins and line height.

    Returns:
        Placed lines in reading order; ``page_index`` of the last line + 1
        is the page count (at least one page is always implied).
    """
    max_width = settings.max_line_width
    top = settings.margin
    bottom = settings.page_height - settings.margin

    placed: list[PlacedLine] = []
    page_index = 0
    y = top

    def flush(line: str) -> None:
        nonlocal page_index, y
        placed.append(PlacedLine(page_index, settings.margin, y, line))
        y += settings.line_height
        if y > bottom:
            page_index += 1
            y = top

    for source_line in text.split("\n"):
        current = ""
        for word in source_line.split():
            candidate = f"{current} {word}" if current else word
            if current and measure(candidate) > max_width:
                flush(current)
                current = word
            else:
                current = candidate
        if current:
            flush(current)

    return placed


def page_count_for(placed: list[PlacedLine]) -> int:
    """Number of pages needed for *placed* (an empty layout is one page)."""
    if not placed:
        return 1
    return placed[-1].page_index + 1


def render_pdf(placed: list[PlacedLine], settings: LayoutSettings) -> bytes:
    """Write placed lines to a new PDF and return its bytes."""
    doc = pymupdf.open()
    try:
        for _ in range(page_count_for(placed)):
            doc.new_page(width=settings.page_width, height=settings.page_height)

        for line in placed:
            doc[line.page_index].insert_text(
                (line.x, line.y),
                line.text,
                fontname=settings.font_name,
                fontsize=settings.font_size,
                color=(0, 0, 0),
            )

        logger.debug(
            "Rendered %d lines onto %d pages", len(placed), doc.page_count
        )
        return doc.tobytes(garbage=3, deflate=True)
    finally:
        doc.close()
