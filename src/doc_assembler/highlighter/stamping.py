"""Optional page-number footer for body pages.

Body pages follow the cover in the final document, so numbering starts
after the cover's last page and the total counts both parts.
"""

from __future__ import annotations

import logging

import pymupdf

from doc_assembler.config.settings import HighlightSettings
from doc_assembler.errors import MalformedDocument

logger = logging.getLogger(__name__)

_FOOTER_X = 50.0
_FOOTER_BASELINE_FROM_BOTTOM = 20.0


def stamp_page_numbers(
    pdf_bytes: bytes,
    start_page: int,
    total_pages: int,
    settings: HighlightSettings,
) -> bytes:
    """Write ``settings.page_label`` at the foot of every page.

    Args:
        pdf_bytes: Body document.
        start_page: Number printed on the first body page.
        total_pages: Page count of the final merged document.
        settings: Label template and font size.

    Raises:
        MalformedDocument: The PDF cannot be opened or saved.
    """
    try:
        with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:
            for offset, page in enumerate(doc):
                label = settings.page_label.format(
                    page=start_page + offset, total=total_pages
                )
                page.insert_text(
                    (_FOOTER_X, page.rect.height - _FOOTER_BASELINE_FROM_BOTTOM),
                    label,
                    fontname="helv",
                    fontsize=settings.page_label_font_size,
                    color=(0, 0, 0),
                )
            stamped = doc.tobytes(garbage=1, deflate=True)
            logger.debug("Stamped page numbers on %d pages", doc.page_count)
            return stamped
    except Exception as e:
        logger.error("Page numbering failed: %s", e)
        raise MalformedDocument(f"Cannot stamp page numbers: {e}") from e
