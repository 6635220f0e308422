"""Process-wide cache of pymupdf fonts used for glyph-width measurement.

Building a ``pymupdf.Font`` parses font tables, so each font is created
once per process and shared read-only by every submission.  The lock makes
concurrent first use (several worker threads normalizing at once) create
the font exactly once.  There is no teardown; fonts live until exit.
"""

from __future__ import annotations

import logging
import threading

import pymupdf

logger = logging.getLogger(__name__)

_fonts: dict[str, pymupdf.Font] = {}
_fonts_lock = threading.Lock()


def get_font(fontname: str) -> pymupdf.Font:
    """Return the shared ``pymupdf.Font`` for a Base-14 *fontname*."""
    font = _fonts.get(fontname)
    if font is not None:
        return font

    with _fonts_lock:
        font = _fonts.get(fontname)
        if font is None:
            font = pymupdf.Font(fontname=fontname)
            _fonts[fontname] = font
            logger.debug("Initialized measurement font %s", fontname)
    return font


def text_width(text: str, fontname: str, fontsize: float) -> float:
    """Width of *text* in points when set in *fontname* at *fontsize*."""
    return get_font(fontname).text_length(text, fontsize=fontsize)
