"""Best-effort highlight compositor using pikepdf.

Draws a translucent, borderless rectangle behind each selected fragment by
appending a small content stream to the fragment's page.  Drawing happens
in PDF user space (origin bottom-left).  BOTTOM_LEFT fragments are already
in user space; TOP_LEFT fragments are measured from the top-left corner of
the visible page box (CropBox clipped to MediaBox) and are flipped against
that box, then shifted by its lower-left corner.

Highlighting is cosmetic: any failure yields the original bytes with an
UNCHANGED outcome instead of an exception.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence

import pikepdf
from pikepdf import Name

from doc_assembler.config.settings import HighlightSettings
from doc_assembler.geometry import to_origin
from doc_assembler.models import CoordinateOrigin, HighlightResult, HighlightOutcome, TextFragment

logger = logging.getLogger(__name__)


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def _highlight_state(pdf: pikepdf.Pdf, settings: HighlightSettings) -> pikepdf.Dictionary:
    return pdf.make_indirect(
        pikepdf.Dictionary(
            Type=Name.ExtGState,
            ca=settings.opacity,
            CA=settings.opacity,
            BM=Name.Multiply,
        )
    )


def _normalized(box) -> tuple[float, float, float, float]:
    x0, y0, x1, y1 = (float(v) for v in box)
    return min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1)


def visible_box(page: pikepdf.Page) -> tuple[float, float, float, float]:
    """The page's CropBox clipped to its MediaBox, as ``(llx, lly, urx, ury)``.

    Falls back to the MediaBox when the two do not overlap.
    """
    mx0, my0, mx1, my1 = _normalized(page.mediabox)
    cx0, cy0, cx1, cy1 = _normalized(page.cropbox)
    box = (max(mx0, cx0), max(my0, cy0), min(mx1, cx1), min(my1, cy1))
    if box[0] >= box[2] or box[1] >= box[3]:
        return mx0, my0, mx1, my1
    return box


def user_space_box(
    fragment: TextFragment,
    page_box: tuple[float, float, float, float],
) -> tuple[float, float, float, float]:
    """``(x, y, width, height)`` of *fragment* in PDF user space."""
    if fragment.origin is CoordinateOrigin.BOTTOM_LEFT:
        return fragment.x, fragment.y, fragment.width, fragment.height

    llx, lly, _urx, ury = page_box
    box = to_origin(fragment, CoordinateOrigin.BOTTOM_LEFT, ury - lly)
    return llx + box.x, lly + box.y, box.width, box.height


def rectangle_ops(
    fragment: TextFragment,
    page_box: tuple[float, float, float, float],
    state_name: str,
    settings: HighlightSettings,
) -> bytes:
    """Content-stream operators filling *fragment*'s padded box."""
    x, y, width, height = user_space_box(fragment, page_box)
    pad = settings.padding
    r, g, b = settings.color
    return (
        f"q {state_name} gs {_fmt(r)} {_fmt(g)} {_fmt(b)} rg "
        f"{_fmt(x - pad)} {_fmt(y - pad)} "
        f"{_fmt(width + 2 * pad)} {_fmt(height + 2 * pad)} re f Q\n"
    ).encode("ascii")


def draw_highlights(
    pdf_bytes: bytes,
    selection: Sequence[TextFragment],
    settings: HighlightSettings | None = None,
) -> HighlightResult:
    """Return a copy of the PDF with every selected fragment highlighted.

    Fragments whose page index is outside the document are skipped.  Never
    raises: on any failure the original bytes are returned unchanged with
    the error text as the reason.
    """
    if not selection:
        return HighlightResult.unchanged(pdf_bytes, "no fragments selected")

    settings = settings or HighlightSettings()

    try:
        with pikepdf.Pdf.open(io.BytesIO(pdf_bytes)) as pdf:
            page_ops: dict[int, list[bytes]] = {}
            state_names: dict[int, str] = {}
            state = _highlight_state(pdf, settings)
            page_total = len(pdf.pages)
            skipped = 0

            for fragment in selection:
                if not 0 <= fragment.page_index < page_total:
                    skipped += 1
                    continue

                page = pdf.pages[fragment.page_index]
                if fragment.page_index not in state_names:
                    state_names[fragment.page_index] = str(
                        page.add_resource(state, Name.ExtGState, prefix="HL")
                    )

                page_ops.setdefault(fragment.page_index, []).append(
                    rectangle_ops(
                        fragment,
                        visible_box(page),
                        state_names[fragment.page_index],
                        settings,
                    )
                )

            if not page_ops:
                return HighlightResult.unchanged(
                    pdf_bytes,
                    f"all {skipped} fragments outside page range",
                    skipped_count=skipped,
                )

            drawn = 0
            for page_index, ops in page_ops.items():
                page = pdf.pages[page_index]
                # Isolate existing content so its graphics state cannot leak
                page.contents_add(b"q\n", prepend=True)
                page.contents_add(b"Q\n" + b"".join(ops))
                drawn += len(ops)

            out = io.BytesIO()
            pdf.save(out)

    except Exception as e:
        logger.warning("Highlighting failed, returning original document: %s", e)
        return HighlightResult.unchanged(pdf_bytes, f"highlighting failed: {e}")

    if skipped:
        logger.debug("Skipped %d fragments with out-of-range page index", skipped)
    logger.info("Highlighted %d fragments on %d pages", drawn, len(page_ops))

    return HighlightResult(
        pdf_bytes=out.getvalue(),
        outcome=HighlightOutcome.HIGHLIGHTED,
        highlighted_count=drawn,
        skipped_count=skipped,
    )
