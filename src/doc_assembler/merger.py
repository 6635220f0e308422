"""Document merger: cover pages followed by body pages, using pikepdf.

Pages are copied as whole page objects, so each keeps its content stream,
resources and media box.  A failed parse here is fatal -- without both
inputs there is no usable output.
"""

from __future__ import annotations

import io
import logging

import pikepdf

from doc_assembler.errors import MalformedDocument

logger = logging.getLogger(__name__)


def _open(pdf_bytes: bytes, label: str) -> pikepdf.Pdf:
    try:
        return pikepdf.Pdf.open(io.BytesIO(pdf_bytes))
    except pikepdf.PasswordError as e:
        logger.error("%s document is encrypted", label)
        raise MalformedDocument(f"{label} document is encrypted") from e
    except Exception as e:
        logger.error("Could not open %s document: %s", label, e)
        raise MalformedDocument(f"Cannot parse {label} document: {e}") from e


def page_count(pdf_bytes: bytes) -> int:
    """Number of pages in a PDF.

    Raises:
        MalformedDocument: The bytes are not a readable PDF.
    """
    with _open(pdf_bytes, "input") as pdf:
        return len(pdf.pages)


def merge_documents(cover_bytes: bytes, body_bytes: bytes) -> bytes:
    """Concatenate *cover_bytes* then *body_bytes* into a new PDF.

    Raises:
        MalformedDocument: Either input cannot be parsed, or the merged
            document cannot be written.
    """
    with _open(cover_bytes, "cover") as cover, _open(body_bytes, "body") as body:
        merged = pikepdf.Pdf.new()
        try:
            merged.pages.extend(cover.pages)
            merged.pages.extend(body.pages)

            out = io.BytesIO()
            merged.save(out)
        except Exception as e:
            logger.error("Merging failed: %s", e)
            raise MalformedDocument(f"Cannot merge documents: {e}") from e
        finally:
            merged.close()

        logger.info(
            "Merged %d cover pages + %d body pages",
            len(cover.pages),
            len(body.pages),
        )

    return out.getvalue()
