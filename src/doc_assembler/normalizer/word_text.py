"""Plain-text extraction from word-processor documents using python-docx.

Only the text survives.  Paragraphs become single lines, and soft line
breaks inside a paragraph become additional lines.  Table cells are read in
row order, each cell paragraph on its own line, where the table sits in the
body.  Styles and images are dropped; the reflow step lays the text out
from scratch.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator

import docx
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table
from docx.text.paragraph import Paragraph

from doc_assembler.errors import MalformedDocument
from doc_assembler.models import MediaKind, SourceDocument

logger = logging.getLogger(__name__)


def _paragraph_lines(paragraph: Paragraph) -> list[str]:
    return paragraph.text.replace("\r", "\n").split("\n")


def _block_lines(container) -> Iterator[str]:
    """Lines of *container*'s paragraphs and tables in document order."""
    for block in container.iter_inner_content():
        if isinstance(block, Table):
            yield from _table_lines(block)
        else:
            yield from _paragraph_lines(block)


def _table_lines(table: Table) -> Iterator[str]:
    seen = set()
    for row in table.rows:
        for cell in row.cells:
            # Merged cells repeat the same underlying cell element
            if cell._tc in seen:
                continue
            seen.add(cell._tc)
            yield from _block_lines(cell)


def extract_plain_text(source: SourceDocument) -> str:
    """Return the document's text with one ``\\n`` between lines.

    Legacy binary ``.doc`` files are attempted too (many ``.doc`` uploads
    are OOXML packages with the old extension); a true binary ``.doc``
    cannot be read by python-docx and is reported as malformed.

    Raises:
        MalformedDocument: The bytes are not a readable OOXML package.
    """
    try:
        document = docx.Document(io.BytesIO(source.data))
    except PackageNotFoundError as exc:
        if source.media_kind is MediaKind.DOC:
            logger.warning(
                "Legacy binary .doc not readable: %s", source.filename or "<upload>"
            )
            raise MalformedDocument(
                "Legacy .doc files must be saved as .docx before upload"
            ) from exc
        raise MalformedDocument(f"Not a valid DOCX package: {exc}") from exc
    except Exception as exc:
        logger.error(
            "Cannot read word document %s: %s", source.filename or "<upload>", exc
        )
        raise MalformedDocument(f"Cannot read word document: {exc}") from exc

    lines = list(_block_lines(document))

    text = "\n".join(lines)
    logger.debug(
        "Extracted %d chars in %d lines from %s",
        len(text),
        len(lines),
        source.filename or "<upload>",
    )
    return text
