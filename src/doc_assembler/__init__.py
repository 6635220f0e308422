"""doc-assembler -- cover + highlighted body document assembly."""

from doc_assembler.errors import (
    AssemblyError,
    DependencyFailure,
    MalformedDocument,
    UnsupportedFormat,
)
from doc_assembler.models import (
    CoordinateOrigin,
    HighlightOutcome,
    HighlightResult,
    MediaKind,
    SourceDocument,
    TextFragment,
)
from doc_assembler.pipeline import AssemblyResult, assemble_document

__all__ = [
    "AssemblyError",
    "AssemblyResult",
    "CoordinateOrigin",
    "DependencyFailure",
    "HighlightOutcome",
    "HighlightResult",
    "MalformedDocument",
    "MediaKind",
    "SourceDocument",
    "TextFragment",
    "UnsupportedFormat",
    "assemble_document",
]
