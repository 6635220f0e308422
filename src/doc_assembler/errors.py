"""Error taxonomy for the assembly pipeline.

All three concrete errors are fatal to a submission except where a stage
documents otherwise (the highlight compositor swallows MalformedDocument
and reports an UNCHANGED result instead).
"""

from __future__ import annotations


class AssemblyError(Exception):
    """Base class for every pipeline failure surfaced to the caller."""


class UnsupportedFormat(AssemblyError):
    """Input media kind is not one of PDF, DOC, DOCX."""


class MalformedDocument(AssemblyError):
    """Bytes do not parse as a valid instance of the declared format."""


class DependencyFailure(AssemblyError):
    """The external cover-document service failed or returned non-2xx."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
