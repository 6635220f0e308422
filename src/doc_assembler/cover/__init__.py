"""Cover-document service client and request schema."""

from doc_assembler.cover.client import CoverProvider, HttpCoverProvider, fetch_cover
from doc_assembler.cover.schemas import CoverRequest, format_file_size

__all__ = [
    "CoverProvider",
    "CoverRequest",
    "HttpCoverProvider",
    "fetch_cover",
    "format_file_size",
]
