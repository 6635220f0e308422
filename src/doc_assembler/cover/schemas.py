"""Pydantic model for the cover-document service query.

The service renders the front-matter pages from these descriptive values;
field aliases are the query-string parameter names it expects.
"""

from pydantic import BaseModel, ConfigDict, Field


def format_file_size(size_bytes: int) -> str:
    """Human-readable size in kilobytes, e.g. ``"12.3 KB"``."""
    return f"{size_bytes / 1024:.1f} KB"


class CoverRequest(BaseModel):
    """Parameters describing the body document to the cover service.

    Attributes:
        title: Report title shown on the cover.
        file_name: Original upload name.
        word_count: Words in the body document's extracted text.
        char_count: Characters in the body document's extracted text.
        highlight_percent: Resolved share of words highlighted in the body.
        secondary_percent: Second caller-supplied percentage, passed through.
        file_size: Upload size, formatted by :func:`format_file_size`.
        page_count: Real page count of the body document (required).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str
    file_name: str = Field(alias="fileName")
    word_count: int = Field(alias="wordCount", ge=0)
    char_count: int = Field(alias="charCount", ge=0)
    highlight_percent: int = Field(alias="highlightPercent", ge=0, le=100)
    secondary_percent: int = Field(default=0, alias="secondaryPercent", ge=0, le=100)
    file_size: str = Field(alias="fileSize")
    page_count: int = Field(alias="pageCount", ge=1)

    def to_query(self) -> dict[str, str]:
        """Query parameters keyed by their wire names."""
        return {key: str(value) for key, value in self.model_dump(by_alias=True).items()}
