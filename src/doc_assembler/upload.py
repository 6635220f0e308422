"""Upload policy: allow-listed formats and a size ceiling.

Checked before any pipeline work.  A rejected upload is not an error -- it
comes back as an UploadDecision carrying a message meant for the person
who uploaded the file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from doc_assembler.config.settings import PipelineSettings
from doc_assembler.errors import UnsupportedFormat
from doc_assembler.models import MediaKind

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Please upload a PDF, DOC, or DOCX file."


@dataclass
class UploadDecision:
    """Outcome of checking an upload against the policy."""

    accepted: bool
    media_kind: MediaKind | None = None
    message: str | None = None


def _size_label(size_bytes: int) -> str:
    mib = size_bytes / (1024 * 1024)
    return f"{mib:g}MB"


def validate_upload(
    filename: str,
    content_type: str | None,
    size_bytes: int,
    settings: PipelineSettings,
) -> UploadDecision:
    """Decide whether an upload may enter the pipeline.

    The format is accepted when either the MIME type or the extension is
    PDF, DOC or DOCX.
    """
    try:
        kind = MediaKind.detect(filename, content_type)
    except UnsupportedFormat:
        logger.info("Upload rejected (type): %s (%s)", filename, content_type)
        return UploadDecision(accepted=False, message=UNSUPPORTED_MESSAGE)

    if size_bytes > settings.max_upload_bytes:
        logger.info(
            "Upload rejected (size): %s is %d bytes > %d",
            filename,
            size_bytes,
            settings.max_upload_bytes,
        )
        return UploadDecision(
            accepted=False,
            media_kind=kind,
            message=(
                f"File size must be less than "
                f"{_size_label(settings.max_upload_bytes)}."
            ),
        )

    return UploadDecision(accepted=True, media_kind=kind)
