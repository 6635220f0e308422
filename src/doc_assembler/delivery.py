"""Delivery sink: derive the download name and write the final document.

Writes go through a ``.tmp`` intermediate that is renamed into place on
success and removed on failure, so a partial file never appears under the
final name.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePath
from typing import Protocol

logger = logging.getLogger(__name__)

_LAST_EXTENSION = re.compile(r"\.[^.]+$")


def output_filename(original_name: str, prefix: str, ext: str = "pdf") -> str:
    """``<prefix>_<basename without its last extension>.<ext>``."""
    base = PurePath(original_name).name or "document"
    stem = _LAST_EXTENSION.sub("", base) or base
    return f"{prefix}_{stem}.{ext}"


class DeliverySink(Protocol):
    def deliver(self, data: bytes, filename: str) -> Path: ...


class FileSink:
    """Writes delivered documents into a directory."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)

    def deliver(self, data: bytes, filename: str) -> Path:
        dest_path = self.output_dir / filename
        tmp_path = dest_path.with_name(dest_path.name + ".tmp")
        dest_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            tmp_path.write_bytes(data)
            tmp_path.replace(dest_path)
        finally:
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                    logger.debug("Cleaned up temp file %s", tmp_path)
                except OSError:
                    logger.warning("Failed to clean up temp file %s", tmp_path)

        logger.info("Delivered %s (%d bytes)", dest_path, len(data))
        return dest_path
