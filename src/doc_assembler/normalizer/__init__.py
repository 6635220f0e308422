"""Format normalizer: uploads in any supported format become PDF bytes."""

from doc_assembler.normalizer.service import normalize, text_to_pdf

__all__ = ["normalize", "text_to_pdf"]
