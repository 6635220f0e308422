"""Layout extractor: PDF bytes to positioned text fragments."""

from doc_assembler.extractor.service import ExtractionMethod, extract_layout, extract_with

__all__ = ["ExtractionMethod", "extract_layout", "extract_with"]
