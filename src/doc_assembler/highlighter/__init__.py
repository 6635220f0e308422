"""Fragment sampling, highlight drawing and page stamping."""

from doc_assembler.highlighter.compositor import draw_highlights
from doc_assembler.highlighter.sampler import count_words, partition_chunks, select_fragments
from doc_assembler.highlighter.stamping import stamp_page_numbers

__all__ = [
    "count_words",
    "draw_highlights",
    "partition_chunks",
    "select_fragments",
    "stamp_page_numbers",
]
