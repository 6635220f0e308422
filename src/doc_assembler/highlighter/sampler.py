"""Randomized selection of fragments to highlight under a word budget.

Fragments are grouped into contiguous chunks of random size so the
highlighted regions read as organic passages rather than evenly spaced
runs.  Chunks are then shuffled (``random.Random.shuffle``, an unbiased
Fisher-Yates) and a prefix of the shuffled order is taken.

The prefix length starts from the average-words-per-chunk estimate and is
then calibrated against the actual chunk word counts, so the selected word
total lands within one chunk's word count of the target.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence

from doc_assembler.config.settings import HighlightSettings
from doc_assembler.models import TextFragment

logger = logging.getLogger(__name__)


def count_words(fragments: Sequence[TextFragment]) -> int:
    """Whitespace-delimited word count of all fragment text joined by spaces."""
    return len(" ".join(f.text for f in fragments).split())


def partition_chunks(
    fragments: Sequence[TextFragment],
    rng: random.Random,
    min_size: int = 3,
    max_size: int = 10,
) -> list[list[TextFragment]]:
    """Split *fragments* into contiguous chunks of random length.

    A target size is drawn from ``[min_size, max_size]`` for each chunk;
    the final chunk may be shorter when fragments run out.
    """
    chunks: list[list[TextFragment]] = []
    current: list[TextFragment] = []
    target = rng.randint(min_size, max_size)

    for fragment in fragments:
        current.append(fragment)
        if len(current) >= target:
            chunks.append(current)
            current = []
            target = rng.randint(min_size, max_size)

    if current:
        chunks.append(current)
    return chunks


def _calibrate_prefix(
    order: list[int],
    chunk_words: list[int],
    estimate: int,
    words_to_highlight: int,
) -> int:
    """Length of the shuffled-order prefix whose word total best fits the budget.

    Walks from *estimate* to the shortest prefix reaching the budget, then
    keeps one chunk fewer if that lands closer.  The result differs from
    the budget by at most one chunk's words.
    """
    prefix_words = [0]
    for idx in order:
        prefix_words.append(prefix_words[-1] + chunk_words[idx])

    n = estimate
    while n > 0 and prefix_words[n - 1] >= words_to_highlight:
        n -= 1
    while n < len(order) and prefix_words[n] < words_to_highlight:
        n += 1

    if n > 0:
        over = prefix_words[n] - words_to_highlight
        under = words_to_highlight - prefix_words[n - 1]
        if under < over:
            n -= 1
    return n


def select_fragments(
    fragments: Sequence[TextFragment],
    percentage: int,
    rng: random.Random | None = None,
    settings: HighlightSettings | None = None,
) -> list[TextFragment]:
    """Choose fragments whose combined words approximate *percentage* of the total.

    Args:
        fragments: Extracted fragments in document order.
        percentage: Target share of words, 0-100.
        rng: Random source; inject a seeded ``random.Random`` for repeatable
            selections.  Not touched when nothing can be selected.
        settings: Chunk size bounds.

    Returns:
        The chosen fragments (the same objects as in *fragments*), chunk by
        chunk in shuffled chunk order, each chunk in document order.
    """
    if percentage <= 0 or not fragments:
        return []

    total_words = count_words(fragments)
    if total_words == 0:
        return []

    settings = settings or HighlightSettings()
    rng = rng or random.Random()

    words_to_highlight = math.floor(total_words * percentage / 100)
    chunks = partition_chunks(
        fragments, rng, settings.chunk_min_size, settings.chunk_max_size
    )

    avg_words_per_chunk = total_words / len(chunks)
    estimate = math.ceil(words_to_highlight / avg_words_per_chunk)
    estimate = max(0, min(estimate, len(chunks)))

    order = list(range(len(chunks)))
    rng.shuffle(order)

    chunk_words = [count_words(chunk) for chunk in chunks]
    take = _calibrate_prefix(order, chunk_words, estimate, words_to_highlight)

    selected: list[TextFragment] = []
    for idx in order[:take]:
        selected.extend(chunks[idx])

    logger.info(
        "Selected %d/%d chunks (%d fragments, %d/%d words, target %d at %d%%)",
        take,
        len(chunks),
        len(selected),
        count_words(selected),
        total_words,
        words_to_highlight,
        percentage,
    )
    return selected
