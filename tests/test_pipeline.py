"""End-to-end tests for the async assembly pipeline."""

from __future__ import annotations

import random

import pymupdf
import pytest

from doc_assembler import assemble_document
from doc_assembler.errors import DependencyFailure, UnsupportedFormat
from doc_assembler.models import HighlightOutcome, MediaKind, SourceDocument

from conftest import make_docx


class FakeCoverProvider:
    """Records requests and hands back a fixed cover PDF."""

    def __init__(self, cover_bytes: bytes) -> None:
        self.cover_bytes = cover_bytes
        self.requests = []

    async def __call__(self, request):
        self.requests.append(request)
        return self.cover_bytes


async def _failing_cover(request):
    raise DependencyFailure("Failed to generate cover document (HTTP 500)", 500)


@pytest.fixture
def pdf_source(body_pdf) -> SourceDocument:
    return SourceDocument(data=body_pdf, media_kind=MediaKind.PDF, filename="essay.pdf")


@pytest.mark.asyncio
async def test_half_highlight_merges_cover_and_body(
    pdf_source, cover_pdf, highlight_settings, pipeline_settings, rng
):
    provider = FakeCoverProvider(cover_pdf)

    result = await assemble_document(
        pdf_source,
        provider,
        highlight_percent=50,
        highlight_settings=highlight_settings,
        pipeline_settings=pipeline_settings,
        rng=rng,
    )

    assert result.cover_page_count == 2
    assert result.body_page_count == 1
    with pymupdf.open(stream=result.pdf_bytes, filetype="pdf") as doc:
        assert doc.page_count == 3
        assert doc[0].get_text().strip() == "Cover page one"
    assert result.total_words == 100
    assert abs(result.selected_words - 50) <= 10
    assert result.highlight.outcome is HighlightOutcome.HIGHLIGHTED


@pytest.mark.asyncio
async def test_cover_request_describes_the_body(
    pdf_source, cover_pdf, highlight_settings, pipeline_settings, rng
):
    provider = FakeCoverProvider(cover_pdf)

    await assemble_document(
        pdf_source,
        provider,
        title="Term Paper",
        highlight_percent=30,
        secondary_percent=7,
        highlight_settings=highlight_settings,
        pipeline_settings=pipeline_settings,
        rng=rng,
    )

    (request,) = provider.requests
    assert request.title == "Term Paper"
    assert request.file_name == "essay.pdf"
    assert request.word_count == 100
    assert request.highlight_percent == 30
    assert request.secondary_percent == 7
    assert request.page_count == 1
    assert request.file_size.endswith("KB")


@pytest.mark.asyncio
async def test_default_title_is_used(pdf_source, cover_pdf, pipeline_settings, rng):
    provider = FakeCoverProvider(cover_pdf)

    await assemble_document(
        pdf_source, provider, pipeline_settings=pipeline_settings, rng=rng
    )

    assert provider.requests[0].title == pipeline_settings.default_title


@pytest.mark.asyncio
async def test_zero_percent_leaves_body_unchanged(
    pdf_source, body_pdf, cover_pdf, pipeline_settings, rng
):
    result = await assemble_document(
        pdf_source,
        FakeCoverProvider(cover_pdf),
        highlight_percent=0,
        pipeline_settings=pipeline_settings,
        rng=rng,
    )

    assert result.highlight.outcome is HighlightOutcome.UNCHANGED
    assert result.highlight.pdf_bytes is body_pdf
    assert result.selection == []
    assert result.page_count == 3


@pytest.mark.asyncio
async def test_random_sentinel_is_resolved_once(
    pdf_source, cover_pdf, highlight_settings, pipeline_settings
):
    provider = FakeCoverProvider(cover_pdf)

    result = await assemble_document(
        pdf_source,
        provider,
        highlight_percent="*",
        highlight_settings=highlight_settings,
        pipeline_settings=pipeline_settings,
        rng=random.Random(99),
    )

    assert 20 <= result.highlight_percent < 50
    assert provider.requests[0].highlight_percent == result.highlight_percent
    assert abs(result.selected_words - result.highlight_percent) <= 10


@pytest.mark.asyncio
async def test_same_seed_same_selection(pdf_source, cover_pdf, pipeline_settings):
    async def run(seed):
        result = await assemble_document(
            pdf_source,
            FakeCoverProvider(cover_pdf),
            highlight_percent=40,
            pipeline_settings=pipeline_settings,
            rng=random.Random(seed),
        )
        return [f.text for f in result.selection]

    assert await run(5) == await run(5)


@pytest.mark.asyncio
async def test_cover_failure_propagates(pdf_source, pipeline_settings, rng):
    with pytest.raises(DependencyFailure) as info:
        await assemble_document(
            pdf_source,
            _failing_cover,
            highlight_percent=25,
            pipeline_settings=pipeline_settings,
            rng=rng,
        )
    assert info.value.status_code == 500


@pytest.mark.asyncio
async def test_output_name_uses_prefix_and_stem(cover_pdf, pipeline_settings, rng):
    source = SourceDocument(
        data=make_docx(["A short essay body."]),
        media_kind=MediaKind.DOCX,
        filename="my.final.essay.docx",
    )

    result = await assemble_document(
        source,
        FakeCoverProvider(cover_pdf),
        highlight_percent=100,
        pipeline_settings=pipeline_settings,
        rng=rng,
    )

    assert result.filename == "report_my.final.essay.pdf"
    assert result.total_words == 4


@pytest.mark.asyncio
async def test_unsupported_kind_raises_before_cover_call(cover_pdf, pipeline_settings):
    provider = FakeCoverProvider(cover_pdf)
    source = SourceDocument(data=b"plain", media_kind="text/plain", filename="notes.txt")

    with pytest.raises(UnsupportedFormat):
        await assemble_document(
            source, provider, pipeline_settings=pipeline_settings
        )
    assert provider.requests == []


@pytest.mark.asyncio
async def test_out_of_range_percentage_is_rejected(pdf_source, cover_pdf, pipeline_settings):
    with pytest.raises(ValueError):
        await assemble_document(
            pdf_source,
            FakeCoverProvider(cover_pdf),
            highlight_percent=140,
            pipeline_settings=pipeline_settings,
        )


@pytest.mark.asyncio
async def test_page_labels_keep_page_count(
    pdf_source, cover_pdf, highlight_settings, pipeline_settings, rng
):
    stamping = highlight_settings.model_copy(update={"stamp_page_numbers": True})

    result = await assemble_document(
        pdf_source,
        FakeCoverProvider(cover_pdf),
        highlight_percent=20,
        highlight_settings=stamping,
        pipeline_settings=pipeline_settings,
        rng=rng,
    )

    with pymupdf.open(stream=result.pdf_bytes, filetype="pdf") as doc:
        assert doc.page_count == 3
        assert "Page 3 of 3" in doc[2].get_text()
