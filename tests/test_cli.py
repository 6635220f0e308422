"""Tests for the command-line entry point."""

from __future__ import annotations

import httpx
import pymupdf
import pytest

import main as cli
from doc_assembler.cover import HttpCoverProvider

from conftest import one_word_per_line_pdf


class FakeCoverService:
    """In-memory stand-in for the cover HTTP service."""

    def __init__(self, cover_pdf: bytes) -> None:
        self.requests: list[httpx.Request] = []
        self.handler = lambda request: httpx.Response(200, content=cover_pdf)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def cover_service(monkeypatch, tmp_path, cover_pdf, restore_root_logger):
    service = FakeCoverService(cover_pdf)

    class InMemoryCoverProvider(HttpCoverProvider):
        def _new_client(self) -> httpx.AsyncClient:
            return httpx.AsyncClient(
                transport=httpx.MockTransport(service), follow_redirects=True
            )

    monkeypatch.setattr(cli, "HttpCoverProvider", InMemoryCoverProvider)
    monkeypatch.setenv("COVER_BASE_URL", "http://cover.test")
    monkeypatch.setenv("PIPELINE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("PIPELINE_OUTPUT_DIR", str(tmp_path / "out"))
    return service


@pytest.fixture
def essay(tmp_path):
    path = tmp_path / "essay.pdf"
    path.write_bytes(one_word_per_line_pdf(100))
    return path


def test_successful_run_writes_merged_document(cover_service, essay, tmp_path, capsys):
    out_dir = tmp_path / "delivered"

    code = cli.main([str(essay), "--percent", "50", "--seed", "3", "-o", str(out_dir)])

    assert code == 0
    written = out_dir / "report_essay.pdf"
    with pymupdf.open(written) as doc:
        assert doc.page_count == 3
    assert "Wrote" in capsys.readouterr().out
    assert len(cover_service.requests) == 1
    assert cover_service.requests[0].url.params["highlightPercent"] == "50"


def test_default_output_dir_comes_from_settings(cover_service, essay, tmp_path):
    assert cli.main([str(essay)]) == 0
    assert (tmp_path / "out" / "report_essay.pdf").is_file()


def test_rejected_upload_exits_nonzero(cover_service, tmp_path, capsys):
    notes = tmp_path / "notes.txt"
    notes.write_text("plain text is not accepted")

    assert cli.main([str(notes)]) == 1
    assert "Please upload a PDF, DOC, or DOCX file." in capsys.readouterr().err
    assert cover_service.requests == []


def test_missing_input_exits_nonzero(cover_service, tmp_path):
    assert cli.main([str(tmp_path / "absent.pdf")]) == 1
    assert cover_service.requests == []


def test_cover_service_error_exits_nonzero(cover_service, essay, tmp_path, capsys):
    cover_service.handler = lambda request: httpx.Response(
        500, json={"message": "template missing"}
    )

    assert cli.main([str(essay), "-p", "30"]) == 1
    assert "template missing" in capsys.readouterr().err
    assert not (tmp_path / "out" / "report_essay.pdf").exists()


def test_cover_redirect_loop_exits_nonzero(cover_service, essay, capsys):
    cover_service.handler = lambda request: httpx.Response(
        302, headers={"Location": str(request.url)}
    )

    assert cli.main([str(essay), "-p", "30"]) == 1
    assert "Failed to generate document" in capsys.readouterr().err


def test_out_of_range_percent_exits_nonzero(cover_service, essay):
    assert cli.main([str(essay), "--percent", "150"]) == 1
    assert cover_service.requests == []
