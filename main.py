"""doc-assembler -- command-line entry point.

Usage:
    python main.py report.docx                      # No highlighting
    python main.py report.pdf --percent 40          # Highlight ~40% of words
    python main.py report.pdf --percent "*"         # Random share in [20, 50)
    python main.py report.pdf --title "Q3 Review" --secondary 12 -o out/

Startup sequence:
    1. Load configuration (needed for log_dir and output settings)
    2. Setup logging (must happen before any code that logs)
    3. Check the input file against the upload policy
    4. Run the assembly pipeline against the cover service
    5. Deliver the merged document to the output directory
"""

import argparse
import asyncio
import logging
import mimetypes
import random
import sys
from pathlib import Path

from doc_assembler import AssemblyError, SourceDocument, assemble_document
from doc_assembler.backend import PdfBackend
from doc_assembler.config import load_all_settings
from doc_assembler.cover import HttpCoverProvider
from doc_assembler.delivery import FileSink
from doc_assembler.logging import setup_logging
from doc_assembler.upload import validate_upload

logger = logging.getLogger(__name__)


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Prepend a generated cover document to a body document "
        "and highlight a share of the body's text.",
    )
    parser.add_argument("input", help="PDF, DOC or DOCX file")
    parser.add_argument(
        "--percent", "-p", default="0",
        help='Share of words to highlight, 0-100, or "*" for random (default: 0)',
    )
    parser.add_argument("--secondary", "-s", type=int, default=0,
                        help="Second percentage passed to the cover service")
    parser.add_argument("--title", "-t", help="Cover title")
    parser.add_argument("--output-dir", "-o", help="Output directory")
    parser.add_argument("--seed", type=int,
                        help="Seed for repeatable highlight selection")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show DEBUG output on the console")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    layout, highlight, cover, pipeline = load_all_settings()

    setup_logging(
        log_dir=pipeline.log_dir,
        log_level_console=logging.DEBUG if args.verbose else logging.INFO,
        max_bytes=pipeline.log_max_bytes,
        backup_count=pipeline.log_backup_count,
    )
    logger.info(
        "Config loaded -- cover: base_url=%s, path=%s, attempts=%s",
        cover.base_url,
        cover.cover_path,
        cover.max_attempts,
    )

    path = Path(args.input)
    if not path.is_file():
        logger.error("Input file not found: %s", path)
        return 1

    content_type, _ = mimetypes.guess_type(path.name)
    decision = validate_upload(path.name, content_type, path.stat().st_size, pipeline)
    if not decision.accepted:
        print(decision.message, file=sys.stderr)
        return 1

    source = SourceDocument(
        data=path.read_bytes(),
        media_kind=decision.media_kind,
        filename=path.name,
    )

    rng = random.Random(args.seed) if args.seed is not None else None

    try:
        async with HttpCoverProvider(cover) as cover_provider:
            result = await assemble_document(
                source,
                cover_provider,
                title=args.title,
                highlight_percent=args.percent,
                secondary_percent=args.secondary,
                backend=PdfBackend(layout=layout, highlight=highlight),
                highlight_settings=highlight,
                pipeline_settings=pipeline,
                rng=rng,
            )
    except (AssemblyError, ValueError) as exc:
        logger.error("Assembly failed: %s", exc)
        print(f"Failed to generate document: {exc}", file=sys.stderr)
        return 1

    sink = FileSink(args.output_dir or pipeline.output_dir)
    dest = sink.deliver(result.pdf_bytes, result.filename)

    print(f"Wrote {dest} ({result.page_count} pages, "
          f"{result.selected_words}/{result.total_words} words highlighted)")
    return 0


def main(argv=None) -> int:
    """Run the assembler for one input file."""
    return asyncio.run(_run(_parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
