"""Process-wide logging for the assembler.

Every submission's stages log through ``logging.getLogger(__name__)``; this
module decides where those records go.  Structured records land in
``<log_dir>/assembler.log`` as one JSON object per line, so a submission can
be followed stage by stage with ``jq``.  The console gets short text lines
for whoever runs the CLI.
"""

import logging
import logging.handlers
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

LOG_FILENAME = "assembler.log"

# Third-party loggers that flood DEBUG output while parsing PDFs or calling
# the cover service
NOISY_LOGGERS = ("pdfminer", "httpx", "httpcore")


def _json_file_handler(
    log_dir: Path, level: int, max_bytes: int, backup_count: int
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=str(log_dir / LOG_FILENAME),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "component",
            },
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-7s %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    return handler


def setup_logging(
    log_dir: str = "logs",
    log_level_file: int = logging.DEBUG,
    log_level_console: int = logging.INFO,
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> None:
    """Route assembler logs to a rotating JSON file and the console.

    Safe to call again (the CLI and tests both do): the root logger's
    handlers are replaced, not appended to.

    Args:
        log_dir: Created if missing; holds ``assembler.log`` and its backups.
        log_level_file: Threshold for the JSON file.
        log_level_console: Threshold for console output.
        max_bytes: Size at which ``assembler.log`` rotates.
        backup_count: Rotated files kept.
    """
    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.addHandler(
        _json_file_handler(path, log_level_file, max_bytes, backup_count)
    )
    root_logger.addHandler(_console_handler(log_level_console))
