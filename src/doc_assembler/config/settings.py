"""Pydantic settings models for document assembly configuration.

Four settings classes load from separate YAML config files with environment
variable override support. Source priority (highest to lowest):

    1. Environment variables (with prefix, e.g., LAYOUT_FONT_SIZE)
    2. .env file (e.g., COVER_BASE_URL for a private cover service)
    3. YAML config file (e.g., config/layout.yaml)
    4. Default values defined here

Config paths are resolved relative to PROJECT_ROOT so the application works
regardless of the current working directory.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# Resolve project root: settings.py -> config/ -> doc_assembler/ -> src/ -> repo root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

_CONFIG_DIR = PROJECT_ROOT / "config"
_ENV_FILE = PROJECT_ROOT / ".env"


class _YamlSettings(BaseSettings):
    """Shared source ordering: init > env > .env > YAML > defaults."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


class LayoutSettings(_YamlSettings):
    """Reflow geometry used when converting word-processor text to PDF."""

    page_width: float = 595.0
    page_height: float = 842.0
    margin: float = 50.0
    font_name: str = "cour"  # Base-14 Courier, monospace
    font_size: float = 11.0
    line_height: float = 14.0

    # Extraction backend tried first; the other one is the fallback
    extraction_method: str = "pymupdf"  # "pymupdf" or "pdfplumber"

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "layout.yaml"),
        env_prefix="LAYOUT_",
    )

    @property
    def max_line_width(self) -> float:
        """Usable text width between the left and right margins."""
        return self.page_width - 2 * self.margin


class HighlightSettings(_YamlSettings):
    """Fragment sampling and highlight rectangle appearance."""

    chunk_min_size: int = 3
    chunk_max_size: int = 10
    random_percent_min: int = 20
    random_percent_max: int = 50  # exclusive

    color: tuple[float, float, float] = (1.0, 1.0, 0.0)
    opacity: float = Field(default=0.4, ge=0.0, le=1.0)
    padding: float = 1.0

    # Optional "Page N of M" footer on body pages
    stamp_page_numbers: bool = False
    page_label: str = "Page {page} of {total}"
    page_label_font_size: float = 7.0

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "highlight.yaml"),
        env_prefix="HIGHLIGHT_",
    )


class CoverServiceSettings(_YamlSettings):
    """External cover-document service: endpoint, timeout, retry policy.

    ``max_attempts`` defaults to 1 -- a failed cover call is fatal and the
    caller decides whether to resubmit.  Raise it only for flaky networks;
    retries apply to transport errors, never to HTTP error statuses.
    """

    base_url: str = "http://localhost:3000"
    cover_path: str = "/api/cover-pdf"
    timeout_seconds: float = 30.0
    max_attempts: int = 1
    user_agent: str = "doc-assembler/1.0"

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "cover.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="COVER_",
    )


class PipelineSettings(_YamlSettings):
    """Pipeline operations: upload policy, output, logging."""

    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    output_dir: str = "output"
    output_prefix: str = "report"
    default_title: str = "Document Report"
    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10MB
    log_backup_count: int = 5

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "pipeline.yaml"),
        env_prefix="PIPELINE_",
    )
