"""Configuration package -- typed, validated settings from YAML + .env."""

from .settings import (
    CoverServiceSettings,
    HighlightSettings,
    LayoutSettings,
    PipelineSettings,
)

__all__ = [
    "CoverServiceSettings",
    "HighlightSettings",
    "LayoutSettings",
    "PipelineSettings",
    "load_all_settings",
]


def load_all_settings() -> tuple[
    LayoutSettings, HighlightSettings, CoverServiceSettings, PipelineSettings
]:
    """Load and return all configuration objects.

    Returns a tuple of (LayoutSettings, HighlightSettings,
    CoverServiceSettings, PipelineSettings), each populated from its own
    YAML file with environment variable overrides.
    """
    return (
        LayoutSettings(),
        HighlightSettings(),
        CoverServiceSettings(),
        PipelineSettings(),
    )
