"""Configuration management for pixelproof using pydantic-settings.

Settings are read from environment variables prefixed with ``PIXELPROOF_``
and from an optional ``.env`` file. They only provide defaults: every
comparison and recognition call also accepts explicit arguments.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class PixelProofSettings(BaseSettings):
    """Main configuration settings for pixelproof."""

    # Core settings
    debug_mode: bool = Field(False, description="Enable debug logging")
    log_level: str = Field("INFO", description="Log level when not in debug mode")
    log_path: Path | None = Field(None, description="Directory for log files (None = console only)")
    structured_logging: bool = Field(False, description="Render logs as JSON")

    # Screenshot comparison
    reference_dir: Path = Field(
        Path("reference-screenshots"), description="Directory holding reference screenshots"
    )
    diff_artifact_path: Path = Field(
        Path("diff.png"), description="Where the diff image of a failed comparison is written"
    )
    pixel_threshold: float = Field(
        0.1, ge=0.0, le=1.0, description="Default per-pixel color tolerance"
    )
    element_pixel_threshold: float = Field(
        0.2, ge=0.0, le=1.0, description="Default per-pixel tolerance for element screenshots"
    )

    # Recognition
    ocr_language: str = Field("eng", description="Tesseract language code for local OCR")
    tesseract_cmd: str | None = Field(None, description="Path to the tesseract executable")
    recognition_timeout: float | None = Field(
        None, gt=0, description="Per-request timeout in seconds for the vision service"
    )

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_prefix = "PIXELPROOF_"
        case_sensitive = False
        extra = "ignore"


_settings: PixelProofSettings | None = None


def get_settings() -> PixelProofSettings:
    """Get the singleton settings instance.

    Returns:
        PixelProofSettings instance
    """
    global _settings

    if _settings is None:
        _settings = PixelProofSettings()

    return _settings


def reset_settings() -> None:
    """Reset settings (mainly for testing)."""
    global _settings
    _settings = None
