"""Configuration module for pixelproof."""

from .settings import PixelProofSettings, get_settings, reset_settings

__all__ = [
    "PixelProofSettings",
    "get_settings",
    "reset_settings",
]
