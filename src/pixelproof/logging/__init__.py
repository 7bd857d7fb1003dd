"""Logging module for pixelproof."""

from .logger import (
    AssertionLogger,
    get_assertion_logger,
    get_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "AssertionLogger",
    "get_assertion_logger",
]
