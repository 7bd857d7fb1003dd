"""Verification assertions.

Every ``assert_*`` function returns None on pass and raises an
``AssertionFailure`` carrying expected and actual values on failure.
"""

from .color import assert_colors_visually_same, assert_element_corner_colors, sample_corner_colors
from .recognition import (
    assert_contains_labels,
    assert_contains_logos,
    assert_element_ocr_text,
    assert_ocr_text,
    detect_element_dominant_color,
    detect_element_text,
    extract_element_text,
)
from .screenshot import (
    assert_element_matches_reference,
    assert_matches_reference,
    assert_screenshots_match,
)

__all__ = [
    # Color
    "assert_colors_visually_same",
    "assert_element_corner_colors",
    "sample_corner_colors",
    # Recognition
    "assert_contains_labels",
    "assert_contains_logos",
    "assert_element_ocr_text",
    "assert_ocr_text",
    "detect_element_dominant_color",
    "detect_element_text",
    "extract_element_text",
    # Screenshots
    "assert_element_matches_reference",
    "assert_matches_reference",
    "assert_screenshots_match",
]
