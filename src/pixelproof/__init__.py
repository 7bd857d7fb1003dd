"""pixelproof - visual and content verification for end-to-end browser tests.

Pixel-level screenshot comparison, label/logo/text recognition through
Google Cloud Vision or local Tesseract OCR, and perceptual color comparison,
each exposed as pass-or-raise assertions.
"""

__version__ = "0.1.0"

from pixelproof.verification import (
    AssertionFailure,
    GoogleVisionClient,
    ImageAnalyzer,
    PlaywrightCapture,
    TesseractEngine,
    VisionError,
    assert_colors_visually_same,
    assert_contains_labels,
    assert_contains_logos,
    assert_element_corner_colors,
    assert_element_matches_reference,
    assert_matches_reference,
    assert_ocr_text,
    assert_screenshots_match,
    detect_text,
    sample_corner_colors,
)
from pixelproof.vision import (
    Color,
    ReferenceStore,
    are_visually_same,
    color_distance,
    color_to_hex,
    compare_images,
    diff_pixel_counts,
    hex_to_color,
    load_reference_screenshot,
)

__all__ = [
    "__version__",
    # Errors
    "AssertionFailure",
    "VisionError",
    # Color model
    "Color",
    "are_visually_same",
    "color_distance",
    "color_to_hex",
    "hex_to_color",
    # Pixel comparison
    "ReferenceStore",
    "compare_images",
    "diff_pixel_counts",
    "load_reference_screenshot",
    # Recognition
    "GoogleVisionClient",
    "ImageAnalyzer",
    "PlaywrightCapture",
    "TesseractEngine",
    "detect_text",
    # Assertions
    "assert_colors_visually_same",
    "assert_contains_labels",
    "assert_contains_logos",
    "assert_element_corner_colors",
    "assert_element_matches_reference",
    "assert_matches_reference",
    "assert_ocr_text",
    "assert_screenshots_match",
    "sample_corner_colors",
]
