"""Verification module.

Turns screenshots and vision service results into pass-or-raise verdicts for
end-to-end browser tests.

Usage:
    from pixelproof.verification import (
        GoogleVisionClient,
        ImageAnalyzer,
        PlaywrightCapture,
        assert_contains_labels,
        assert_element_corner_colors,
    )

    analyzer = ImageAnalyzer(GoogleVisionClient())
    capture = PlaywrightCapture(page)

    await assert_contains_labels(analyzer, png, ["Cat"], only_highest_probability=True)
    await assert_element_corner_colors(analyzer, capture, page.locator("canvas"), 10, (255, 0, 0))
"""

from pixelproof.verification.errors import (
    AssertionFailure,
    ColorFormatError,
    CornerColorError,
    ImageDecodeError,
    ImageDimensionMismatchError,
    RecognitionError,
    ReferenceNotFoundError,
    ScreenshotComparisonError,
    VisionError,
)
from pixelproof.verification.assertions import (
    assert_colors_visually_same,
    assert_contains_labels,
    assert_contains_logos,
    assert_element_corner_colors,
    assert_element_matches_reference,
    assert_element_ocr_text,
    assert_matches_reference,
    assert_ocr_text,
    assert_screenshots_match,
    detect_element_dominant_color,
    detect_element_text,
    extract_element_text,
    sample_corner_colors,
)
from pixelproof.verification.capture import (
    BoundingBox,
    CaptureProvider,
    CornerRegion,
    PlaywrightCapture,
    Region,
    capture_element,
    corner_regions,
)
from pixelproof.verification.detection import (
    DetectionKind,
    GoogleVisionClient,
    ImageAnalyzer,
    ImageLabel,
    LocalOCREngine,
    RecognitionClient,
    TesseractEngine,
    TextExtraction,
    detect_text,
    ocr_session,
)

__all__ = [
    # Errors
    "AssertionFailure",
    "ColorFormatError",
    "CornerColorError",
    "ImageDecodeError",
    "ImageDimensionMismatchError",
    "RecognitionError",
    "ReferenceNotFoundError",
    "ScreenshotComparisonError",
    "VisionError",
    # Capture
    "BoundingBox",
    "CaptureProvider",
    "CornerRegion",
    "PlaywrightCapture",
    "Region",
    "capture_element",
    "corner_regions",
    # Detection
    "DetectionKind",
    "GoogleVisionClient",
    "ImageAnalyzer",
    "ImageLabel",
    "LocalOCREngine",
    "RecognitionClient",
    "TesseractEngine",
    "TextExtraction",
    "detect_text",
    "ocr_session",
    # Assertions
    "assert_colors_visually_same",
    "assert_contains_labels",
    "assert_contains_logos",
    "assert_element_corner_colors",
    "assert_element_matches_reference",
    "assert_element_ocr_text",
    "assert_matches_reference",
    "assert_ocr_text",
    "assert_screenshots_match",
    "detect_element_dominant_color",
    "detect_element_text",
    "extract_element_text",
    "sample_corner_colors",
]
