"""Label, logo and text assertions.

Checks the normalized results of the vision service against expected values,
plus element-level helpers that capture an element before analyzing it.
"""

import logging
import warnings
from collections.abc import Sequence
from typing import Any

from pixelproof.logging import get_assertion_logger
from pixelproof.verification.capture import CaptureProvider, capture_element
from pixelproof.verification.detection.analyzer import ImageAnalyzer, TextExtraction
from pixelproof.verification.detection.ocr import LocalOCREngine, detect_text
from pixelproof.verification.errors import AssertionFailure

logger = logging.getLogger(__name__)


def _fail(assertion: str, error: AssertionFailure) -> AssertionFailure:
    get_assertion_logger().log_failed(assertion, error)
    return error


async def assert_contains_labels(
    analyzer: ImageAnalyzer,
    image: bytes,
    expected_labels: Sequence[str],
    only_highest_probability: bool = False,
) -> None:
    """Assert the image is labelled with the expected descriptions.

    Args:
        analyzer: Analyzer used for label detection.
        image: PNG bytes.
        expected_labels: Expected label descriptions.
        only_highest_probability: Only check that the top-ranked label is one
            of ``expected_labels``. Otherwise every expected label must be
            present; extra labels are fine.

    Raises:
        AssertionFailure: If the labels do not match.
    """
    labels = await analyzer.extract_labels(image)
    descriptions = [label.description for label in labels]

    if only_highest_probability:
        top = labels[0].description if labels else None
        if top not in expected_labels:
            raise _fail(
                "assert_contains_labels",
                AssertionFailure(
                    "contains_labels",
                    expected=f"one of {list(expected_labels)}",
                    actual=top,
                    message=(
                        "No labels detected in the image"
                        if top is None
                        else f"Highest probability label {top!r} is not expected"
                    ),
                    details={"detected": descriptions},
                ),
            )
    else:
        missing = [label for label in expected_labels if label not in descriptions]
        if missing:
            raise _fail(
                "assert_contains_labels",
                AssertionFailure(
                    "contains_labels",
                    expected=list(expected_labels),
                    actual=descriptions,
                    message=f"Labels not detected in the image: {missing}",
                    details={"missing": missing},
                ),
            )

    get_assertion_logger().log_passed("assert_contains_labels", labels=descriptions)


async def assert_contains_logos(
    analyzer: ImageAnalyzer,
    image: bytes,
    expected_logos: Sequence[str],
) -> None:
    """Assert every expected logo is detected in the image, in any order.

    Raises:
        AssertionFailure: Naming the first missing logo.
    """
    logos = await analyzer.extract_logos(image)
    descriptions = [logo.description for logo in logos]

    for expected_logo in expected_logos:
        if expected_logo not in descriptions:
            raise _fail(
                "assert_contains_logos",
                AssertionFailure(
                    "contains_logos",
                    expected=expected_logo,
                    actual=descriptions,
                    message=f"Logo not detected in the image: {expected_logo!r}",
                ),
            )

    get_assertion_logger().log_passed("assert_contains_logos", logos=descriptions)


async def assert_ocr_text(
    analyzer: ImageAnalyzer,
    image: bytes,
    text: str,
    no_text_expected: bool = False,
) -> None:
    """Assert the image text contains ``text`` (case-insensitive).

    Deprecated: use ``ImageAnalyzer.extract_text`` and check its lines.

    Args:
        analyzer: Analyzer used for document text detection.
        image: PNG bytes.
        text: Expected substring.
        no_text_expected: Instead assert that no text at all is detected.

    Raises:
        AssertionFailure: If the detected text does not satisfy the check.
    """
    warnings.warn(
        "assert_ocr_text is deprecated; use ImageAnalyzer.extract_text and check the lines",
        DeprecationWarning,
        stacklevel=2,
    )

    detected = (await analyzer.extract_text(image)).text

    if no_text_expected:
        if detected:
            raise _fail(
                "assert_ocr_text",
                AssertionFailure(
                    "ocr_text",
                    expected="no text",
                    actual=detected,
                    message=(
                        "Text detected in the image but no_text_expected was set. "
                        f"Annotations: {detected}"
                    ),
                ),
            )
    elif not detected:
        raise _fail(
            "assert_ocr_text",
            AssertionFailure(
                "ocr_text", expected=text, actual="", message="No text detected in the image"
            ),
        )
    elif text.lower() not in detected:
        raise _fail(
            "assert_ocr_text",
            AssertionFailure(
                "ocr_text",
                expected=text.lower(),
                actual=detected,
                message=f"Detected text does not contain {text!r}",
            ),
        )

    get_assertion_logger().log_passed("assert_ocr_text", no_text_expected=no_text_expected)


async def extract_element_text(
    analyzer: ImageAnalyzer, capture: CaptureProvider, element: Any
) -> TextExtraction:
    """Capture an element and extract its lower-cased text and lines."""
    return await analyzer.extract_text(await capture_element(capture, element))


async def assert_element_ocr_text(
    analyzer: ImageAnalyzer,
    capture: CaptureProvider,
    element: Any,
    text: str,
    no_text_expected: bool = False,
) -> None:
    """Capture an element and run the deprecated ``assert_ocr_text`` on it."""
    warnings.warn(
        "assert_element_ocr_text is deprecated; use extract_element_text and check the lines",
        DeprecationWarning,
        stacklevel=2,
    )
    screenshot = await capture_element(capture, element)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DeprecationWarning)
        await assert_ocr_text(analyzer, screenshot, text, no_text_expected)


async def detect_element_dominant_color(
    analyzer: ImageAnalyzer, capture: CaptureProvider, element: Any
) -> str:
    """Capture an element and return its dominant color as '#rrggbb'."""
    return await analyzer.detect_dominant_color(await capture_element(capture, element))


async def detect_element_text(
    capture: CaptureProvider,
    element: Any,
    engine: LocalOCREngine | None = None,
    language: str | None = None,
) -> str:
    """Capture an element and recognize its text with local OCR."""
    screenshot = await capture_element(capture, element)
    text = await detect_text(screenshot, engine=engine, language=language)
    logger.debug(f"Local OCR recognized {len(text)} characters")
    return text


__all__ = [
    "assert_contains_labels",
    "assert_contains_logos",
    "assert_element_ocr_text",
    "assert_ocr_text",
    "detect_element_dominant_color",
    "detect_element_text",
    "extract_element_text",
]
