"""Screenshot comparison assertions for visual regression testing.

Provides pass-or-raise checks on top of the pixel matcher, against another
screenshot or against a stored reference screenshot.
"""

import logging
from typing import Any

from pixelproof.config import get_settings
from pixelproof.logging import get_assertion_logger
from pixelproof.verification.capture import CaptureProvider, capture_element
from pixelproof.verification.errors import ScreenshotComparisonError
from pixelproof.vision.comparison import (
    DecodedImage,
    compare_images_with_diff,
    diff_pixel_counts,
    read_png_size,
)
from pixelproof.vision.reference import ReferenceStore

logger = logging.getLogger(__name__)


def assert_screenshots_match(
    image_a: bytes | DecodedImage,
    image_b: bytes | DecodedImage,
    max_diff_pixels: int = 0,
    ignore_size_difference: bool = False,
    threshold: float | None = None,
) -> None:
    """Assert two screenshots differ in at most ``max_diff_pixels`` pixels.

    Args:
        image_a: First PNG screenshot.
        image_b: Second PNG screenshot.
        max_diff_pixels: Largest number of differing pixels that still passes.
        ignore_size_difference: Pass without comparing when sizes differ.
        threshold: Per-pixel color tolerance (default from settings).

    Raises:
        ScreenshotComparisonError: If too many pixels differ.
        ImageDimensionMismatchError: If sizes differ and are not ignored.
    """
    if threshold is None:
        threshold = get_settings().pixel_threshold

    if ignore_size_difference:
        size_a = read_png_size(image_a, "image_a")
        size_b = read_png_size(image_b, "image_b")
        if size_a != size_b:
            get_assertion_logger().log_passed(
                "assert_screenshots_match", size_a=size_a, size_b=size_b, size_ignored=True
            )
            return

    diff_pixels = diff_pixel_counts(image_a, image_b, threshold=threshold)

    if diff_pixels > max_diff_pixels:
        error = ScreenshotComparisonError(diff_pixels, max_diff_pixels, threshold)
        get_assertion_logger().log_failed("assert_screenshots_match", error)
        raise error

    get_assertion_logger().log_passed("assert_screenshots_match", diff_pixels=diff_pixels)


def assert_matches_reference(
    image: bytes | DecodedImage,
    reference_name: str,
    threshold: float | None = None,
    max_diff_pixels: int = 0,
    store: ReferenceStore | None = None,
) -> None:
    """Assert a screenshot matches a stored reference screenshot.

    A diff image is written when any pixel differs.

    Args:
        image: Freshly captured PNG screenshot.
        reference_name: File name in the reference directory.
        threshold: Per-pixel color tolerance (default from settings).
        max_diff_pixels: Largest number of differing pixels that still passes.
        store: Reference store (default: configured directories).

    Raises:
        ReferenceNotFoundError: If the reference does not exist.
        ScreenshotComparisonError: If too many pixels differ.
    """
    if threshold is None:
        threshold = get_settings().pixel_threshold
    if store is None:
        store = ReferenceStore()

    reference = store.load(reference_name)
    diff_pixels, diff_path = compare_images_with_diff(reference, image, threshold, store)

    if diff_pixels > max_diff_pixels:
        error = ScreenshotComparisonError(
            diff_pixels,
            max_diff_pixels,
            threshold,
            reference=reference_name,
            diff_path=str(diff_path) if diff_path else None,
        )
        get_assertion_logger().log_failed(
            "assert_matches_reference", error, reference=reference_name
        )
        raise error

    get_assertion_logger().log_passed(
        "assert_matches_reference", reference=reference_name, diff_pixels=diff_pixels
    )


async def assert_element_matches_reference(
    capture: CaptureProvider,
    element: Any,
    reference_name: str,
    threshold: float | None = None,
    max_diff_pixels: int = 0,
    store: ReferenceStore | None = None,
) -> None:
    """Capture an element and assert it matches a reference screenshot.

    Element screenshots use ``element_pixel_threshold`` (0.2) by default.
    """
    if threshold is None:
        threshold = get_settings().element_pixel_threshold

    screenshot = await capture_element(capture, element)
    logger.debug(f"Comparing element screenshot with reference {reference_name}")
    assert_matches_reference(screenshot, reference_name, threshold, max_diff_pixels, store)


__all__ = [
    "assert_element_matches_reference",
    "assert_matches_reference",
    "assert_screenshots_match",
]
