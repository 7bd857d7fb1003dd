"""Color assertions.

Compares colors perceptually and samples the four corners of an element,
checking each corner's dominant color against an expected color.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pixelproof.logging import get_assertion_logger
from pixelproof.verification.capture import (
    BoundingBox,
    CaptureProvider,
    CornerRegion,
    corner_regions,
)
from pixelproof.verification.detection.analyzer import ImageAnalyzer
from pixelproof.verification.errors import AssertionFailure, CornerColorError
from pixelproof.vision.color import (
    VISUALLY_SAME_MAX_DISTANCE,
    Color,
    color_distance,
    color_to_hex,
)

logger = logging.getLogger(__name__)

ScreenshotFn = Callable[[CornerRegion], Awaitable[bytes]]


def assert_colors_visually_same(color_a: str, color_b: str) -> None:
    """Assert two hex colors are indistinguishable (distance <= 2).

    Raises:
        AssertionFailure: Reporting the distance when they differ.
        ColorFormatError: If either color is not a valid hex.
    """
    distance = color_distance(color_a, color_b)

    if distance > VISUALLY_SAME_MAX_DISTANCE:
        error = AssertionFailure(
            "colors_visually_same",
            expected=color_a,
            actual=color_b,
            message=f"Colors are visually different: distance {distance:.2f} > 2",
            details={"distance": f"{distance:.4f}"},
        )
        get_assertion_logger().log_failed("assert_colors_visually_same", error)
        raise error

    get_assertion_logger().log_passed("assert_colors_visually_same", distance=distance)


def _expected_hex(expected: Color | tuple[int, int, int]) -> str:
    if isinstance(expected, Color):
        return expected.to_hex()
    return color_to_hex(*expected)


async def sample_corner_colors(
    analyzer: ImageAnalyzer,
    screenshot_fn: ScreenshotFn,
    bounding_box: BoundingBox | Mapping[str, Any] | None,
    corner_size: float,
    expected: Color | tuple[int, int, int],
) -> None:
    """Assert all four corners of a box show the expected color.

    Corners are checked in the order top-left, top-right, bottom-left,
    bottom-right; the first failing corner stops the check. A corner passes
    when its dominant color is strictly closer than 2 to the expected color.

    Args:
        analyzer: Analyzer used for dominant color detection.
        screenshot_fn: Returns a PNG screenshot of a page region.
        bounding_box: Element box; missing values count as 0.
        corner_size: Side length of each corner square in pixels.
        expected: Expected color as Color or ``(red, green, blue)``.

    Raises:
        CornerColorError: Naming the corner that failed.
    """
    if not isinstance(bounding_box, BoundingBox):
        bounding_box = BoundingBox.from_mapping(bounding_box)

    expected_hex = _expected_hex(expected)

    for region in corner_regions(bounding_box, corner_size):
        screenshot = await screenshot_fn(region)
        detected = await analyzer.dominant_color(screenshot)

        if detected is None:
            error = CornerColorError(region.name, expected_hex, None)
            get_assertion_logger().log_failed("sample_corner_colors", error, corner=region.name)
            raise error

        actual_hex = detected.to_hex()
        distance = color_distance(expected_hex, actual_hex)
        logger.debug(f"{region.name} corner: {actual_hex} (distance {distance:.2f})")

        if not distance < VISUALLY_SAME_MAX_DISTANCE:
            error = CornerColorError(region.name, expected_hex, actual_hex, distance)
            get_assertion_logger().log_failed("sample_corner_colors", error, corner=region.name)
            raise error

    get_assertion_logger().log_passed("sample_corner_colors", expected=expected_hex)


async def assert_element_corner_colors(
    analyzer: ImageAnalyzer,
    capture: CaptureProvider,
    element: Any,
    corner_size: float,
    expected: Color | tuple[int, int, int],
) -> None:
    """Wait for an element and check the color of its four corners."""
    await capture.wait_ready(element)
    box = BoundingBox.from_mapping(await capture.bounding_box(element))

    async def screenshot_corner(region: CornerRegion) -> bytes:
        return await capture.screenshot(clip=region)

    await sample_corner_colors(analyzer, screenshot_corner, box, corner_size, expected)


__all__ = [
    "assert_colors_visually_same",
    "assert_element_corner_colors",
    "sample_corner_colors",
]
