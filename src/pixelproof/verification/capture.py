"""Capture collaborator for element-level verification.

Screenshots are taken by the surrounding automation framework. This module
defines the small async interface pixelproof needs from it, the bounding box
and corner geometry used for corner color sampling, and an adapter for
Playwright's async API.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page

logger = logging.getLogger(__name__)

CORNER_NAMES = ("top-left", "top-right", "bottom-left", "bottom-right")


class CaptureProvider(Protocol):
    """Interface of the screenshot-capable automation framework."""

    async def wait_ready(self, element: Any) -> None:
        """Wait until the element is attached and visible."""
        ...

    async def bounding_box(self, element: Any) -> Mapping[str, float] | None:
        """Return ``{x, y, width, height}`` of the element, or None."""
        ...

    async def screenshot(
        self, element: Any | None = None, clip: "Region | None" = None
    ) -> bytes:
        """Return PNG bytes of the element, or of a viewport clip."""
        ...


@dataclass(frozen=True)
class Region:
    """Rectangle in page coordinates."""

    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary representation."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class BoundingBox(Region):
    """Element bounding box."""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "BoundingBox":
        """Create from a bounding box mapping.

        Missing boxes or values default to 0, which yields degenerate corners
        rather than an error.
        """
        data = data or {}
        return cls(
            x=data.get("x") or 0,
            y=data.get("y") or 0,
            width=data.get("width") or 0,
            height=data.get("height") or 0,
        )


@dataclass(frozen=True)
class CornerRegion(Region):
    """A square sampled at one corner of a bounding box."""

    name: str = ""


def corner_regions(box: BoundingBox, corner_size: float) -> list[CornerRegion]:
    """Compute the four corner squares of a bounding box.

    Args:
        box: Element bounding box.
        corner_size: Side length of each corner square in pixels.

    Returns:
        Regions in order top-left, top-right, bottom-left, bottom-right.
    """
    right = box.x + box.width - corner_size
    bottom = box.y + box.height - corner_size
    origins = [(box.x, box.y), (right, box.y), (box.x, bottom), (right, bottom)]

    return [
        CornerRegion(x=x, y=y, width=corner_size, height=corner_size, name=name)
        for name, (x, y) in zip(CORNER_NAMES, origins)
    ]


async def capture_element(capture: CaptureProvider, element: Any) -> bytes:
    """Wait for an element and return its screenshot."""
    await capture.wait_ready(element)
    screenshot = await capture.screenshot(element)
    logger.debug(f"Captured element screenshot ({len(screenshot)} bytes)")
    return screenshot


class PlaywrightCapture:
    """CaptureProvider backed by Playwright's async API.

    The page is driven by the test; this adapter only reads from it.

    Usage:
        capture = PlaywrightCapture(page)
        png = await capture_element(capture, page.locator("#logo"))
    """

    def __init__(self, page: "Page") -> None:
        """Initialize adapter.

        Args:
            page: Playwright page used for clipped viewport screenshots.
        """
        self._page = page

    async def wait_ready(self, element: "Locator") -> None:
        """Wait for the locator to become visible."""
        await element.wait_for()

    async def bounding_box(self, element: "Locator") -> Mapping[str, float] | None:
        """Return the locator's bounding box."""
        return await element.bounding_box()

    async def screenshot(
        self, element: "Locator | None" = None, clip: Region | None = None
    ) -> bytes:
        """Screenshot a clip of the page, an element, or the viewport."""
        if clip is not None:
            return await self._page.screenshot(clip=clip.to_dict())
        if element is not None:
            return await element.screenshot()
        return await self._page.screenshot()


__all__ = [
    "CORNER_NAMES",
    "BoundingBox",
    "CaptureProvider",
    "CornerRegion",
    "PlaywrightCapture",
    "Region",
    "capture_element",
    "corner_regions",
]
