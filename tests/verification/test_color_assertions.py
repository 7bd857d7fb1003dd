"""Tests for color assertions and corner sampling."""

import pytest

from helpers import FakeCapture, color_response
from pixelproof.verification.assertions.color import (
    assert_colors_visually_same,
    assert_element_corner_colors,
    sample_corner_colors,
)
from pixelproof.verification.capture import BoundingBox, CornerRegion
from pixelproof.verification.detection.analyzer import ImageAnalyzer
from pixelproof.verification.errors import AssertionFailure, ColorFormatError, CornerColorError
from pixelproof.vision.color import Color

RED = (255, 0, 0)
GREEN = (0, 255, 0)


class CornerClient:
    """Recognition client answering image properties by screenshot content."""

    def __init__(self, colors: dict[bytes, tuple | None]):
        self.colors = colors
        self.requested: list[bytes] = []

    def detect(self, kind, image: bytes):
        self.requested.append(image)
        color = self.colors[image]
        return color_response(color) if color is not None else color_response()


def corner_screenshots(**overrides) -> dict[str, bytes]:
    names = ["top-left", "top-right", "bottom-left", "bottom-right"]
    return {name: overrides.get(name.replace("-", "_"), name.encode()) for name in names}


class TestAssertColorsVisuallySame:
    """Tests for assert_colors_visually_same."""

    def test_same_colors_pass(self) -> None:
        assert_colors_visually_same("#fff", "#ffffff")
        assert_colors_visually_same("#ff0000", "#fe0101")

    def test_different_colors_fail(self) -> None:
        with pytest.raises(AssertionFailure) as exc_info:
            assert_colors_visually_same("#ff0000", "#0000ff")

        assert exc_info.value.expected == "#ff0000"
        assert exc_info.value.actual == "#0000ff"
        assert "visually different" in exc_info.value.message

    def test_invalid_color_raises_format_error(self) -> None:
        with pytest.raises(ColorFormatError):
            assert_colors_visually_same("#ff0000", "red")


class TestSampleCornerColors:
    """Tests for sample_corner_colors."""

    @pytest.fixture
    def box(self) -> BoundingBox:
        return BoundingBox(x=50, y=40, width=200, height=100)

    @staticmethod
    def screenshot_fn(taken: list[CornerRegion]):
        async def screenshot(region: CornerRegion) -> bytes:
            taken.append(region)
            return region.name.encode()

        return screenshot

    @pytest.mark.asyncio
    async def test_all_red_corners_pass(self, box: BoundingBox) -> None:
        client = CornerClient({name.encode(): RED for name in corner_screenshots()})
        taken: list[CornerRegion] = []

        await sample_corner_colors(ImageAnalyzer(client), self.screenshot_fn(taken), box, 10, RED)

        assert [region.name for region in taken] == [
            "top-left",
            "top-right",
            "bottom-left",
            "bottom-right",
        ]
        assert (taken[3].x, taken[3].y) == (240, 130)

    @pytest.mark.asyncio
    async def test_near_color_passes(self, box: BoundingBox) -> None:
        client = CornerClient({name.encode(): (254, 1, 1) for name in corner_screenshots()})

        await sample_corner_colors(ImageAnalyzer(client), self.screenshot_fn([]), box, 10, RED)

    @pytest.mark.asyncio
    async def test_accepts_color_and_mapping_box(self) -> None:
        client = CornerClient({name.encode(): RED for name in corner_screenshots()})
        box = {"x": 0, "y": 0, "width": 20, "height": 20}

        await sample_corner_colors(
            ImageAnalyzer(client), self.screenshot_fn([]), box, 10, Color(255, 0, 0)
        )

    @pytest.mark.asyncio
    async def test_failing_corner_is_named_and_stops_sampling(self, box: BoundingBox) -> None:
        colors = {name.encode(): RED for name in corner_screenshots()}
        colors[b"top-right"] = GREEN
        client = CornerClient(colors)
        taken: list[CornerRegion] = []

        with pytest.raises(CornerColorError) as exc_info:
            await sample_corner_colors(
                ImageAnalyzer(client), self.screenshot_fn(taken), box, 10, RED
            )

        error = exc_info.value
        assert error.corner == "top-right"
        assert "top-right" in str(error)
        assert error.expected == "#ff0000"
        assert error.actual == "#00ff00"
        assert [region.name for region in taken] == ["top-left", "top-right"]

    @pytest.mark.asyncio
    async def test_missing_dominant_color_fails(self, box: BoundingBox) -> None:
        colors = {name.encode(): RED for name in corner_screenshots()}
        colors[b"bottom-left"] = None

        with pytest.raises(CornerColorError, match="No dominant color detected for bottom-left"):
            await sample_corner_colors(
                ImageAnalyzer(CornerClient(colors)), self.screenshot_fn([]), box, 10, RED
            )


class TestAssertElementCornerColors:
    """Tests for assert_element_corner_colors."""

    @pytest.mark.asyncio
    async def test_red_square_passes(self) -> None:
        capture = FakeCapture(
            box={"x": 8, "y": 8, "width": 100, "height": 100},
            corner_pngs=corner_screenshots(),
        )
        client = CornerClient({png: RED for png in capture.corner_pngs.values()})

        await assert_element_corner_colors(ImageAnalyzer(client), capture, "#square", 10, RED)

        assert capture.waited == ["#square"]
        assert [(clip.x, clip.y) for clip in capture.clips] == [
            (8, 8),
            (98, 8),
            (8, 98),
            (98, 98),
        ]
        assert client.requested == [
            b"top-left",
            b"top-right",
            b"bottom-left",
            b"bottom-right",
        ]

    @pytest.mark.asyncio
    async def test_green_corner_fails(self) -> None:
        capture = FakeCapture(
            box={"x": 0, "y": 0, "width": 100, "height": 100},
            corner_pngs=corner_screenshots(bottom_right=b"green"),
        )
        colors = {png: RED for png in capture.corner_pngs.values()}
        colors[b"green"] = GREEN

        with pytest.raises(CornerColorError) as exc_info:
            await assert_element_corner_colors(
                ImageAnalyzer(CornerClient(colors)), capture, "#square", 10, RED
            )

        assert exc_info.value.corner == "bottom-right"
