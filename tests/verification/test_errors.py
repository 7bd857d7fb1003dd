"""Tests for verification error types."""

import pytest

from pixelproof.verification.errors import (
    AssertionFailure,
    ColorFormatError,
    CornerColorError,
    ImageDimensionMismatchError,
    RecognitionError,
    ScreenshotComparisonError,
    VisionError,
)


class TestVisionError:
    """Tests for the base error formatting."""

    def test_message_only(self) -> None:
        assert str(VisionError("Something failed")) == "Something failed"

    def test_includes_details_and_suggestion(self) -> None:
        error = VisionError("Something failed", {"key": "value"}, suggestion="Try again")

        text = str(error)
        assert "Details:" in text
        assert "  key: value" in text
        assert text.endswith("Suggestion: Try again")


class TestAssertionFailure:
    """Tests for AssertionFailure."""

    def test_is_assertion_error(self) -> None:
        with pytest.raises(AssertionError):
            raise AssertionFailure("check", expected=1, actual=2)

    def test_records_expected_and_actual(self) -> None:
        error = AssertionFailure("check", expected="a", actual="b")

        assert error.message == "Assertion failed: check"
        assert error.details == {"expected": "a", "actual": "b"}


class TestScreenshotComparisonError:
    """Tests for ScreenshotComparisonError."""

    def test_default_message(self) -> None:
        error = ScreenshotComparisonError(12, 0, 0.1)

        assert error.message == (
            "Screenshot comparison against screenshot failed: "
            "12 differing pixels > 0 allowed"
        )
        assert error.assertion_method == "screenshots_match"
        assert error.details["threshold"] == 0.1

    def test_names_reference_and_diff(self) -> None:
        error = ScreenshotComparisonError(3, 1, 0.2, reference="home.png", diff_path="diff.png")

        assert "reference 'home.png'" in error.message
        assert error.details["diff_image"] == "diff.png"


class TestCornerColorError:
    """Tests for CornerColorError."""

    def test_distance_message(self) -> None:
        error = CornerColorError("top-right", "#ff0000", "#00ff00", 86.6)

        assert error.corner == "top-right"
        assert "top-right corner" in error.message
        assert "distance 86.60" in error.message
        assert error.expected == "#ff0000"
        assert error.actual == "#00ff00"

    def test_no_color_message(self) -> None:
        error = CornerColorError("bottom-left", "#ff0000", None)
        assert error.message == "No dominant color detected for bottom-left corner"


def test_color_format_error_default_message() -> None:
    error = ColorFormatError("color_a", "#12")

    assert error.message == "color_a: #12 is not a valid color hex"
    assert isinstance(error, ValueError)


def test_dimension_mismatch_message() -> None:
    error = ImageDimensionMismatchError((100, 50), (100, 60))

    assert error.message == "Image dimensions differ: 100x50 vs 100x60"
    assert error.details["image_b"] == "100x60"


def test_recognition_error_names_detection() -> None:
    error = RecognitionError("logo_detection")

    assert error.detection == "logo_detection"
    assert error.details["detection"] == "logo_detection"
    assert "logo_detection" in error.message
