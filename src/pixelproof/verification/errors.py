"""Verification error types.

Provides custom exceptions for color, image and recognition failures with
rich error messages and debugging information.
"""

from typing import Any


class VisionError(Exception):
    """Base exception for all pixelproof errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize vision error.

        Args:
            message: Human-readable error message.
            details: Additional error details for debugging.
            suggestion: Suggested fix for the error.
        """
        self.message = message
        self.details = details or {}
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        lines = [self.message]

        if self.details:
            lines.append("")
            lines.append("Details:")
            for key, value in self.details.items():
                lines.append(f"  {key}: {value}")

        if self.suggestion:
            lines.append("")
            lines.append(f"Suggestion: {self.suggestion}")

        return "\n".join(lines)


class AssertionFailure(VisionError, AssertionError):
    """Raised when a verification assertion fails.

    Also a builtin ``AssertionError`` so test runners report it as a failed
    assertion rather than an error.
    """

    def __init__(
        self,
        assertion_method: str,
        expected: Any,
        actual: Any,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize assertion failure.

        Args:
            assertion_method: The assertion method that failed.
            expected: Expected value.
            actual: Actual value found.
            message: Custom error message.
            details: Additional error details.
            suggestion: Suggested fix.
        """
        self.assertion_method = assertion_method
        self.expected = expected
        self.actual = actual

        if message is None:
            message = f"Assertion failed: {assertion_method}"

        full_details = details or {}
        full_details["expected"] = expected
        full_details["actual"] = actual

        super().__init__(message, full_details, suggestion)


class ScreenshotComparisonError(AssertionFailure):
    """Raised when two screenshots differ by more pixels than allowed."""

    def __init__(
        self,
        diff_pixels: int,
        max_diff_pixels: int,
        threshold: float,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        suggestion: str | None = None,
        reference: str | None = None,
        diff_path: str | None = None,
    ) -> None:
        """Initialize screenshot comparison error.

        Args:
            diff_pixels: Number of differing pixels found.
            max_diff_pixels: Largest number of differing pixels allowed.
            threshold: Per-pixel color tolerance used by the matcher.
            message: Custom error message.
            details: Additional error details.
            suggestion: Suggested fix.
            reference: Name of the reference screenshot, if any.
            diff_path: Path of the written diff image, if any.
        """
        self.diff_pixels = diff_pixels
        self.max_diff_pixels = max_diff_pixels
        self.threshold = threshold
        self.reference = reference
        self.diff_path = diff_path

        if message is None:
            target = f"reference {reference!r}" if reference else "screenshot"
            message = (
                f"Screenshot comparison against {target} failed: "
                f"{diff_pixels} differing pixels > {max_diff_pixels} allowed"
            )

        full_details = details or {}
        full_details["threshold"] = threshold
        if reference:
            full_details["reference"] = reference
        if diff_path:
            full_details["diff_image"] = diff_path

        if suggestion is None:
            suggestion = (
                "Review the diff image. If the change is intended, update the "
                "reference screenshot or raise the threshold."
            )

        super().__init__(
            "screenshots_match",
            expected=f"<= {max_diff_pixels} differing pixels",
            actual=f"{diff_pixels} differing pixels",
            message=message,
            details=full_details,
            suggestion=suggestion,
        )


class CornerColorError(AssertionFailure):
    """Raised when an element corner does not show the expected color."""

    def __init__(
        self,
        corner: str,
        expected: str,
        actual: str | None,
        distance: float | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize corner color error.

        Args:
            corner: Corner name, e.g. ``"top-left"``.
            expected: Expected color as hex.
            actual: Detected dominant color as hex, or None if none detected.
            distance: CIEDE2000 distance between the two colors.
            message: Custom error message.
            details: Additional error details.
        """
        self.corner = corner
        self.distance = distance

        if message is None:
            if actual is None:
                message = f"No dominant color detected for {corner} corner"
            else:
                message = (
                    f"Color of {corner} corner differs from expected: "
                    f"distance {distance:.2f} is not below 2"
                )

        full_details = details or {}
        full_details["corner"] = corner
        if distance is not None:
            full_details["distance"] = f"{distance:.4f}"

        super().__init__(
            "corner_colors",
            expected=expected,
            actual=actual,
            message=message,
            details=full_details,
        )


class ColorFormatError(VisionError, ValueError):
    """Raised when a color value cannot be parsed or formatted."""

    def __init__(
        self,
        argument: str,
        value: Any,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize color format error.

        Args:
            argument: Name of the offending argument.
            value: The invalid value.
            message: Custom error message.
            details: Additional error details.
        """
        self.argument = argument
        self.value = value

        if message is None:
            message = f"{argument}: {value} is not a valid color hex"

        super().__init__(
            message,
            details,
            suggestion="Use the '#rgb' or '#rrggbb' form.",
        )


class ImageDecodeError(VisionError, ValueError):
    """Raised when an image buffer cannot be decoded."""

    def __init__(self, label: str, reason: str) -> None:
        """Initialize image decode error.

        Args:
            label: Which image failed, e.g. ``"image_a"``.
            reason: Decoder error text.
        """
        self.label = label
        super().__init__(
            f"Unable to decode {label} as an image",
            {"reason": reason},
        )


class ImageDimensionMismatchError(VisionError):
    """Raised when two images of different sizes are compared."""

    def __init__(
        self,
        size_a: tuple[int, int],
        size_b: tuple[int, int],
        message: str | None = None,
    ) -> None:
        """Initialize dimension mismatch error.

        Args:
            size_a: ``(width, height)`` of the first image.
            size_b: ``(width, height)`` of the second image.
            message: Custom error message.
        """
        self.size_a = size_a
        self.size_b = size_b

        if message is None:
            message = (
                f"Image dimensions differ: {size_a[0]}x{size_a[1]} "
                f"vs {size_b[0]}x{size_b[1]}"
            )

        super().__init__(
            message,
            {"image_a": f"{size_a[0]}x{size_a[1]}", "image_b": f"{size_b[0]}x{size_b[1]}"},
            suggestion=(
                "Recapture the reference at the current viewport size or pass "
                "ignore_size_difference=True."
            ),
        )


class ReferenceNotFoundError(VisionError, FileNotFoundError):
    """Raised when a reference screenshot does not exist."""

    def __init__(self, name: str, path: str) -> None:
        """Initialize reference not found error.

        Args:
            name: Reference name requested.
            path: Resolved path that was looked up.
        """
        self.name = name
        self.path = path
        super().__init__(
            f"Reference screenshot not found: {name}",
            {"path": path},
            suggestion="Check the reference directory setting or record the reference first.",
        )


class RecognitionError(VisionError):
    """Raised when a recognition engine call fails or returns nothing usable."""

    def __init__(
        self,
        detection: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize recognition error.

        Args:
            detection: Detection call that failed, e.g. ``"label_detection"``.
            message: Custom error message.
            details: Additional error details.
            suggestion: Suggested fix.
        """
        self.detection = detection

        if message is None:
            message = f"Recognition call produced no usable result: {detection}"

        full_details = details or {}
        full_details["detection"] = detection

        super().__init__(message, full_details, suggestion)


__all__ = [
    "VisionError",
    "AssertionFailure",
    "ScreenshotComparisonError",
    "CornerColorError",
    "ColorFormatError",
    "ImageDecodeError",
    "ImageDimensionMismatchError",
    "ReferenceNotFoundError",
    "RecognitionError",
]
