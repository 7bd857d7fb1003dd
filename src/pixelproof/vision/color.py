"""Color model: hex conversion and perceptual color distance.

Colors are compared in CIE Lab space (D65 white point) with the CIEDE2000
difference formula, so a distance of about 2 or less is indistinguishable to
a human viewer.

Usage:
    from pixelproof.vision.color import are_visually_same, color_distance

    color_distance("#ff0000", "#fe0101")
    are_visually_same("#000", "#000000")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import numpy as np
from skimage.color import deltaE_ciede2000, rgb2lab

from pixelproof.verification.errors import ColorFormatError

# Colors at or below this CIEDE2000 distance look the same to a human viewer.
VISUALLY_SAME_MAX_DISTANCE = 2.0

_HEX_PATTERN = re.compile(r"^#([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)
_SHORTHAND_PATTERN = re.compile(r"^#([0-9a-f])([0-9a-f])([0-9a-f])$", re.IGNORECASE)


@dataclass(frozen=True)
class Color:
    """RGB color with 8-bit channels."""

    red: int
    green: int
    blue: int

    @classmethod
    def from_hex(cls, hex_color: str) -> Color:
        """Create color from a '#rgb' or '#rrggbb' string.

        Raises:
            ColorFormatError: If the string is not a valid color hex.
        """
        color = hex_to_color(hex_color)
        if color is None:
            raise ColorFormatError("hex_color", hex_color)
        return color

    def to_hex(self) -> str:
        """Convert to a zero-padded '#rrggbb' string."""
        return color_to_hex(self.red, self.green, self.blue)

    def as_tuple(self) -> tuple[int, int, int]:
        """Return color as ``(red, green, blue)`` tuple."""
        return self.red, self.green, self.blue


def hex_to_color(hex_color: Any) -> Color | None:
    """Parse a '#rgb' or '#rrggbb' string, case-insensitive.

    Shorthand digits are duplicated, so ``#abc`` reads as ``#aabbcc``.

    Returns:
        The parsed color, or None when the input matches neither form.
    """
    if not isinstance(hex_color, str):
        return None

    shorthand = _SHORTHAND_PATTERN.match(hex_color)
    if shorthand:
        hex_color = "#" + "".join(digit * 2 for digit in shorthand.groups())

    match = _HEX_PATTERN.match(hex_color)
    if not match:
        return None

    red, green, blue = (int(group, 16) for group in match.groups())
    return Color(red, green, blue)


def _channel(name: str, value: Any) -> int:
    try:
        channel = int(value)
    except (TypeError, ValueError) as e:
        raise ColorFormatError(
            name, value, message=f"{name}: {value!r} is not a color channel value"
        ) from e
    if not 0 <= channel <= 255:
        raise ColorFormatError(
            name, value, message=f"{name}: {value!r} is outside the 0-255 channel range"
        )
    return channel


def color_to_hex(red: Any, green: Any, blue: Any) -> str:
    """Format channels as '#rrggbb', each zero-padded to two hex digits.

    Float channels (as reported by recognition engines) are truncated to int.

    Raises:
        ColorFormatError: If a channel is not a number in 0-255.
    """
    return "#{:02x}{:02x}{:02x}".format(
        _channel("red", red), _channel("green", green), _channel("blue", blue)
    )


def _to_lab(color: Color) -> np.ndarray:
    rgb = np.array([[color.as_tuple()]], dtype=np.float64) / 255.0
    return rgb2lab(rgb)


def color_distance(color_a: str, color_b: str) -> float:
    """Return the CIEDE2000 distance between two hex colors.

    Args:
        color_a: First color as '#rgb' or '#rrggbb'.
        color_b: Second color as '#rgb' or '#rrggbb'.

    Returns:
        Perceptual distance, 0 for identical colors.

    Raises:
        ColorFormatError: Naming ``color_a`` or ``color_b`` when it is invalid.
    """
    a = hex_to_color(color_a)
    b = hex_to_color(color_b)

    if a is None:
        raise ColorFormatError("color_a", color_a)

    if b is None:
        raise ColorFormatError("color_b", color_b)

    distance = deltaE_ciede2000(_to_lab(a), _to_lab(b))
    return float(distance[0, 0])


def are_visually_same(color_a: str, color_b: str) -> bool:
    """Return True if the two colors are indistinguishable (distance <= 2)."""
    return color_distance(color_a, color_b) <= VISUALLY_SAME_MAX_DISTANCE


__all__ = [
    "VISUALLY_SAME_MAX_DISTANCE",
    "Color",
    "are_visually_same",
    "color_distance",
    "color_to_hex",
    "hex_to_color",
]
