"""Vision module for pixelproof.

Pixel-level screenshot comparison, reference screenshot storage and the
perceptual color model.
"""

from .color import (
    VISUALLY_SAME_MAX_DISTANCE,
    Color,
    are_visually_same,
    color_distance,
    color_to_hex,
    hex_to_color,
)
from .comparison import (
    DEFAULT_THRESHOLD,
    SIZE_MISMATCH_SENTINEL,
    DecodedImage,
    PixelMatcher,
    compare_images,
    compare_images_with_diff,
    decode_png,
    diff_pixel_counts,
)
from .reference import ReferenceStore, load_reference_screenshot

__all__ = [
    # Color model
    "VISUALLY_SAME_MAX_DISTANCE",
    "Color",
    "are_visually_same",
    "color_distance",
    "color_to_hex",
    "hex_to_color",
    # Pixel comparison
    "DEFAULT_THRESHOLD",
    "SIZE_MISMATCH_SENTINEL",
    "DecodedImage",
    "PixelMatcher",
    "compare_images",
    "compare_images_with_diff",
    "decode_png",
    "diff_pixel_counts",
    # References
    "ReferenceStore",
    "load_reference_screenshot",
]
