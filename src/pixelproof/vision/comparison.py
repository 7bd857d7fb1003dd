"""Pixel comparison of screenshots for regression testing.

This module decodes PNG screenshots and counts differing pixels with an
antialiasing-aware matcher. Each pixel pair is compared in YIQ space (alpha
blended over white); a pixel only counts as different when its color delta
exceeds the tolerance and it does not look like antialiasing in either image.

Usage:
    from pixelproof.vision.comparison import compare_images, diff_pixel_counts

    diff = diff_pixel_counts(reference_png, screenshot_png)
    diff = compare_images(reference_png, screenshot_png, threshold=0.2)
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError

from pixelproof.verification.errors import ImageDecodeError, ImageDimensionMismatchError

if TYPE_CHECKING:
    from pixelproof.vision.reference import ReferenceStore

logger = logging.getLogger(__name__)

# Returned by diff_pixel_counts when sizes differ and the caller asked to
# ignore that; callers treat it as a pass without a computed diff.
SIZE_MISMATCH_SENTINEL = 2

DEFAULT_THRESHOLD = 0.1

# Maximum possible YIQ delta between two colors.
MAX_YIQ_DELTA = 35215.0

DIFF_COLOR = (255, 0, 0)
AA_COLOR = (255, 255, 0)
UNCHANGED_ALPHA = 0.1

# DecompressionBombError is not an OSError.
_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    TypeError,
    ValueError,
)


@dataclass(frozen=True)
class DecodedImage:
    """RGBA raster decoded from a PNG buffer."""

    width: int
    height: int
    pixels: NDArray[np.uint8]  # shape (height, width, 4)

    @property
    def size(self) -> tuple[int, int]:
        """``(width, height)`` tuple."""
        return self.width, self.height


def decode_png(buffer: bytes | DecodedImage, label: str = "image") -> DecodedImage:
    """Decode an image buffer into an RGBA raster.

    Already decoded images are returned unchanged.

    Raises:
        ImageDecodeError: If the buffer is not a readable image.
    """
    if isinstance(buffer, DecodedImage):
        return buffer

    try:
        with Image.open(io.BytesIO(buffer)) as img:
            rgba = img.convert("RGBA")
    except _DECODE_ERRORS as e:
        raise ImageDecodeError(label, str(e)) from e

    pixels = np.asarray(rgba, dtype=np.uint8)
    return DecodedImage(width=rgba.width, height=rgba.height, pixels=pixels)


def encode_png(pixels: NDArray[np.uint8]) -> bytes:
    """Encode an RGBA array as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


def read_png_size(buffer: bytes | DecodedImage, label: str = "image") -> tuple[int, int]:
    """Read ``(width, height)`` from the image header without decoding pixels.

    Raises:
        ImageDecodeError: If the buffer is not a readable image.
    """
    if isinstance(buffer, DecodedImage):
        return buffer.size

    try:
        with Image.open(io.BytesIO(buffer)) as img:
            return img.size
    except _DECODE_ERRORS as e:
        raise ImageDecodeError(label, str(e)) from e


def _blend(channels: NDArray[np.float64], alpha: NDArray[np.float64]) -> NDArray[np.float64]:
    """Blend channels over a white background."""
    return 255.0 + (channels - 255.0) * alpha[..., None]


def _rgb2y(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    return rgb[..., 0] * 0.29889531 + rgb[..., 1] * 0.58662247 + rgb[..., 2] * 0.11448223


def _rgb2i(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    return rgb[..., 0] * 0.59597799 - rgb[..., 1] * 0.27417610 - rgb[..., 2] * 0.32180189


def _rgb2q(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    return rgb[..., 0] * 0.21147017 - rgb[..., 1] * 0.52261711 + rgb[..., 2] * 0.31114694


def _blended_rgb(pixels: NDArray[np.uint8]) -> NDArray[np.float64]:
    values = pixels.astype(np.float64)
    alpha = values[..., 3] / 255.0
    return np.where(alpha[..., None] < 1.0, _blend(values[..., :3], alpha), values[..., :3])


# Neighbour offsets as (dx, dy), in the column-major scan order of the
# antialiasing check; ties between equal deltas go to the first offset.
_NEIGHBOUR_DX = np.array([-1, -1, -1, 0, 0, 1, 1, 1])
_NEIGHBOUR_DY = np.array([-1, 0, 1, -1, 1, -1, 0, 1])

# Candidates are checked for antialiasing in chunks to bound memory.
_AA_CHUNK_SIZE = 65536


@dataclass(frozen=True)
class _Raster:
    """Per-image arrays used by the antialiasing check."""

    luma: NDArray[np.float64]  # blended Y per pixel
    packed: NDArray[np.uint32]  # RGBA packed into one value per pixel
    many_siblings: NDArray[np.bool_]  # more than two identical neighbours

    @classmethod
    def from_pixels(cls, pixels: NDArray[np.uint8]) -> _Raster:
        packed = np.ascontiguousarray(pixels).view(np.uint32)[..., 0]
        return cls(
            luma=_rgb2y(_blended_rgb(pixels)),
            packed=packed,
            many_siblings=_many_siblings(packed),
        )


def _on_border(xs: NDArray[np.intp], ys: NDArray[np.intp], width: int, height: int) -> NDArray:
    return (xs == 0) | (xs == width - 1) | (ys == 0) | (ys == height - 1)


def _many_siblings(packed: NDArray[np.uint32]) -> NDArray[np.bool_]:
    """Mark pixels with at least three identical neighbours (border counts as one)."""
    height, width = packed.shape
    counts = np.zeros((height, width), dtype=np.int8)

    for dx, dy in zip(_NEIGHBOUR_DX.tolist(), _NEIGHBOUR_DY.tolist()):
        cy = slice(max(0, -dy), height - max(0, dy))
        cx = slice(max(0, -dx), width - max(0, dx))
        ny = slice(max(0, dy), height - max(0, -dy))
        nx = slice(max(0, dx), width - max(0, -dx))
        counts[cy, cx] += packed[cy, cx] == packed[ny, nx]

    ys, xs = np.indices((height, width))
    counts += _on_border(xs, ys, width, height)
    return counts > 2


class PixelMatcher:
    """Antialiasing-aware pixel matcher.

    Compares two equal-sized RGBA rasters and counts the pixels whose color
    delta exceeds ``threshold``. Pixels that look like antialiased edges in
    either image are reported separately and not counted.

    Example:
        matcher = PixelMatcher(threshold=0.1)
        count, diff = matcher.match(image_a, image_b, with_output=True)
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD, include_aa: bool = False) -> None:
        """Initialize the matcher.

        Args:
            threshold: Per-pixel color tolerance in [0, 1]; higher tolerates more.
            include_aa: Count antialiased pixels as differences too.
        """
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
        self.threshold = threshold
        self.include_aa = include_aa
        self.max_delta = MAX_YIQ_DELTA * threshold * threshold

    def match(
        self,
        image_a: DecodedImage,
        image_b: DecodedImage,
        with_output: bool = False,
    ) -> tuple[int, NDArray[np.uint8] | None]:
        """Count differing pixels between two rasters of the same size.

        Args:
            image_a: First raster.
            image_b: Second raster, same dimensions as ``image_a``.
            with_output: Also render a diff raster.

        Returns:
            Tuple of differing pixel count and the diff raster (or None).
        """
        if image_a.size != image_b.size:
            raise ImageDimensionMismatchError(image_a.size, image_b.size)

        a = image_a.pixels
        b = image_b.pixels
        output = self._draw_unchanged(a) if with_output else None

        if np.array_equal(a, b):
            return 0, output

        delta = self._color_delta(a, b)
        ys, xs = np.nonzero(np.abs(delta) > self.max_delta)

        if self.include_aa or len(ys) == 0:
            antialiased = np.zeros(len(ys), dtype=bool)
        else:
            antialiased = self._antialiased_candidates(a, b, xs, ys)

        diff_count = int(len(ys) - np.count_nonzero(antialiased))
        if output is not None:
            output[ys[antialiased], xs[antialiased]] = (*AA_COLOR, 255)
            output[ys[~antialiased], xs[~antialiased]] = (*DIFF_COLOR, 255)

        logger.debug(
            f"Pixel match: {diff_count} differing of {image_a.width * image_a.height} pixels "
            f"({len(ys)} above tolerance)"
        )
        return diff_count, output

    def _color_delta(self, a: NDArray[np.uint8], b: NDArray[np.uint8]) -> NDArray[np.float64]:
        """Signed YIQ delta per pixel; zero where pixels are identical."""
        rgb_a = _blended_rgb(a)
        rgb_b = _blended_rgb(b)

        y_a = _rgb2y(rgb_a)
        y_b = _rgb2y(rgb_b)
        y = y_a - y_b
        i = _rgb2i(rgb_a) - _rgb2i(rgb_b)
        q = _rgb2q(rgb_a) - _rgb2q(rgb_b)

        delta = 0.5053 * y * y + 0.299 * i * i + 0.1957 * q * q
        delta = np.where(y_a > y_b, -delta, delta)

        identical = np.all(a == b, axis=-1)
        return np.where(identical, 0.0, delta)

    def _antialiased_candidates(
        self,
        a: NDArray[np.uint8],
        b: NDArray[np.uint8],
        xs: NDArray[np.intp],
        ys: NDArray[np.intp],
    ) -> NDArray[np.bool_]:
        """Flag candidate pixels that look antialiased in either image."""
        raster_a = _Raster.from_pixels(a)
        raster_b = _Raster.from_pixels(b)

        flags = np.empty(len(xs), dtype=bool)
        for start in range(0, len(xs), _AA_CHUNK_SIZE):
            chunk = slice(start, start + _AA_CHUNK_SIZE)
            cx, cy = xs[chunk], ys[chunk]
            flags[chunk] = self._antialiased(raster_a, raster_b, cx, cy) | self._antialiased(
                raster_b, raster_a, cx, cy
            )
        return flags

    @staticmethod
    def _antialiased(
        img: _Raster,
        other: _Raster,
        xs: NDArray[np.intp],
        ys: NDArray[np.intp],
    ) -> NDArray[np.bool_]:
        """Check which pixels of ``img`` are likely part of an antialiased edge.

        A pixel qualifies when at most two neighbours share its brightness and
        both its darkest and its brightest neighbour sit in a flat region,
        in both images, for at least one of the two.
        """
        height, width = img.packed.shape
        rows = np.arange(len(xs))

        nx = xs[:, None] + _NEIGHBOUR_DX[None, :]
        ny = ys[:, None] + _NEIGHBOUR_DY[None, :]
        inside = (nx >= 0) & (nx < width) & (ny >= 0) & (ny < height)
        nx = np.clip(nx, 0, width - 1)
        ny = np.clip(ny, 0, height - 1)

        identical = img.packed[ny, nx] == img.packed[ys, xs][:, None]
        delta = np.where(identical, 0.0, img.luma[ys, xs][:, None] - img.luma[ny, nx])

        zeroes = np.count_nonzero(inside & (delta == 0), axis=1)
        zeroes += _on_border(xs, ys, width, height)

        darker = np.where(inside & (delta < 0), delta, np.inf)
        brighter = np.where(inside & (delta > 0), delta, -np.inf)
        min_index = np.argmin(darker, axis=1)
        max_index = np.argmax(brighter, axis=1)
        has_min = np.isfinite(darker[rows, min_index])
        has_max = np.isfinite(brighter[rows, max_index])

        min_x, min_y = nx[rows, min_index], ny[rows, min_index]
        max_x, max_y = nx[rows, max_index], ny[rows, max_index]
        flat_min = img.many_siblings[min_y, min_x] & other.many_siblings[min_y, min_x]
        flat_max = img.many_siblings[max_y, max_x] & other.many_siblings[max_y, max_x]

        return (zeroes <= 2) & has_min & has_max & (flat_min | flat_max)

    @staticmethod
    def _draw_unchanged(pixels: NDArray[np.uint8]) -> NDArray[np.uint8]:
        """Render the first image as a faded grayscale background."""
        values = pixels.astype(np.float64)
        alpha = UNCHANGED_ALPHA * values[..., 3] / 255.0
        gray = 255.0 + (_rgb2y(values[..., :3]) - 255.0) * alpha
        output = np.empty_like(pixels)
        output[..., :3] = np.clip(gray, 0, 255).astype(np.uint8)[..., None]
        output[..., 3] = 255
        return output


def diff_pixel_counts(
    image_a: bytes | DecodedImage,
    image_b: bytes | DecodedImage,
    ignore_size_difference: bool = False,
    threshold: float = DEFAULT_THRESHOLD,
    include_aa: bool = False,
) -> int:
    """Count pixels that differ between two screenshots.

    Args:
        image_a: First PNG screenshot.
        image_b: Second PNG screenshot.
        ignore_size_difference: When sizes differ, return
            ``SIZE_MISMATCH_SENTINEL`` instead of comparing.
        threshold: Per-pixel color tolerance in [0, 1].
        include_aa: Count antialiased pixels as differences too.

    Returns:
        Number of differing pixels.

    Raises:
        ImageDimensionMismatchError: If sizes differ and are not ignored.
    """
    size_a = read_png_size(image_a, "image_a")
    size_b = read_png_size(image_b, "image_b")

    if size_a != size_b:
        if ignore_size_difference:
            logger.info(
                f"Ignoring size difference {size_a} vs {size_b}; skipping pixel comparison"
            )
            return SIZE_MISMATCH_SENTINEL
        raise ImageDimensionMismatchError(size_a, size_b)

    decoded_a = decode_png(image_a, "image_a")
    decoded_b = decode_png(image_b, "image_b")
    count, _ = PixelMatcher(threshold, include_aa).match(decoded_a, decoded_b)
    return count


def compare_images(
    image_a: bytes | DecodedImage,
    image_b: bytes | DecodedImage,
    threshold: float = DEFAULT_THRESHOLD,
    store: ReferenceStore | None = None,
    include_aa: bool = False,
) -> int:
    """Compare two screenshots and write a diff image when they differ.

    Args:
        image_a: Usually the reference screenshot.
        image_b: Usually the freshly captured screenshot.
        threshold: Per-pixel color tolerance in [0, 1].
        store: Where to write the diff image (default: configured store).
        include_aa: Count antialiased pixels as differences too.

    Returns:
        Number of differing pixels; 0 means identical under the tolerance.

    Raises:
        ImageDimensionMismatchError: If the screenshots differ in size.
    """
    count, _ = compare_images_with_diff(image_a, image_b, threshold, store, include_aa)
    return count


def compare_images_with_diff(
    image_a: bytes | DecodedImage,
    image_b: bytes | DecodedImage,
    threshold: float = DEFAULT_THRESHOLD,
    store: ReferenceStore | None = None,
    include_aa: bool = False,
) -> tuple[int, Path | None]:
    """Like ``compare_images`` but also return where the diff image was written.

    Returns:
        Tuple of differing pixel count and diff image path (None when the
        images match or the diff could not be written).
    """
    decoded_a = decode_png(image_a, "image_a")
    decoded_b = decode_png(image_b, "image_b")

    count, diff = PixelMatcher(threshold, include_aa).match(
        decoded_a, decoded_b, with_output=True
    )

    diff_path = None
    if count > 0 and diff is not None:
        if store is None:
            from pixelproof.vision.reference import ReferenceStore

            store = ReferenceStore()
        diff_path = store.write_diff(encode_png(diff))

    return count, diff_path


__all__ = [
    "DEFAULT_THRESHOLD",
    "SIZE_MISMATCH_SENTINEL",
    "DecodedImage",
    "PixelMatcher",
    "compare_images",
    "compare_images_with_diff",
    "decode_png",
    "diff_pixel_counts",
    "encode_png",
    "read_png_size",
]
