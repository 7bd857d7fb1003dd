"""Shared test doubles and image builders."""

import io
from types import SimpleNamespace

import numpy as np
from PIL import Image

from pixelproof.verification.detection.client import DetectionKind


def make_png(
    width: int = 20,
    height: int = 20,
    color: tuple[int, ...] = (255, 255, 255, 255),
    blocks: list[tuple[int, int, int, int, tuple[int, ...]]] | None = None,
) -> bytes:
    """Build a PNG with a solid background and optional filled blocks.

    Blocks are ``(x, y, width, height, color)`` tuples.
    """
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[...] = _rgba(color)
    for x, y, block_width, block_height, block_color in blocks or []:
        pixels[y : y + block_height, x : x + block_width] = _rgba(block_color)

    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


def _rgba(color: tuple[int, ...]) -> tuple[int, ...]:
    return color if len(color) == 4 else (*color, 255)


class FakeVisionClient:
    """Recognition client double returning canned responses per detection kind."""

    def __init__(self, responses: dict | None = None, error: Exception | None = None):
        self.responses = responses or {}
        self.error = error
        self.calls: list[tuple[DetectionKind, bytes]] = []

    def detect(self, kind: DetectionKind, image: bytes):
        self.calls.append((kind, image))
        if self.error is not None:
            raise self.error
        response = self.responses.get(kind)
        if isinstance(response, list):
            return response.pop(0)
        return response


def label_response(*annotations: tuple) -> SimpleNamespace:
    """Build a label detection response from ``(description, score)`` pairs."""
    return SimpleNamespace(
        label_annotations=[
            SimpleNamespace(description=description, score=score)
            for description, score in annotations
        ]
    )


def logo_response(*annotations: tuple) -> SimpleNamespace:
    """Build a logo detection response from ``(description, score)`` pairs."""
    return SimpleNamespace(
        logo_annotations=[
            SimpleNamespace(description=description, score=score)
            for description, score in annotations
        ]
    )


def text_response(text: str | None) -> SimpleNamespace:
    """Build a document text response."""
    return SimpleNamespace(full_text_annotation=SimpleNamespace(text=text))


def color_response(*colors: tuple) -> SimpleNamespace:
    """Build an image properties response with dominant ``(r, g, b)`` colors."""
    return SimpleNamespace(
        image_properties_annotation=SimpleNamespace(
            dominant_colors=SimpleNamespace(
                colors=[
                    SimpleNamespace(color=SimpleNamespace(red=r, green=g, blue=b))
                    for r, g, b in colors
                ]
            )
        )
    )


class FakeCapture:
    """Capture provider double.

    Element screenshots return ``element_png``; clipped screenshots are looked
    up by corner name in ``corner_pngs`` and recorded in ``clips``.
    """

    def __init__(self, element_png=b"", box=None, corner_pngs=None):
        self.element_png = element_png
        self.box = box
        self.corner_pngs = corner_pngs or {}
        self.waited: list = []
        self.clips: list = []

    async def wait_ready(self, element):
        self.waited.append(element)

    async def bounding_box(self, element):
        return self.box

    async def screenshot(self, element=None, clip=None):
        if clip is not None:
            self.clips.append(clip)
            return self.corner_pngs[clip.name]
        return self.element_png
