"""Normalization of vision service responses.

Turns label, logo, text and image-properties responses into plain, ranked
and filtered Python values. The recognition client is injected, so tests can
substitute a double for the real service.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pixelproof.verification.detection.client import (
    DetectionKind,
    GoogleVisionClient,
    RecognitionClient,
)
from pixelproof.verification.errors import RecognitionError, VisionError
from pixelproof.vision.color import Color, color_to_hex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageLabel:
    """A label or logo annotation with its confidence score."""

    description: str
    score: float


@dataclass(frozen=True)
class TextExtraction:
    """Lower-cased document text and its lines."""

    text: str = ""
    lines: list[str] = field(default_factory=list)


def _field(obj: Any, name: str) -> Any:
    """Read a response field from a message object or a mapping."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


class ImageAnalyzer:
    """Runs recognition features and normalizes their results.

    Usage:
        analyzer = ImageAnalyzer(GoogleVisionClient())
        labels = await analyzer.extract_labels(png_bytes)
        text = await analyzer.extract_text(png_bytes)
    """

    def __init__(self, client: RecognitionClient | None = None) -> None:
        """Initialize analyzer.

        Args:
            client: Recognition client; a GoogleVisionClient configured from
                settings is created when omitted.
        """
        if client is None:
            from pixelproof.config import get_settings

            client = GoogleVisionClient(timeout=get_settings().recognition_timeout)
        self._client = client

    async def _detect(self, kind: DetectionKind, image: bytes) -> Any:
        """Run one recognition call in a worker thread.

        Raises:
            RecognitionError: Naming the detection call when it fails.
        """
        try:
            return await asyncio.to_thread(self._client.detect, kind, image)
        except VisionError:
            raise
        except Exception as e:
            raise RecognitionError(
                kind.value,
                message=f"Recognition call failed: {kind.value}: {e}",
                details={"error_type": type(e).__name__},
            ) from e

    async def extract_labels(self, image: bytes) -> list[ImageLabel]:
        """Detect labels, highest score first.

        Annotations without a description or without a non-zero score are
        dropped. An empty list means no labels were found.
        """
        response = await self._detect(DetectionKind.LABEL, image)

        labels = []
        for annotation in _field(response, "label_annotations") or []:
            description = _field(annotation, "description")
            score = _field(annotation, "score")
            if not description or not score:
                continue
            labels.append(ImageLabel(description=description, score=float(score)))

        labels.sort(key=lambda label: label.score, reverse=True)
        logger.debug(f"Detected {len(labels)} labels")
        return labels

    async def extract_logos(self, image: bytes) -> list[ImageLabel]:
        """Detect logos in engine order.

        Annotations with a missing description or score are dropped.
        """
        response = await self._detect(DetectionKind.LOGO, image)

        logos = []
        for annotation in _field(response, "logo_annotations") or []:
            description = _field(annotation, "description")
            score = _field(annotation, "score")
            if description is None or description == "" or score is None:
                continue
            logos.append(ImageLabel(description=description, score=float(score)))

        logger.debug(f"Detected {len(logos)} logos")
        return logos

    async def extract_text(self, image: bytes) -> TextExtraction:
        """Detect document text, lower-cased and split into lines.

        Returns an empty extraction when no text is found.
        """
        response = await self._detect(DetectionKind.DOCUMENT_TEXT, image)
        text = _field(_field(response, "full_text_annotation"), "text")

        if not text:
            return TextExtraction()

        lowercase = text.lower()
        return TextExtraction(text=lowercase, lines=lowercase.split("\n"))

    async def dominant_color(self, image: bytes) -> Color | None:
        """Return the engine's top-ranked dominant color, or None."""
        response = await self._detect(DetectionKind.IMAGE_PROPERTIES, image)
        properties = _field(response, "image_properties_annotation")
        colors = _field(_field(properties, "dominant_colors"), "colors") or []

        if not colors:
            return None

        color = _field(colors[0], "color")
        if color is None:
            return None

        return Color(
            red=int(_field(color, "red") or 0),
            green=int(_field(color, "green") or 0),
            blue=int(_field(color, "blue") or 0),
        )

    async def detect_dominant_color(self, image: bytes) -> str:
        """Return the dominant color as a zero-padded '#rrggbb' string.

        Raises:
            RecognitionError: If the engine reports no color.
        """
        color = await self.dominant_color(image)
        if color is None:
            raise RecognitionError(
                DetectionKind.IMAGE_PROPERTIES.value,
                message="Unable to detect dominant color",
            )
        return color_to_hex(*color.as_tuple())


__all__ = [
    "ImageAnalyzer",
    "ImageLabel",
    "TextExtraction",
]
