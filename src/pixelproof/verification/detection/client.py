"""Recognition client interface and the Google Cloud Vision adapter.

The analyzer talks to any object implementing ``RecognitionClient``. Responses
are expected to be shaped like Google Cloud Vision's ``AnnotateImageResponse``
(``label_annotations``, ``logo_annotations``, ``full_text_annotation``,
``image_properties_annotation``), which keeps test doubles trivial.
"""

import logging
from enum import Enum
from typing import Any, Protocol

from pixelproof.verification.errors import RecognitionError

logger = logging.getLogger(__name__)


class DetectionKind(str, Enum):
    """Recognition features used by pixelproof."""

    LABEL = "label_detection"
    LOGO = "logo_detection"
    DOCUMENT_TEXT = "document_text_detection"
    IMAGE_PROPERTIES = "image_properties"


class RecognitionClient(Protocol):
    """Anything that can run one recognition feature on an image."""

    def detect(self, kind: DetectionKind, image: bytes) -> Any:
        """Run a recognition feature and return the engine response."""
        ...


class GoogleVisionClient:
    """RecognitionClient backed by ``google.cloud.vision``.

    The underlying ``ImageAnnotatorClient`` is created on first use and
    reused for the lifetime of this adapter. Pass ``client`` to supply a
    preconfigured one (credentials, client options).

    Usage:
        analyzer = ImageAnalyzer(GoogleVisionClient(timeout=30))
        labels = await analyzer.extract_labels(png_bytes)
    """

    def __init__(self, client: Any = None, timeout: float | None = None) -> None:
        """Initialize adapter.

        Args:
            client: Optional ``vision.ImageAnnotatorClient`` instance.
            timeout: Per-request timeout in seconds, passed to the service call.
        """
        self._client = client
        self._timeout = timeout

    def _get_client(self) -> Any:
        """Get or create the annotator client."""
        if self._client is None:
            from google.cloud import vision

            self._client = vision.ImageAnnotatorClient()
            logger.info("Initialized Google Cloud Vision client")
        return self._client

    def detect(self, kind: DetectionKind, image: bytes) -> Any:
        """Run one feature through the matching annotator helper.

        Args:
            kind: Feature to run.
            image: PNG bytes.

        Returns:
            ``AnnotateImageResponse``.

        Raises:
            RecognitionError: If the service reports an error status.
        """
        client = self._get_client()
        method = getattr(client, kind.value)
        response = method(image={"content": image}, timeout=self._timeout)

        error = getattr(response, "error", None)
        error_message = getattr(error, "message", "") if error is not None else ""
        if error_message:
            raise RecognitionError(
                kind.value,
                message=f"Vision service returned an error for {kind.value}: {error_message}",
                details={"code": getattr(error, "code", None)},
            )

        return response


__all__ = [
    "DetectionKind",
    "GoogleVisionClient",
    "RecognitionClient",
]
