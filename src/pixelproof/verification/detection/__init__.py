"""Recognition engines for verification.

Provides the vision service client, response normalization and local OCR.
"""

from .analyzer import ImageAnalyzer, ImageLabel, TextExtraction
from .client import DetectionKind, GoogleVisionClient, RecognitionClient
from .ocr import LocalOCREngine, TesseractEngine, TesseractSession, detect_text, ocr_session

__all__ = [
    "DetectionKind",
    "GoogleVisionClient",
    "ImageAnalyzer",
    "ImageLabel",
    "LocalOCREngine",
    "RecognitionClient",
    "TesseractEngine",
    "TesseractSession",
    "TextExtraction",
    "detect_text",
    "ocr_session",
]
