"""Local OCR with Tesseract.

A recognition session is acquired, configured for a language, used for one
recognition and then released. ``ocr_session`` guarantees the release on every
exit path so repeated calls in a long test run do not leak sessions.
"""

import asyncio
import io
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Protocol

from PIL import Image, UnidentifiedImageError

from pixelproof.verification.errors import ImageDecodeError, RecognitionError, VisionError

logger = logging.getLogger(__name__)

LOCAL_OCR = "local_ocr"


class LocalOCREngine(Protocol):
    """Session-based local OCR engine."""

    def create_session(self, language: str) -> Any:
        """Acquire a session configured for ``language``."""
        ...

    def recognize(self, session: Any, image: bytes) -> str:
        """Recognize the text in a PNG image."""
        ...

    def release(self, session: Any) -> None:
        """Release the session."""
        ...


@dataclass
class TesseractSession:
    """Tesseract configuration for one recognition."""

    language: str
    config: str = ""
    active: bool = True


class TesseractEngine:
    """LocalOCREngine built on ``pytesseract``.

    Each recognition runs the tesseract executable; the session carries the
    language and page segmentation settings and is invalidated on release.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        psm_mode: int = 3,
        oem_mode: int = 3,
        timeout: float = 0,
    ) -> None:
        """Initialize Tesseract engine.

        Args:
            tesseract_cmd: Path to the tesseract executable (default: PATH).
            psm_mode: Page Segmentation Mode (default: 3 - fully automatic)
            oem_mode: OCR Engine Mode (default: 3 - default)
            timeout: Seconds before tesseract is killed (0 = no timeout).
        """
        self.tesseract_cmd = tesseract_cmd
        self.psm_mode = psm_mode
        self.oem_mode = oem_mode
        self.timeout = timeout

    def create_session(self, language: str) -> TesseractSession:
        """Acquire a session for ``language``.

        Raises:
            RecognitionError: If the language data is not installed.
        """
        import pytesseract

        if self.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd

        try:
            languages = pytesseract.get_languages(config="")
        except pytesseract.TesseractNotFoundError as e:
            raise RecognitionError(
                LOCAL_OCR,
                message="Tesseract executable not found",
                suggestion="Install tesseract or set PIXELPROOF_TESSERACT_CMD.",
            ) from e

        if language not in languages:
            raise RecognitionError(
                LOCAL_OCR,
                message=f"Tesseract language not installed: {language}",
                details={"installed": ", ".join(sorted(languages))},
            )

        config = f"--psm {self.psm_mode} --oem {self.oem_mode}"
        logger.debug(f"Tesseract session created for {language}")
        return TesseractSession(language=language, config=config)

    def recognize(self, session: TesseractSession, image: bytes) -> str:
        """Recognize the text in a PNG image."""
        import pytesseract

        if not session.active:
            raise RecognitionError(LOCAL_OCR, message="Tesseract session already released")

        try:
            with Image.open(io.BytesIO(image)) as img:
                img.load()
                return pytesseract.image_to_string(
                    img, lang=session.language, config=session.config, timeout=self.timeout
                )
        except (UnidentifiedImageError, OSError) as e:
            raise ImageDecodeError("ocr_image", str(e)) from e

    def release(self, session: TesseractSession) -> None:
        """Release the session."""
        session.active = False
        logger.debug(f"Tesseract session released for {session.language}")


@contextmanager
def ocr_session(engine: LocalOCREngine, language: str) -> Iterator[Any]:
    """Acquire an OCR session and release it on exit.

    Usage:
        with ocr_session(engine, "eng") as session:
            text = engine.recognize(session, png_bytes)
    """
    session = engine.create_session(language)
    try:
        yield session
    finally:
        engine.release(session)


def _recognize_once(engine: LocalOCREngine, image: bytes, language: str) -> str:
    with ocr_session(engine, language) as session:
        return engine.recognize(session, image)


async def detect_text(
    image: bytes,
    engine: LocalOCREngine | None = None,
    language: str | None = None,
) -> str:
    """Recognize text in an image with the local OCR engine.

    Args:
        image: PNG bytes.
        engine: OCR engine (default: TesseractEngine configured from settings).
        language: Language code (default from settings, ``"eng"``).

    Returns:
        Recognized text with surrounding whitespace stripped.

    Raises:
        RecognitionError: If the engine fails; the session is released first.
    """
    if engine is None or language is None:
        from pixelproof.config import get_settings

        settings = get_settings()
        if engine is None:
            engine = TesseractEngine(tesseract_cmd=settings.tesseract_cmd)
        if language is None:
            language = settings.ocr_language

    try:
        text = await asyncio.to_thread(_recognize_once, engine, image, language)
    except VisionError:
        raise
    except Exception as e:
        raise RecognitionError(
            LOCAL_OCR,
            message=f"Local OCR failed: {e}",
            details={"language": language, "error_type": type(e).__name__},
        ) from e

    return text.strip()


__all__ = [
    "LocalOCREngine",
    "TesseractEngine",
    "TesseractSession",
    "detect_text",
    "ocr_session",
]
