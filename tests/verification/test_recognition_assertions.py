"""Tests for label, logo and text assertions."""

import warnings

import pytest

from helpers import (
    FakeCapture,
    FakeVisionClient,
    color_response,
    label_response,
    logo_response,
    text_response,
)
from pixelproof.verification.assertions.recognition import (
    assert_contains_labels,
    assert_contains_logos,
    assert_element_ocr_text,
    assert_ocr_text,
    detect_element_dominant_color,
    detect_element_text,
    extract_element_text,
)
from pixelproof.verification.detection.analyzer import ImageAnalyzer
from pixelproof.verification.detection.client import DetectionKind
from pixelproof.verification.errors import AssertionFailure, RecognitionError


def labels(*annotations) -> ImageAnalyzer:
    return ImageAnalyzer(FakeVisionClient({DetectionKind.LABEL: label_response(*annotations)}))


def logos(*annotations) -> ImageAnalyzer:
    return ImageAnalyzer(FakeVisionClient({DetectionKind.LOGO: logo_response(*annotations)}))


def document_text(text) -> ImageAnalyzer:
    return ImageAnalyzer(FakeVisionClient({DetectionKind.DOCUMENT_TEXT: text_response(text)}))


class TestAssertContainsLabels:
    """Tests for assert_contains_labels."""

    @pytest.mark.asyncio
    async def test_all_expected_labels_present(self) -> None:
        analyzer = labels(("Cat", 0.9), ("Whiskers", 0.8), ("Pet", 0.7))
        await assert_contains_labels(analyzer, b"png", ["Pet", "Cat"])

    @pytest.mark.asyncio
    async def test_missing_label_fails(self) -> None:
        analyzer = labels(("Cat", 0.9), ("Pet", 0.7))

        with pytest.raises(AssertionFailure) as exc_info:
            await assert_contains_labels(analyzer, b"png", ["Cat", "Dog"])

        assert "Dog" in exc_info.value.message
        assert exc_info.value.details["missing"] == ["Dog"]

    @pytest.mark.asyncio
    async def test_highest_probability_matches(self) -> None:
        analyzer = labels(("Pet", 0.7), ("Cat", 0.9))
        await assert_contains_labels(
            analyzer, b"png", ["Cat", "Kitten"], only_highest_probability=True
        )

    @pytest.mark.asyncio
    async def test_highest_probability_ignores_lower_labels(self) -> None:
        analyzer = labels(("Dog", 0.95), ("Cat", 0.9))

        with pytest.raises(AssertionFailure) as exc_info:
            await assert_contains_labels(analyzer, b"png", ["Cat"], only_highest_probability=True)

        assert exc_info.value.actual == "Dog"

    @pytest.mark.asyncio
    async def test_highest_probability_without_labels_fails(self) -> None:
        with pytest.raises(AssertionFailure, match="No labels detected"):
            await assert_contains_labels(labels(), b"png", ["Cat"], only_highest_probability=True)

    @pytest.mark.asyncio
    async def test_no_expected_labels_passes(self) -> None:
        await assert_contains_labels(labels(), b"png", [])


class TestAssertContainsLogos:
    """Tests for assert_contains_logos."""

    @pytest.mark.asyncio
    async def test_logos_in_any_order(self) -> None:
        analyzer = logos(("Acme", 0.6), ("Globex", 0.9))
        await assert_contains_logos(analyzer, b"png", ["Globex", "Acme"])

    @pytest.mark.asyncio
    async def test_names_missing_logo(self) -> None:
        analyzer = logos(("Acme", 0.6))

        with pytest.raises(AssertionFailure) as exc_info:
            await assert_contains_logos(analyzer, b"png", ["Acme", "Initech"])

        assert exc_info.value.message == "Logo not detected in the image: 'Initech'"
        assert exc_info.value.expected == "Initech"


class TestAssertOcrText:
    """Tests for the deprecated assert_ocr_text."""

    @pytest.mark.asyncio
    async def test_contains_text_case_insensitive(self) -> None:
        with pytest.warns(DeprecationWarning):
            await assert_ocr_text(document_text("Welcome BACK\nSign in"), b"png", "welcome back")

    @pytest.mark.asyncio
    async def test_text_not_found(self) -> None:
        with pytest.warns(DeprecationWarning):
            with pytest.raises(AssertionFailure, match="does not contain"):
                await assert_ocr_text(document_text("Welcome"), b"png", "Goodbye")

    @pytest.mark.asyncio
    async def test_no_text_detected(self) -> None:
        with pytest.warns(DeprecationWarning):
            with pytest.raises(AssertionFailure, match="No text detected in the image"):
                await assert_ocr_text(document_text(None), b"png", "Welcome")

    @pytest.mark.asyncio
    async def test_no_text_expected_passes_on_empty(self) -> None:
        with pytest.warns(DeprecationWarning):
            await assert_ocr_text(document_text(""), b"png", "", no_text_expected=True)

    @pytest.mark.asyncio
    async def test_no_text_expected_fails_with_annotations(self) -> None:
        with pytest.warns(DeprecationWarning):
            with pytest.raises(AssertionFailure) as exc_info:
                await assert_ocr_text(document_text("Oops"), b"png", "", no_text_expected=True)

        assert "no_text_expected" in exc_info.value.message
        assert "oops" in exc_info.value.message


class TestElementHelpers:
    """Tests for element-level recognition helpers."""

    @pytest.mark.asyncio
    async def test_extract_element_text(self) -> None:
        client = FakeVisionClient({DetectionKind.DOCUMENT_TEXT: text_response("Line A\nLine B")})
        capture = FakeCapture(element_png=b"element")

        extraction = await extract_element_text(ImageAnalyzer(client), capture, "#card")

        assert extraction.lines == ["line a", "line b"]
        assert client.calls == [(DetectionKind.DOCUMENT_TEXT, b"element")]
        assert capture.waited == ["#card"]

    @pytest.mark.asyncio
    async def test_assert_element_ocr_text_warns_once(self) -> None:
        capture = FakeCapture(element_png=b"element")

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            await assert_element_ocr_text(document_text("Total 42"), capture, "#total", "total")

        deprecations = [w for w in caught if issubclass(w.category, DeprecationWarning)]
        assert len(deprecations) == 1
        assert "assert_element_ocr_text" in str(deprecations[0].message)

    @pytest.mark.asyncio
    async def test_detect_element_dominant_color(self) -> None:
        client = FakeVisionClient({DetectionKind.IMAGE_PROPERTIES: color_response((0, 128, 0))})
        capture = FakeCapture(element_png=b"element")

        color = await detect_element_dominant_color(ImageAnalyzer(client), capture, "#badge")

        assert color == "#008000"

    @pytest.mark.asyncio
    async def test_detect_element_dominant_color_without_result(self) -> None:
        client = FakeVisionClient({DetectionKind.IMAGE_PROPERTIES: color_response()})

        with pytest.raises(RecognitionError):
            await detect_element_dominant_color(ImageAnalyzer(client), FakeCapture(), "#badge")

    @pytest.mark.asyncio
    async def test_detect_element_text_with_local_ocr(self) -> None:
        class StaticEngine:
            def create_session(self, language):
                return language

            def recognize(self, session, image):
                return f" {session}:{image.decode()} "

            def release(self, session):
                pass

        capture = FakeCapture(element_png=b"price")

        text = await detect_element_text(capture, "#price", engine=StaticEngine(), language="eng")

        assert text == "eng:price"
