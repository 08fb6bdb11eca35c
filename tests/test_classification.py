import base64
import json

import httpx
import pytest

from palletboard.models.domain import Flux
from palletboard.services.classification import (
    ClassificationError,
    DocumentClassifier,
    NothingExtractedError,
    parse_extraction,
)


def _answer(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _classifier(handler) -> DocumentClassifier:
    return DocumentClassifier(
        api_key="test-key",
        model="test-model",
        base_url="https://vision.test/v1beta/",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


def test_parse_extraction_strips_code_fences() -> None:
    result = parse_extraction('```json\n{"orderNumber": "1512345678", "clientName": "Jean", "flux": "cdc"}\n```')

    assert result.order_number == "1512345678"
    assert result.client_name == "Jean"
    assert result.flux is Flux.CDC
    assert result.is_complete


def test_parse_extraction_partial_and_empty() -> None:
    partial = parse_extraction('{"orderNumber": "8QAL-4MQ8", "flux": "XYZ"}')
    assert partial.client_name == ""
    assert partial.flux is Flux.NONE
    assert not partial.is_complete

    with pytest.raises(NothingExtractedError):
        parse_extraction('{"orderNumber": "", "clientName": null}')
    with pytest.raises(ClassificationError):
        parse_extraction("I could not read this document")
    with pytest.raises(ClassificationError):
        parse_extraction("[1, 2]")


def test_classify_posts_image_and_reads_answer() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_answer('{"orderNumber": "8QAL-4MQ8", "clientName": "Marie", "flux": "RET"}'))

    result = _classifier(handler).classify(b"\x89PNG", "image/png")

    assert result.flux is Flux.RET
    assert seen["url"].startswith("https://vision.test/v1beta/models/test-model:generateContent")
    assert "key=test-key" in seen["url"]
    inline = seen["body"]["contents"][0]["parts"][1]["inline_data"]
    assert inline["mime_type"] == "image/png"
    assert base64.b64decode(inline["data"]) == b"\x89PNG"


def test_classify_maps_http_failures() -> None:
    classifier = _classifier(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(ClassificationError):
        classifier.classify(b"image")


def test_classify_maps_transport_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(ClassificationError):
        _classifier(handler).classify(b"image")


def test_classify_with_empty_answer_extracts_nothing() -> None:
    classifier = _classifier(lambda request: httpx.Response(200, json={"candidates": []}))

    with pytest.raises(NothingExtractedError):
        classifier.classify(b"image")


def test_classifier_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    from palletboard.config import settings

    monkeypatch.setattr(settings, "classifier_api_key", None)

    with pytest.raises(ValueError):
        DocumentClassifier()
