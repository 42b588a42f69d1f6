import asyncio
import json

import httpx
import pytest

from recipesmith.services.errors import DecodingError, InvalidResponse, MissingData, UnknownError
from recipesmith.services.image_gemini import ImageClient, ImageNotReady, find_inline_image


def _client(handler, **kw):
    return ImageClient(api_key="k", transport=httpx.MockTransport(handler), **kw)


def _answer(parts, status=200):
    body = {"candidates": [{"content": {"parts": parts}}]}
    return lambda request: httpx.Response(status, json=body)


def test_request_shape_and_inline_data():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [
            {"text": "Here is your dish"},
            {"inlineData": {"mimeType": "image/png", "data": "aGVsbG8="}},
        ]}}]})

    data = asyncio.run(_client(handler, model="img-model", base_url="https://g.test/v1beta/").generate_image("a bowl of pho"))
    assert data == "aGVsbG8="
    assert seen["url"] == "https://g.test/v1beta/models/img-model:generateContent"
    assert seen["key"] == "k"
    assert seen["body"] == {"contents": [{"parts": [{"text": "a bowl of pho"}]}]}


def test_image_found_by_content_not_position():
    # image first, no text part: position-based lookup would miss it
    data = asyncio.run(_client(_answer([{"inlineData": {"data": "QUJD"}}])).generate_image("x"))
    assert data == "QUJD"
    assert find_inline_image({"candidates": [{"content": {"parts": [{"inline_data": {"data": "Zg=="}}]}}]}) == "Zg=="


@pytest.mark.parametrize("parts", [
    [],
    [{"text": "no image today"}],
    [{"text": "a"}, {"inlineData": {"mimeType": "image/png"}}],
])
def test_fewer_parts_or_no_inline_data_is_missing_data(parts):
    with pytest.raises(MissingData):
        asyncio.run(_client(_answer(parts)).generate_image("x"))


def test_no_candidates_is_missing_data():
    handler = lambda request: httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}})
    with pytest.raises(MissingData):
        asyncio.run(_client(handler).generate_image("x"))


def test_non_object_body_is_decoding_error():
    handler = lambda request: httpx.Response(200, json=["not", "an", "object"])
    with pytest.raises(DecodingError):
        asyncio.run(_client(handler).generate_image("x"))
    handler = lambda request: httpx.Response(200, text="<html>")
    with pytest.raises(DecodingError):
        asyncio.run(_client(handler).generate_image("x"))


def test_provider_error_is_unknown(caplog):
    handler = lambda request: httpx.Response(400, json={"error": {"code": 400, "message": "API key not valid"}})
    with pytest.raises(UnknownError):
        asyncio.run(_client(handler).generate_image("x"))
    assert "API key not valid" in caplog.text


def test_transport_failure_is_invalid_response():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(InvalidResponse):
        asyncio.run(_client(handler).generate_image("x"))


def test_missing_key():
    with pytest.raises(ImageNotReady):
        asyncio.run(ImageClient(api_key=None).generate_image("x"))
