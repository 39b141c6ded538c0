import base64
import json

import httpx
import pytest

from menulens.config.settings import VisionSettings
from menulens.core.exceptions import RecognitionError, RecognizerUnavailableError
from menulens.services.recognizer import (
    GoogleVisionRecognizer,
    MockRecognizer,
    create_recognizer,
)

VISION_PAYLOAD = {
    "responses": [{"textAnnotations": [{"description": "MENU"}, {"description": "ラーメン"}]}]
}


def vision(handler, **overrides):
    settings = VisionSettings(**{"api_key": "test-key", **overrides})
    return GoogleVisionRecognizer(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_google_vision_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=VISION_PAYLOAD)

    payload = await vision(handler).recognize(b"jpeg-bytes")

    assert payload == VISION_PAYLOAD
    assert seen["url"].params["key"] == "test-key"
    (req,) = seen["body"]["requests"]
    assert req["features"] == [{"type": "TEXT_DETECTION"}]
    assert base64.b64decode(req["image"]["content"]) == b"jpeg-bytes"


@pytest.mark.asyncio
async def test_bearer_token_auth():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=VISION_PAYLOAD)

    await vision(handler, api_key=None, access_token="tok").recognize(b"x")

    assert seen["auth"] == "Bearer tok"
    assert "key" not in seen["params"]


@pytest.mark.asyncio
async def test_http_error_status_raises_recognition_error():
    recognizer = vision(lambda request: httpx.Response(403, json={"error": {"message": "denied"}}))

    with pytest.raises(RecognitionError) as exc_info:
        await recognizer.recognize(b"x")
    assert exc_info.value.details["status_code"] == 403


@pytest.mark.asyncio
async def test_network_failure_raises_recognition_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RecognitionError):
        await vision(handler).recognize(b"x")


@pytest.mark.asyncio
async def test_invalid_json_raises_recognition_error():
    recognizer = vision(lambda request: httpx.Response(200, content=b"<html>"))

    with pytest.raises(RecognitionError):
        await recognizer.recognize(b"x")


@pytest.mark.asyncio
async def test_missing_credentials():
    recognizer = GoogleVisionRecognizer(VisionSettings(api_key=None, access_token=None))

    with pytest.raises(RecognizerUnavailableError):
        await recognizer.recognize(b"x")
    assert await recognizer.health_check() is False


@pytest.mark.asyncio
async def test_mock_recognizer_counts_calls():
    recognizer = MockRecognizer({"responses": []})
    assert await recognizer.recognize(b"x") == {"responses": []}
    assert recognizer.calls == 1
    assert await recognizer.health_check()


def test_create_recognizer_selection():
    assert isinstance(create_recognizer(VisionSettings(use_mock=True, api_key="k")), MockRecognizer)
    assert isinstance(create_recognizer(VisionSettings(api_key="k")), GoogleVisionRecognizer)
    assert isinstance(create_recognizer(VisionSettings(api_key=None, access_token=None)), MockRecognizer)


def test_create_recognizer_requires_credentials_when_asked():
    with pytest.raises(RecognizerUnavailableError):
        create_recognizer(VisionSettings(api_key=None, access_token=None), require_credentials=True)
    assert isinstance(
        create_recognizer(VisionSettings(api_key="k"), require_credentials=True),
        GoogleVisionRecognizer,
    )
