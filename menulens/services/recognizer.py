"""
Text-detection collaborators.

The recognizer takes one encoded image and returns the service's decoded JSON
untouched; turning it into regions is the extractor's job.
"""

import base64
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from ..config.settings import VisionSettings
from ..core.exceptions import RecognitionError, RecognizerUnavailableError

logger = logging.getLogger(__name__)


class BaseRecognizer(ABC):
    """Abstract base class for text-detection backends"""

    name = "base"

    @abstractmethod
    async def recognize(self, content: bytes) -> Dict[str, Any]:
        """Detect text in an encoded image, returning the raw annotate payload"""

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the recognizer is usable"""


class GoogleVisionRecognizer(BaseRecognizer):
    """Google Cloud Vision ``images:annotate`` over REST"""

    name = "google_vision"

    def __init__(self, settings: VisionSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    def _build_request(self, content: bytes) -> Dict[str, Any]:
        return {
            "requests": [
                {
                    "image": {"content": base64.b64encode(content).decode("ascii")},
                    "features": [{"type": self.settings.feature_type}],
                }
            ]
        }

    def _auth(self) -> tuple:
        """(query params, headers) for the configured credential"""
        if self.settings.api_key:
            return {"key": self.settings.api_key}, {}
        if self.settings.access_token:
            return {}, {"Authorization": f"Bearer {self.settings.access_token}"}
        raise RecognizerUnavailableError(details={"recognizer": self.name})

    async def recognize(self, content: bytes) -> Dict[str, Any]:
        params, headers = self._auth()

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds,
                transport=self.transport,
            ) as client:
                response = await client.post(
                    self.settings.api_url,
                    params=params,
                    headers=headers,
                    json=self._build_request(content),
                )
        except httpx.HTTPError as e:
            logger.error(f"Text detection request failed: {e}")
            raise RecognitionError(f"Text detection request failed: {e}")

        if response.status_code != 200:
            logger.error(
                f"Text detection returned HTTP {response.status_code}",
                extra={'status_code': response.status_code, 'body': response.text[:500]}
            )
            raise RecognitionError(
                f"Text detection service returned HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RecognitionError(f"Text detection returned invalid JSON: {e}")

        logger.info(f"Text detection completed ({len(content)} bytes sent)")
        return payload

    async def health_check(self) -> bool:
        return self.settings.has_credentials


class MockRecognizer(BaseRecognizer):
    """Canned recognizer for development and tests"""

    name = "mock"

    DEFAULT_PAYLOAD = {
        "responses": [
            {
                "textAnnotations": [
                    {
                        "locale": "ja",
                        "description": "お品書き\nラーメン\n餃子\n",
                        "boundingPoly": {"vertices": [
                            {"x": 10, "y": 10}, {"x": 200, "y": 10},
                            {"x": 200, "y": 120}, {"x": 10, "y": 120},
                        ]},
                    },
                    {
                        "description": "ラーメン",
                        "boundingPoly": {"vertices": [
                            {"x": 10, "y": 10}, {"x": 50, "y": 10},
                            {"x": 50, "y": 30}, {"x": 10, "y": 30},
                        ]},
                    },
                    {
                        "description": "餃子",
                        "boundingPoly": {"vertices": [
                            {"x": 10, "y": 60}, {"x": 42, "y": 60},
                            {"x": 42, "y": 80}, {"x": 10, "y": 80},
                        ]},
                    },
                ]
            }
        ]
    }

    def __init__(self, payload: Optional[Dict[str, Any]] = None):
        self.payload = payload if payload is not None else self.DEFAULT_PAYLOAD
        self.calls = 0
        self.is_healthy = True

    async def recognize(self, content: bytes) -> Dict[str, Any]:
        self.calls += 1
        return self.payload

    async def health_check(self) -> bool:
        return self.is_healthy


def create_recognizer(settings: VisionSettings, require_credentials: bool = False) -> BaseRecognizer:
    """
    Pick the recognizer for the configured credentials.

    Without credentials the mock recognizer is used, unless
    ``require_credentials`` is set (production), which raises
    RecognizerUnavailableError instead.
    """
    if settings.use_mock:
        return MockRecognizer()
    if settings.has_credentials:
        return GoogleVisionRecognizer(settings)
    if require_credentials:
        raise RecognizerUnavailableError(
            details={"reason": "VISION_API_KEY or VISION_ACCESS_TOKEN is required"}
        )
    logger.warning("No VISION_API_KEY or VISION_ACCESS_TOKEN, falling back to mock recognizer")
    return MockRecognizer()
