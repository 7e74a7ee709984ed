import asyncio
import json
from dataclasses import replace
from typing import List, Optional

import cv2
import numpy as np
import pytest

from logoguard.config.settings import InspectionSettings
from logoguard.services.analysis_client import AnalysisClient, VisionBackend, VisionResponse
from logoguard.utils.image_codec import ImageAsset

FAIL_PAYLOAD = {
    "verdict": "FAIL",
    "confidence": 92,
    "reasoning": "The left stroke of the letter A is missing.",
    "defects": [{"description": "missing stroke", "box_2d": [10, 10, 50, 60]}],
}


class FakeBackend(VisionBackend):
    """In-memory stand-in for the remote model; records every request."""

    name = "fake"

    def __init__(
        self, text: Optional[str] = None, error: Optional[Exception] = None, gate: Optional[asyncio.Event] = None
    ):
        self.text = text
        self.error = error
        self.gate = gate
        self.requests: List = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def generate(self, request):
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return VisionResponse(text=self.text)


def _png_bytes(width: int = 200, height: int = 100) -> bytes:
    img = np.full((height, width, 3), 255, dtype=np.uint8)
    cv2.rectangle(img, (40, 20), (160, 80), (0, 0, 0), -1)
    _, encoded = cv2.imencode(".png", img)
    return encoded.tobytes()


@pytest.fixture
def png_bytes():
    return _png_bytes()


@pytest.fixture
def reference_asset(png_bytes):
    return ImageAsset.from_bytes(png_bytes, "image/png")


@pytest.fixture
def inspection_asset():
    return ImageAsset.from_bytes(_png_bytes(320, 240), "image/jpeg")


@pytest.fixture
def settings():
    return InspectionSettings(api_key="test-key", output_language="ja")


@pytest.fixture
def make_backend():
    def _make(payload=None, text=None, error=None, gate=None):
        if payload is not None:
            text = json.dumps(payload, ensure_ascii=False)
        return FakeBackend(text=text, error=error, gate=gate)

    return _make


@pytest.fixture
def make_client(settings, make_backend):
    def _make(payload=FAIL_PAYLOAD, backend=None, **settings_overrides):
        client_settings = replace(settings, **settings_overrides)
        backend = backend or make_backend(payload=payload)
        return AnalysisClient(client_settings, backend=backend), backend

    return _make


@pytest.fixture
def fail_payload():
    return dict(FAIL_PAYLOAD)
