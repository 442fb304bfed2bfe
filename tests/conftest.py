"""Pytest configuration and shared fixtures."""

import asyncio
import base64
import json
from typing import AsyncGenerator, List, Optional

import httpx
import pytest

from styleswap.providers import GeminiImageClient
from styleswap.utils.config import Config

BASE_URL = "https://gemini.test"
API_KEY = "test-key"

# Smallest valid PNG: 1x1 transparent pixel
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def image_response(data: bytes, mime_type: Optional[str] = "image/png") -> dict:
    """generateContent body carrying one inline image."""
    inline = {"data": base64.b64encode(data).decode("utf-8")}
    if mime_type:
        inline["mimeType"] = mime_type
    return {"candidates": [{"content": {"parts": [{"inlineData": inline}]}}]}


def text_response(text: str) -> dict:
    """generateContent body carrying only an explanation."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class GeminiStub:
    """Stands in for the generateContent endpoint and records what it was sent."""

    def __init__(self, body: dict = None, status_code: int = 200, headers: dict = None):
        self.body = body if body is not None else image_response(PNG_BYTES)
        self.status_code = status_code
        self.headers = headers or {}
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body, headers=self.headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def sent_json(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


class BlockingClient:
    """Generation client that waits until released."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls = 0

    async def generate_edited_image(self, image_base64, mime_type, prompt):
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return "data:image/png;base64,UE5H"

@pytest.fixture
def gemini_stub() -> GeminiStub:
    return GeminiStub()


@pytest.fixture
async def gemini_client(gemini_stub) -> AsyncGenerator[GeminiImageClient, None]:
    """Create and initialize a Gemini client wired to the stub."""
    client = GeminiImageClient(
        api_key=API_KEY,
        base_url=BASE_URL,
        transport=gemini_stub.transport,
    )
    await client.initialize()
    yield client
    await client.close()


@pytest.fixture
def config() -> Config:
    return Config(GEMINI_BASE_URL=BASE_URL, GEMINI_API_KEY=API_KEY)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


def reader(data: bytes):
    """Coroutine function returning data, shaped like UploadFile.read."""
    async def read() -> bytes:
        return data
    return read
