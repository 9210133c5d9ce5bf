"""Pytest configuration and fixtures for the Figma server tests.

The Figma API is faked with ``httpx.MockTransport`` and export downloads with
an in-memory fetcher, so no test touches the network.

Run with: uv run pytest tests/ -v
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio

from figma_server import deps
from figma_server.utils.figma_client import FigmaClient
from figma_server.utils.image_cache import ImageCache

TEST_TOKEN = "figd_test-token"
API_BASE = "https://api.figma.com/v1"
EXPORT_URL_BASE = "https://figma-alpha-api.s3.us-west-2.amazonaws.com/images"


class FakeFetcher:
    """Byte fetcher returning fixed bytes per URL and recording every call.

    Fake export URLs (under EXPORT_URL_BASE) without an explicit payload return
    bytes derived from the URL; any other unknown URL fails like an expired link.
    """

    def __init__(self, payloads: dict[str, bytes] | None = None) -> None:
        self.payloads: dict[str, bytes] = dict(payloads or {})
        self.calls: list[str] = []

    async def __call__(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.payloads and url.startswith(EXPORT_URL_BASE):
            return f"image:{url}".encode()
        if url not in self.payloads:
            raise httpx.HTTPStatusError(
                "403 Forbidden",
                request=httpx.Request("GET", url),
                response=httpx.Response(403),
            )
        return self.payloads[url]


class FakeFigmaApi:
    """Minimal stand-in for the Figma REST API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.export_counter = 0
        # Node IDs added to every images response, as if Figma echoed them back.
        self.extra_images: dict[str, str | None] = {}

    def export_url(self, file_key: str, node_id: str, fmt: str) -> str:
        return f"{EXPORT_URL_BASE}/{file_key}/{node_id.replace(':', '-')}-{self.export_counter}.{fmt}"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        params = request.url.params

        if request.headers.get("X-Figma-Token") != TEST_TOKEN:
            return httpx.Response(403, json={"status": 403, "err": "Invalid token"})

        if path == "/me":
            return httpx.Response(200, json={"id": "1", "handle": "tester", "email": "t@example.com"})

        if path.startswith("/files/") and path.endswith("/nodes"):
            file_key = path.split("/")[2]
            ids = params["ids"].split(",")
            return httpx.Response(
                200,
                json={
                    "name": file_key,
                    "nodes": {node_id: {"document": {"id": node_id}} for node_id in ids},
                },
            )

        if path.startswith("/files/"):
            file_key = path.split("/")[2]
            if file_key == "MISSING":
                return httpx.Response(404, json={"status": 404, "err": "Not found"})
            return httpx.Response(
                200,
                json={
                    "name": "My File",
                    "document": {"id": "0:0", "children": [{"id": "0:1", "name": "Page 1"}]},
                    "depth": params.get("depth"),
                },
            )

        if path.startswith("/images/"):
            file_key = path.split("/")[2]
            self.export_counter += 1
            fmt = params["format"]
            images: dict[str, Any] = {}
            for node_id in params["ids"].split(","):
                images[node_id] = None if node_id == "9:9" else self.export_url(file_key, node_id, fmt)
            images.update(self.extra_images)
            return httpx.Response(200, content=json.dumps({"err": None, "images": images}))

        return httpx.Response(404, json={"status": 404, "err": "Not found"})


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def image_cache(fetcher: FakeFetcher) -> ImageCache:
    return ImageCache(fetch=fetcher)


@pytest.fixture
def figma_api() -> FakeFigmaApi:
    return FakeFigmaApi()


@pytest_asyncio.fixture
async def figma_client(figma_api: FakeFigmaApi) -> AsyncGenerator[FigmaClient]:
    client = FigmaClient(
        TEST_TOKEN, base_url=API_BASE, transport=httpx.MockTransport(figma_api.handler)
    )
    async with client:
        yield client


@pytest_asyncio.fixture
async def server_deps(
    figma_client: FigmaClient, image_cache: ImageCache
) -> AsyncGenerator[None]:
    """Point the server's shared client and cache at the fakes for one test."""
    deps.set_figma_client(figma_client)
    deps.set_image_cache(image_cache)
    try:
        yield
    finally:
        deps.set_figma_client(None)
        deps.set_image_cache(None)
