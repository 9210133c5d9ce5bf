"""Async client for the Figma REST API.

Responses are returned as plain JSON dicts. The server forwards them to the
caller untouched, so no response schema is modelled here.
"""

from collections.abc import Iterable
from typing import Any

import httpx
from loguru import logger

from figma_server.models.export import ExportFormat
from figma_server.utils.errors import DownloadError, FigmaApiError, FigmaAuthError
from figma_server.utils.settings import Settings

DEFAULT_API_BASE = "https://api.figma.com/v1"
TOKEN_HEADER = "X-Figma-Token"


def _validate_token(token: str | None) -> str:
    if not token:
        raise FigmaAuthError(
            "FIGMA_TOKEN is not set. Get a personal access token from "
            "https://www.figma.com/developers/api#access-tokens"
        )
    if any(ch in token for ch in "\r\n\t\0") or token != token.strip():
        raise FigmaAuthError("Invalid token format")
    return token


class FigmaClient:
    def __init__(
        self,
        token: str | None,
        *,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = _validate_token(token)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={TOKEN_HEADER: self._token},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "FigmaClient":
        return cls(
            settings.FIGMA_TOKEN,
            base_url=settings.FIGMA_API_BASE,
            timeout=settings.FIGMA_HTTP_TIMEOUT,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "FigmaClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        query = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug(f"GET {path} {query}")
        try:
            response = await self._client.get(path, params=query)
        except httpx.HTTPError as exc:
            raise FigmaApiError(f"Request to {path} failed: {exc!r}") from exc

        if not response.is_success:
            raise FigmaApiError(
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise FigmaApiError(f"Invalid JSON from {path}: {exc}") from exc

        if isinstance(body, dict) and body.get("err"):
            raise FigmaApiError(str(body["err"]), status_code=response.status_code)
        return body

    async def get_file(self, file_key: str, depth: int | None = None) -> dict[str, Any]:
        return await self._get(f"/files/{file_key}", {"depth": depth})

    async def get_file_nodes(
        self,
        file_key: str,
        node_ids: Iterable[str],
        depth: int | None = None,
    ) -> dict[str, Any]:
        return await self._get(
            f"/files/{file_key}/nodes",
            {"ids": ",".join(node_ids), "depth": depth},
        )

    async def export_images(
        self,
        file_key: str,
        node_ids: Iterable[str],
        format: ExportFormat = ExportFormat.PNG,
        scale: float | None = None,
    ) -> dict[str, Any]:
        """Render nodes and return Figma's response.

        ``response["images"]`` maps each node ID to a temporary download URL,
        or to null when Figma could not render that node.
        """
        return await self._get(
            f"/images/{file_key}",
            {"ids": ",".join(node_ids), "format": format.value, "scale": scale},
        )

    async def get_me(self) -> dict[str, Any]:
        return await self._get("/me")


async def download_export(
    url: str,
    *,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bytes:
    """Download exported image bytes.

    Export URLs are pre-signed, so no Figma token is sent.
    """
    try:
        async with httpx.AsyncClient(
            timeout=timeout, transport=transport, follow_redirects=True
        ) as client:
            response = await client.get(url)
    except httpx.HTTPError as exc:
        raise DownloadError(repr(exc)) from exc

    if not response.is_success:
        raise DownloadError(f"HTTP {response.status_code}")
    return response.content
