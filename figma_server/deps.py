"""Process-wide Figma client and export cache shared by every tool call."""

from figma_server.utils.figma_client import FigmaClient, download_export
from figma_server.utils.image_cache import ImageCache
from figma_server.utils.settings import get_settings

_figma_client: FigmaClient | None = None
_image_cache: ImageCache | None = None


async def _download(url: str) -> bytes:
    return await download_export(url, timeout=get_settings().FIGMA_HTTP_TIMEOUT)


def get_figma_client() -> FigmaClient:
    """Return the shared client, creating it from settings on first use.

    Raises:
        FigmaAuthError: if FIGMA_TOKEN is unset or malformed.
    """
    global _figma_client
    if _figma_client is None:
        _figma_client = FigmaClient.from_settings(get_settings())
    return _figma_client


def get_image_cache() -> ImageCache:
    global _image_cache
    if _image_cache is None:
        _image_cache = ImageCache(fetch=_download)
    return _image_cache


def set_figma_client(client: FigmaClient | None) -> None:
    global _figma_client
    _figma_client = client


def set_image_cache(cache: ImageCache | None) -> None:
    global _image_cache
    _image_cache = cache
