"""In-memory cache for images exported from Figma files.

Exports are registered with the short-lived download URL Figma returns. The
image bytes are only fetched the first time a resource is read, then kept for
the life of the process. Re-exporting the same (file, node, format) replaces
the entry and drops any bytes downloaded from the previous URL.

There is no eviction and no expiry tracking: an expired export URL shows up as
a failed download, and the caller re-exports to get a fresh one.
"""

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from loguru import logger

from figma_server.models.export import (
    CacheEntry,
    ExportFormat,
    ExportMetadata,
    ExportResourceKey,
)
from figma_server.utils.errors import DownloadError, cache_miss_error, download_failed_error
from figma_server.utils.rwlock import AsyncRWLock

Fetcher = Callable[[str], Awaitable[bytes]]


class ImageCache:
    """Concurrency-safe store of export metadata with lazy byte downloads.

    All map access goes through one reader/writer lock. Downloads run with no
    lock held; the lock is retaken only to store the result.
    """

    def __init__(self, fetch: Fetcher) -> None:
        self._entries: dict[ExportResourceKey, CacheEntry] = {}
        self._lock = AsyncRWLock()
        self._fetch = fetch

    async def register(
        self,
        key: ExportResourceKey,
        export_url: str,
        format: ExportFormat | None = None,
        scale: float = 1.0,
    ) -> None:
        """Insert an export, replacing any previous entry for ``key``.

        Raises:
            ValueError: if ``format`` is given and differs from ``key.format``.
        """
        if format is not None and format != key.format:
            raise ValueError(f"Format {format} does not match resource {key.uri}")
        entry = CacheEntry(
            key=key,
            export_url=export_url,
            format=key.format,
            scale=scale,
            registered_at=datetime.now(UTC),
        )
        async with self._lock.write():
            replaced = key in self._entries
            self._entries[key] = entry
        logger.debug(f"{'Replaced' if replaced else 'Registered'} export {key.uri}")

    async def list(self) -> list[ExportMetadata]:
        """Return a point-in-time snapshot of every registered export."""
        async with self._lock.read():
            entries = list(self._entries.values())
        return [entry.metadata() for entry in entries]

    async def contains(self, key: ExportResourceKey) -> bool:
        async with self._lock.read():
            return key in self._entries

    async def get_entry(self, key: ExportResourceKey) -> CacheEntry | None:
        async with self._lock.read():
            return self._entries.get(key)

    async def read(self, key: ExportResourceKey) -> bytes:
        """Return the image bytes for ``key``, downloading them on first use.

        Raises:
            CacheMiss: if ``key`` was never registered.
            DownloadError: if fetching from the export URL failed. The entry
                stays registered; re-export to refresh its URL.
        """
        async with self._lock.read():
            entry = self._entries.get(key)
        if entry is None:
            raise cache_miss_error(key.uri)
        if entry.data is not None:
            return entry.data

        logger.debug(f"Downloading {key.uri}")
        try:
            data = await self._fetch(entry.export_url)
        except DownloadError as exc:
            raise download_failed_error(key.uri, exc.message) from exc
        except Exception as exc:
            raise download_failed_error(key.uri, repr(exc)) from exc

        async with self._lock.write():
            current = self._entries.get(key)
            # Only commit against the URL we fetched; a newer export wins.
            if current is not None and current.export_url == entry.export_url:
                if current.data is None:
                    self._entries[key] = current.model_copy(update={"data": data})
                else:
                    data = current.data
            else:
                logger.debug(f"Export {key.uri} was replaced during download, not caching")
        logger.debug(f"Downloaded {len(data)} bytes for {key.uri}")
        return data
