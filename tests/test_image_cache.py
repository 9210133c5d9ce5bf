"""Tests for the export image cache."""

import asyncio

import pytest
from conftest import FakeFetcher

from figma_server.models.export import ExportFormat, ExportResourceKey
from figma_server.utils.errors import CacheMiss, DownloadError, ErrorCode
from figma_server.utils.image_cache import ImageCache

URL_1 = "https://example.com/exports/one.png"
URL_2 = "https://example.com/exports/two.png"


def make_key(node_id: str = "1:2", fmt: ExportFormat = ExportFormat.PNG) -> ExportResourceKey:
    return ExportResourceKey(file_key="ABC123", node_id=node_id, format=fmt)


class TestReadThrough:
    @pytest.mark.asyncio
    async def test_register_then_read_returns_fetched_bytes(
        self, image_cache: ImageCache, fetcher: FakeFetcher
    ) -> None:
        fetcher.payloads[URL_1] = b"png-bytes-1"
        key = make_key()
        await image_cache.register(key, URL_1, ExportFormat.PNG)

        assert await image_cache.read(key) == b"png-bytes-1"
        assert fetcher.calls == [URL_1]

    @pytest.mark.asyncio
    async def test_second_read_does_not_fetch_again(
        self, image_cache: ImageCache, fetcher: FakeFetcher
    ) -> None:
        fetcher.payloads[URL_1] = b"png-bytes-1"
        key = make_key()
        await image_cache.register(key, URL_1, ExportFormat.PNG)

        first = await image_cache.read(key)
        second = await image_cache.read(key)

        assert first == second == b"png-bytes-1"
        assert fetcher.calls == [URL_1]

    @pytest.mark.asyncio
    async def test_register_does_not_fetch(
        self, image_cache: ImageCache, fetcher: FakeFetcher
    ) -> None:
        await image_cache.register(make_key(), URL_1, ExportFormat.PNG)
        assert fetcher.calls == []
        [meta] = await image_cache.list()
        assert meta.size is None


class TestReplacement:
    @pytest.mark.asyncio
    async def test_reregister_discards_old_bytes(
        self, image_cache: ImageCache, fetcher: FakeFetcher
    ) -> None:
        fetcher.payloads.update({URL_1: b"old", URL_2: b"new"})
        key = make_key()

        await image_cache.register(key, URL_1, ExportFormat.PNG)
        assert await image_cache.read(key) == b"old"

        await image_cache.register(key, URL_2, ExportFormat.PNG)
        assert await image_cache.read(key) == b"new"
        assert fetcher.calls == [URL_1, URL_2]

    @pytest.mark.asyncio
    async def test_same_triple_collides_and_other_fields_do_not(
        self, image_cache: ImageCache
    ) -> None:
        await image_cache.register(make_key(), URL_1, ExportFormat.PNG)
        await image_cache.register(make_key(), URL_2, ExportFormat.PNG)
        await image_cache.register(make_key(fmt=ExportFormat.SVG), URL_1, ExportFormat.SVG)
        await image_cache.register(make_key(node_id="3:4"), URL_1, ExportFormat.PNG)
        await image_cache.register(
            ExportResourceKey(file_key="OTHER", node_id="1:2", format=ExportFormat.PNG),
            URL_1,
            ExportFormat.PNG,
        )

        uris = sorted(meta.uri for meta in await image_cache.list())
        assert uris == [
            "figma://file/ABC123/node/1:2.png",
            "figma://file/ABC123/node/1:2.svg",
            "figma://file/ABC123/node/3:4.png",
            "figma://file/OTHER/node/1:2.png",
        ]

    @pytest.mark.asyncio
    async def test_read_racing_reregister_does_not_commit_stale_bytes(
        self, fetcher: FakeFetcher
    ) -> None:
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_fetch(url: str) -> bytes:
            if url == URL_1:
                started.set()
                await release.wait()
                return b"stale"
            return await fetcher(url)

        fetcher.payloads[URL_2] = b"fresh"
        cache = ImageCache(fetch=slow_fetch)
        key = make_key()
        await cache.register(key, URL_1, ExportFormat.PNG)

        pending = asyncio.create_task(cache.read(key))
        await started.wait()
        await cache.register(key, URL_2, ExportFormat.PNG)
        release.set()

        assert await pending == b"stale"
        assert await cache.read(key) == b"fresh"


class TestErrors:
    @pytest.mark.asyncio
    async def test_unknown_key(self, image_cache: ImageCache, fetcher: FakeFetcher) -> None:
        key = make_key()
        with pytest.raises(CacheMiss) as exc_info:
            await image_cache.read(key)
        assert exc_info.value.code == ErrorCode.RESOURCE_NOT_FOUND
        assert not await image_cache.contains(key)
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_format_must_match_key(self, image_cache: ImageCache) -> None:
        key = make_key(fmt=ExportFormat.PNG)
        with pytest.raises(ValueError, match="does not match"):
            await image_cache.register(key, URL_1, ExportFormat.SVG)
        assert not await image_cache.contains(key)

    @pytest.mark.asyncio
    async def test_format_defaults_to_key_format(self, image_cache: ImageCache) -> None:
        await image_cache.register(make_key(fmt=ExportFormat.SVG), URL_1)
        [meta] = await image_cache.list()
        assert meta.format == ExportFormat.SVG
        assert meta.mime_type == "image/svg+xml"
        assert meta.uri.endswith(".svg")

    @pytest.mark.asyncio
    async def test_failed_download_keeps_entry(
        self, image_cache: ImageCache, fetcher: FakeFetcher
    ) -> None:
        key = make_key()
        await image_cache.register(key, URL_1, ExportFormat.PNG, scale=2.0)

        with pytest.raises(DownloadError) as exc_info:
            await image_cache.read(key)
        assert exc_info.value.code == ErrorCode.DOWNLOAD_FAILED
        assert not isinstance(exc_info.value, CacheMiss)

        assert await image_cache.contains(key)
        entry = await image_cache.get_entry(key)
        assert entry is not None
        assert entry.export_url == URL_1
        assert entry.scale == 2.0
        assert entry.data is None

    @pytest.mark.asyncio
    async def test_reexport_recovers_from_failed_download(
        self, image_cache: ImageCache, fetcher: FakeFetcher
    ) -> None:
        key = make_key()
        await image_cache.register(key, URL_1, ExportFormat.PNG)
        with pytest.raises(DownloadError):
            await image_cache.read(key)

        fetcher.payloads[URL_2] = b"fresh"
        await image_cache.register(key, URL_2, ExportFormat.PNG)
        assert await image_cache.read(key) == b"fresh"


class TestListing:
    @pytest.mark.asyncio
    async def test_list_is_a_snapshot(self, image_cache: ImageCache, fetcher: FakeFetcher) -> None:
        fetcher.payloads[URL_1] = b"12345"
        key = make_key()
        await image_cache.register(key, URL_1, ExportFormat.PNG)

        snapshot = await image_cache.list()
        await image_cache.read(key)
        await image_cache.register(make_key(node_id="5:6"), URL_2, ExportFormat.PNG)

        assert len(snapshot) == 1
        assert snapshot[0].size is None

        [fresh] = [meta for meta in await image_cache.list() if meta.node_id == "1:2"]
        assert fresh.size == 5
        assert fresh.mime_type == "image/png"
        assert fresh.key == key

    @pytest.mark.asyncio
    async def test_contains(self, image_cache: ImageCache) -> None:
        key = make_key()
        assert not await image_cache.contains(key)
        await image_cache.register(key, URL_1, ExportFormat.PNG)
        assert await image_cache.contains(key)


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_concurrent_register_and_read_distinct_keys(
        self, image_cache: ImageCache, fetcher: FakeFetcher
    ) -> None:
        count = 50
        keys = [make_key(node_id=f"{i}:1") for i in range(count)]
        for i in range(count):
            fetcher.payloads[f"https://example.com/exports/{i}.png"] = f"bytes-{i}".encode()

        await asyncio.gather(
            *(
                image_cache.register(key, f"https://example.com/exports/{i}.png", ExportFormat.PNG)
                for i, key in enumerate(keys)
            )
        )
        results = await asyncio.gather(*(image_cache.read(key) for key in keys))

        assert results == [f"bytes-{i}".encode() for i in range(count)]
        assert len(await image_cache.list()) == count

    @pytest.mark.asyncio
    async def test_download_does_not_block_other_keys(self, fetcher: FakeFetcher) -> None:
        release = asyncio.Event()

        async def blocking_fetch(url: str) -> bytes:
            if url == URL_1:
                await release.wait()
            return url.encode()

        cache = ImageCache(fetch=blocking_fetch)
        slow_key, other_key = make_key("1:1"), make_key("2:2")
        await cache.register(slow_key, URL_1, ExportFormat.PNG)

        slow_read = asyncio.create_task(cache.read(slow_key))
        await asyncio.sleep(0)

        # Registration and reads of other keys proceed while the download hangs.
        await asyncio.wait_for(cache.register(other_key, URL_2, ExportFormat.PNG), timeout=1)
        assert await asyncio.wait_for(cache.read(other_key), timeout=1) == URL_2.encode()
        assert not slow_read.done()

        release.set()
        assert await slow_read == URL_1.encode()
