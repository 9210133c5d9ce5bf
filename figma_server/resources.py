"""Expose exported images as MCP resources.

Every cache entry is published as a concrete resource so clients can list it.
A template on the same URI shape resolves any export URI back to its cache
key, so reads always go through the cache even for entries published before a
re-export replaced them.
"""

from fastmcp import FastMCP
from fastmcp.resources import FunctionResource
from loguru import logger

from figma_server.deps import get_image_cache
from figma_server.models.export import URI_SCHEME, ExportMetadata, ExportResourceKey

EXPORT_URI_TEMPLATE = f"{URI_SCHEME}://file/{{file_key}}/node/{{node_file}}"


def _reader(key: ExportResourceKey):
    async def read() -> bytes:
        return await get_image_cache().read(key)

    return read


def _to_resource(meta: ExportMetadata) -> FunctionResource:
    return FunctionResource.from_function(
        fn=_reader(meta.key),
        uri=meta.uri,
        name=f"Node {meta.node_id} Export",
        description=(
            f"Exported from Figma file {meta.file_key} as {meta.format.value} "
            f"({meta.scale:g}x scale)"
        ),
        mime_type=meta.mime_type,
    )


async def publish_exports(server: FastMCP) -> int:
    """Register a resource for every export currently in the cache."""
    exports = await get_image_cache().list()
    for meta in exports:
        server.add_resource(_to_resource(meta))
    logger.debug(f"Published {len(exports)} export resource(s)")
    return len(exports)


async def read_export(file_key: str, node_file: str) -> bytes:
    """Read an exported image by URI, downloading it on first access."""
    key = ExportResourceKey.from_uri(
        f"{URI_SCHEME}://file/{file_key}/node/{node_file}"
    )
    return await get_image_cache().read(key)
