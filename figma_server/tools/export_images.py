from typing import Annotated

from fastmcp import Context
from loguru import logger
from pydantic import Field

from figma_server.deps import get_figma_client, get_image_cache
from figma_server.models.export import ExportFormat, ExportResourceKey
from figma_server.models.responses import ExportImagesResponse
from figma_server.models.url import FILE_KEY_PATTERN
from figma_server.resources import publish_exports
from figma_server.utils.url_parser import normalize_node_id, parse_node_ids


async def export_images(
    file_key: Annotated[
        str,
        Field(
            pattern=FILE_KEY_PATTERN,
            description="Figma file key (get it from parse_figma_url). REQUIRED. Example: 'ABC123'.",
        ),
    ],
    node_ids: Annotated[
        str,
        Field(
            description="Comma-separated node IDs to render. REQUIRED. Accepts '1:2' or '1-2' notation. Example: '1:2,3:4'."
        ),
    ],
    ctx: Context,
    format: Annotated[
        str,
        Field(description="Export format: 'png', 'jpg', 'svg' or 'pdf'. Default: 'png'."),
    ] = "png",
    scale: Annotated[
        float,
        Field(
            ge=0.01,
            le=4,
            description="Scale factor between 0.01 and 4. Default: 1.0. Ignored by Figma for svg.",
        ),
    ] = 1.0,
) -> ExportImagesResponse:
    """Export nodes as images. Each image becomes a resource (figma://file/{file_key}/node/{node_id}.{format}) readable as base64 data."""
    export_format = ExportFormat.parse(format)
    ids = parse_node_ids(node_ids)

    result = await get_figma_client().export_images(
        file_key, ids, format=export_format, scale=scale
    )
    images: dict[str, str | None] = result.get("images") or {}

    cache = get_image_cache()
    resources: list[str] = []
    failed: list[str] = []
    for raw_node_id, url in images.items():
        node_id = normalize_node_id(raw_node_id)
        if node_id is None or not url:
            failed.append(node_id or raw_node_id)
            continue
        key = ExportResourceKey(file_key=file_key, node_id=node_id, format=export_format)
        await cache.register(key, url, scale=scale)
        resources.append(key.uri)

    if resources:
        await publish_exports(ctx.fastmcp)
    logger.info(f"Exported {len(resources)} image(s) from {file_key} ({len(failed)} failed)")

    return ExportImagesResponse(
        file_key=file_key,
        format=export_format,
        scale=scale,
        images=images,
        resources=resources,
        failed_node_ids=failed,
    )
