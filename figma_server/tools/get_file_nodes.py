from typing import Annotated, Any

from pydantic import Field

from figma_server.deps import get_figma_client
from figma_server.models.url import FILE_KEY_PATTERN
from figma_server.utils.url_parser import parse_node_ids


async def get_file_nodes(
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
            description="Comma-separated node IDs to fetch. REQUIRED. Accepts '1:2' or '1-2' notation. Example: '1:2,3:4'."
        ),
    ],
    depth: Annotated[
        int,
        Field(
            ge=1,
            description="How deep to traverse below each node. 1 = direct children only, 2 = children + grandchildren. Default: 1.",
        ),
    ] = 1,
) -> dict[str, Any]:
    """Get specific nodes of a Figma file. Use to drill into pages and frames found with get_file."""
    ids = parse_node_ids(node_ids)
    return await get_figma_client().get_file_nodes(file_key, ids, depth=depth)
