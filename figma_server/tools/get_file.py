from typing import Annotated, Any

from pydantic import Field

from figma_server.deps import get_figma_client
from figma_server.models.url import FILE_KEY_PATTERN


async def get_file(
    file_key: Annotated[
        str,
        Field(
            pattern=FILE_KEY_PATTERN,
            description="Figma file key (get it from parse_figma_url). REQUIRED. Example: 'ABC123'.",
        ),
    ],
    depth: Annotated[
        int,
        Field(
            ge=1,
            description="How deep to traverse the document tree. 1 = pages only, 2 = pages + top-level frames, and so on. Default: 1. Larger values can return very large responses.",
        ),
    ] = 1,
) -> dict[str, Any]:
    """Get a Figma file's document tree, limited to the given depth."""
    return await get_figma_client().get_file(file_key, depth=depth)
