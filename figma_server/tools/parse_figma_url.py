from typing import Annotated

from pydantic import Field

from figma_server.models.url import ParsedUrl
from figma_server.utils.url_parser import parse_figma_url as _parse


async def parse_figma_url(
    url: Annotated[
        str,
        Field(
            description="Figma file or design URL to parse. REQUIRED. Examples: 'https://www.figma.com/design/ABC123/My-File?node-id=1-2', 'https://www.figma.com/file/ABC123/Old-File?node-id=1%3A2'. The https:// prefix may be omitted."
        ),
    ],
) -> ParsedUrl:
    """Parse a Figma URL into its file key and optional node ID. Use first, then pass file_key to the other tools."""
    return _parse(url)
