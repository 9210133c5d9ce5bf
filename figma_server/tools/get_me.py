from typing import Any

from figma_server.deps import get_figma_client


async def get_me() -> dict[str, Any]:
    """Get the authenticated Figma user. Use to check that the access token works."""
    return await get_figma_client().get_me()
