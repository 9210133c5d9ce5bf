from figma_server.deps import get_image_cache
from figma_server.models.responses import ExportListResponse


async def list_exported_images() -> ExportListResponse:
    """List images exported so far in this session, with their resource URIs."""
    exports = await get_image_cache().list()
    exports.sort(key=lambda meta: meta.registered_at)
    return ExportListResponse(exports=exports, total=len(exports))
