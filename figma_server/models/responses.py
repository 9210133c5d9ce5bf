from pydantic import BaseModel, ConfigDict, Field

from figma_server.models.export import ExportFormat, ExportMetadata


class ExportImagesResponse(BaseModel):
    """Result of exporting nodes as images."""

    model_config = ConfigDict(extra="forbid")

    file_key: str = Field(..., description="Figma file key the nodes were exported from.")
    format: ExportFormat = Field(..., description="Export format used for every node.")
    scale: float = Field(..., description="Scale factor used for every node.")
    images: dict[str, str | None] = Field(
        ...,
        description="Map of node ID to Figma's temporary download URL (null if the node could not be rendered). URLs expire after a while; read the resources instead.",
    )
    resources: list[str] = Field(
        ...,
        description="Resource URIs of the exported images, e.g. 'figma://file/ABC123/node/1:2.png'. Read them to get the image data.",
    )
    failed_node_ids: list[str] = Field(
        default_factory=list,
        description="Node IDs Figma returned no image for.",
    )

    def __str__(self) -> str:
        lines = [f"Exported {len(self.resources)} image(s) from {self.file_key} as {self.format.value}:"]
        lines.extend(f"  {uri}" for uri in self.resources)
        if self.failed_node_ids:
            lines.append(f"Failed nodes: {', '.join(self.failed_node_ids)}")
        return "\n".join(lines)


class ExportListResponse(BaseModel):
    """Snapshot of all exported images known to the server."""

    model_config = ConfigDict(extra="forbid")

    exports: list[ExportMetadata] = Field(
        ...,
        description="Exported images, each with its resource URI, format, scale and download state.",
    )
    total: int = Field(..., description="Number of exported images.")

    def __str__(self) -> str:
        if not self.exports:
            return "No images exported yet"
        lines = [f"{self.total} exported image(s):"]
        for meta in self.exports:
            size = f"{meta.size} bytes" if meta.size is not None else "not downloaded"
            lines.append(f"  {meta.uri} ({meta.mime_type}, {meta.scale:g}x, {size})")
        return "\n".join(lines)
