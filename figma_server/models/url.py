from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# Character sets Figma uses for file keys and (instance) node IDs.
FILE_KEY_PATTERN = r"^[A-Za-z0-9]+$"
NODE_ID_PATTERN = r"^[A-Za-z0-9:;]+$"


class UrlKind(StrEnum):
    """Which path form a Figma file URL used."""

    FILE = "file"
    DESIGN = "design"


class ParsedUrl(BaseModel):
    """Identifiers extracted from a Figma file or design URL."""

    model_config = ConfigDict(frozen=True)

    file_key: str = Field(
        ...,
        description="Figma file key, copied verbatim from the URL (case-sensitive). Pass this as file_key to the other tools.",
    )
    node_id: str | None = Field(
        default=None,
        description="Node ID from the node-id query parameter in canonical '1:2' form, or null when the URL has none.",
    )
    url_kind: UrlKind = Field(
        ...,
        description="'file' for legacy /file/ links, 'design' for current /design/ links. Both refer to the same kind of resource.",
    )
    original_url: str = Field(
        ...,
        description="The URL exactly as it was given.",
    )

    def __str__(self) -> str:
        node = self.node_id if self.node_id is not None else "none"
        return f"Figma {self.url_kind} URL: file_key={self.file_key}, node_id={node}"
