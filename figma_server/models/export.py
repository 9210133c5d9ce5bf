"""Models describing exported images and their cache entries."""

import re
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from figma_server.models.url import FILE_KEY_PATTERN, NODE_ID_PATTERN
from figma_server.utils.errors import cache_miss_error

URI_SCHEME = "figma"

_MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "svg": "image/svg+xml",
    "pdf": "application/pdf",
}


class ExportFormat(StrEnum):
    """Image formats supported by the Figma images endpoint."""

    PNG = "png"
    JPG = "jpg"
    SVG = "svg"
    PDF = "pdf"

    @classmethod
    def parse(cls, value: str) -> "ExportFormat":
        """Parse a user-supplied format name, accepting 'jpeg' for 'jpg'."""
        normalized = value.strip().lower()
        if normalized == "jpeg":
            normalized = "jpg"
        try:
            return cls(normalized)
        except ValueError:
            supported = ", ".join(f.value for f in cls)
            raise ValueError(
                f"Unsupported export format: {value}. Supported formats: {supported}"
            ) from None

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self.value]


_URI_RE = re.compile(
    rf"^{URI_SCHEME}://file/(?P<file_key>[^/]+)/node/(?P<node_id>[^/]+)"
    rf"\.(?P<format>{'|'.join(f.value for f in ExportFormat)})$"
)


class ExportResourceKey(BaseModel):
    """Identity of one exported asset: (file_key, node_id, format)."""

    model_config = ConfigDict(frozen=True)

    file_key: str = Field(..., pattern=FILE_KEY_PATTERN)
    node_id: str = Field(..., pattern=NODE_ID_PATTERN)
    format: ExportFormat

    @property
    def uri(self) -> str:
        return f"{URI_SCHEME}://file/{self.file_key}/node/{self.node_id}.{self.format.value}"

    @classmethod
    def from_uri(cls, uri: str) -> "ExportResourceKey":
        """Recover the key encoded in a resource URI.

        Raises:
            CacheMiss: if ``uri`` does not have the export resource shape.
        """
        match = _URI_RE.match(uri)
        if match is None:
            raise cache_miss_error(uri)
        try:
            return cls(
                file_key=match["file_key"],
                node_id=match["node_id"],
                format=ExportFormat(match["format"]),
            )
        except ValidationError:
            raise cache_miss_error(uri) from None

    def __str__(self) -> str:
        return self.uri


class CacheEntry(BaseModel):
    """One registered export. Replaced wholesale, never edited in place."""

    model_config = ConfigDict(frozen=True)

    key: ExportResourceKey
    export_url: str
    format: ExportFormat
    scale: float = 1.0
    registered_at: datetime
    data: bytes | None = None

    @property
    def mime_type(self) -> str:
        return self.format.mime_type

    def metadata(self) -> "ExportMetadata":
        return ExportMetadata(
            uri=self.key.uri,
            file_key=self.key.file_key,
            node_id=self.key.node_id,
            format=self.format,
            mime_type=self.mime_type,
            scale=self.scale,
            registered_at=self.registered_at,
            size=len(self.data) if self.data is not None else None,
        )


class ExportMetadata(BaseModel):
    """Snapshot of a cache entry without its bytes."""

    model_config = ConfigDict(extra="forbid")

    uri: str = Field(
        ...,
        description="Resource URI to read the image from, e.g. 'figma://file/ABC123/node/1:2.png'.",
    )
    file_key: str = Field(..., description="Figma file key the image was exported from.")
    node_id: str = Field(..., description="Exported node ID in '1:2' form.")
    format: ExportFormat = Field(..., description="Export format: png, jpg, svg or pdf.")
    mime_type: str = Field(..., description="MIME type of the resource content.")
    scale: float = Field(..., description="Scale factor the image was exported at.")
    registered_at: datetime = Field(
        ...,
        description="UTC time the export URL was obtained from Figma.",
    )
    size: int | None = Field(
        default=None,
        description="Size in bytes once the image has been downloaded, null before the first read.",
    )

    @property
    def key(self) -> ExportResourceKey:
        return ExportResourceKey(file_key=self.file_key, node_id=self.node_id, format=self.format)
