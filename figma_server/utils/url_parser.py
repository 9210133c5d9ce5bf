"""Parse shared Figma links into file keys and node IDs.

Figma has used two path forms for the same file resource over time:

- legacy: ``https://www.figma.com/file/{file_key}/{title}``
- current: ``https://www.figma.com/design/{file_key}/{title}``

Either may carry a ``node-id`` query parameter, written as ``1-2`` in newer
links and ``1%3A2`` (an encoded ``1:2``) in older ones. Both normalize to
``1:2``, the form the REST API expects.
"""

import re
from re import Pattern
from urllib.parse import parse_qs, unquote, urlsplit

from figma_server.models.url import NODE_ID_PATTERN, ParsedUrl, UrlKind
from figma_server.utils.errors import UrlParseError

FIGMA_HOSTS = frozenset({"figma.com", "www.figma.com"})

# Tried in order; the first match wins.
PATH_PATTERNS: tuple[tuple[UrlKind, Pattern[str]], ...] = (
    (UrlKind.FILE, re.compile(r"^/file/(?P<file_key>[A-Za-z0-9]+)(?:/|$)")),
    (UrlKind.DESIGN, re.compile(r"^/design/(?P<file_key>[A-Za-z0-9]+)(?:/|$)")),
)

NODE_ID_PARAM = "node-id"
_NODE_ID_RE = re.compile(NODE_ID_PATTERN)
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def normalize_node_id(raw: str) -> str | None:
    """Return ``raw`` in canonical ``1:2`` form, or None if it is not a node ID.

    ``raw`` must already be percent-decoded.
    """
    node_id = raw.strip().replace("-", ":")
    if not node_id or not _NODE_ID_RE.match(node_id):
        return None
    return node_id


def parse_node_ids(node_ids: str) -> list[str]:
    """Split a comma-separated node ID list, normalizing each entry.

    Raises:
        ValueError: if the list is empty or contains something that is not a node ID.
    """
    parsed: list[str] = []
    for raw in node_ids.split(","):
        if not raw.strip():
            continue
        node_id = normalize_node_id(unquote(raw))
        if node_id is None:
            raise ValueError(f"Invalid node ID: {raw.strip()!r}")
        if node_id not in parsed:
            parsed.append(node_id)
    if not parsed:
        raise ValueError("At least one node ID is required")
    return parsed


def _extract_node_id(query: str) -> str | None:
    values = parse_qs(query).get(NODE_ID_PARAM)
    if not values:
        return None
    return normalize_node_id(values[0])


def parse_figma_url(raw_url: str) -> ParsedUrl:
    """Parse a Figma file or design URL.

    The scheme may be omitted (``figma.com/design/...``). The node ID is
    optional; a missing or malformed ``node-id`` yields ``node_id=None``
    rather than an error.

    Raises:
        UrlParseError: if the input is not a recognized Figma file URL.
    """
    text = raw_url.strip() if isinstance(raw_url, str) else ""
    if not text:
        raise UrlParseError("URL is required")

    candidate = text if _SCHEME_RE.match(text) else f"https://{text}"
    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        raise UrlParseError(f"Not a recognized Figma file URL: {raw_url} ({exc})") from exc

    if parts.scheme not in ("http", "https") or parts.hostname not in FIGMA_HOSTS:
        raise UrlParseError(f"Not a Figma URL: {raw_url}")

    for kind, pattern in PATH_PATTERNS:
        match = pattern.match(parts.path)
        if match is None:
            continue
        return ParsedUrl(
            file_key=match["file_key"],
            node_id=_extract_node_id(parts.query),
            url_kind=kind,
            original_url=raw_url,
        )

    raise UrlParseError(
        f"Not a recognized Figma file URL: {raw_url}. "
        "Expected https://www.figma.com/file/<key>/... or https://www.figma.com/design/<key>/..."
    )
