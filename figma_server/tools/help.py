HELP_TEXT = """
# Figma MCP Server Help

Tools for reading Figma files by file key, with depth control to keep
responses small, and for exporting nodes as images.

## Workflow

1. Use `parse_figma_url` to get the file key (and node ID) from a Figma URL
2. Use the file key with the other tools
3. Keep `depth` low and drill down with `get_file_nodes`

## Tools

- `parse_figma_url`: file key and node ID from a file or design URL
- `get_file`: file structure, depth-limited (default: 1)
- `get_file_nodes`: specific nodes, depth-limited (default: 1)
- `export_images`: render nodes as png, jpg, svg or pdf
- `list_exported_images`: images exported so far, with resource URIs
- `get_me`: authenticated user (checks the token)

## Resources

Exported images are available as resources with URIs like
`figma://file/{file_key}/node/{node_id}.{format}`. Reading one returns the
image as base64 data. The image is downloaded on first read. Figma's export
URLs expire; if a read fails, run `export_images` again and re-read.

## Depth

- depth=1: files: pages only; nodes: direct children only
- depth=2: files: pages + top-level frames; nodes: children + grandchildren
- depth=3+: deeper traversal, responses grow quickly

To navigate a large file: `get_file` at depth=1 for pages, then
`get_file_nodes` on a page ID at depth=1, then on frame IDs as needed.

## Supported URL formats

- https://www.figma.com/file/FILE_KEY/title
- https://www.figma.com/file/FILE_KEY/title?node-id=1%3A2
- https://www.figma.com/design/FILE_KEY/title?node-id=1-2

## Authentication

Set a personal access token in the environment:
export FIGMA_TOKEN="your_figma_token_here"

Get a token from: https://www.figma.com/developers/api#access-tokens
""".strip()


async def help() -> str:
    """How to use this Figma server: workflow, tools, resources and URL formats."""
    return HELP_TEXT
