"""Middleware that renders server errors as concise tool errors for LLM agents.

``FigmaServerError`` subclasses become ``[ERROR_CODE] message`` strings, and
verbose Pydantic ``ValidationError`` messages (type metadata plus
``https://errors.pydantic.dev/`` URLs) are reduced to ``field: message`` pairs.
The tool manager wraps exceptions raised by tools, so the original error is
looked up along the ``__cause__`` chain.
"""

from typing import override

from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from fastmcp.tools.tool import ToolResult
from loguru import logger
from mcp.types import CallToolRequestParams
from pydantic import ValidationError as PydanticValidationError

from figma_server.utils.errors import ErrorCode, FigmaServerError, format_error


def format_validation_error(exc: PydanticValidationError) -> str:
    """Format a Pydantic ValidationError into a concise, URL-free string."""
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(segment) for segment in err["loc"])
        msg = err["msg"]
        parts.append(f"{loc}: {msg}" if loc else msg)
    return format_error(ErrorCode.VALIDATION_ERROR, "; ".join(parts))


def describe_error(exc: BaseException) -> str | None:
    """Return the client-facing message for a known error, or None."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, FigmaServerError):
            return current.formatted()
        if isinstance(current, PydanticValidationError):
            return format_validation_error(current)
        if isinstance(current, ValueError):
            return format_error(ErrorCode.VALIDATION_ERROR, str(current))
        current = current.__cause__
    return None


class FigmaErrorMiddleware(Middleware):
    """Turns server and validation errors into ``ToolError`` with a stable format."""

    @override
    async def on_call_tool(
        self,
        context: MiddlewareContext[CallToolRequestParams],
        call_next: CallNext[CallToolRequestParams, ToolResult],
    ) -> ToolResult:
        try:
            return await call_next(context)
        except Exception as exc:
            message = describe_error(exc)
            if message is None:
                raise
        logger.debug(f"Tool {context.message.name} failed: {message}")
        raise ToolError(message) from None
