import time
from typing import Any, override

from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from loguru import logger


class LoggingMiddleware(Middleware):
    """Logs every MCP request with its target and duration."""

    @override
    async def on_request(
        self,
        context: MiddlewareContext[Any],
        call_next: CallNext[Any, Any],
    ) -> Any:
        target = getattr(context.message, "name", None) or getattr(context.message, "uri", None)
        label = f"{context.method} {target}" if target else str(context.method)
        start = time.perf_counter()
        try:
            result = await call_next(context)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.warning(f"{label} failed after {elapsed_ms:.0f}ms: {exc}")
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"{label} completed in {elapsed_ms:.0f}ms")
        return result
