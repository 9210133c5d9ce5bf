import sys

from loguru import logger

from figma_server.utils.settings import Environment, get_settings


def setup_logger() -> None:
    settings = get_settings()
    logger.remove()

    # stdout carries the MCP stdio transport, so logs always go to stderr
    if settings.ENV == Environment.LOCAL:
        logger.add(
            sys.stderr,
            level=settings.LOG_LEVEL,
            backtrace=True,
            diagnose=True,
            colorize=True,
        )
    else:
        # Structured logger
        logger.add(
            sys.stderr,
            level=settings.LOG_LEVEL,
            backtrace=True,
            diagnose=False,
            serialize=True,
        )
