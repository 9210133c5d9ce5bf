from enum import Enum
from functools import cache

from pydantic_settings import BaseSettings


class Environment(Enum):
    LOCAL = "local"
    DEV = "dev"
    PROD = "prod"


class Settings(BaseSettings):
    ENV: Environment = Environment.LOCAL
    LOG_LEVEL: str = "INFO"

    # Figma REST API
    # Personal access token: https://www.figma.com/developers/api#access-tokens
    FIGMA_TOKEN: str | None = None
    FIGMA_API_BASE: str = "https://api.figma.com/v1"
    FIGMA_HTTP_TIMEOUT: float = 30.0

    # MCP transport
    MCP_TRANSPORT: str = "stdio"  # stdio | http
    MCP_HOST: str = "0.0.0.0"
    MCP_PORT: int = 5000


@cache
def get_settings() -> Settings:
    return Settings()
