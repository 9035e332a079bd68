from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Transport = Literal["stdio", "streamable-http"]


class ServerSettings(BaseSettings):
    """Stateless server settings.

    All settings can be configured via environment variables with the prefix
    MCP_STATELESS_. For example, MCP_STATELESS_PORT=3001 will set port=3001.
    """

    model_config = SettingsConfigDict(
        env_prefix="MCP_STATELESS_",
        env_file=".env",
        extra="ignore",
    )

    # Server settings
    name: str = "stateless-server"
    version: str = "1.0.0"
    log_level: LogLevel = "INFO"
    transport: Transport = "streamable-http"

    # HTTP settings
    host: str = "127.0.0.1"
    port: int = 3000
    streamable_http_path: str = "/mcp"
    json_response: bool = False
    """Return plain JSON responses instead of SSE streams."""
