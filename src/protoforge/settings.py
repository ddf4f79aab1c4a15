"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the Protoforge REST API and MCP servers.

    Values are read from environment variables and from a ``.env`` file
    in the working directory.  See ``.env.example`` for all options.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # Cloud Run injects PORT; takes precedence over api_server_port

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (Cloud Run PORT takes precedence)."""
        return self.port if self.port is not None else self.api_server_port

    # Request body limits
    max_body_bytes_content: int = 5 * 1024 * 1024  # version/artifact payloads
    max_body_bytes_default: int = 1 * 1024 * 1024

    # Versioning
    append_max_retries: int = 3
    message_revert_fallback: Literal["oldest", "none"] = "oldest"
    default_visibility: Literal["public", "private", "unlisted"] = "public"

    # Events
    event_history_size: int = 100

    # MCP
    mcp_transport: Literal["stdio", "http", "sse"] = "stdio"
    mcp_server_host: str = "localhost"
    mcp_server_port: int = 9000
