# notevault/config.py
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

# Placeholder token; the HTTP transport refuses to start while it is in use.
DEFAULT_BEARER_TOKEN = "change-me"


class Settings(BaseSettings):
    # Vault (required at startup)
    OBSIDIAN_VAULT_PATH: str = ""
    # Extra confinement roots, comma separated (optional)
    OBSIDIAN_EXTRA_VAULT_PATHS: str = ""

    # Note operations
    NOTE_EXTENSION: str = ".md"
    SEARCH_LIMIT: int = 200
    READ_MAX_WORKERS: int = 8

    # HTTP MCP transport
    MCP_HTTP_HOST: str = "127.0.0.1"
    MCP_HTTP_PORT: int = 8080
    MCP_HTTP_PATH: str = "/mcp"

    # Security: Bearer token and allowed origins
    MCP_HTTP_BEARER_TOKEN: str = DEFAULT_BEARER_TOKEN  # set in .env
    MCP_HTTP_ALLOWED_ORIGINS: str = "http://localhost, http://127.0.0.1"
    MCP_HTTP_ALLOW_NO_ORIGIN: bool = True            # allow non-browser clients

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def vault_paths(self) -> List[str]:
        """Primary vault first, then any extra roots."""
        paths = [self.OBSIDIAN_VAULT_PATH.strip()] if self.OBSIDIAN_VAULT_PATH.strip() else []
        paths += [p.strip() for p in self.OBSIDIAN_EXTRA_VAULT_PATHS.split(",") if p.strip()]
        return paths
