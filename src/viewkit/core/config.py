"""Configuration Management."""

import os
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _default_api_key() -> str:
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="VIEWKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    http_host: str = Field(default="0.0.0.0", description="HTTP bind address")
    http_port: int = Field(default=8765, gt=0, description="HTTP port")

    # Host callbacks
    host_url: str = Field(default="http://localhost:3000", description="Embedding host URL")
    host_timeout: float = Field(default=5.0, gt=0, description="Host request timeout")
    tool_call_timeout: float = Field(default=30.0, gt=0, description="Direct tool call timeout")
    context_update_timeout: float = Field(
        default=5.0, gt=0, description="Narration (model context update) timeout"
    )

    # Generation collaborator
    gemini_api_key: str = Field(default_factory=_default_api_key, description="Gemini API key")
    gemini_model: str = Field(default="gemini-2.0-flash", description="Gemini model name")
    gemini_temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Model temperature")
    gemini_max_tokens: int = Field(default=8192, gt=0, description="Max output tokens")
    generation_timeout: float = Field(default=60.0, gt=0, description="Generation call timeout")

    # Density constraints handed to the generator
    max_tree_nodes: int = Field(default=15, gt=0, description="Max nodes in a generated tree")
    max_table_rows: int = Field(default=8, gt=0, description="Max rows per generated table")

    # Limits
    max_prompt_length: int = Field(default=4000, gt=0, description="Max prompt length")
    max_response_size: int = Field(default=256 * 1024, gt=0, description="Max raw reply size")
    max_tracked_changes: int = Field(default=500, gt=0, description="Change tracker capacity")
    render_max_depth: int = Field(default=32, gt=0, description="Max rendered nesting depth")
    render_max_nodes: int = Field(default=1000, gt=0, description="Max nodes produced by one render")

    # Auto-save
    auto_save_debounce: float = Field(default=3.0, ge=0, description="Auto-save debounce seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
