"""Configuration Management."""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class RetentionPolicy(str, Enum):
    """What the surface store does when max_surfaces is reached."""

    REJECT = "reject"  # refuse new surfaces
    LRU = "lru"  # evict the least recently updated surface


class Settings(BaseSettings):
    """Runtime settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="A2UI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Server
    host: str = Field(default="127.0.0.1", description="HTTP bind host")
    port: int = Field(default=8765, gt=0, description="HTTP port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Catalog
    default_catalog_id: str = Field(default="standard", description="Catalog used when none is given")

    # Surfaces
    max_surfaces: int = Field(default=10, gt=0, description="Max live surfaces per session")
    retention_policy: RetentionPolicy = Field(
        default=RetentionPolicy.REJECT, description="Behaviour when max_surfaces is reached"
    )

    # Events
    action_debounce_ms: int = Field(default=300, ge=0, description="Per-component action debounce window")

    # Protocol
    max_message_size: int = Field(default=512 * 1024, gt=0, description="Max inbound message size (bytes)")
    max_json_depth: int = Field(default=20, gt=0, description="Max inbound JSON nesting depth")
    repair_json: bool = Field(default=False, description="Attempt to repair malformed JSON lines")

    # Rendering
    max_render_depth: int = Field(default=64, gt=0, description="Max component nesting during render")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
