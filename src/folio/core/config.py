"""Configuration Management."""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class UnknownComponentPolicy(str, Enum):
    """What the compiler does with capitalised tags missing from the registry."""

    LITERAL = "literal"  # Show the element source as escaped text
    OMIT = "omit"  # Render nothing
    ERROR = "error"  # Fail the compile


class Settings(BaseSettings):
    """Preview service settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="FOLIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=8010, gt=0, lt=65536, description="HTTP port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Caching
    enable_cache: bool = Field(default=True, description="Memoise compile results")
    cache_size: int = Field(default=256, gt=0, description="Compile cache max entries")
    cache_ttl: int = Field(default=900, gt=0, description="Compile cache TTL (seconds)")

    # Compiler
    max_source_length: int = Field(
        default=200_000, gt=0, description="Max MDX source length accepted over the wire"
    )
    unknown_component_policy: UnknownComponentPolicy = Field(
        default=UnknownComponentPolicy.LITERAL,
        description="Handling of unregistered capitalised tags",
    )
    markdown_tables: bool = Field(default=True, description="Enable GFM tables")
    markdown_strikethrough: bool = Field(default=True, description="Enable ~~strikethrough~~")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
