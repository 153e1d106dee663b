"""Core utilities and infrastructure."""

from .config import Settings, UnknownComponentPolicy, get_settings
from .validate import (
    ValidationError,
    ValidationResult,
    PreviewRequest,
    SnippetRequest,
    validate_source,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import safe_json_dumps
from .hash import hash_string, hash_fields
from .cache import LRUCache, Stats


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "UnknownComponentPolicy",
    "get_settings",
    # Validation
    "ValidationError",
    "ValidationResult",
    "PreviewRequest",
    "SnippetRequest",
    "validate_source",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "safe_json_dumps",
    # DI
    "create_container",
    # Hashing
    "hash_string",
    "hash_fields",
    # Caching
    "LRUCache",
    "Stats",
]
