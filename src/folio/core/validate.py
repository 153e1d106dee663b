"""Request validation for the preview surface."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import get_settings


MAX_CHILDREN_LENGTH = 20_000
MAX_PROP_VALUES = 64


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)


class PreviewRequest(RequestValidator):
    """MDX source submitted for a one-shot preview or publish render.

    Blank sources are valid: they compile to the empty state.
    """

    source: str = Field(default="")

    @field_validator("source")
    @classmethod
    def validate_length(cls, v: str) -> str:
        """Reject sources above the configured limit."""
        limit = get_settings().max_source_length
        if len(v) > limit:
            raise ValueError(f"Source length {len(v)} exceeds maximum {limit}")
        return v


class SnippetRequest(RequestValidator):
    """Prop values used to build an MDX snippet for a palette component."""

    values: dict[str, Any] = Field(default_factory=dict)
    children: str = Field(default="", max_length=MAX_CHILDREN_LENGTH)

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: dict[str, Any]) -> dict[str, Any]:
        """Bound the number of props."""
        if len(v) > MAX_PROP_VALUES:
            raise ValueError(f"Too many prop values ({len(v)} > {MAX_PROP_VALUES})")
        return v


def validate_source(source: str) -> str:
    """
    Validate raw MDX source received outside a request model.

    Args:
        source: MDX source text

    Returns:
        The unchanged source

    Raises:
        ValidationError: If the source is not a string or is too long
    """
    if not isinstance(source, str):
        raise ValidationError(f"Source must be a string, got {type(source).__name__}")

    limit = get_settings().max_source_length
    if len(source) > limit:
        raise ValidationError(f"Source length {len(source)} exceeds maximum {limit}")
    return source
