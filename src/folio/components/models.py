"""Prop models for the registered MDX components.

Every model is lenient: props arrive straight from author-written MDX, so
unknown keys are ignored and malformed values fall back to defaults instead of
raising. A renderer must always get a usable model out of any attribute bag.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


# ============================================================================
# Coercion helpers
# ============================================================================

def optional_text(value: Any) -> str | None:
    """Text for display, or None when absent or not text-like."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return value if value.strip() else None
    return None


def required_text(value: Any) -> str:
    """Like optional_text, but a missing value becomes an empty string."""
    return optional_text(value) or ""


def format_number(value: int | float) -> str:
    """Render numbers the way a JavaScript template literal would (95.0 -> "95")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coerce_enum(enum_cls: type[Enum], value: Any, default: Any = None) -> Any:
    """Case-insensitive enum lookup with a fallback."""
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            return default
    return default


def coerce_items(value: Any, model: type["LenientModel"], scalar_field: str | None = None) -> list:
    """
    Build a list of models from an author-supplied collection.

    Non-list values become an empty list; items that are not objects (or, when
    ``scalar_field`` is given, plain strings) or that fail validation are dropped.
    """
    if not isinstance(value, (list, tuple)):
        return []

    items = []
    for raw in value:
        if isinstance(raw, model):
            items.append(raw)
            continue
        if scalar_field and isinstance(raw, (str, int, float)) and not isinstance(raw, bool):
            raw = {scalar_field: raw}
        if not isinstance(raw, dict):
            continue
        try:
            item = model.model_validate(raw)
        except ValidationError:
            continue
        if item.is_usable():
            items.append(item)
    return items


class LenientModel(BaseModel):
    """Base for component props: ignore extras, never mutate."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    def is_usable(self) -> bool:
        """Whether a list item carries enough data to be displayed."""
        return True


# ============================================================================
# Callout
# ============================================================================

class CalloutType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


class CalloutProps(LenientModel):
    title: str | None = None
    icon: str | None = None
    type: CalloutType = CalloutType.INFO

    @field_validator("title", "icon", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str | None:
        return optional_text(v)

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v: Any) -> CalloutType:
        return coerce_enum(CalloutType, v, CalloutType.INFO)


# ============================================================================
# Tech stack
# ============================================================================

class TechCategory(str, Enum):
    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"
    DEVOPS = "devops"
    MOBILE = "mobile"
    TESTING = "testing"
    OTHER = "other"


class TechItem(LenientModel):
    name: str = ""
    icon: str | None = None
    role: str | None = None
    version: str | None = None
    category: TechCategory | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return required_text(v)

    @field_validator("icon", "role", "version", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str | None:
        return optional_text(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> TechCategory | None:
        return coerce_enum(TechCategory, v)

    def is_usable(self) -> bool:
        return bool(self.name)

    @property
    def label(self) -> str:
        return f"{self.name}, {self.role}" if self.role else self.name


class TechStackProps(LenientModel):
    technologies: list[TechItem] = Field(default_factory=list)

    @field_validator("technologies", mode="before")
    @classmethod
    def _items(cls, v: Any) -> list[TechItem]:
        return coerce_items(v, TechItem, scalar_field="name")


# ============================================================================
# Timeline
# ============================================================================

class TimelineStatus(str, Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    PLANNED = "planned"


class TimelineItem(LenientModel):
    date: str = ""
    title: str = ""
    description: str | None = None
    status: TimelineStatus | None = None

    @field_validator("date", "title", mode="before")
    @classmethod
    def _required(cls, v: Any) -> str:
        return required_text(v)

    @field_validator("description", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str | None:
        return optional_text(v)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> TimelineStatus | None:
        return coerce_enum(TimelineStatus, v)

    def is_usable(self) -> bool:
        return bool(self.title or self.date)


class TimelineProps(LenientModel):
    items: list[TimelineItem] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, v: Any) -> list[TimelineItem]:
        return coerce_items(v, TimelineItem)


# ============================================================================
# Feature showcase
# ============================================================================

class Feature(LenientModel):
    title: str = ""
    description: str = ""
    status: str | None = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _required(cls, v: Any) -> str:
        return required_text(v)

    @field_validator("status", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str | None:
        return optional_text(v)

    def is_usable(self) -> bool:
        return bool(self.title or self.description)


class FeatureGroup(LenientModel):
    title: str = ""
    image: str | None = None
    features: list[Feature] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return required_text(v)

    @field_validator("image", mode="before")
    @classmethod
    def _image(cls, v: Any) -> str | None:
        return optional_text(v)

    @field_validator("features", mode="before")
    @classmethod
    def _features(cls, v: Any) -> list[Feature]:
        return coerce_items(v, Feature, scalar_field="title")

    def is_usable(self) -> bool:
        return bool(self.title or self.features)


class FeatureShowcaseProps(LenientModel):
    groups: list[FeatureGroup] = Field(default_factory=list)

    @field_validator("groups", mode="before")
    @classmethod
    def _groups(cls, v: Any) -> list[FeatureGroup]:
        return coerce_items(v, FeatureGroup)


# ============================================================================
# Metrics
# ============================================================================

class Metric(LenientModel):
    label: str = ""
    value: str = ""
    icon: str | None = None
    progress: float | None = None

    @field_validator("label", "value", mode="before")
    @classmethod
    def _required(cls, v: Any) -> str:
        return required_text(v)

    @field_validator("icon", mode="before")
    @classmethod
    def _icon(cls, v: Any) -> str | None:
        return optional_text(v)

    @field_validator("progress", mode="before")
    @classmethod
    def _progress(cls, v: Any) -> float | None:
        """Numbers only, clamped to a percentage."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        if v != v:  # NaN
            return None
        return float(min(max(v, 0), 100))

    def is_usable(self) -> bool:
        return bool(self.label or self.value)

    @property
    def progress_text(self) -> str | None:
        return None if self.progress is None else format_number(self.progress)


class MetricsProps(LenientModel):
    metrics: list[Metric] = Field(default_factory=list)

    @field_validator("metrics", mode="before")
    @classmethod
    def _metrics(cls, v: Any) -> list[Metric]:
        return coerce_items(v, Metric)


# ============================================================================
# Challenge card
# ============================================================================

class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ChallengeCardProps(LenientModel):
    title: str = ""
    challenge: str = ""
    solution: str = ""
    impact: str | None = None
    difficulty: Difficulty | None = None
    domain: str | None = None

    @field_validator("title", "challenge", "solution", mode="before")
    @classmethod
    def _required(cls, v: Any) -> str:
        return required_text(v)

    @field_validator("impact", "domain", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str | None:
        return optional_text(v)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _difficulty(cls, v: Any) -> Difficulty | None:
        return coerce_enum(Difficulty, v)


__all__ = [
    "LenientModel",
    "CalloutType",
    "CalloutProps",
    "TechCategory",
    "TechItem",
    "TechStackProps",
    "TimelineStatus",
    "TimelineItem",
    "TimelineProps",
    "Feature",
    "FeatureGroup",
    "FeatureShowcaseProps",
    "Metric",
    "MetricsProps",
    "Difficulty",
    "ChallengeCardProps",
    "optional_text",
    "required_text",
    "format_number",
]
