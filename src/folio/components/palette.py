"""
Component Palette
Authoring metadata for the registered components and the snippet builder
behind the editor's "insert component" form.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from returns.result import Failure, Result, Success

from ..core import ValidationError, safe_json_dumps
from ..core.validate import ValidationResult
from .models import format_number
from .registry import ComponentKind


class PropType(str, Enum):
    """Editor input kinds for component props."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    ENUM = "enum"


class PropSpec(BaseModel):
    """Prop definition shown in the insertion form."""

    name: str
    label: str
    type: PropType
    required: bool = False
    options: list[str] = Field(default_factory=list)
    description: str | None = None


class ComponentSpec(BaseModel):
    """Palette entry for one registered component."""

    name: str = Field(..., description="MDX tag name")
    label: str = Field(..., description="Human-readable name")
    props: list[PropSpec] = Field(default_factory=list)
    has_children: bool = False
    example: str = ""

    def prop(self, name: str) -> PropSpec | None:
        for spec in self.props:
            if spec.name == name:
                return spec
        return None


PALETTE: tuple[ComponentSpec, ...] = (
    ComponentSpec(
        name=ComponentKind.CALLOUT.tag,
        label="Callout (info/warning/note)",
        props=[
            PropSpec(name="title", label="Title", type=PropType.STRING),
            PropSpec(name="icon", label="Icon Emoji", type=PropType.STRING),
            PropSpec(
                name="type",
                label="Type",
                type=PropType.ENUM,
                options=["info", "warning", "success", "error"],
            ),
        ],
        has_children=True,
        example='<Callout title="Note" icon="💡" type="info">Content here</Callout>',
    ),
    ComponentSpec(
        name=ComponentKind.TECH_STACK.tag,
        label="Project Tech Stack",
        props=[
            PropSpec(
                name="technologies",
                label="Technologies (array)",
                type=PropType.ARRAY,
                required=True,
                description="e.g. Next.js, TypeScript, MongoDB",
            ),
        ],
        example="<ProjectTechStack technologies={[{ name: 'Next.js', icon: '▲', role: 'primary' }]} />",
    ),
    ComponentSpec(
        name=ComponentKind.TIMELINE.tag,
        label="Project Timeline",
        props=[
            PropSpec(
                name="items",
                label="Timeline Items (array)",
                type=PropType.ARRAY,
                required=True,
                description="[{ date, title, description, status }]",
            ),
        ],
        example=(
            "<ProjectTimeline items={[{ date: '2025-01', title: 'Start', "
            "description: '...', status: 'completed' }]} />"
        ),
    ),
    ComponentSpec(
        name=ComponentKind.FEATURE_SHOWCASE.tag,
        label="Project Feature Showcase",
        props=[
            PropSpec(
                name="groups",
                label="Feature Groups (array)",
                type=PropType.ARRAY,
                required=True,
                description="[{ title, image, features: [{ title, description, status }] }]",
            ),
        ],
        example=(
            "<ProjectFeatureShowcase groups={[{ title: 'Core', image: '/img.png', "
            "features: [{ title: 'X', description: '...', status: 'implemented' }] }]} />"
        ),
    ),
    ComponentSpec(
        name=ComponentKind.METRICS.tag,
        label="Project Metrics",
        props=[
            PropSpec(
                name="metrics",
                label="Metrics (array)",
                type=PropType.ARRAY,
                required=True,
                description="[{ label, value, icon, progress }]",
            ),
        ],
        example="<ProjectMetrics metrics={[{ label: 'Performance', value: '95%', icon: '⚡', progress: 95 }]} />",
    ),
    ComponentSpec(
        name=ComponentKind.CHALLENGE_CARD.tag,
        label="Project Challenge Card",
        props=[
            PropSpec(name="title", label="Title", type=PropType.STRING, required=True),
            PropSpec(name="challenge", label="Challenge", type=PropType.STRING, required=True),
            PropSpec(name="solution", label="Solution", type=PropType.STRING, required=True),
            PropSpec(name="impact", label="Impact", type=PropType.STRING),
            PropSpec(
                name="difficulty",
                label="Difficulty",
                type=PropType.ENUM,
                options=["easy", "medium", "hard"],
            ),
            PropSpec(name="domain", label="Domain", type=PropType.STRING),
        ],
        example='<ProjectChallengeCard title="..." challenge="..." solution="..." />',
    ),
)

_BY_NAME = {spec.name: spec for spec in PALETTE}


def get_spec(name: str) -> ComponentSpec | None:
    """Palette entry by tag name."""
    return _BY_NAME.get(name)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_type(prop: PropSpec, value: Any) -> str | None:
    """Return an error message when the value does not fit the prop type."""
    if prop.type in (PropType.STRING, PropType.ENUM) and not isinstance(value, str):
        return f"'{prop.name}' must be a string"
    if prop.type == PropType.NUMBER and (
        isinstance(value, bool) or not isinstance(value, (int, float))
    ):
        return f"'{prop.name}' must be a number"
    if prop.type == PropType.BOOLEAN and not isinstance(value, bool):
        return f"'{prop.name}' must be a boolean"
    if prop.type == PropType.ARRAY and not isinstance(value, list):
        return f"'{prop.name}' must be an array"
    if prop.type == PropType.ENUM and value not in prop.options:
        return f"'{prop.name}' must be one of: {', '.join(prop.options)}"
    return None


def check_values(spec: ComponentSpec, values: dict[str, Any]) -> Result[None, ValidationResult]:
    """
    Validate form values against a component's prop schema.

    Blank values count as "not set"; unknown prop names are rejected.
    """
    for name, value in values.items():
        prop = spec.prop(name)
        if prop is None:
            return Failure(ValidationResult(f"Unknown prop '{name}' for <{spec.name}>", name, value))
        if _is_blank(value):
            continue
        if message := _check_type(prop, value):
            return Failure(ValidationResult(message, name, value))

    for prop in spec.props:
        if prop.required and _is_blank(values.get(prop.name)):
            return Failure(ValidationResult(f"'{prop.name}' is required for <{spec.name}>", prop.name))

    return Success(None)


def _format_prop(prop: PropSpec, value: Any) -> str:
    if prop.type in (PropType.STRING, PropType.ENUM):
        # JSX string attributes have no escapes; fall back to an expression
        if '"' in value:
            return f"{prop.name}={{{safe_json_dumps(value)}}}"
        return f'{prop.name}="{value}"'
    if prop.type == PropType.NUMBER:
        return f"{prop.name}={{{format_number(value)}}}"
    if prop.type == PropType.BOOLEAN:
        return f"{prop.name}={{{'true' if value else 'false'}}}"
    return f"{prop.name}={{{safe_json_dumps(value)}}}"


def build_snippet(spec: ComponentSpec, values: dict[str, Any], children: str = "") -> str:
    """
    Build the MDX tag for a component from form values.

    Props are emitted in schema order and blank values are skipped. Components
    without children produce a self-closing tag.

    Raises:
        ValidationError: If the values do not satisfy the prop schema
    """
    result = check_values(spec, values)
    if isinstance(result, Failure):
        raise ValidationError(result.failure().message)

    attrs = [
        _format_prop(prop, values[prop.name])
        for prop in spec.props
        if not _is_blank(values.get(prop.name))
    ]
    opening = f"<{spec.name}{' ' + ' '.join(attrs) if attrs else ''}"

    if not spec.has_children:
        return f"{opening} />"
    return f"{opening}>\n{children}\n</{spec.name}>"


__all__ = [
    "PropType",
    "PropSpec",
    "ComponentSpec",
    "PALETTE",
    "get_spec",
    "check_values",
    "build_snippet",
]
