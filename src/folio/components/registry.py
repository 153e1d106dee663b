"""Component Registry - the fixed set of custom MDX tags.

The same registry instance backs the live editor preview and the public page
renderer, so content that previews correctly publishes identically.
"""

from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Mapping

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape
from markupsafe import Markup, escape

from ..core import get_logger
from ..core.hash import hash_fields
from .models import (
    CalloutProps,
    ChallengeCardProps,
    FeatureShowcaseProps,
    LenientModel,
    MetricsProps,
    TechStackProps,
    TimelineProps,
)

logger = get_logger(__name__)


class ComponentKind(str, Enum):
    """Registered component variants, keyed by their MDX tag name."""

    CALLOUT = "Callout"
    TECH_STACK = "ProjectTechStack"
    TIMELINE = "ProjectTimeline"
    FEATURE_SHOWCASE = "ProjectFeatureShowcase"
    METRICS = "ProjectMetrics"
    CHALLENGE_CARD = "ProjectChallengeCard"

    @property
    def tag(self) -> str:
        return self.value


def _environment() -> Environment:
    return Environment(
        loader=PackageLoader("folio.components", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


class ComponentRegistry:
    """
    Immutable tag-name -> component lookup with explicit render dispatch.

    Built once per process via default_registry(); independently constructed
    instances carry identical bindings and the same fingerprint.
    """

    def __init__(self) -> None:
        self._kinds: Mapping[str, ComponentKind] = MappingProxyType(
            {kind.tag: kind for kind in ComponentKind}
        )
        self._env = _environment()
        self.fingerprint = hash_fields(*self._kinds)
        logger.debug("registry_built", components=len(self._kinds), fingerprint=self.fingerprint)

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._kinds)

    def lookup(self, tag: str) -> ComponentKind | None:
        """Resolve a tag name; None when it is not registered."""
        return self._kinds.get(tag)

    def __contains__(self, tag: object) -> bool:
        return tag in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)

    def parse_props(self, kind: ComponentKind, attrs: Mapping[str, Any]) -> LenientModel:
        """Turn an author attribute bag into the component's props model."""
        match kind:
            case ComponentKind.CALLOUT:
                return CalloutProps.model_validate(dict(attrs))
            case ComponentKind.TECH_STACK:
                return TechStackProps.model_validate(dict(attrs))
            case ComponentKind.TIMELINE:
                return TimelineProps.model_validate(dict(attrs))
            case ComponentKind.FEATURE_SHOWCASE:
                return FeatureShowcaseProps.model_validate(dict(attrs))
            case ComponentKind.METRICS:
                return MetricsProps.model_validate(dict(attrs))
            case ComponentKind.CHALLENGE_CARD:
                return ChallengeCardProps.model_validate(dict(attrs))
        raise ValueError(f"Unhandled component kind: {kind!r}")

    def render(
        self,
        kind: ComponentKind,
        attrs: Mapping[str, Any],
        children: Markup | str = "",
    ) -> Markup:
        """
        Render a registered component to HTML.

        Args:
            kind: Component variant
            attrs: Raw attribute bag from the MDX source
            children: Already-rendered nested content (plain strings are escaped)

        Returns:
            HTML markup
        """
        props = self.parse_props(kind, attrs)
        body = escape(children)

        match kind:
            case ComponentKind.CALLOUT:
                template = "callout.html"
            case ComponentKind.TECH_STACK:
                template = "tech_stack.html"
            case ComponentKind.TIMELINE:
                template = "timeline.html"
            case ComponentKind.FEATURE_SHOWCASE:
                template = "feature_showcase.html"
            case ComponentKind.METRICS:
                template = "metrics.html"
            case ComponentKind.CHALLENGE_CARD:
                template = "challenge_card.html"

        html = self._env.get_template(template).render(props=props, children=body)
        return Markup(html.strip())

    def render_tag(self, tag: str, attrs: Mapping[str, Any], children: Markup | str = "") -> Markup:
        """Render by tag name; raises KeyError for unregistered tags."""
        kind = self.lookup(tag)
        if kind is None:
            raise KeyError(tag)
        return self.render(kind, attrs, children)


@lru_cache(maxsize=1)
def default_registry() -> ComponentRegistry:
    """Process-wide registry shared by preview and publish."""
    return ComponentRegistry()


__all__ = ["ComponentKind", "ComponentRegistry", "default_registry"]
