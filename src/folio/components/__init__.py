"""
MDX Components
Registry, prop models and authoring palette for the custom block components.
"""

from .registry import ComponentKind, ComponentRegistry, default_registry
from .palette import PALETTE, ComponentSpec, PropSpec, PropType, build_snippet, check_values, get_spec

__all__ = [
    "ComponentKind",
    "ComponentRegistry",
    "default_registry",
    "PALETTE",
    "ComponentSpec",
    "PropSpec",
    "PropType",
    "build_snippet",
    "check_values",
    "get_spec",
]
