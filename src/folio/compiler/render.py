"""
HTML Renderer
Turns a parsed MDX document into HTML.

Markdown text goes through markdown-it with raw HTML disabled. Elements and
expressions are swapped out for placeholders before the Markdown pass and
substituted back afterwards, so nothing an author writes as plain text can
become markup.
"""

import re
import textwrap
from typing import Any

from markdown_it import MarkdownIt
from markupsafe import Markup, escape

from ..components import ComponentRegistry
from ..components.models import format_number
from ..core import UnknownComponentPolicy, get_logger
from .errors import MDXEvaluationError, SourceMap
from .parser import PLACEHOLDER_CLOSE, PLACEHOLDER_OPEN, Document, Element, Expression, Node, Text

logger = get_logger(__name__)

# A placeholder alone in a paragraph is a block; unwrap it
_PLACEHOLDER = re.compile(
    rf"<p>{PLACEHOLDER_OPEN}(\d+){PLACEHOLDER_CLOSE}</p>\n?|{PLACEHOLDER_OPEN}(\d+){PLACEHOLDER_CLOSE}"
)

VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)
FORBIDDEN_ELEMENTS = frozenset({"script", "style", "iframe", "object"})
URL_ATTRIBUTES = frozenset({"href", "src", "action", "formaction", "poster"})

SAFE_URL_SCHEMES = frozenset({"http", "https", "mailto", "tel"})

_ATTRIBUTE_ALIASES = {"className": "class", "htmlFor": "for"}
_C0_AND_SPACE = "".join(chr(c) for c in range(0x21))
_URL_SCHEME = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*):")
_URL_STRIPPED = re.compile(r"[\t\n\r]")
_CAMEL = re.compile(r"(?<!^)([A-Z])")


def create_markdown(tables: bool = True, strikethrough: bool = True) -> MarkdownIt:
    """
    CommonMark parser with raw HTML disabled and optional GFM extensions.

    Indented code blocks are off, as in MDX: indentation inside component
    bodies is layout, not code. Fenced code still works.
    """
    md = MarkdownIt("commonmark", {"html": False}).disable("code")
    if tables:
        md.enable("table")
    if strikethrough:
        md.enable("strikethrough")
    return md


def _style(value: dict[str, Any]) -> str:
    """``{ marginTop: 4, color: 'red' }`` -> ``margin-top: 4px; color: red``."""
    rules = []
    for key, raw in value.items():
        if raw is None or isinstance(raw, bool) or isinstance(raw, (dict, list)):
            continue
        prop = key if key.startswith("--") else _CAMEL.sub(r"-\1", key).lower()
        if isinstance(raw, (int, float)):
            text = format_number(raw) + ("px" if raw != 0 else "")
        else:
            text = str(raw)
        rules.append(f"{prop}: {text}")
    return "; ".join(rules)


def is_safe_url(url: str) -> bool:
    """
    Relative URLs and http(s), mailto and tel links are allowed.

    The scheme is read the way browsers read it: surrounding C0 controls and
    spaces are trimmed and tabs or newlines anywhere are ignored, so
    `java<TAB>script:` counts as `javascript:`.
    """
    normalized = _URL_STRIPPED.sub("", url.strip(_C0_AND_SPACE))
    match = _URL_SCHEME.match(normalized)
    return match is None or match.group(1).lower() in SAFE_URL_SCHEMES


def _line_indent(parts: list[str]) -> str:
    """Whitespace between the last newline emitted so far and the current position."""
    if not parts:
        return ""
    tail = parts[-1].rsplit("\n", 1)[-1]
    return tail if not tail.strip() else ""


class HTMLRenderer:
    """Renders one document; instances are cheap and hold no per-source state."""

    def __init__(
        self,
        registry: ComponentRegistry,
        markdown: MarkdownIt,
        unknown_policy: UnknownComponentPolicy = UnknownComponentPolicy.LITERAL,
    ) -> None:
        self.registry = registry
        self.markdown = markdown
        self.unknown_policy = unknown_policy

    def render(self, document: Document) -> Markup:
        return self._nodes(document.children, document.source_map, block=True, nested=False)

    # ------------------------------------------------------------------
    # Node lists
    # ------------------------------------------------------------------

    def _nodes(self, nodes: list[Node], source_map: SourceMap, block: bool, nested: bool = True) -> Markup:
        parts: list[str] = []
        fragments: list[Markup] = []

        def placeholder(html: Markup) -> str:
            fragments.append(html)
            return f"{PLACEHOLDER_OPEN}{len(fragments) - 1}{PLACEHOLDER_CLOSE}"

        for node in nodes:
            if isinstance(node, Text):
                parts.append(node.value)
            elif isinstance(node, Expression):
                parts.append(placeholder(self._expression(node.value, node.start, source_map)))
            elif isinstance(node, Element):
                token = placeholder(self._element(node, source_map))
                if node.flow and block:
                    # Keep the tag's indentation so dedent still sees the common margin
                    indent = _line_indent(parts) if nested else ""
                    token = f"\n\n{indent}{token}\n\n"
                parts.append(token)

        def substitute(match: re.Match) -> str:
            if match.group(1) is not None:
                return f"{fragments[int(match.group(1))]}\n"
            return str(fragments[int(match.group(2))])

        text = "".join(parts)
        if block:
            rendered = self.markdown.render(textwrap.dedent(text) if nested else text)
        else:
            rendered = self.markdown.renderInline(text.strip())

        return Markup(_PLACEHOLDER.sub(substitute, rendered).strip())

    def _children(self, element: Element, source_map: SourceMap) -> Markup:
        if not element.children:
            return Markup("")
        return self._nodes(element.children, source_map, block=element.block_children)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _expression(self, value: Any, at: int, source_map: SourceMap) -> Markup:
        if value is None or isinstance(value, bool):
            return Markup("")
        if isinstance(value, (int, float)):
            return Markup(escape(format_number(value)))
        if isinstance(value, str):
            return escape(value)
        if isinstance(value, list):
            return Markup("").join(self._expression(item, at, source_map) for item in value)

        line, column = source_map.locate(at)
        raise MDXEvaluationError(
            "Objects are not valid as a child, use an array or a string instead", line, column
        )

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def _element(self, element: Element, source_map: SourceMap) -> Markup:
        if element.is_fragment:
            return self._children(element, source_map)
        if element.is_intrinsic:
            return self._intrinsic(element, source_map)

        kind = self.registry.lookup(element.name)
        if kind is None:
            return self._unknown(element, source_map)

        children = self._children(element, source_map)
        try:
            return self.registry.render(kind, element.attrs, children)
        except Exception as e:
            line, column = source_map.locate(element.start)
            logger.error("component_render_failed", component=element.name, error=str(e))
            raise MDXEvaluationError(f"Could not render `{element.label}`: {e}", line, column) from e

    def _unknown(self, element: Element, source_map: SourceMap) -> Markup:
        logger.debug("unknown_component", component=element.name, policy=self.unknown_policy.value)

        match self.unknown_policy:
            case UnknownComponentPolicy.OMIT:
                return Markup("")
            case UnknownComponentPolicy.ERROR:
                line, column = source_map.locate(element.start)
                raise MDXEvaluationError(
                    f"Expected component `{element.name}` to be defined: you likely forgot "
                    "to import, pass, or provide it.",
                    line,
                    column,
                )
        return Markup('<code class="mdx-unknown-component">{}</code>').format(element.source)

    def _intrinsic(self, element: Element, source_map: SourceMap) -> Markup:
        name = element.name.lower()
        if name in FORBIDDEN_ELEMENTS:
            line, column = source_map.locate(element.start)
            raise MDXEvaluationError(f"`<{element.name}>` elements are not allowed in content", line, column)

        attrs = self._html_attributes(element, source_map)
        opening = Markup("<{}{}>").format(Markup(element.name), attrs)

        if name in VOID_ELEMENTS:
            if element.children:
                line, column = source_map.locate(element.start)
                raise MDXEvaluationError(
                    f"`{element.label}` is a void element and cannot have children", line, column
                )
            return opening

        children = self._children(element, source_map)
        if element.block_children and children:
            children = Markup("\n{}\n").format(children)
        return Markup("{}{}</{}>").format(opening, children, Markup(element.name))

    def _html_attributes(self, element: Element, source_map: SourceMap) -> Markup:
        parts: list[Markup] = []

        for raw_name, value in element.attrs.items():
            if raw_name.lower().startswith("on"):
                continue
            name = _ATTRIBUTE_ALIASES.get(raw_name, raw_name)

            if value is None or value is False:
                continue
            if value is True:
                parts.append(Markup(" {}").format(Markup(name)))
                continue
            if name == "style" and isinstance(value, dict):
                value = _style(value)
            elif isinstance(value, dict):
                line, column = source_map.locate(element.start)
                raise MDXEvaluationError(
                    f"Attribute `{raw_name}` on `{element.label}` cannot be an object", line, column
                )
            elif isinstance(value, list):
                value = " ".join(format_number(v) if isinstance(v, (int, float)) else str(v) for v in value)
            elif isinstance(value, (int, float)):
                value = format_number(value)

            if name in URL_ATTRIBUTES and not is_safe_url(value):
                logger.warning("unsafe_url_dropped", element=element.name, attribute=name)
                continue
            parts.append(Markup(' {}="{}"').format(Markup(name), value))

        return Markup("").join(parts)


__all__ = ["HTMLRenderer", "create_markdown", "is_safe_url", "VOID_ELEMENTS"]
