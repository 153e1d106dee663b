"""
MDX Parser
Splits MDX source into Markdown text, JSX elements and literal expressions.

Markdown itself is left untouched here; text chunks are handed to
markdown-it by the renderer. The parser only has to find the JSX and
expression constructs, skipping fenced code and code spans, and report
malformed ones with a source position.
"""

import html
import re
from dataclasses import dataclass, field
from typing import Any, Union

from ..core import get_logger
from .errors import MDXSyntaxError, SourceMap
from .literals import EMPTY, evaluate_literal

logger = get_logger(__name__)

# Placeholder delimiters used by the renderer; never allowed through from source
PLACEHOLDER_OPEN = "\ue000"
PLACEHOLDER_CLOSE = "\ue001"

_NAME_START = re.compile(r"[A-Za-z_$]")
_TAG_NAME = re.compile(r"[A-Za-z_$][\w$-]*(?::[A-Za-z_$][\w$-]*)?")
_ATTR_NAME = re.compile(r"[A-Za-z_$][\w$:-]*")
_FENCE_OPEN = re.compile(r"[ \t]*(`{3,}|~{3,})")
_URI_AUTOLINK = re.compile(r"<[A-Za-z][A-Za-z0-9+.-]{1,31}:[^\s<>]*>")
_EMAIL_AUTOLINK = re.compile(
    r"<[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*>"
)


# ============================================================================
# Nodes
# ============================================================================

@dataclass
class Text:
    """Raw Markdown."""

    value: str


@dataclass
class Expression:
    """Evaluated ``{...}`` in text position."""

    value: Any
    start: int
    end: int


@dataclass
class Element:
    """
    A JSX element.

    ``name`` is empty for fragments. ``flow`` marks an element that occupies
    its own lines and therefore renders as a block; ``block_children`` marks
    children that span lines and render as block Markdown.
    """

    name: str
    attrs: dict[str, Any]
    start: int
    open_end: int
    children: list["Node"] = field(default_factory=list)
    end: int = -1
    self_closing: bool = False
    flow: bool = False
    block_children: bool = False
    source: str = ""

    @property
    def is_fragment(self) -> bool:
        return not self.name

    @property
    def is_intrinsic(self) -> bool:
        return bool(self.name) and self.name[0].islower()

    @property
    def label(self) -> str:
        return f"<{self.name}>"


Node = Union[Text, Expression, Element]


@dataclass
class Document:
    children: list[Node]
    source_map: SourceMap


# ============================================================================
# Parser
# ============================================================================

class MDXParser:
    """Single-pass scanner over an MDX document."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.source_map = SourceMap(source)
        self.pos = 0
        self._text_start = 0
        self._root: list[Node] = []
        self._stack: list[Element] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self) -> Document:
        """
        Parse the whole document.

        Raises:
            MDXSyntaxError: On the first malformed construct
        """
        source = self.source
        length = len(source)

        while self.pos < length:
            char = source[self.pos]

            if self._at_line_start() and self._skip_fence():
                continue
            if char == "\\":
                self.pos = min(self.pos + 2, length)
            elif char == "`":
                self._skip_code_span()
            elif char == "{":
                self._text_expression()
            elif char == "<":
                self._angle()
            else:
                self.pos += 1

        self._flush(length)

        if self._stack:
            element = self._stack[-1]
            self._fail(
                f"Expected a closing tag for `{element.label}` "
                f"({self.source_map.span(element.start, element.open_end)}) "
                "before the end of the document",
                element.start,
            )

        return Document(self._root, self.source_map)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fail(self, reason: str, at: int) -> None:
        line, column = self.source_map.locate(at)
        raise MDXSyntaxError(reason, line, column)

    def _describe(self, at: int) -> str:
        if at >= len(self.source):
            return "end of file"
        char = self.source[at]
        return f"character `{char}` (U+{ord(char):04X})"

    @property
    def _children(self) -> list[Node]:
        return self._stack[-1].children if self._stack else self._root

    def _flush(self, upto: int) -> None:
        """Move pending text into the current children list."""
        if upto > self._text_start:
            text = self.source[self._text_start:upto]
            text = text.replace(PLACEHOLDER_OPEN, "\ufffd").replace(PLACEHOLDER_CLOSE, "\ufffd")
            self._children.append(Text(text))
        self._text_start = upto

    def _at_line_start(self) -> bool:
        return self.pos == 0 or self.source[self.pos - 1] == "\n"

    def _skip_ws(self) -> None:
        source = self.source
        while self.pos < len(source) and source[self.pos].isspace():
            self.pos += 1

    # ------------------------------------------------------------------
    # Code
    # ------------------------------------------------------------------

    def _skip_fence(self) -> bool:
        match = _FENCE_OPEN.match(self.source, self.pos)
        if not match:
            return False

        marker = match.group(1)
        closing = re.compile(
            rf"^[ \t]*{re.escape(marker[0])}{{{len(marker)},}}[ \t]*$", re.MULTILINE
        )
        body_start = self.source.find("\n", match.end())
        if body_start == -1:
            self.pos = len(self.source)
            return True

        close = closing.search(self.source, body_start + 1)
        self.pos = close.end() if close else len(self.source)
        return True

    def _skip_code_span(self) -> None:
        source = self.source
        start = self.pos
        while self.pos < len(source) and source[self.pos] == "`":
            self.pos += 1
        run = self.pos - start

        close = re.compile(rf"(?<!`)`{{{run}}}(?!`)").search(source, self.pos)
        if close:
            self.pos = close.end()

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _find_brace(self, start: int) -> int:
        """Index of the ``}`` matching the ``{`` at ``start``."""
        source = self.source
        depth = 0
        index = start

        while index < len(source):
            char = source[index]
            if char in ("'", '"', "`"):
                index += 1
                while index < len(source) and source[index] != char:
                    index += 2 if source[index] == "\\" else 1
            elif source.startswith("//", index):
                newline = source.find("\n", index)
                index = len(source) if newline == -1 else newline
            elif source.startswith("/*", index):
                close = source.find("*/", index + 2)
                index = len(source) if close == -1 else close + 1
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return index
            index += 1

        self._fail(
            "Unexpected end of file in expression, expected a corresponding closing brace for `{`",
            start,
        )

    def _evaluate(self, start: int) -> tuple[Any, int]:
        """Evaluate the braced expression at ``start``; returns (value, end)."""
        close = self._find_brace(start)
        value = evaluate_literal(self.source[start + 1 : close], self.source_map, start + 1)
        return value, close + 1

    def _text_expression(self) -> None:
        start = self.pos
        self._flush(start)

        value, end = self._evaluate(start)
        if value is not EMPTY:
            self._children.append(Expression(value, start, end))

        self.pos = self._text_start = end

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def _angle(self) -> None:
        source = self.source
        start = self.pos
        nxt = source[start + 1 : start + 2]

        if nxt == "/":
            after = source[start + 2 : start + 3]
            if after == ">" or _NAME_START.match(after):
                self._closing_tag()
                return
        elif nxt == ">" or _NAME_START.match(nxt):
            if _URI_AUTOLINK.match(source, start) or _EMAIL_AUTOLINK.match(source, start):
                self.pos = source.find(">", start) + 1
                return
            self._opening_tag()
            return
        elif source.startswith("<!--", start):
            self._fail(
                "Unexpected character `!` (U+0021) before name, expected a character that "
                "can start a name, such as a letter, `$`, or `_` "
                "(note: to create a comment in MDX, use `{/* text */}`)",
                start + 1,
            )

        self.pos += 1

    def _tag_name(self) -> str:
        """Read an optional tag name at the current position."""
        match = _TAG_NAME.match(self.source, self.pos)
        if not match:
            return ""

        self.pos = match.end()
        if self.source[self.pos : self.pos + 1] == ".":
            self._fail(
                f"Member expressions in tag names (`{match.group()}.…`) are not supported",
                self.pos,
            )
        return match.group()

    def _opening_tag(self) -> None:
        start = self.pos
        self._flush(start)

        self.pos += 1
        name = self._tag_name()
        attrs = self._attributes(name) if name else {}
        self._skip_ws()

        if self.source.startswith("/>", self.pos):
            if not name:
                self._fail("Unexpected self-closing slash `/` in fragment", self.pos)
            self.pos += 2
            element = Element(name, attrs, start, self.pos, self_closing=True)
            self._finish(element, self.pos)
            self._children.append(element)
        elif self.source.startswith(">", self.pos):
            self.pos += 1
            element = Element(name, attrs, start, self.pos)
            self._children.append(element)
            self._stack.append(element)
        else:
            self._fail(
                f"Unexpected {self._describe(self.pos)} in tag, expected `>` or `/>`",
                self.pos,
            )

        self._text_start = self.pos

    def _attributes(self, tag: str) -> dict[str, Any]:
        source = self.source
        attrs: dict[str, Any] = {}

        while True:
            self._skip_ws()
            if self.pos >= len(source):
                self._fail(
                    f"Unexpected end of file in tag `<{tag}>`, expected an attribute name or tag end",
                    self.pos,
                )

            char = source[self.pos]
            if char in "/>":
                return attrs
            if char == "{":
                if source[self.pos + 1 : self.pos + 32].lstrip().startswith("..."):
                    self._fail("Spread attributes are not supported", self.pos)
                self._fail(
                    f"Unexpected {self._describe(self.pos)} in tag `<{tag}>`, expected an attribute name",
                    self.pos,
                )

            match = _ATTR_NAME.match(source, self.pos)
            if not match:
                self._fail(
                    f"Unexpected {self._describe(self.pos)} in tag `<{tag}>`, "
                    "expected an attribute name or tag end",
                    self.pos,
                )
            name = match.group()
            self.pos = match.end()
            self._skip_ws()

            if source.startswith("=", self.pos):
                self.pos += 1
                self._skip_ws()
                attrs[name] = self._attribute_value(name)
            else:
                attrs[name] = True

    def _attribute_value(self, name: str) -> Any:
        source = self.source
        start = self.pos
        char = source[start : start + 1]

        if char in ("'", '"'):
            close = source.find(char, start + 1)
            if close == -1:
                self._fail(
                    f"Unexpected end of file in attribute value, expected a closing `{char}`",
                    start,
                )
            self.pos = close + 1
            return html.unescape(source[start + 1 : close])

        if char == "{":
            value, self.pos = self._evaluate(start)
            if value is EMPTY:
                self._fail(
                    f"Unexpected empty expression as value of attribute `{name}`, expected a value",
                    start,
                )
            return value

        self._fail(
            f"Unexpected {self._describe(start)} before attribute value, "
            "expected a quote or an expression",
            start,
        )

    def _closing_tag(self) -> None:
        start = self.pos
        self.pos += 2
        self._skip_ws()
        name = self._tag_name()
        self._skip_ws()

        if not self.source.startswith(">", self.pos):
            self._fail(
                f"Unexpected {self._describe(self.pos)} in closing tag, expected `>`",
                self.pos,
            )
        self.pos += 1
        label = f"</{name}>"

        if not self._stack:
            self._fail(
                "Unexpected closing slash `/` in tag, expected an open tag first",
                start,
            )

        element = self._stack[-1]
        if element.name != name:
            self._fail(
                f"Unexpected closing tag `{label}`, expected corresponding closing tag for "
                f"`{element.label}` ({self.source_map.span(element.start, element.open_end)})",
                start,
            )

        self._flush(start)
        self._stack.pop()
        element.block_children = "\n" in self.source[element.open_end : start]
        self._finish(element, self.pos)
        self._text_start = self.pos

    def _finish(self, element: Element, end: int) -> None:
        source = self.source
        element.end = end
        element.source = source[element.start : end]

        line_start = source.rfind("\n", 0, element.start) + 1
        line_end = source.find("\n", end)
        rest = source[end:] if line_end == -1 else source[end:line_end]
        element.flow = not source[line_start : element.start].strip() and not rest.strip()


def parse(source: str) -> Document:
    """Parse MDX source into a document tree."""
    document = MDXParser(source).parse()
    logger.debug("mdx_parsed", nodes=len(document.children), length=len(source))
    return document


__all__ = [
    "PLACEHOLDER_OPEN",
    "PLACEHOLDER_CLOSE",
    "Text",
    "Expression",
    "Element",
    "Node",
    "Document",
    "MDXParser",
    "parse",
]
