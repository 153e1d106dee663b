"""JavaScript literal evaluation for MDX expressions.

Props such as ``technologies={[{ name: 'Next.js', icon: '▲' }]}`` are written
as JavaScript. Only literal values are evaluated: strings, numbers, booleans,
null/undefined, arrays and objects (bare or quoted keys, trailing commas,
comments). Identifiers, calls, operators and template interpolation are
rejected with a positioned diagnostic.
"""

import re
from typing import Any

from .errors import MDXSyntaxError, SourceMap


class _Empty:
    """Marker for an expression containing only whitespace and comments."""

    def __repr__(self) -> str:
        return "EMPTY"


EMPTY = _Empty()

_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F](?:_?[0-9a-fA-F])*"
    r"|0[bB][01](?:_?[01])*"
    r"|0[oO][0-7](?:_?[0-7])*"
    r"|(?:\d(?:_?\d)*(?:\.(?:\d(?:_?\d)*)?)?|\.\d(?:_?\d)*)(?:[eE][+-]?\d(?:_?\d)*)?"
)
_IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*")

_KEYWORDS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
    "Infinity": float("inf"),
    "NaN": float("nan"),
}

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class LiteralParser:
    """Recursive-descent parser over one expression body."""

    def __init__(self, text: str, source_map: SourceMap, offset: int = 0) -> None:
        self.text = text
        self.source_map = source_map
        self.offset = offset
        self.pos = 0

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def parse(self) -> Any:
        self._skip_trivia()
        if self.pos >= len(self.text):
            return EMPTY

        value = self._value()
        self._skip_trivia()
        if self.pos < len(self.text):
            self._fail(f"Unexpected {self._describe()} after value, expected the end of the expression")
        return value

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fail(self, reason: str, at: int | None = None) -> None:
        line, column = self.source_map.locate(self.offset + (self.pos if at is None else at))
        raise MDXSyntaxError(reason, line, column)

    def _describe(self) -> str:
        if self.pos >= len(self.text):
            return "end of expression"
        char = self.text[self.pos]
        return f"character `{char}` (U+{ord(char):04X})"

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _skip_trivia(self) -> None:
        """Skip whitespace, // line comments and /* block */ comments."""
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char.isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                newline = text.find("\n", self.pos)
                self.pos = len(text) if newline == -1 else newline + 1
            elif text.startswith("/*", self.pos):
                close = text.find("*/", self.pos + 2)
                if close == -1:
                    self._fail("Unterminated comment, expected `*/`")
                self.pos = close + 2
            else:
                break

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def _value(self) -> Any:
        char = self._peek()

        if char in ("'", '"'):
            return self._string(char)
        if char == "`":
            return self._template()
        if char == "[":
            return self._array()
        if char == "{":
            return self._object()
        if char in "+-" and char:
            self.pos += 1
            self._skip_trivia()
            operand = self._value()
            if isinstance(operand, bool) or not isinstance(operand, (int, float)):
                self._fail(f"Unary `{char}` is only supported before numbers")
            return -operand if char == "-" else operand
        if char.isdigit() or (char == "." and self.text[self.pos + 1 : self.pos + 2].isdigit()):
            return self._number()

        match = _IDENT_RE.match(self.text, self.pos)
        if match:
            word = match.group()
            if word in _KEYWORDS:
                self.pos = match.end()
                return _KEYWORDS[word]
            self._fail(
                f"Could not evaluate `{word}`: only literal values (strings, numbers, "
                "booleans, null, arrays and objects) are supported in expressions"
            )

        self._fail(f"Unexpected {self._describe()}, expected a value")

    def _number(self) -> int | float:
        match = _NUMBER_RE.match(self.text, self.pos)
        if not match:
            self._fail(f"Unexpected {self._describe()}, expected a number")
        raw = match.group().replace("_", "")
        self.pos = match.end()

        prefix = raw[:2].lower()
        if prefix == "0x":
            return int(raw, 16)
        if prefix == "0b":
            return int(raw, 2)
        if prefix == "0o":
            return int(raw, 8)
        if any(c in raw for c in ".eE"):
            return float(raw)
        return int(raw)

    def _string(self, quote: str) -> str:
        start = self.pos
        self.pos += 1
        chunks: list[str] = []
        text = self.text

        while self.pos < len(text):
            char = text[self.pos]
            if char == quote:
                self.pos += 1
                return "".join(chunks)
            if char == "\n":
                self._fail("Unterminated string literal", at=start)
            if char == "\\":
                chunks.append(self._escape())
                continue
            chunks.append(char)
            self.pos += 1

        self._fail(f"Unterminated string literal, expected a closing `{quote}`", at=start)

    def _escape(self) -> str:
        text = self.text
        self.pos += 1
        if self.pos >= len(text):
            self._fail("Unexpected end of expression in escape sequence")

        char = text[self.pos]
        self.pos += 1

        if char in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[char]
        if char == "\n":
            return ""  # line continuation
        if char == "x":
            digits = text[self.pos : self.pos + 2]
            if not re.fullmatch(r"[0-9a-fA-F]{2}", digits):
                self._fail("Invalid hexadecimal escape sequence")
            self.pos += 2
            return chr(int(digits, 16))
        if char == "u":
            if self._peek() == "{":
                close = text.find("}", self.pos)
                digits = text[self.pos + 1 : close] if close != -1 else ""
                if not re.fullmatch(r"[0-9a-fA-F]{1,6}", digits) or int(digits, 16) > 0x10FFFF:
                    self._fail("Invalid Unicode escape sequence")
                self.pos = close + 1
                return chr(int(digits, 16))
            digits = text[self.pos : self.pos + 4]
            if not re.fullmatch(r"[0-9a-fA-F]{4}", digits):
                self._fail("Invalid Unicode escape sequence")
            self.pos += 4
            return chr(int(digits, 16))
        return char

    def _template(self) -> str:
        start = self.pos
        self.pos += 1
        chunks: list[str] = []
        text = self.text

        while self.pos < len(text):
            char = text[self.pos]
            if char == "`":
                self.pos += 1
                return "".join(chunks)
            if text.startswith("${", self.pos):
                self._fail("Template literal interpolation is not supported")
            if char == "\\":
                chunks.append(self._escape())
                continue
            chunks.append(char)
            self.pos += 1

        self._fail("Unterminated template literal, expected a closing backtick", at=start)

    def _array(self) -> list[Any]:
        self.pos += 1
        items: list[Any] = []

        while True:
            self._skip_trivia()
            if self._peek() == "]":
                self.pos += 1
                return items
            if not self._peek():
                self._fail("Unexpected end of expression, expected `]`")
            if self.text.startswith("...", self.pos):
                self._fail("Spread elements are not supported in expressions")

            items.append(self._value())
            self._skip_trivia()

            if self._peek() == ",":
                self.pos += 1
            elif self._peek() != "]":
                self._fail(f"Unexpected {self._describe()} in array, expected `,` or `]`")

    def _object(self) -> dict[str, Any]:
        self.pos += 1
        result: dict[str, Any] = {}

        while True:
            self._skip_trivia()
            char = self._peek()
            if char == "}":
                self.pos += 1
                return result
            if not char:
                self._fail("Unexpected end of expression, expected `}`")
            if self.text.startswith("...", self.pos):
                self._fail("Spread properties are not supported in expressions")

            key = self._key()
            self._skip_trivia()
            if self._peek() != ":":
                self._fail(
                    f"Unexpected {self._describe()} after property `{key}`, expected `:` "
                    "(shorthand properties are not supported)"
                )
            self.pos += 1
            self._skip_trivia()
            result[key] = self._value()
            self._skip_trivia()

            if self._peek() == ",":
                self.pos += 1
            elif self._peek() != "}":
                self._fail(f"Unexpected {self._describe()} in object, expected `,` or `}}`")

    def _key(self) -> str:
        char = self._peek()
        if char in ("'", '"'):
            return self._string(char)
        if char.isdigit():
            number = self._number()
            return str(int(number)) if isinstance(number, float) and number.is_integer() else str(number)
        match = _IDENT_RE.match(self.text, self.pos)
        if not match:
            self._fail(f"Unexpected {self._describe()}, expected a property name")
        self.pos = match.end()
        return match.group()


def evaluate_literal(text: str, source_map: SourceMap, offset: int = 0) -> Any:
    """
    Evaluate the body of a ``{...}`` expression.

    Args:
        text: Expression body (without the surrounding braces)
        source_map: Position lookup for the whole document
        offset: Offset of ``text`` within the document

    Returns:
        The Python value, or EMPTY for comment-only expressions

    Raises:
        MDXSyntaxError: If the expression is not a supported literal
    """
    return LiteralParser(text, source_map, offset).parse()


__all__ = ["EMPTY", "LiteralParser", "evaluate_literal"]
