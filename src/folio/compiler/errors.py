"""Compiler diagnostics."""

from bisect import bisect_right


class MDXError(Exception):
    """A diagnostic raised while compiling MDX, carrying a source position."""

    def __init__(self, reason: str, line: int = 1, column: int = 1) -> None:
        super().__init__(reason)
        self.reason = reason
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.reason}"


class MDXSyntaxError(MDXError):
    """Malformed MDX: tags, attributes or expressions that cannot be parsed."""


class MDXEvaluationError(MDXError):
    """Well-formed MDX that cannot be turned into output."""


class SourceMap:
    """Offset -> (line, column) lookup, both 1-based."""

    def __init__(self, source: str) -> None:
        self._line_starts = [0]
        for index, char in enumerate(source):
            if char == "\n":
                self._line_starts.append(index + 1)

    def locate(self, offset: int) -> tuple[int, int]:
        line = bisect_right(self._line_starts, offset)
        return line, offset - self._line_starts[line - 1] + 1

    def span(self, start: int, end: int) -> str:
        """Format a range the way diagnostics quote it: ``1:1-1:9``."""
        start_line, start_col = self.locate(start)
        end_line, end_col = self.locate(end)
        return f"{start_line}:{start_col}-{end_line}:{end_col}"


__all__ = ["MDXError", "MDXSyntaxError", "MDXEvaluationError", "SourceMap"]
