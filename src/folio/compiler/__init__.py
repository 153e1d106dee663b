"""
MDX Compiler
Parses MDX, renders Markdown and dispatches registered components.
"""

from .adapter import Compiler, MDXCompiler
from .errors import MDXError, MDXEvaluationError, MDXSyntaxError, SourceMap
from .parser import Document, Element, Expression, MDXParser, Text, parse
from .render import HTMLRenderer, create_markdown
from .result import CompileResult, Empty, Failure, Success

__all__ = [
    "Compiler",
    "MDXCompiler",
    "MDXError",
    "MDXSyntaxError",
    "MDXEvaluationError",
    "SourceMap",
    "Document",
    "Element",
    "Expression",
    "Text",
    "MDXParser",
    "parse",
    "HTMLRenderer",
    "create_markdown",
    "CompileResult",
    "Empty",
    "Success",
    "Failure",
]
