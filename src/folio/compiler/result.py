"""Compile results.

Each source change yields exactly one of these; a newer result always fully
replaces the previous one. All variants are immutable so they can be cached
and shared between preview sessions.
"""

from dataclasses import dataclass
from typing import Union

from markupsafe import Markup


@dataclass(frozen=True)
class Empty:
    """Source was blank or whitespace-only."""

    @property
    def status(self) -> str:
        return "empty"


@dataclass(frozen=True)
class Success:
    """Compiled, renderable HTML."""

    html: Markup

    @property
    def status(self) -> str:
        return "success"


@dataclass(frozen=True)
class Failure:
    """Compile or evaluation error; ``message`` is shown to the author verbatim."""

    message: str

    @property
    def status(self) -> str:
        return "failure"


CompileResult = Union[Empty, Success, Failure]

__all__ = ["Empty", "Success", "Failure", "CompileResult"]
