"""Preview view states and their rendering into the preview region."""

from dataclasses import dataclass
from typing import Union

from markupsafe import Markup

from ..compiler import CompileResult, Empty, Failure, Success

EMPTY_TEXT = "Nothing to preview."
LOADING_TEXT = "Loading preview…"
ERROR_PREFIX = "MDX parse error: "


@dataclass(frozen=True)
class Loading:
    generation: int = 0
    state: str = "loading"


@dataclass(frozen=True)
class ShowingEmpty:
    generation: int
    state: str = "empty"


@dataclass(frozen=True)
class ShowingContent:
    generation: int
    html: Markup
    state: str = "content"


@dataclass(frozen=True)
class ShowingError:
    generation: int
    message: str
    state: str = "error"


ViewState = Union[Loading, ShowingEmpty, ShowingContent, ShowingError]


def state_for(result: CompileResult, generation: int) -> ViewState:
    """Map a compile result onto the view state it produces."""
    match result:
        case Empty():
            return ShowingEmpty(generation)
        case Success(html=html):
            return ShowingContent(generation, html)
        case Failure(message=message):
            return ShowingError(generation, message)
    raise TypeError(f"Unknown compile result: {result!r}")


def render_view(state: ViewState) -> Markup:
    """
    HTML for the preview region.

    Errors render inside an alert region with the diagnostic text verbatim;
    the content state is the compiled output unchanged.
    """
    match state:
        case Loading():
            return Markup('<p class="mdx-preview-loading">{}</p>').format(LOADING_TEXT)
        case ShowingEmpty():
            return Markup('<p class="mdx-preview-empty">{}</p>').format(EMPTY_TEXT)
        case ShowingContent(html=html):
            return html
        case ShowingError(message=message):
            return Markup('<div class="mdx-preview-error" role="alert">{}{}</div>').format(
                ERROR_PREFIX, message
            )
    raise TypeError(f"Unknown view state: {state!r}")


__all__ = [
    "Loading",
    "ShowingEmpty",
    "ShowingContent",
    "ShowingError",
    "ViewState",
    "state_for",
    "render_view",
    "EMPTY_TEXT",
    "LOADING_TEXT",
    "ERROR_PREFIX",
]
