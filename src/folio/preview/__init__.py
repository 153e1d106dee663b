"""
Live Preview
Generation-tagged preview controller and its view states.
"""

from .controller import PreviewController
from .outbox import Outbox
from .state import (
    EMPTY_TEXT,
    ERROR_PREFIX,
    LOADING_TEXT,
    Loading,
    ShowingContent,
    ShowingEmpty,
    ShowingError,
    ViewState,
    render_view,
    state_for,
)

__all__ = [
    "PreviewController",
    "Outbox",
    "Loading",
    "ShowingEmpty",
    "ShowingContent",
    "ShowingError",
    "ViewState",
    "render_view",
    "state_for",
    "EMPTY_TEXT",
    "LOADING_TEXT",
    "ERROR_PREFIX",
]
