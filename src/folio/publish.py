"""
Publish Renderer
Renders stored MDX for permanent public pages.

Uses the same registry and compile pipeline as the live preview, so what an
author sees in the editor is what gets published.
"""

from markupsafe import Markup

from .compiler import Empty, Failure, MDXCompiler, Success
from .core import get_logger

logger = get_logger(__name__)


class RenderError(Exception):
    """Stored content failed to compile."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PublishRenderer:
    """Synchronous MDX renderer for public pages."""

    def __init__(self, compiler: MDXCompiler | None = None) -> None:
        self.compiler = compiler or MDXCompiler()

    @property
    def registry(self):
        return self.compiler.registry

    def render(self, source: str) -> Markup:
        """
        Render MDX to HTML.

        Args:
            source: Stored MDX document

        Returns:
            HTML markup; empty markup for blank content

        Raises:
            RenderError: If the content does not compile
        """
        result = self.compiler.compile_sync(source, mode="publish")

        match result:
            case Empty():
                return Markup("")
            case Success(html=html):
                return html
            case Failure(message=message):
                logger.warning("publish_render_failed", error=message)
                raise RenderError(message)
        raise RenderError(f"Unexpected compile result: {result!r}")


__all__ = ["PublishRenderer", "RenderError"]
