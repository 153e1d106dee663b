"""
Preview Controller
Keeps a preview region in sync with editor source text.

Every update gets a generation number and its own compile task. Compiles may
finish in any order; only the result of the most recently triggered update is
allowed to change the visible state.
"""

import asyncio
from typing import Callable

from markupsafe import Markup

from ..compiler import Compiler, CompileResult, Failure
from ..core import get_logger
from ..monitoring import metrics_collector
from .state import Loading, ViewState, render_view, state_for

logger = get_logger(__name__)

Listener = Callable[[ViewState], None]


class PreviewController:
    """
    Generation-tagged live preview for one editor.

    Usage:
        controller = PreviewController(MDXCompiler())
        unsubscribe = controller.subscribe(print)
        controller.update("# Hello")
        await controller.settle()
    """

    def __init__(self, compiler: Compiler, session_id: str | None = None) -> None:
        self._compiler = compiler
        self._session_id = session_id
        self._generation = 0
        self._state: ViewState = Loading()
        self._listeners: list[Listener] = []
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def generation(self) -> int:
        """Generation of the most recently triggered update."""
        return self._generation

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def view(self) -> Markup:
        return render_view(self._state)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, source: str) -> int:
        """
        Start compiling a new source revision.

        Returns immediately; the visible state keeps showing the previous
        result until this compile (or a newer one) resolves.

        Returns:
            The generation assigned to this revision
        """
        if self._closed:
            raise RuntimeError("Preview controller is closed")

        self._generation += 1
        generation = self._generation

        task = asyncio.create_task(self._run(source, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.debug("preview_update", generation=generation, length=len(source), session=self._session_id)
        return generation

    async def _run(self, source: str, generation: int) -> None:
        try:
            result = await self._compiler.compile(source)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("compiler_raised", generation=generation, error=str(e), exc_info=True)
            metrics_collector.record_error(type(e).__name__, "preview")
            result = Failure(str(e))

        self._apply(result, generation)

    def _apply(self, result: CompileResult, generation: int) -> None:
        if self._closed:
            return

        if generation != self._generation:
            logger.debug(
                "stale_result_dropped",
                generation=generation,
                latest=self._generation,
                session=self._session_id,
            )
            metrics_collector.record_stale_drop()
            return

        self._state = state_for(result, generation)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.error("preview_listener_failed", error=str(e), exc_info=True)

    async def settle(self) -> ViewState:
        """Wait for every in-flight compile, then return the visible state."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        return self._state

    async def close(self) -> None:
        """Cancel outstanding compiles and detach listeners."""
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._listeners.clear()
        logger.debug("preview_closed", session=self._session_id, cancelled=len(tasks))


__all__ = ["PreviewController", "Listener"]
