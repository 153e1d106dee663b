"""
Compiler Adapter
Source text in, CompileResult out. Nothing raises past this boundary.
"""

import asyncio
import threading
import time
from typing import Protocol, runtime_checkable

from ..components import ComponentRegistry, default_registry
from ..core import LRUCache, Settings, get_logger, get_settings
from ..monitoring import metrics_collector
from .errors import MDXError
from .parser import parse
from .render import HTMLRenderer, create_markdown
from .result import CompileResult, Empty, Failure, Success

logger = get_logger(__name__)


@runtime_checkable
class Compiler(Protocol):
    """Anything the preview controller can ask for a compile."""

    async def compile(self, source: str) -> CompileResult: ...


class MDXCompiler:
    """
    MDX -> HTML compiler bound to a component registry.

    Results are deterministic for a given (registry, settings, source), so
    parse and evaluation outcomes are memoised; unexpected crashes are not.
    """

    def __init__(
        self,
        registry: ComponentRegistry | None = None,
        settings: Settings | None = None,
        enable_cache: bool | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.registry = registry or default_registry()
        self.markdown = create_markdown(
            tables=self.settings.markdown_tables,
            strikethrough=self.settings.markdown_strikethrough,
        )
        self.unknown_policy = self.settings.unknown_component_policy

        use_cache = self.settings.enable_cache if enable_cache is None else enable_cache
        self._cache: LRUCache[CompileResult] | None = (
            LRUCache(max_size=self.settings.cache_size, ttl_seconds=self.settings.cache_ttl)
            if use_cache
            else None
        )
        self._lock = threading.Lock()

        logger.info(
            "compiler_ready",
            cache=use_cache,
            policy=self.unknown_policy.value,
            fingerprint=self.registry.fingerprint,
        )

    @property
    def cache(self) -> LRUCache[CompileResult] | None:
        return self._cache

    def _cache_key(self, source: str, registry: ComponentRegistry) -> str:
        return f"{registry.fingerprint}\x00{self.unknown_policy.value}\x00{source}"

    def compile_sync(
        self, source: str, registry: ComponentRegistry | None = None, mode: str = "preview"
    ) -> CompileResult:
        """
        Compile MDX source.

        Args:
            source: MDX document
            registry: Override for the bound registry
            mode: Metrics label for the caller (preview or publish)

        Returns:
            Empty for blank input, Success with HTML, or Failure with the
            diagnostic text
        """
        if not source.strip():
            return Empty()

        registry = registry or self.registry
        key = self._cache_key(source, registry)

        if self._cache is not None:
            with self._lock:
                cached = self._cache.get(key)
            if cached is not None:
                metrics_collector.record_cache_hit("compile")
                return cached
            metrics_collector.record_cache_miss("compile")

        start = time.perf_counter()
        cacheable = True
        try:
            document = parse(source)
            renderer = HTMLRenderer(registry, self.markdown, self.unknown_policy)
            result: CompileResult = Success(renderer.render(document))
        except MDXError as e:
            logger.debug("compile_failed", error=str(e), error_type=type(e).__name__)
            result = Failure(str(e))
        except Exception as e:
            logger.error("compile_crashed", error=str(e), error_type=type(e).__name__, exc_info=True)
            metrics_collector.record_error(type(e).__name__, "compiler")
            result = Failure(str(e))
            cacheable = False

        metrics_collector.record_compile(result.status, time.perf_counter() - start, mode)

        if cacheable and self._cache is not None:
            with self._lock:
                self._cache.set(key, result)
        return result

    async def compile(self, source: str, registry: ComponentRegistry | None = None) -> CompileResult:
        """Compile off the event loop; blank input short-circuits."""
        if not source.strip():
            return Empty()

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.compile_sync, source, registry)


__all__ = ["Compiler", "MDXCompiler"]
