"""Pytest configuration and fixtures."""

import asyncio
import os

import pytest
from markupsafe import Markup

from folio.compiler import CompileResult, Empty, Failure, MDXCompiler, Success
from folio.components import default_registry
from folio.core import Settings, create_container, get_settings
from folio.publish import PublishRenderer


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["FOLIO_LOG_LEVEL"] = "DEBUG"
    os.environ["FOLIO_ENABLE_CACHE"] = "false"  # Disable cache in tests
    get_settings.cache_clear()


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return get_settings()


@pytest.fixture
def di_container(settings):
    """Dependency injection container for testing."""
    return create_container(settings)


@pytest.fixture
def registry():
    """Process-wide component registry."""
    return default_registry()


# ============================================================================
# Compiler Fixtures
# ============================================================================

@pytest.fixture
def compiler(registry, settings):
    """Uncached MDX compiler."""
    return MDXCompiler(registry=registry, settings=settings, enable_cache=False)


@pytest.fixture
def cached_compiler(registry, settings):
    """MDX compiler with result memoisation."""
    return MDXCompiler(registry=registry, settings=settings, enable_cache=True)


@pytest.fixture
def publisher(compiler):
    """Publish renderer sharing the test compiler."""
    return PublishRenderer(compiler)


def make_compiler(**overrides) -> MDXCompiler:
    """Compiler built from settings overrides."""
    return MDXCompiler(settings=Settings(**overrides), enable_cache=False)


class ScriptedCompiler:
    """
    Fake compiler whose results resolve on demand.

    Each compile call parks on an event keyed by source; tests release
    sources in whatever order they want results to arrive.
    """

    def __init__(self, results: dict[str, CompileResult] | None = None):
        self.results = results or {}
        self.calls: list[str] = []
        self._gates: dict[str, asyncio.Event] = {}

    def gate(self, source: str) -> asyncio.Event:
        return self._gates.setdefault(source, asyncio.Event())

    def release(self, source: str) -> None:
        self.gate(source).set()

    async def compile(self, source: str) -> CompileResult:
        self.calls.append(source)
        await self.gate(source).wait()
        if source in self.results:
            return self.results[source]
        if not source.strip():
            return Empty()
        return Success(Markup(f"<p>{source}</p>"))


class DelayedCompiler:
    """Fake compiler that sleeps a per-source delay before answering."""

    def __init__(self, delays: dict[str, float]):
        self.delays = delays

    async def compile(self, source: str) -> CompileResult:
        await asyncio.sleep(self.delays.get(source, 0))
        return Success(Markup(f"<p>{source}</p>"))


class ExplodingCompiler:
    """Fake compiler that raises instead of returning a result."""

    async def compile(self, source: str) -> CompileResult:
        raise RuntimeError(f"boom: {source}")


@pytest.fixture
def scripted_compiler():
    return ScriptedCompiler()


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def project_mdx():
    """Representative project write-up using several components."""
    return """# Portfolio CMS

Built with **Next.js** and MongoDB.

<Callout title="Heads up" type="warning">
  Preview and publish share one registry.
</Callout>

<ProjectTechStack technologies={[
  { name: 'Next.js', icon: '▲', role: 'primary' },
  { name: 'TypeScript', category: 'language' },
]} />

<ProjectMetrics metrics={[{ label: 'Performance', value: '95%', icon: '⚡', progress: 95 }]} />

<ProjectChallengeCard
  title="Live preview"
  challenge="Keystrokes race each other"
  solution="Generation-tagged compiles"
  difficulty="hard"
/>
"""


@pytest.fixture
def failure_message():
    """Helper to unwrap a Failure."""

    def unwrap(result: CompileResult) -> str:
        assert isinstance(result, Failure), f"expected Failure, got {result!r}"
        return result.message

    return unwrap


# ============================================================================
# Fake Compiler Fixtures
# ============================================================================

@pytest.fixture
def compiler_factory():
    """Build compilers from settings overrides."""
    return make_compiler


@pytest.fixture
def delayed_compiler():
    """Factory for compilers with per-source latency."""
    return DelayedCompiler


@pytest.fixture
def exploding_compiler():
    return ExplodingCompiler()
