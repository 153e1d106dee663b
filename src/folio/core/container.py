"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from ..compiler import MDXCompiler
from ..components import ComponentRegistry, default_registry
from ..publish import PublishRenderer
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide service settings."""
        return self.settings

    @singleton
    @provider
    def provide_registry(self) -> ComponentRegistry:
        """Provide the process-wide component registry."""
        return default_registry()

    @singleton
    @provider
    def provide_compiler(self, registry: ComponentRegistry, settings: Settings) -> MDXCompiler:
        """Provide the MDX compiler shared by preview sessions and publishing."""
        return MDXCompiler(registry=registry, settings=settings)

    @singleton
    @provider
    def provide_publish_renderer(self, compiler: MDXCompiler) -> PublishRenderer:
        """Provide the public page renderer on top of the shared compiler."""
        return PublishRenderer(compiler)


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings)])
