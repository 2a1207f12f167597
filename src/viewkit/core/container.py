"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from ..generation.data_sources import DataSourceProvider
from ..generation.gemini import Generator
from ..generation.pipeline import GenerationPipeline
from ..handlers.views import ViewHandler
from ..host.client import HostClient
from ..host.protocol import Host
from ..monitoring.metrics import MetricsCollector, metrics_collector
from ..resources.templates import TemplateRegistry
from ..resources.view import ViewResource
from ..session import SessionRegistry
from ..tree.renderer import Renderer
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(
        self,
        settings: Settings | None = None,
        host: Host | None = None,
        generator: Generator | None = None,
        data_provider: DataSourceProvider | None = None,
        templates: TemplateRegistry | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.host = host
        self.generator = generator
        self.data_provider = data_provider
        self.templates = templates

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_metrics(self) -> MetricsCollector:
        return metrics_collector

    @singleton
    @provider
    def provide_host(self, settings: Settings) -> Host:
        """Provide the embedding host (HTTP client unless one was given)."""
        if self.host is not None:
            return self.host
        return HostClient(settings.host_url, settings.host_timeout)

    @singleton
    @provider
    def provide_renderer(self, settings: Settings) -> Renderer:
        return Renderer(settings.render_max_depth, settings.render_max_nodes)

    @singleton
    @provider
    def provide_view_resource(self, renderer: Renderer, metrics: MetricsCollector) -> ViewResource:
        return ViewResource(renderer, metrics)

    @singleton
    @provider
    def provide_templates(self) -> TemplateRegistry:
        return self.templates or TemplateRegistry()

    @singleton
    @provider
    def provide_pipeline(self, settings: Settings, metrics: MetricsCollector) -> GenerationPipeline:
        """Provide generation pipeline (Gemini is created lazily on first request)."""
        return GenerationPipeline(settings, self.generator, self.data_provider, metrics)

    @singleton
    @provider
    def provide_view_handler(
        self,
        pipeline: GenerationPipeline,
        resource: ViewResource,
        templates: TemplateRegistry,
        settings: Settings,
        metrics: MetricsCollector,
    ) -> ViewHandler:
        return ViewHandler(pipeline, resource, templates, settings, metrics)

    @singleton
    @provider
    def provide_sessions(self, host: Host, settings: Settings, metrics: MetricsCollector) -> SessionRegistry:
        return SessionRegistry(host, settings, metrics)


def create_container(settings: Settings | None = None, **overrides) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings, **overrides)])
