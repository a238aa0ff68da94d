"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from a2ui.catalog import CatalogRegistry
from a2ui.events import ActionDispatcher, FormSubmitHandler
from a2ui.protocol import MessageProcessor
from a2ui.renderer import Renderer
from a2ui.surfaces import SurfaceStore
from a2ui.validation import SchemaValidator
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_catalog_registry(self) -> CatalogRegistry:
        """Provide catalog registry with the standard catalog."""
        return CatalogRegistry()

    @singleton
    @provider
    def provide_validator(self, registry: CatalogRegistry) -> SchemaValidator:
        return SchemaValidator(registry, max_depth=self.settings.max_json_depth)

    @singleton
    @provider
    def provide_store(self, validator: SchemaValidator) -> SurfaceStore:
        """Provide the session surface store."""
        return SurfaceStore(
            validator,
            max_surfaces=self.settings.max_surfaces,
            retention_policy=self.settings.retention_policy,
        )

    @singleton
    @provider
    def provide_renderer(self) -> Renderer:
        return Renderer(max_depth=self.settings.max_render_depth)

    @singleton
    @provider
    def provide_processor(self, store: SurfaceStore) -> MessageProcessor:
        return MessageProcessor(
            store,
            max_size=self.settings.max_message_size,
            max_depth=self.settings.max_json_depth,
            repair=self.settings.repair_json,
        )

    @singleton
    @provider
    def provide_dispatcher(self, store: SurfaceStore) -> ActionDispatcher:
        """Provide action dispatcher; the host attaches a sink."""
        return ActionDispatcher(store, debounce_ms=self.settings.action_debounce_ms)

    @singleton
    @provider
    def provide_form_handler(self, dispatcher: ActionDispatcher) -> FormSubmitHandler:
        return FormSubmitHandler(dispatcher)


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings)])
