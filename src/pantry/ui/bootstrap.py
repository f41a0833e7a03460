"""Application bootstrap module.

Creates and wires the event bus, the storage adapter, the domain objects,
the coordinator and the main window.

Usage:
    from pantry.ui.bootstrap import create_application
    from pantry.ui.models.view_state import AppContext

    context = AppContext(settings=settings, settings_store=settings_store)
    event_bus, coordinator, window = create_application(context)
    window.show()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..services.settings import Settings
from ..services.storage import ItemListStore, JsonFileStorage, StorageBackend
from .application.coordinator import ListCoordinator
from .domain import EditSession, FilterProjection, ListModel
from .events import EventBus
from .models.view_state import AppContext

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from .presentation.main_window import ItemListWindow

_LOGGER = logging.getLogger(__name__)


def build_storage(settings: Settings) -> StorageBackend:
    """Return the file-backed storage configured by ``settings``."""

    path = settings.resolved_storage_path()
    _LOGGER.debug("Using JSON file storage at %s", path)
    return JsonFileStorage(path)


def create_coordinator(context: AppContext, event_bus: EventBus) -> ListCoordinator:
    """Create the domain objects and the coordinator without any widgets."""

    settings = context.settings or Settings()
    if context.settings is None:
        context.settings = settings
    backend = context.storage or build_storage(settings)

    store = ItemListStore(backend, key=settings.storage_key)
    list_model = ListModel(store, event_bus)
    edit_session = EditSession(event_bus)
    projection = FilterProjection(event_bus)
    _LOGGER.debug(
        "Created domain objects (backend=%s, key=%s)", backend.name, settings.storage_key
    )

    return ListCoordinator(
        event_bus=event_bus,
        list_model=list_model,
        edit_session=edit_session,
        projection=projection,
        settings_provider=lambda: context.settings,
    )


def create_application(
    context: AppContext,
    *,
    skip_widgets: bool = False,
) -> tuple[EventBus, ListCoordinator, "ItemListWindow"]:
    """Create and wire all application components.

    The persisted list is not loaded here; the window triggers
    :meth:`ListCoordinator.app_initialized` once it is subscribed, so the
    first view state reaches it.

    Args:
        context: Settings and optional storage override.
        skip_widgets: If True, skip widget creation (for headless testing).

    Returns:
        A tuple of (event_bus, coordinator, main_window).
    """
    _LOGGER.info("Bootstrapping application...")

    event_bus = EventBus()
    coordinator = create_coordinator(context, event_bus)

    from .presentation.main_window import ItemListWindow

    window = ItemListWindow(
        event_bus=event_bus,
        coordinator=coordinator,
        context=context,
        skip_widgets=skip_widgets,
    )
    _LOGGER.debug("Created main window")
    return event_bus, coordinator, window


__all__ = ["build_storage", "create_application", "create_coordinator"]
