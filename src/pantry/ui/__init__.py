"""UI package: event bus, domain managers, coordinator and widgets."""

from .bootstrap import create_application, create_coordinator
from .events import EventBus
from .models.view_state import AppContext, ViewState

__all__ = [
    # Bootstrap
    "create_application",
    "create_coordinator",
    # Event Bus
    "EventBus",
    # Models
    "AppContext",
    "ViewState",
]
