"""Domain layer for the item list.

Domain managers:
    - ListModel: The item list and its persistence
    - EditSession: Edit-mode tracking
    - FilterProjection: Display sequence derived from the list and filter

All domain managers receive their dependencies through the constructor,
publish changes on the event bus and never touch Qt.
"""

from __future__ import annotations

from .edit_session import EditSession, EditStatus
from .filter_projection import FilterProjection, filter_items
from .list_model import Item, ListModel

__all__: list[str] = [
    "EditSession",
    "EditStatus",
    "FilterProjection",
    "Item",
    "ListModel",
    "filter_items",
]
