"""View state and application context models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ...services.settings import Settings, SettingsStore
    from ...services.storage import StorageBackend

ADD_ITEM_LABEL = "Add Item"
UPDATE_ITEM_LABEL = "Update Item"


@dataclass(slots=True, frozen=True)
class ViewState:
    """Everything the presentation layer needs to render the list.

    Attributes:
        items: Display sequence after applying the filter.
        filter_text: The filter currently applied to ``items``.
        editing: Whether form submission updates an existing item.
        edit_target: Text of the item being edited, if any.
        has_items: Whether the underlying list is non-empty; drives the
            visibility of the filter and clear controls.
        total_count: Number of items before filtering.
    """

    items: tuple[str, ...] = ()
    filter_text: str = ""
    editing: bool = False
    edit_target: str | None = None
    has_items: bool = False
    total_count: int = 0

    @property
    def input_text(self) -> str:
        """Text to pre-fill in the item input."""
        return self.edit_target or ""

    @property
    def submit_label(self) -> str:
        return UPDATE_ITEM_LABEL if self.editing else ADD_ITEM_LABEL


@dataclass(slots=True)
class AppContext:
    """Shared context passed to :func:`pantry.ui.bootstrap.create_application`."""

    settings: Settings | None = None
    settings_store: SettingsStore | None = None
    storage: StorageBackend | None = None


__all__ = ["AppContext", "ViewState", "ADD_ITEM_LABEL", "UPDATE_ITEM_LABEL"]
