"""Edit session tracker.

Add and edit submissions follow different duplicate policies, so the
session keeps an explicit mode flag instead of guessing intent from the
submitted text.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from ...errors import NotFoundError
from ...services.settings import DEFAULT_EDIT_PLACEMENT
from ..events import EditModeChanged

if TYPE_CHECKING:  # pragma: no cover
    from ..events import EventBus
    from .list_model import Item, ListModel

LOGGER = logging.getLogger(__name__)


class EditStatus(Enum):
    """Lifecycle states of the edit session."""

    IDLE = "idle"
    EDITING = "editing"


class EditSession:
    """Tracks whether an item is targeted for edit, and which one.

    Events Emitted:
        - EditModeChanged: When editing starts, switches target, or ends
    """

    __slots__ = ("_bus", "_target")

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self._bus = event_bus
        self._target: str | None = None

    @property
    def status(self) -> EditStatus:
        return EditStatus.EDITING if self._target is not None else EditStatus.IDLE

    @property
    def is_editing(self) -> bool:
        return self._target is not None

    @property
    def target(self) -> str | None:
        """Text of the item being edited, or ``None`` when idle."""
        return self._target

    def begin_edit(self, item: Item | str, *, model: ListModel | None = None) -> None:
        """Target ``item`` for edit, silently replacing any previous target.

        Args:
            item: The selected item or its text.
            model: When given, ``item`` must currently be on this list.

        Raises:
            NotFoundError: If ``model`` is given and does not contain ``item``.
        """
        text = item if isinstance(item, str) else item.text
        if model is not None and not model.exists(text):
            raise NotFoundError(text=text)

        previous = self._target
        self._target = text
        if previous is not None and previous != text:
            LOGGER.debug("EditSession.begin_edit: switched %r -> %r", previous, text)
        else:
            LOGGER.debug("EditSession.begin_edit: %r", text)
        if previous != text:
            self._publish()

    def commit(
        self,
        model: ListModel,
        new_text: str,
        *,
        placement: str = DEFAULT_EDIT_PLACEMENT,
    ) -> Item:
        """Replace the targeted item with ``new_text`` and return to idle.

        If the replacement is rejected the session keeps its target, so the
        user can correct the input and submit again.

        Raises:
            RuntimeError: If no item is targeted.
            ValidationError: If ``new_text`` is empty.
            DuplicateError: If ``new_text`` matches a different item.
            NotFoundError: If the target is no longer on the list.
        """
        target = self._target
        if target is None:
            raise RuntimeError("No item is being edited")

        item = model.replace(target, new_text, placement=placement)
        self.cancel()
        return item

    def cancel(self) -> bool:
        """Return to idle.

        Returns:
            ``True`` if an edit was in progress.
        """
        if self._target is None:
            return False
        LOGGER.debug("EditSession.cancel: dropped target %r", self._target)
        self._target = None
        self._publish()
        return True

    def release(self, text: str) -> bool:
        """Cancel the session if it targets ``text``."""
        if self._target is not None and self._target == text:
            return self.cancel()
        return False

    def _publish(self) -> None:
        if self._bus is not None:
            self._bus.publish(EditModeChanged(editing=self.is_editing, target=self._target))


__all__ = ["EditSession", "EditStatus"]
