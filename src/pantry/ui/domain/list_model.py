"""List model domain manager.

Holds the in-memory item list and keeps it reconciled with the item list
store. This is the single source of truth for which items exist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, Sequence

from ...errors import CorruptDataError, DuplicateError, NotFoundError, ValidationError
from ...services.settings import DEFAULT_EDIT_PLACEMENT, EDIT_PLACEMENT_CHOICES
from ..events import (
    ItemAdded,
    ItemRemoved,
    ItemReplaced,
    ItemsChanged,
    ListCleared,
)
from .filter_projection import filter_items

if TYPE_CHECKING:  # pragma: no cover
    from ...services.settings import EditPlacement
    from ...services.storage import ItemListStore
    from ..events import EventBus

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Item:
    """A single list entry, identified solely by its text."""

    text: str

    def __str__(self) -> str:
        return self.text


class ListModel:
    """Domain manager for the item list.

    Every mutation builds the candidate list, writes it to the store and
    only then swaps it in, so a rejected or failed write leaves both the
    in-memory and the persisted list untouched.

    A failed :meth:`load` blocks every mutation except :meth:`clear_all`
    until a later load succeeds; the unreadable record is left as it is.

    Events Emitted:
        - ItemAdded / ItemRemoved / ItemReplaced: After the specific change
        - ListCleared: After clear_all
        - ItemsChanged: After every successful mutation or load
    """

    __slots__ = ("_store", "_bus", "_items", "_load_failed")

    def __init__(self, store: ItemListStore, event_bus: EventBus | None = None) -> None:
        """Initialize an empty model.

        Args:
            store: Adapter persisting the list under its store key.
            event_bus: Optional bus for change notifications.
        """
        self._store = store
        self._bus = event_bus
        self._items: list[Item] = []
        self._load_failed = False

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def items(self) -> tuple[Item, ...]:
        return tuple(self._items)

    @property
    def texts(self) -> tuple[str, ...]:
        return tuple(item.text for item in self._items)

    @property
    def load_failed(self) -> bool:
        return self._load_failed

    @property
    def has_items(self) -> bool:
        return bool(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(tuple(self._items))

    def __contains__(self, text: object) -> bool:
        if isinstance(text, Item):
            text = text.text
        return isinstance(text, str) and self.exists(text)

    def exists(self, text: str) -> bool:
        """Return ``True`` if an item with exactly ``text`` is on the list.

        The comparison is case-sensitive.
        """
        return any(item.text == text for item in self._items)

    def index_of(self, text: str) -> int:
        """Return the position of ``text``.

        Raises:
            NotFoundError: If ``text`` is not on the list.
        """
        for index, item in enumerate(self._items):
            if item.text == text:
                return index
        raise NotFoundError(text=text)

    def filter(self, substring: str) -> list[Item]:
        """Return items containing ``substring``, ignoring case, in list order."""
        return filter_items(self._items, substring)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_all(self) -> list[Item]:
        """Read the persisted list without touching the in-memory state.

        Returns:
            The stored items, or an empty list if no record exists.

        Raises:
            CorruptDataError: If the record is not a JSON array of strings.
        """
        stored = self._store.read_list()
        if stored is None:
            return []

        items: list[Item] = []
        seen: set[str] = set()
        for text in stored:
            if text == "" or text in seen:
                LOGGER.warning("ListModel.load_all: skipping invalid entry %r", text)
                continue
            seen.add(text)
            items.append(Item(text))
        return items

    def load(self) -> tuple[Item, ...]:
        """Replace the in-memory list with the persisted one.

        Raises:
            CorruptDataError: If the record cannot be read. The in-memory
                list is kept and mutations are refused until a later load
                succeeds or the list is cleared.
        """
        try:
            items = self.load_all()
        except CorruptDataError:
            self._load_failed = True
            raise
        self._items = items
        self._load_failed = False
        LOGGER.debug("ListModel.load: %d item(s)", len(self._items))
        self._publish(ItemsChanged(items=self.texts))
        return self.items

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, text: str) -> Item:
        """Append a new item and persist the list.

        Raises:
            ValidationError: If ``text`` is empty.
            DuplicateError: If ``text`` is already on the list.
            CorruptDataError: If the last load failed.
        """
        self._ensure_writable()
        _validate_text(text)
        if self.exists(text):
            raise DuplicateError(text=text)

        item = Item(text)
        self._commit([*self._items, item])
        LOGGER.debug("ListModel.add: %r, total=%d", text, len(self._items))

        self._publish(ItemAdded(text=text))
        self._publish(ItemsChanged(items=self.texts))
        return item

    def remove(self, text: str) -> Item:
        """Remove the item matching ``text`` and persist the list.

        Raises:
            NotFoundError: If ``text`` is not on the list.
        """
        self._ensure_writable()
        index = self.index_of(text)
        updated = list(self._items)
        removed = updated.pop(index)
        self._commit(updated)
        LOGGER.debug("ListModel.remove: %r, total=%d", text, len(self._items))

        self._publish(ItemRemoved(text=text))
        self._publish(ItemsChanged(items=self.texts))
        return removed

    def replace(
        self,
        old_text: str,
        new_text: str,
        *,
        placement: EditPlacement | str = DEFAULT_EDIT_PLACEMENT,
    ) -> Item:
        """Swap ``old_text`` for ``new_text`` in a single persisted step.

        The duplicate check ignores ``old_text`` itself, so an item can be
        committed unchanged. With ``placement="append"`` the replacement
        moves to the end of the list; ``"in_place"`` keeps its position.

        Raises:
            ValidationError: If ``new_text`` is empty.
            NotFoundError: If ``old_text`` is not on the list.
            DuplicateError: If ``new_text`` matches a different item.
        """
        self._ensure_writable()
        _validate_text(new_text)
        if placement not in EDIT_PLACEMENT_CHOICES:
            raise ValueError(f"Unsupported edit placement: {placement!r}")

        index = self.index_of(old_text)
        if new_text != old_text and self.exists(new_text):
            raise DuplicateError(text=new_text)

        item = Item(new_text)
        updated = list(self._items)
        if placement == "in_place":
            updated[index] = item
            new_index = index
        else:
            del updated[index]
            updated.append(item)
            new_index = len(updated) - 1
        self._commit(updated)
        LOGGER.debug(
            "ListModel.replace: %r -> %r at %d (%s)", old_text, new_text, new_index, placement
        )

        self._publish(ItemReplaced(old_text=old_text, new_text=new_text, index=new_index))
        self._publish(ItemsChanged(items=self.texts))
        return item

    def replace_all(self, texts: Iterable[str]) -> tuple[Item, ...]:
        """Replace the whole list, validating every entry first.

        This bypasses the edit session: a caller holding an
        :class:`~pantry.ui.domain.edit_session.EditSession` must cancel it,
        since its target may no longer be on the list.

        Raises:
            ValidationError: If any entry is empty.
            DuplicateError: If an entry appears more than once.
        """
        self._ensure_writable()
        candidate: list[Item] = []
        seen: set[str] = set()
        for text in texts:
            _validate_text(text)
            if text in seen:
                raise DuplicateError(text=text)
            seen.add(text)
            candidate.append(Item(text))

        self._commit(candidate)
        LOGGER.debug("ListModel.replace_all: total=%d", len(self._items))
        self._publish(ItemsChanged(items=self.texts))
        return self.items

    def clear_all(self) -> int:
        """Empty the list and delete the store record.

        Calling this on an empty list is harmless. Clearing also lifts the
        write block left by a failed :meth:`load`.

        Returns:
            The number of items removed.
        """
        removed = len(self._items)
        self._store.delete_list()
        self._items = []
        self._load_failed = False
        LOGGER.debug("ListModel.clear_all: removed=%d", removed)

        self._publish(ListCleared(removed=removed))
        self._publish(ItemsChanged(items=()))
        return removed

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_writable(self) -> None:
        if self._load_failed:
            raise CorruptDataError(
                message="Stored item list is corrupt; clear the list before making changes",
                details={"key": self._store.key},
            )

    def _commit(self, updated: Sequence[Item]) -> None:
        self._store.write_list(item.text for item in updated)
        self._items = list(updated)

    def _publish(self, event: object) -> None:
        if self._bus is not None:
            self._bus.publish(event)  # type: ignore[arg-type]


def _validate_text(text: str) -> None:
    if not isinstance(text, str) or text == "":
        raise ValidationError()


__all__ = ["Item", "ListModel"]
