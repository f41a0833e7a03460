"""Filter projection from the item list to the display sequence."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, TypeVar, Union

from ..events import FilterChanged

if TYPE_CHECKING:  # pragma: no cover
    from ..events import EventBus
    from .list_model import Item

LOGGER = logging.getLogger(__name__)

T = TypeVar("T", bound=Union[str, "Item"])


def filter_items(items: Iterable[T], substring: str) -> list[T]:
    """Return the entries of ``items`` whose text contains ``substring``.

    Matching ignores case and the original order is kept. Entries are
    plain strings or :class:`~pantry.ui.domain.list_model.Item` objects.
    An empty ``substring`` returns every entry.
    """
    entries = list(items)
    if not substring:
        return entries
    needle = substring.casefold()
    return [entry for entry in entries if needle in _text_of(entry).casefold()]


def _text_of(entry: str | Item) -> str:
    return entry if isinstance(entry, str) else entry.text


class FilterProjection:
    """Tracks the active filter text and projects snapshots through it.

    The projection owns no items; callers pass the current list snapshot
    every time they need the display sequence.
    """

    __slots__ = ("_filter_text", "_bus")

    def __init__(self, event_bus: EventBus | None = None, *, filter_text: str = "") -> None:
        self._bus = event_bus
        self._filter_text = filter_text

    @property
    def filter_text(self) -> str:
        return self._filter_text

    @property
    def active(self) -> bool:
        return bool(self._filter_text)

    def set_filter(self, filter_text: str | None) -> bool:
        """Update the filter text.

        Returns:
            ``True`` if the filter changed.
        """
        value = filter_text or ""
        if value == self._filter_text:
            return False
        self._filter_text = value
        LOGGER.debug("FilterProjection.set_filter: %r", value)
        if self._bus is not None:
            self._bus.publish(FilterChanged(filter_text=value))
        return True

    def reset(self) -> bool:
        return self.set_filter("")

    def project(self, items: Iterable[T]) -> list[T]:
        """Return the display sequence for ``items`` under the current filter."""
        return filter_items(items, self._filter_text)


__all__ = ["FilterProjection", "filter_items"]
