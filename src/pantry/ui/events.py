"""Event bus and the events exchanged between the list core and the UI.

Domain objects publish what changed; the presentation layer subscribes
and re-renders. Nothing in the domain layer knows about widgets.
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Generic, TypeVar
from weakref import WeakMethod

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from typing import DefaultDict

    from .models.view_state import ViewState

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="Event")

Handler = Callable[[E], None]


@dataclass(slots=True)
class Event:
    """Base class for all events.

    Subclasses are ``@dataclass(slots=True)`` value objects::

        @dataclass(slots=True)
        class ItemAdded(Event):
            text: str
    """

    pass


# =============================================================================
# List events
# =============================================================================


@dataclass(slots=True)
class ItemsChanged(Event):
    """Emitted after any persisted mutation of the item list.

    Attributes:
        items: Snapshot of the full list in display order.
    """

    items: tuple[str, ...]


@dataclass(slots=True)
class ItemAdded(Event):
    """Emitted when a new item is appended."""

    text: str


@dataclass(slots=True)
class ItemRemoved(Event):
    """Emitted when an item is deleted."""

    text: str


@dataclass(slots=True)
class ItemReplaced(Event):
    """Emitted when an edited item is committed.

    Attributes:
        old_text: The text that was being edited.
        new_text: The replacement text.
        index: Position of the replacement in the list.
    """

    old_text: str
    new_text: str
    index: int


@dataclass(slots=True)
class ListCleared(Event):
    """Emitted when every item is removed and the store record deleted."""

    removed: int = 0


# =============================================================================
# Session events
# =============================================================================


@dataclass(slots=True)
class EditModeChanged(Event):
    """Emitted when the edit session starts, switches target, or ends.

    Attributes:
        editing: Whether an item is currently targeted for edit.
        target: The text of the targeted item, if any.
    """

    editing: bool
    target: str | None = None


@dataclass(slots=True)
class FilterChanged(Event):
    """Emitted when the filter text changes."""

    filter_text: str


@dataclass(slots=True)
class ViewStateChanged(Event):
    """Emitted after every command with the state the UI should display."""

    view_state: ViewState


@dataclass(slots=True)
class NoticePosted(Event):
    """Emitted when a command is rejected and the user should be told.

    Attributes:
        message: Human-readable text for an alert.
        level: ``"warning"`` for user mistakes, ``"error"`` for faults.
        error_code: Machine-readable code of the underlying error.
    """

    message: str
    level: str = "warning"
    error_code: str | None = None


# =============================================================================
# Event Bus
# =============================================================================


class EventBus(Generic[E]):
    """A typed publish-subscribe event bus.

    Handlers are invoked synchronously in subscription order. Bound methods
    are held through :class:`WeakMethod` so a discarded window does not keep
    receiving events.

    Example::

        bus = EventBus()
        bus.subscribe(ItemAdded, lambda event: print(event.text))
        bus.publish(ItemAdded(text="milk"))

    This implementation is not thread-safe; publish from the UI thread.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: DefaultDict[type[Event], list[_Resolver]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Register ``handler`` for events of exactly ``event_type``.

        Subscribing the same handler twice results in two invocations.
        """
        self._handlers[event_type].append(_resolver_for(handler))
        logger.debug("%s subscribed to %s", _handler_name(handler), event_type.__name__)

    def unsubscribe(self, event_type: type[E], handler: Handler[E]) -> None:
        """Remove the first registration of ``handler``; unknown handlers are ignored."""
        resolvers = self._handlers.get(event_type, [])
        position = next(
            (index for index, resolve in enumerate(resolvers) if resolve() == handler),
            None,
        )
        if position is None:
            return
        del resolvers[position]
        logger.debug("%s unsubscribed from %s", _handler_name(handler), event_type.__name__)

    def publish(self, event: E) -> None:
        """Broadcast ``event`` to every registered handler.

        A handler that raises is logged and the remaining handlers still run.
        Registrations whose owner has been collected are pruned.
        """
        name = type(event).__name__
        resolvers = self._handlers.get(type(event))
        if not resolvers:
            logger.debug("Dropping %s: nobody is listening", name)
            return

        stale = False
        for resolve in tuple(resolvers):
            handler = resolve()
            if handler is None:
                stale = True
                continue
            try:
                handler(event)
            except Exception:
                logger.exception("%s failed while handling %s", _handler_name(handler), name)
        if stale:
            resolvers[:] = [resolve for resolve in resolvers if resolve() is not None]

    def clear(self) -> None:
        """Remove all registered handlers."""
        self._handlers.clear()
        logger.debug("Event bus cleared")

    def handler_count(self, event_type: type[E] | None = None) -> int:
        """Return the number of handlers for ``event_type``, or in total."""
        if event_type is None:
            return sum(map(len, self._handlers.values()))
        return len(self._handlers.get(event_type, ()))


_Resolver = Callable[[], "Handler | None"]


def _resolver_for(handler: Handler) -> _Resolver:
    """Return a callable yielding ``handler``, or ``None`` once its owner is gone."""
    if inspect.ismethod(handler):
        try:
            return WeakMethod(handler)
        except TypeError:  # owner does not support weak references
            pass
    return lambda: handler


def _handler_name(handler: Handler) -> str:
    if inspect.ismethod(handler):
        return f"{type(handler.__self__).__name__}.{handler.__func__.__name__}"
    return getattr(handler, "__name__", repr(handler))


__all__ = [
    "Event",
    "EventBus",
    "Handler",
    "ItemsChanged",
    "ItemAdded",
    "ItemRemoved",
    "ItemReplaced",
    "ListCleared",
    "EditModeChanged",
    "FilterChanged",
    "ViewStateChanged",
    "NoticePosted",
]
