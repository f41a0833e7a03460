"""Application coordinator for list commands.

The presentation layer turns widget signals into the discrete commands
below. Each command mutates the domain objects, resets the edit session
where required, and publishes the resulting :class:`ViewState`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from ...errors import CorruptDataError, ItemListError
from ...services.settings import DEFAULT_EDIT_PLACEMENT
from ..events import NoticePosted, ViewStateChanged
from ..models.view_state import ViewState

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ...services.settings import Settings
    from ..domain.edit_session import EditSession
    from ..domain.filter_projection import FilterProjection
    from ..domain.list_model import ListModel
    from ..events import EventBus

LOGGER = logging.getLogger(__name__)


class ListCoordinator:
    """Facade routing UI commands to the list domain.

    Rejected commands publish a :class:`NoticePosted` event and then
    re-raise the :class:`~pantry.errors.ItemListError` to the caller.
    Neither the list nor the store is modified by a rejected command.

    Example:
        coordinator = ListCoordinator(
            event_bus=event_bus,
            list_model=list_model,
            edit_session=edit_session,
            projection=projection,
        )
        coordinator.app_initialized()
        coordinator.submit_form("milk")
        coordinator.select_item_for_edit("milk")
        coordinator.submit_form("oat milk")
    """

    __slots__ = (
        "_event_bus",
        "_list_model",
        "_edit_session",
        "_projection",
        "_settings_provider",
    )

    def __init__(
        self,
        event_bus: EventBus,
        list_model: ListModel,
        edit_session: EditSession,
        projection: FilterProjection,
        *,
        settings_provider: Callable[[], Settings | None] | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            event_bus: Bus used for view state and notice events.
            list_model: The item list.
            edit_session: The edit-mode tracker.
            projection: The filter projection.
            settings_provider: Returns the current settings; consulted for
                the edit placement policy on every commit.
        """
        self._event_bus = event_bus
        self._list_model = list_model
        self._edit_session = edit_session
        self._projection = projection
        self._settings_provider = settings_provider

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def list_model(self) -> ListModel:
        return self._list_model

    @property
    def edit_session(self) -> EditSession:
        return self._edit_session

    @property
    def projection(self) -> FilterProjection:
        return self._projection

    @property
    def edit_placement(self) -> str:
        settings = self._settings_provider() if self._settings_provider else None
        return getattr(settings, "edit_placement", None) or DEFAULT_EDIT_PLACEMENT

    @property
    def settings(self) -> Settings | None:
        return self._settings_provider() if self._settings_provider else None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def app_initialized(self) -> ViewState:
        """Load the persisted list and publish the initial view.

        Raises:
            CorruptDataError: If the stored list cannot be read. The view
                is still published (empty) before raising.
        """
        self._edit_session.cancel()
        self._projection.reset()
        try:
            self._list_model.load()
        except CorruptDataError as exc:
            LOGGER.warning("Stored list could not be loaded: %s", exc)
            self._post_notice(exc)
            self._publish_view()
            raise
        LOGGER.info("Loaded %d item(s)", len(self._list_model))
        return self._publish_view()

    def submit_form(self, text: str) -> ViewState:
        """Add ``text``, or commit it as the replacement while editing."""
        try:
            if self._edit_session.is_editing:
                self._edit_session.commit(
                    self._list_model, text, placement=self.edit_placement
                )
            else:
                self._list_model.add(text)
        except ItemListError as exc:
            self._reject("submit_form", exc)
            raise
        self._reset_after_mutation()
        return self._publish_view()

    def select_item_for_edit(self, text: str) -> ViewState:
        """Enter edit mode targeting ``text``."""
        try:
            self._edit_session.begin_edit(text, model=self._list_model)
        except ItemListError as exc:
            self._reject("select_item_for_edit", exc)
            raise
        return self._publish_view()

    def request_delete(self, text: str) -> ViewState:
        """Delete ``text``; the caller has already confirmed with the user."""
        try:
            self._list_model.remove(text)
        except ItemListError as exc:
            self._reject("request_delete", exc)
            raise
        self._reset_after_mutation()
        return self._publish_view()

    def request_clear_all(self) -> ViewState:
        """Remove every item and the store record."""
        try:
            self._list_model.clear_all()
        except ItemListError as exc:
            self._reject("request_clear_all", exc)
            raise
        self._reset_after_mutation()
        return self._publish_view()

    def filter_text_changed(self, substring: str) -> ViewState:
        self._projection.set_filter(substring)
        return self._publish_view()

    def cancel_edit(self) -> ViewState:
        """Leave edit mode without changing the list."""
        self._edit_session.cancel()
        return self._publish_view()

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    def view_state(self) -> ViewState:
        """Compute the current view state without publishing it."""
        texts = self._list_model.texts
        return ViewState(
            items=tuple(self._projection.project(texts)),
            filter_text=self._projection.filter_text,
            editing=self._edit_session.is_editing,
            edit_target=self._edit_session.target,
            has_items=bool(texts),
            total_count=len(texts),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _reset_after_mutation(self) -> None:
        self._edit_session.cancel()

    def _publish_view(self) -> ViewState:
        state = self.view_state()
        self._event_bus.publish(ViewStateChanged(view_state=state))
        return state

    def _reject(self, command: str, exc: ItemListError) -> None:
        LOGGER.info("%s rejected: %s", command, exc)
        self._post_notice(exc)

    def _post_notice(self, exc: ItemListError) -> None:
        self._event_bus.publish(
            NoticePosted(message=exc.message, level=exc.severity, error_code=exc.error_code)
        )


__all__ = ["ListCoordinator"]
