"""Main window for the item list.

The window only translates widget signals into coordinator commands and
renders whatever :class:`ViewState` the coordinator publishes. It never
inspects or mutates the list itself.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from ...errors import CorruptDataError, ItemListError
from ..events import NoticePosted, ViewStateChanged
from ..models.view_state import ViewState

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..application.coordinator import ListCoordinator
    from ..events import EventBus
    from ..models.view_state import AppContext

LOGGER = logging.getLogger(__name__)

WINDOW_APP_NAME = "Pantry"
CLEAR_ALL_LABEL = "Clear All"
FILTER_PLACEHOLDER = "Filter Items"
INPUT_PLACEHOLDER = "Enter Item"
_EDIT_BUTTON_STYLE = "background-color: #228B22; color: white;"
_ADD_BUTTON_STYLE = "background-color: #333; color: white;"

# Qt imports with headless fallback
try:  # pragma: no cover - PySide6 optional in CI
    from PySide6.QtCore import QByteArray, Qt
    from PySide6.QtWidgets import (
        QHBoxLayout,
        QLabel,
        QLineEdit,
        QListWidget,
        QListWidgetItem,
        QMainWindow,
        QMessageBox,
        QPushButton,
        QVBoxLayout,
        QWidget,
    )

    _QT_AVAILABLE = True
except Exception:  # pragma: no cover - runtime stubs keep tests headless
    _QT_AVAILABLE = False
    QByteArray = None  # type: ignore[assignment,misc]
    Qt = None  # type: ignore[assignment,misc]
    QHBoxLayout = None  # type: ignore[assignment,misc]
    QLabel = None  # type: ignore[assignment,misc]
    QLineEdit = None  # type: ignore[assignment,misc]
    QListWidget = None  # type: ignore[assignment,misc]
    QListWidgetItem = None  # type: ignore[assignment,misc]
    QMessageBox = None  # type: ignore[assignment,misc]
    QPushButton = None  # type: ignore[assignment,misc]
    QVBoxLayout = None  # type: ignore[assignment,misc]
    QWidget = None  # type: ignore[assignment,misc]

    class QMainWindow:  # type: ignore[no-redef]
        """Stub for headless testing."""

        def __init__(self, *args: object, **kwargs: object) -> None:
            pass

        def setWindowTitle(self, title: str) -> None:
            pass

        def setCentralWidget(self, widget: Any) -> None:
            pass

        def show(self) -> None:
            pass

        def close(self) -> None:
            pass


ConfirmCallback = Callable[[str], bool]


class ItemListWindow(QMainWindow):
    """Presentation shell for the item list.

    Example:
        event_bus, coordinator, window = create_application(context)
        window.initialize()
        window.show()
    """

    def __init__(
        self,
        event_bus: "EventBus",
        coordinator: "ListCoordinator",
        *,
        context: "AppContext | None" = None,
        skip_widgets: bool = False,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        """Initialize the main window.

        Args:
            event_bus: The event bus for reactive updates.
            coordinator: The coordinator receiving every command.
            context: Application context with settings and settings store.
            skip_widgets: If True, skip widget creation (for testing).
            confirm: Asks the user to confirm a destructive action; defaults
                to a Qt question box, or to always-yes without widgets.
        """
        super().__init__()
        self._event_bus = event_bus
        self._coordinator = coordinator
        self._context = context
        self._confirm = confirm

        # Widgets (created unless skip_widgets)
        self._input: Any = None
        self._submit_button: Any = None
        self._filter_input: Any = None
        self._list_widget: Any = None
        self._clear_button: Any = None
        self._widgets_ready = False

        # Last rendered state
        self._view_state = ViewState()
        self._last_notice: NoticePosted | None = None

        if not skip_widgets and _QT_AVAILABLE:
            self._create_widgets()
            self._restore_geometry()

        self._subscribe_to_events()
        self.setWindowTitle(WINDOW_APP_NAME)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def view_state(self) -> ViewState:
        """The last view state rendered."""
        return self._view_state

    @property
    def displayed_items(self) -> tuple[str, ...]:
        return self._view_state.items

    @property
    def controls_visible(self) -> bool:
        """Whether the filter and clear controls are shown."""
        return self._view_state.has_items

    @property
    def last_notice(self) -> NoticePosted | None:
        return self._last_notice

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Load the persisted list into the window."""
        try:
            self._coordinator.app_initialized()
        except CorruptDataError:
            LOGGER.error("ItemListWindow: stored list is corrupt; starting empty")

    # ------------------------------------------------------------------
    # UI event handlers
    # ------------------------------------------------------------------

    def handle_submit(self, text: str | None = None) -> bool:
        """Submit the input text; returns ``True`` on success."""
        if text is None:
            text = self._input.text() if self._input is not None else ""
        return self._run(self._coordinator.submit_form, text)

    def handle_item_selected(self, text: str) -> bool:
        return self._run(self._coordinator.select_item_for_edit, text)

    def handle_remove_clicked(self, text: str) -> bool:
        if not self._ask(f"Remove {text!r} from the list?"):
            return False
        return self._run(self._coordinator.request_delete, text)

    def handle_clear_clicked(self) -> bool:
        if not self._ask("Clear every item from the list?"):
            return False
        return self._run(self._coordinator.request_clear_all)

    def handle_filter_changed(self, text: str) -> bool:
        return self._run(self._coordinator.filter_text_changed, text)

    def handle_cancel_edit(self) -> bool:
        return self._run(self._coordinator.cancel_edit)

    def _run(self, command: Callable[..., Any], *args: Any) -> bool:
        try:
            command(*args)
        except ItemListError as exc:
            # The coordinator already posted a notice for the alert.
            LOGGER.debug("ItemListWindow: command %s rejected: %s", command.__name__, exc)
            return False
        return True

    def _ask(self, question: str) -> bool:
        settings = self._coordinator.settings
        if settings is not None and not settings.confirm_destructive:
            return True
        if self._confirm is not None:
            return bool(self._confirm(question))
        if not self._widgets_ready or QMessageBox is None:
            return True
        answer = QMessageBox.question(self, WINDOW_APP_NAME, question)
        return answer == QMessageBox.StandardButton.Yes

    # ------------------------------------------------------------------
    # Event subscriptions
    # ------------------------------------------------------------------

    def _subscribe_to_events(self) -> None:
        self._event_bus.subscribe(ViewStateChanged, self._on_view_state_changed)
        self._event_bus.subscribe(NoticePosted, self._on_notice_posted)

    def _on_view_state_changed(self, event: ViewStateChanged) -> None:
        previous = self._view_state
        self._view_state = event.view_state
        self._render(event.view_state, previous)

    def _on_notice_posted(self, event: NoticePosted) -> None:
        self._last_notice = event
        if not self._widgets_ready or QMessageBox is None:
            return
        if event.level == "error":
            QMessageBox.critical(self, WINDOW_APP_NAME, event.message)
        else:
            QMessageBox.warning(self, WINDOW_APP_NAME, event.message)

    # ------------------------------------------------------------------
    # Widgets
    # ------------------------------------------------------------------

    def _create_widgets(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)

        form_row = QHBoxLayout()
        self._input = QLineEdit(central)
        self._input.setPlaceholderText(INPUT_PLACEHOLDER)
        self._input.returnPressed.connect(lambda: self.handle_submit())
        self._submit_button = QPushButton(central)
        self._submit_button.clicked.connect(lambda: self.handle_submit())
        form_row.addWidget(self._input)
        form_row.addWidget(self._submit_button)
        layout.addLayout(form_row)

        self._filter_input = QLineEdit(central)
        self._filter_input.setPlaceholderText(FILTER_PLACEHOLDER)
        self._filter_input.textChanged.connect(self.handle_filter_changed)
        layout.addWidget(self._filter_input)

        self._list_widget = QListWidget(central)
        self._list_widget.itemClicked.connect(
            lambda item: self.handle_item_selected(item.data(Qt.ItemDataRole.UserRole))
        )
        layout.addWidget(self._list_widget)

        self._clear_button = QPushButton(CLEAR_ALL_LABEL, central)
        self._clear_button.clicked.connect(lambda: self.handle_clear_clicked())
        layout.addWidget(self._clear_button)

        self.setCentralWidget(central)
        self._widgets_ready = True
        self._render(self._view_state, None)
        LOGGER.debug("ItemListWindow: created widgets")

    def _render(self, state: ViewState, previous: ViewState | None) -> None:
        if not self._widgets_ready:
            return

        self._list_widget.clear()
        for text in state.items:
            entry = QListWidgetItem(self._list_widget)
            entry.setData(Qt.ItemDataRole.UserRole, text)
            row = self._build_row(text, highlighted=state.edit_target == text)
            entry.setSizeHint(row.sizeHint())
            self._list_widget.setItemWidget(entry, row)

        if previous is None or _input_reset_needed(state, previous):
            self._input.setText(state.input_text)
        self._submit_button.setText(state.submit_label)
        self._submit_button.setStyleSheet(
            _EDIT_BUTTON_STYLE if state.editing else _ADD_BUTTON_STYLE
        )
        self._filter_input.setVisible(state.has_items)
        self._clear_button.setVisible(state.has_items)
        if self._filter_input.text() != state.filter_text:
            self._filter_input.blockSignals(True)
            self._filter_input.setText(state.filter_text)
            self._filter_input.blockSignals(False)

    def _build_row(self, text: str, *, highlighted: bool) -> Any:
        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(6, 2, 6, 2)
        label = QLabel(text, row)
        if highlighted:
            label.setStyleSheet("color: #999;")
        remove_button = QPushButton("✕", row)
        remove_button.setObjectName("remove-item")
        remove_button.setFlat(True)
        remove_button.setStyleSheet("color: #c0392b;")
        remove_button.clicked.connect(lambda: self.handle_remove_clicked(text))
        row_layout.addWidget(label)
        row_layout.addStretch(1)
        row_layout.addWidget(remove_button)
        return row

    # ------------------------------------------------------------------
    # Geometry persistence
    # ------------------------------------------------------------------

    def _restore_geometry(self) -> None:
        settings = self._context.settings if self._context else None
        geometry = getattr(settings, "window_geometry", None)
        if not geometry or QByteArray is None:
            return
        try:
            self.restoreGeometry(QByteArray.fromBase64(geometry.encode("ascii")))
        except (TypeError, ValueError):  # pragma: no cover - corrupt geometry
            LOGGER.debug("ItemListWindow: ignoring unreadable window geometry")

    def closeEvent(self, event: Any) -> None:  # pragma: no cover - Qt only
        context = self._context
        if context is not None and context.settings is not None and context.settings_store:
            encoded = bytes(self.saveGeometry().toBase64()).decode("ascii")
            context.settings.window_geometry = encoded
            try:
                context.settings_store.save(context.settings)
            except OSError as exc:
                LOGGER.warning("ItemListWindow: failed to persist geometry: %s", exc)
        super().closeEvent(event)


def _input_reset_needed(state: ViewState, previous: ViewState) -> bool:
    # Filtering and rejected submissions keep whatever the user is typing.
    return (
        state.editing != previous.editing
        or state.edit_target != previous.edit_target
        or state.total_count != previous.total_count
    )


__all__ = ["ItemListWindow", "WINDOW_APP_NAME"]
