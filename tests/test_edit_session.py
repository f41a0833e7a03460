"""Tests for the EditSession tracker."""

from __future__ import annotations

import pytest

from pantry.errors import DuplicateError, NotFoundError, ValidationError
from pantry.services.storage import ItemListStore
from pantry.ui.domain.edit_session import EditSession, EditStatus
from pantry.ui.domain.list_model import Item, ListModel
from pantry.ui.events import EditModeChanged


@pytest.fixture
def model(list_store: ItemListStore) -> ListModel:
    model = ListModel(list_store)
    model.add("milk")
    model.add("eggs")
    return model


@pytest.fixture
def session(event_bus) -> EditSession:
    return EditSession(event_bus)


class TestLifecycle:
    def test_starts_idle(self, session: EditSession) -> None:
        assert session.status is EditStatus.IDLE
        assert not session.is_editing
        assert session.target is None

    def test_begin_edit_targets_item(self, session: EditSession, event_bus) -> None:
        session.begin_edit(Item("milk"))

        assert session.status is EditStatus.EDITING
        assert session.target == "milk"
        assert event_bus.of_type(EditModeChanged) == [
            EditModeChanged(editing=True, target="milk")
        ]

    def test_begin_edit_switches_target(self, session: EditSession) -> None:
        session.begin_edit("milk")
        session.begin_edit("eggs")

        assert session.target == "eggs"

    def test_reselecting_same_target_publishes_once(
        self, session: EditSession, event_bus
    ) -> None:
        session.begin_edit("milk")
        session.begin_edit("milk")

        assert len(event_bus.of_type(EditModeChanged)) == 1

    def test_begin_edit_checks_model_membership(
        self, session: EditSession, model: ListModel
    ) -> None:
        with pytest.raises(NotFoundError):
            session.begin_edit("bread", model=model)

        assert not session.is_editing

    def test_cancel_returns_to_idle(self, session: EditSession, event_bus) -> None:
        session.begin_edit("milk")

        assert session.cancel() is True
        assert session.cancel() is False
        assert session.status is EditStatus.IDLE
        assert event_bus.of_type(EditModeChanged)[-1] == EditModeChanged(editing=False)

    def test_release_only_matching_target(self, session: EditSession) -> None:
        session.begin_edit("milk")

        assert session.release("eggs") is False
        assert session.is_editing
        assert session.release("milk") is True
        assert not session.is_editing


class TestCommit:
    def test_commit_replaces_and_goes_idle(
        self, session: EditSession, model: ListModel
    ) -> None:
        session.begin_edit("milk", model=model)

        item = session.commit(model, "oat milk")

        assert item == Item("oat milk")
        assert model.texts == ("eggs", "oat milk")
        assert not session.is_editing

    def test_commit_in_place(self, session: EditSession, model: ListModel) -> None:
        session.begin_edit("milk")

        session.commit(model, "oat milk", placement="in_place")

        assert model.texts == ("oat milk", "eggs")

    def test_commit_unchanged_text(self, session: EditSession, model: ListModel) -> None:
        session.begin_edit("milk")

        session.commit(model, "milk", placement="in_place")

        assert model.texts == ("milk", "eggs")
        assert not session.is_editing

    def test_commit_while_idle_raises(self, session: EditSession, model: ListModel) -> None:
        with pytest.raises(RuntimeError):
            session.commit(model, "oat milk")

    @pytest.mark.parametrize(
        ("text", "error"),
        [("", ValidationError), ("   ", ValidationError), ("eggs", DuplicateError)],
    )
    def test_rejected_commit_keeps_target(
        self,
        session: EditSession,
        model: ListModel,
        text: str,
        error: type[Exception],
    ) -> None:
        session.begin_edit("milk")

        with pytest.raises(error):
            session.commit(model, text)

        assert session.target == "milk"
        assert model.texts == ("milk", "eggs")

    def test_commit_after_target_removed(
        self, session: EditSession, model: ListModel
    ) -> None:
        session.begin_edit("milk")
        model.remove("milk")

        with pytest.raises(NotFoundError):
            session.commit(model, "oat milk")

        assert model.texts == ("eggs",)
