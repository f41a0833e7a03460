"""Shared pytest fixtures."""

from __future__ import annotations

import os

import pytest

from pantry.services.storage import ItemListStore, MemoryStorage
from pantry.ui.events import Event, EventBus


class RecordingBus(EventBus):
    """Event bus that also keeps every published event."""

    __slots__ = ("published",)

    def __init__(self) -> None:
        super().__init__()
        self.published: list[Event] = []

    def publish(self, event: Event) -> None:
        self.published.append(event)
        super().publish(event)

    def of_type(self, event_type: type) -> list[Event]:
        return [event for event in self.published if isinstance(event, event_type)]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in list(os.environ):
        if name.startswith("PANTRY_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PANTRY_LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def list_store(memory_storage: MemoryStorage) -> ItemListStore:
    return ItemListStore(memory_storage)


@pytest.fixture
def event_bus() -> RecordingBus:
    return RecordingBus()
