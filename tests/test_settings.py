"""Tests for the settings persistence layer."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from pantry.services.settings import Settings, SettingsStore, default_storage_path


def test_load_returns_defaults_when_file_missing(tmp_path: Path) -> None:
    settings = SettingsStore(tmp_path / "settings.json").load()

    assert settings == Settings()
    assert settings.edit_placement == "append"
    assert settings.storage_key == "items"
    assert settings.confirm_destructive is True


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    original = Settings(
        storage_path=str(tmp_path / "list.json"),
        storage_key="groceries",
        edit_placement="in_place",
        confirm_destructive=False,
        theme="dark",
        window_geometry="AAAA",
    )

    SettingsStore(path).save(original)
    reloaded = SettingsStore(path).load()

    assert reloaded == original
    assert json.loads(path.read_text(encoding="utf-8"))["version"] == 1
    assert not path.with_suffix(".tmp").exists()


def test_unknown_fields_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"version": 1, "theme": "dark", "api_key": "x"}), encoding="utf-8")

    loaded = SettingsStore(path).load()

    assert loaded.theme == "dark"


def test_legacy_payload_is_migrated(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

    SettingsStore(path).load()

    migrated = json.loads(path.read_text(encoding="utf-8"))
    assert migrated["version"] == 1
    assert migrated["theme"] == "dark"


def test_invalid_json_falls_back_to_defaults(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        loaded = SettingsStore(path).load()

    assert loaded == Settings()
    assert "not valid JSON" in caplog.text


def test_env_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings(storage_key="items", theme="default"))
    monkeypatch.setenv("PANTRY_STORAGE_KEY", "groceries")
    monkeypatch.setenv("PANTRY_THEME", "dark")

    overridden = SettingsStore(path).load()

    assert overridden.storage_key == "groceries"
    assert overridden.theme == "dark"


def test_bool_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PANTRY_DEBUG_LOGGING", "yes")
    monkeypatch.setenv("PANTRY_CONFIRM_DESTRUCTIVE", "0")

    loaded = SettingsStore(tmp_path / "settings.json").load()

    assert loaded.debug_logging is True
    assert loaded.confirm_destructive is False


def test_load_applies_cli_overrides(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings(edit_placement="append"))

    loaded = SettingsStore(path).load(overrides={"edit_placement": "in_place", "bogus": 1})

    assert loaded.edit_placement == "in_place"


def test_env_overrides_take_priority_over_cli(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("PANTRY_EDIT_PLACEMENT", "append")

    loaded = SettingsStore(tmp_path / "settings.json").load(
        overrides={"edit_placement": "in_place"}
    )

    assert loaded.edit_placement == "append"


@pytest.mark.parametrize(("raw", "expected"), [("IN_PLACE", "in_place"), ("sideways", "append")])
def test_edit_placement_is_normalized(tmp_path: Path, raw: str, expected: str) -> None:
    loaded = SettingsStore(tmp_path / "settings.json").load(overrides={"edit_placement": raw})

    assert loaded.edit_placement == expected


def test_resolved_storage_path(tmp_path: Path) -> None:
    assert Settings().resolved_storage_path() == default_storage_path()
    custom = Settings(storage_path=str(tmp_path / "list.json"))
    assert custom.resolved_storage_path() == tmp_path / "list.json"
