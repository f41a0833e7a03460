"""Settings dataclass and its JSON-backed store."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Literal, Mapping

from ..utils.file_io import read_text_if_exists, write_text_atomic

__all__ = [
    "Settings",
    "SettingsStore",
    "EDIT_PLACEMENT_CHOICES",
    "DEFAULT_EDIT_PLACEMENT",
    "DEFAULT_STORAGE_KEY",
    "default_storage_path",
]

LOGGER = logging.getLogger(__name__)

PANTRY_HOME = Path.home() / ".pantry"
SETTINGS_VERSION = 1
DEFAULT_STORAGE_KEY = "items"
DEFAULT_EDIT_PLACEMENT = "append"
EDIT_PLACEMENT_CHOICES: tuple[str, ...] = ("append", "in_place")
EditPlacement = Literal["append", "in_place"]


def default_storage_path() -> Path:
    return PANTRY_HOME / "storage.json"


def default_settings_path() -> Path:
    return PANTRY_HOME / "settings.json"


@dataclass(slots=True)
class Settings:
    """Preferences that survive between Pantry sessions."""

    storage_path: str | None = None
    storage_key: str = DEFAULT_STORAGE_KEY
    edit_placement: str = DEFAULT_EDIT_PLACEMENT
    confirm_destructive: bool = True
    theme: str = "default"
    window_geometry: str | None = None
    debug_logging: bool = False

    def resolved_storage_path(self) -> Path:
        """Return the backing storage file, falling back to the default location."""

        if self.storage_path:
            return Path(self.storage_path).expanduser()
        return default_storage_path()


def _env_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on", "debug"}


# Environment variable -> (settings field, parser)
_ENVIRONMENT: Mapping[str, tuple[str, Callable[[str], Any]]] = {
    "PANTRY_STORAGE_PATH": ("storage_path", str),
    "PANTRY_STORAGE_KEY": ("storage_key", str),
    "PANTRY_EDIT_PLACEMENT": ("edit_placement", str),
    "PANTRY_THEME": ("theme", str),
    "PANTRY_CONFIRM_DESTRUCTIVE": ("confirm_destructive", _env_bool),
    "PANTRY_DEBUG_LOGGING": ("debug_logging", _env_bool),
}


class SettingsStore:
    """Reads and writes :class:`Settings` as a versioned JSON document.

    Effective settings are layered: the persisted file, then explicit
    overrides (the ``--set`` flags), then ``PANTRY_*`` environment variables.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_settings_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Return the effective settings.

        A missing, unreadable or malformed file yields the defaults. A file
        written by an older version is rewritten in the current format.
        """

        stored = self._read_document()
        settings = _from_document(stored)
        if stored and stored.get("version") != SETTINGS_VERSION:
            LOGGER.info("Upgrading settings file %s to version %d", self._path, SETTINGS_VERSION)
            try:
                self.save(settings)
            except OSError as exc:  # pragma: no cover - read-only home directory
                LOGGER.warning("Could not upgrade settings file %s: %s", self._path, exc)

        settings = _layer(settings, overrides or {}, source="command line")
        settings = _layer(settings, _environment_values(), source="environment")
        return _with_valid_placement(settings)

    def save(self, settings: Settings) -> Path:
        """Write ``settings`` atomically and return the file path."""

        document = dict(asdict(settings), version=SETTINGS_VERSION)
        write_text_atomic(self._path, json.dumps(document, indent=2, sort_keys=True))
        LOGGER.debug("Saved settings to %s", self._path)
        return self._path

    def _read_document(self) -> Dict[str, Any]:
        text = read_text_if_exists(self._path)
        if text is None:
            return {}
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Ignoring %s: not valid JSON (%s)", self._path, exc)
            return {}
        if not isinstance(document, dict):
            LOGGER.warning("Ignoring %s: expected a JSON object", self._path)
            return {}
        return document


def _field_names() -> set[str]:
    return {field_def.name for field_def in fields(Settings)}


def _from_document(document: Mapping[str, Any]) -> Settings:
    known = {key: value for key, value in document.items() if key in _field_names()}
    try:
        return Settings(**known)
    except TypeError as exc:  # pragma: no cover - guarded by the field filter
        LOGGER.warning("Settings document rejected (%s); using defaults", exc)
        return Settings()


def _environment_values() -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for variable, (field_name, parse) in _ENVIRONMENT.items():
        raw = os.environ.get(variable)
        if raw is not None:
            values[field_name] = parse(raw)
    return values


def _layer(settings: Settings, values: Mapping[str, Any], *, source: str) -> Settings:
    names = _field_names()
    accepted = {key: value for key, value in values.items() if key in names and value is not None}
    if not accepted:
        return settings
    LOGGER.debug("Settings from %s: %s", source, ", ".join(sorted(accepted)))
    return replace(settings, **accepted)


def _with_valid_placement(settings: Settings) -> Settings:
    placement = (settings.edit_placement or "").strip().lower()
    if placement not in EDIT_PLACEMENT_CHOICES:
        LOGGER.warning(
            "Unknown edit_placement %r; using %r", settings.edit_placement, DEFAULT_EDIT_PLACEMENT
        )
        placement = DEFAULT_EDIT_PLACEMENT
    if placement == settings.edit_placement:
        return settings
    return replace(settings, edit_placement=placement)
