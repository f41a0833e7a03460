"""Command-line entry point and Qt startup for Pantry."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import MISSING, asdict, dataclass, fields
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Sequence, TextIO

from .errors import CorruptDataError
from .services.settings import Settings, SettingsStore
from .services.storage import ItemListStore
from .ui.bootstrap import build_storage, create_application
from .ui.models.view_state import AppContext
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)
_YES = frozenset({"1", "true", "yes", "on", "debug"})
_NO = frozenset({"0", "false", "no", "off", "disabled"})
_NULL = frozenset({"none", "null"})
_QT_LEVELS: Mapping[str, int] = {
    "QtDebugMsg": logging.DEBUG,
    "QtInfoMsg": logging.INFO,
    "QtWarningMsg": logging.WARNING,
    "QtCriticalMsg": logging.ERROR,
    "QtFatalMsg": logging.CRITICAL,
}


@dataclass(slots=True)
class QtRuntime:
    """Holds the running QApplication."""

    app: Any


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Install the rotating log file and route Qt messages into it."""

    level = logging.DEBUG if debug else logging.INFO
    log_path = logging_utils.setup_logging(level, force=force)
    _LOGGER.debug("Writing %s logs to %s", logging.getLevelName(level), log_path)
    _route_qt_messages()


def load_settings(
    path: Path | None = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Return the effective settings; unreadable files yield the defaults."""

    settings_store = store or SettingsStore(path)
    try:
        return settings_store.load(overrides=overrides)
    except (OSError, ValueError) as exc:
        _LOGGER.warning(
            "Using default settings; %s could not be read: %s", settings_store.path, exc
        )
        return Settings()


def create_qapp(settings: Settings) -> QtRuntime:
    """Create (or reuse) the QApplication and apply the configured theme."""

    try:
        from PySide6.QtWidgets import QApplication
    except ImportError as exc:  # pragma: no cover - depends on desktop stack
        raise RuntimeError("The Pantry window needs PySide6; install it to launch the UI.") from exc

    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    app: Any = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("Pantry")
    app.setApplicationDisplayName("Pantry")

    if (settings.theme or "").strip().lower() == "dark":
        try:
            app.setStyle("Fusion")
        except Exception:  # pragma: no cover - style plugins vary per platform
            _LOGGER.debug("Fusion style is not available; keeping the platform style")
    return QtRuntime(app=app)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `pantry` console script and return its exit status."""

    args, qt_args = _parse_cli_args(argv)
    sys.argv = [sys.argv[0] if sys.argv else "pantry", *qt_args]

    debug = _env_flag("PANTRY_DEBUG")
    configure_logging(debug)

    raw_path = args.settings_path or os.environ.get("PANTRY_SETTINGS_PATH")
    settings_path = Path(raw_path).expanduser() if raw_path else None
    settings_store = SettingsStore(settings_path)
    try:
        overrides = _coerce_cli_overrides(args.overrides)
    except ValueError as exc:
        print(f"pantry: bad --set value: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc
    settings = load_settings(store=settings_store, overrides=overrides or None)

    if args.dump_settings:
        _dump_settings(settings, settings_store)
        return 0
    if args.dump_items:
        return _dump_items(settings)

    if settings.debug_logging and not debug:
        configure_logging(True, force=True)

    runtime = create_qapp(settings)
    context = AppContext(settings=settings, settings_store=settings_store)
    _, _, window = create_application(context)
    window.initialize()
    window.show()
    try:
        return int(runtime.app.exec())
    except KeyboardInterrupt:  # pragma: no cover - interactive shutdown
        _LOGGER.info("Interrupted; closing Pantry")
        return 0


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _YES


def _route_qt_messages() -> None:
    try:
        from PySide6.QtCore import qInstallMessageHandler
    except Exception:  # pragma: no cover - PySide6 optional during tests
        return

    qt_logger = logging.getLogger("PySide6")

    def _forward(mode, context, message):  # type: ignore[no-untyped-def]
        del context
        qt_logger.log(_QT_LEVELS.get(getattr(mode, "name", ""), logging.INFO), message)

    qInstallMessageHandler(_forward)


def _parse_cli_args(argv: Sequence[str] | None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(
        prog="pantry",
        description="Shopping list window; the dump options inspect stored data instead.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Settings file (default ~/.pantry/settings.json).",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override one setting for this run; may be repeated.",
    )
    parser.add_argument(
        "--dump-settings", action="store_true", help="Print the effective settings as JSON."
    )
    parser.add_argument(
        "--dump-items", action="store_true", help="Print the stored item list as JSON."
    )
    # Unknown arguments are handed to Qt.
    return parser.parse_known_args(argv)


def _coerce_cli_overrides(entries: Sequence[str]) -> Dict[str, Any]:
    parsers = _setting_parsers()
    overrides: Dict[str, Any] = {}
    for entry in entries:
        name, sep, raw = entry.partition("=")
        name = name.strip()
        if not sep:
            raise ValueError(f"{entry!r} is not KEY=VALUE")
        if not name:
            raise ValueError(f"{entry!r} has no setting name")
        if name not in parsers:
            known = ", ".join(sorted(parsers))
            raise ValueError(f"{name!r} is not a setting (choose from {known})")
        overrides[name] = parsers[name](raw.strip())
    return overrides


def _setting_parsers() -> Dict[str, Callable[[str], Any]]:
    parsers: Dict[str, Callable[[str], Any]] = {}
    for field_def in fields(Settings):
        default = field_def.default if field_def.default is not MISSING else None
        if isinstance(default, bool):
            parsers[field_def.name] = _parse_bool
        elif default is None:
            parsers[field_def.name] = _optional_text
        else:
            parsers[field_def.name] = str
    return parsers


def _optional_text(value: str) -> str | None:
    return None if value.lower() in _NULL else value


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _YES:
        return True
    if lowered in _NO:
        return False
    raise ValueError(f"expected a yes/no value, got {value!r}")


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    stream: TextIO | None = None,
) -> None:
    out = stream or sys.stdout
    payload = dict(
        asdict(settings),
        settings_path=str(store.path),
        resolved_storage_path=str(settings.resolved_storage_path()),
    )
    out.write(json.dumps(payload, indent=2, sort_keys=True) + "\n")


def _dump_items(settings: Settings, *, stream: TextIO | None = None) -> int:
    out = stream or sys.stdout
    store = ItemListStore(build_storage(settings), key=settings.storage_key)
    try:
        items = store.read_list() or []
    except CorruptDataError as exc:
        print(f"pantry: stored item list is corrupt: {exc}", file=sys.stderr)
        return 1
    out.write(json.dumps(items, indent=2, ensure_ascii=False) + "\n")
    return 0


__all__ = ["QtRuntime", "configure_logging", "create_qapp", "load_settings", "main"]
