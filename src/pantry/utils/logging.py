"""Logging setup for the Pantry application."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["setup_logging", "get_log_path", "reset_logging"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_FILENAME = "pantry.log"
_QT_LOGGERS = ("PySide6", "shiboken6")

# Handlers installed by the last setup_logging call
_installed: list[logging.Handler] = []
_log_path: Path | None = None


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 512_000,
    backup_count: int = 2,
    force: bool = False,
) -> Path:
    """Send root logging to a rotating ``pantry.log`` and, optionally, stderr.

    The directory is ``log_dir``, else ``$PANTRY_LOG_DIR``, else
    ``~/.pantry/logs``. Repeated calls are no-ops unless ``force`` is set.
    """

    global _log_path
    if _log_path is not None and not force:
        return _log_path

    directory = Path(
        log_dir or os.environ.get("PANTRY_LOG_DIR") or Path.home() / ".pantry" / "logs"
    ).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / LOG_FILENAME

    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    _remove_installed()
    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)
    # Qt chatter stays at WARNING even in debug sessions.
    for name in _QT_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _installed.extend(handlers)
    _log_path = path
    return path


def get_log_path() -> Path | None:
    """Return the active log file, if logging has been set up."""

    return _log_path


def reset_logging() -> None:
    """Detach and close the handlers installed by :func:`setup_logging`."""

    global _log_path
    _remove_installed()
    _log_path = None


def _remove_installed() -> None:
    root = logging.getLogger()
    while _installed:
        handler = _installed.pop()
        root.removeHandler(handler)
        handler.close()
