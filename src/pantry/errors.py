"""Error taxonomy for item list operations.

Every error raised by the list core derives from :class:`ItemListError`
and serializes consistently so the presentation layer can report it
without inspecting exception types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


class ErrorCode:
    """Constants for machine-readable error codes."""

    VALIDATION_FAILED = "validation_failed"
    DUPLICATE_ITEM = "duplicate_item"
    ITEM_NOT_FOUND = "item_not_found"
    CORRUPT_DATA = "corrupt_data"


@dataclass
class ItemListError(Exception):
    """Base exception for all item list errors.

    Attributes:
        error_code: Machine-readable error identifier.
        message: Human-readable error description.
        details: Additional structured error information.
    """

    error_code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    # "warning" for user mistakes, "error" for faults
    severity: ClassVar[str] = "error"

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        result: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


@dataclass
class ValidationError(ItemListError):
    """Raised when an empty item is submitted."""

    error_code: str = field(default=ErrorCode.VALIDATION_FAILED)
    message: str = field(default="Please input an item")
    details: dict[str, Any] = field(default_factory=dict)

    severity: ClassVar[str] = "warning"


@dataclass
class DuplicateError(ItemListError):
    """Raised when adding text that is already on the list."""

    error_code: str = field(default=ErrorCode.DUPLICATE_ITEM)
    message: str = field(default="That item already exists!")
    details: dict[str, Any] = field(default_factory=dict)

    text: str | None = field(default=None)

    severity: ClassVar[str] = "warning"

    def __post_init__(self) -> None:
        if self.text is not None:
            self.details.setdefault("text", self.text)
        super().__post_init__()


@dataclass
class NotFoundError(ItemListError):
    """Raised when an operation references text that is not on the list.

    Callers select items from the rendered list, so this indicates a
    stale view rather than a user mistake.
    """

    error_code: str = field(default=ErrorCode.ITEM_NOT_FOUND)
    message: str = field(default="Item is not on the list")
    details: dict[str, Any] = field(default_factory=dict)

    text: str | None = field(default=None)

    def __post_init__(self) -> None:
        if self.text is not None:
            self.details.setdefault("text", self.text)
        super().__post_init__()


@dataclass
class CorruptDataError(ItemListError):
    """Raised when persisted data is not a well-formed array of strings."""

    error_code: str = field(default=ErrorCode.CORRUPT_DATA)
    message: str = field(default="Stored item list is corrupt")
    details: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "ErrorCode",
    "ItemListError",
    "ValidationError",
    "DuplicateError",
    "NotFoundError",
    "CorruptDataError",
]
