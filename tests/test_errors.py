"""Tests for the error taxonomy."""

from __future__ import annotations

import pytest

from pantry.errors import (
    CorruptDataError,
    DuplicateError,
    ErrorCode,
    ItemListError,
    NotFoundError,
    ValidationError,
)


class TestDefaults:
    @pytest.mark.parametrize(
        ("error_type", "code", "severity"),
        [
            (ValidationError, ErrorCode.VALIDATION_FAILED, "warning"),
            (DuplicateError, ErrorCode.DUPLICATE_ITEM, "warning"),
            (NotFoundError, ErrorCode.ITEM_NOT_FOUND, "error"),
            (CorruptDataError, ErrorCode.CORRUPT_DATA, "error"),
        ],
    )
    def test_codes_and_severity(
        self, error_type: type[ItemListError], code: str, severity: str
    ) -> None:
        error = error_type()

        assert error.error_code == code
        assert error.severity == severity
        assert isinstance(error, ItemListError)
        assert isinstance(error, Exception)

    def test_user_facing_messages(self) -> None:
        assert ValidationError().message == "Please input an item"
        assert DuplicateError().message == "That item already exists!"


class TestSerialization:
    def test_to_dict_without_details(self) -> None:
        assert ValidationError().to_dict() == {
            "error": "validation_failed",
            "message": "Please input an item",
        }

    def test_text_lands_in_details(self) -> None:
        error = DuplicateError(text="milk")

        assert error.to_dict()["details"] == {"text": "milk"}
        assert NotFoundError(text="bread").details == {"text": "bread"}

    def test_str_includes_code(self) -> None:
        error = CorruptDataError(details={"key": "items"})

        assert str(error) == "[corrupt_data] Stored item list is corrupt"

    def test_can_be_raised_and_caught_as_base(self) -> None:
        with pytest.raises(ItemListError) as excinfo:
            raise DuplicateError(text="milk")

        assert excinfo.value.details["text"] == "milk"

    def test_details_are_not_shared(self) -> None:
        first = DuplicateError(text="milk")
        second = DuplicateError(text="eggs")

        assert first.details is not second.details
