"""Tests for folio._errors."""

import pytest

from folio._errors import (
    ConfigError,
    ConflictError,
    ExportError,
    FolioError,
    NotFoundError,
    StoreError,
    ValidationError,
)

ALL_ERRORS = (ConfigError, ValidationError, ConflictError, NotFoundError, StoreError, ExportError)


class TestErrorHierarchy:
    """All folio errors inherit from FolioError."""

    def test_folio_error_is_exception(self) -> None:
        assert issubclass(FolioError, Exception)

    @pytest.mark.parametrize("error_cls", ALL_ERRORS)
    def test_inherits(self, error_cls: type[FolioError]) -> None:
        assert issubclass(error_cls, FolioError)

    def test_catch_all_folio_errors(self) -> None:
        """All specific errors are catchable via FolioError."""
        for error_cls in ALL_ERRORS:
            with pytest.raises(FolioError, match="boom"):
                raise error_cls("boom")

    def test_cause_preserved(self) -> None:
        try:
            try:
                raise OSError("disk full")
            except OSError as exc:
                msg = "write failed"
                raise ExportError(msg) from exc
        except ExportError as err:
            assert isinstance(err.__cause__, OSError)
