"""Tests for argument validation helpers."""

import pytest

from testsift.core.arguments import is_callable, not_blank, not_none
from testsift.core.errors import ArgumentError, ErrorCode


class TestNotNone:
    def test_returns_value(self) -> None:
        assert not_none(0, "x") == 0

    def test_rejects_none(self) -> None:
        with pytest.raises(ArgumentError) as exc_info:
            not_none(None, "x")
        assert exc_info.value.code == ErrorCode.ARGUMENT_NONE


class TestNotBlank:
    def test_returns_trimmed(self) -> None:
        assert not_blank("  key \t", "key") == "key"

    @pytest.mark.parametrize("value", ["", "   ", "\t\n"])
    def test_rejects_blank(self, value: str) -> None:
        with pytest.raises(ArgumentError) as exc_info:
            not_blank(value, "key")
        assert exc_info.value.code == ErrorCode.ARGUMENT_BLANK

    def test_rejects_none(self) -> None:
        with pytest.raises(ArgumentError) as exc_info:
            not_blank(None, "key")
        assert exc_info.value.code == ErrorCode.ARGUMENT_NONE

    def test_rejects_non_string(self) -> None:
        with pytest.raises(ArgumentError) as exc_info:
            not_blank(42, "key")  # type: ignore[arg-type]
        assert exc_info.value.code == ErrorCode.ARGUMENT_INVALID


class TestIsCallable:
    def test_accepts_callable(self) -> None:
        is_callable(len, "fn")

    def test_rejects_none(self) -> None:
        with pytest.raises(ArgumentError):
            is_callable(None, "fn")

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(ArgumentError):
            is_callable("nope", "fn")
