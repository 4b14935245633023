"""Argument validation helpers.

All helpers raise ArgumentError before the caller touches any state.
"""

from __future__ import annotations

from typing import TypeVar

from testsift.core.errors import ArgumentError

T = TypeVar("T")


def not_none(value: T | None, name: str) -> T:
    if value is None:
        raise ArgumentError.none(name)
    return value


def not_blank(value: str | None, name: str) -> str:
    """Require a non-blank string and return it trimmed."""
    if value is None:
        raise ArgumentError.none(name)
    if not isinstance(value, str):
        raise ArgumentError.invalid(name, f"expected str, got {type(value).__name__}")
    trimmed = value.strip()
    if not trimmed:
        raise ArgumentError.blank(name)
    return trimmed


def is_callable(value: object, name: str) -> None:
    if value is None:
        raise ArgumentError.none(name)
    if not callable(value):
        raise ArgumentError.invalid(name, "not callable")
