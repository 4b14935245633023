"""Read-only parameter view over a ConfigurationStore.

This is the narrow interface the execution engine receives: lookups,
boolean and converted lookups, size and keys. It cannot mutate the store.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from testsift.config.constants import TRUE
from testsift.config.store import ConfigurationStore
from testsift.core.arguments import is_callable, not_blank, not_none

T = TypeVar("T")


class ConfigurationParameters:
    def __init__(self, configuration: ConfigurationStore) -> None:
        self._configuration = not_none(configuration, "configuration")

    def get(self, key: str) -> str | None:
        return self._configuration.get_optional(not_blank(key, "key"))

    def get_bool(self, key: str) -> bool | None:
        """True only for the exact value ``"true"``; None when absent."""
        value = self._configuration.get(not_blank(key, "key"))
        if value is None:
            return None
        return value == TRUE

    def get_as(self, key: str, transform: Callable[[str], T]) -> T | None:
        key = not_blank(key, "key")
        is_callable(transform, "transform")
        value = self._configuration.get(key)
        return transform(value) if value is not None else None

    def size(self) -> int:
        return self._configuration.size()

    def key_set(self) -> list[str]:
        return self._configuration.key_set()
