"""Discovery units: candidate test classes as seen by the filter engine.

A test class is a concrete class with at least one public ``test*`` method.
Classes declare tags with the ``tag`` decorator:

    @tag("slow", "integration")
    class DatabaseTest:
        def test_roundtrip(self) -> None: ...
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from testsift.core.arguments import not_blank, not_none
from testsift.core.logging import get_logger
from testsift.discovery.classpath import ClasspathScanner, NameFilter

log = get_logger(__name__)

C = TypeVar("C", bound=type)

TAGS_ATTRIBUTE = "__testsift_tags__"
TEST_METHOD_PREFIX = "test"

DEFAULT_TEST_MODULE_PATTERN = re.compile(r"(?:.*\.)?(?:test_\w+|\w+_test)")
"""Module names whose last component looks like ``test_x`` or ``x_test``."""


def tag(*names: str) -> Callable[[C], C]:
    """Class decorator adding tags. Tags accumulate across decorators."""
    tags = frozenset(not_blank(name, "tag") for name in names)

    def decorate(cls: C) -> C:
        existing = frozenset(cls.__dict__.get(TAGS_ATTRIBUTE, ()))
        setattr(cls, TAGS_ATTRIBUTE, existing | tags)
        return cls

    return decorate


def tags_of(cls: type) -> frozenset[str]:
    return frozenset(getattr(cls, TAGS_ATTRIBUTE, ()))


def find_test_methods(cls: type) -> frozenset[str]:
    """Names of callable ``test*`` attributes, inherited ones included."""
    return frozenset(
        name
        for name, member in inspect.getmembers(cls)
        if name.startswith(TEST_METHOD_PREFIX) and callable(member)
    )


def is_test_class(cls: type) -> bool:
    return (
        inspect.isclass(cls)
        and not inspect.isabstract(cls)
        and not cls.__name__.startswith("_")
        and bool(find_test_methods(cls))
    )


def is_test_module(module_name: str) -> bool:
    return DEFAULT_TEST_MODULE_PATTERN.fullmatch(module_name) is not None


@dataclass(frozen=True, slots=True)
class DiscoveryUnit:
    """A discovered test class: qualified name, tags and test methods."""

    name: str
    tags: frozenset[str] = field(default_factory=frozenset)
    methods: frozenset[str] = field(default_factory=frozenset)
    cls: type | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_class(cls, klass: type) -> DiscoveryUnit:
        not_none(klass, "klass")
        return cls(
            name=f"{klass.__module__}.{klass.__qualname__}",
            tags=tags_of(klass),
            methods=find_test_methods(klass),
            cls=klass,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "tags": sorted(self.tags),
            "methods": sorted(self.methods),
        }


def discover(
    scanner: ClasspathScanner,
    predicate: Callable[[type], bool] = is_test_class,
    name_filter: NameFilter | None = is_test_module,
) -> list[DiscoveryUnit]:
    """Build the discovery set: every scanned class accepted by ``predicate``."""
    not_none(scanner, "scanner")
    units = [DiscoveryUnit.from_class(c) for c in scanner.find_classes(predicate, name_filter)]
    log.debug("discovery_complete", units=len(units))
    return units
