"""Order-dependent filter evaluation.

The working set starts as the whole discovery set, each class with all of its
test methods. Rules then run in declaration order, adding (Include*) or
removing (Exclude*) membership. A later rule can undo an earlier one, so the
same rules in a different order can give a different working set. Rules only
draw from the discovery set; they never introduce new units.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from testsift.core.arguments import not_none
from testsift.core.errors import InternalError
from testsift.discovery.units import DiscoveryUnit
from testsift.filtering.models import (
    ExcludeClassFilter,
    ExcludeTaggedClassFilter,
    FilterRule,
    IncludeClassFilter,
    IncludeTaggedClassFilter,
)

WorkingSet = dict[str, set[str]]
"""Selected methods per class name; a class is selected when it is a key."""


def _include_class(
    rule: IncludeClassFilter, discovery: Sequence[DiscoveryUnit], working: WorkingSet
) -> None:
    for unit in discovery:
        if not rule.matches_class(unit.name):
            continue
        methods = rule.select_methods(unit.methods)
        if methods or rule.method_regex is None:
            working.setdefault(unit.name, set()).update(methods)


def _exclude_class(
    rule: ExcludeClassFilter, discovery: Sequence[DiscoveryUnit], working: WorkingSet
) -> None:
    for unit in discovery:
        selected = working.get(unit.name)
        if selected is None or not rule.matches_class(unit.name):
            continue
        if rule.method_regex is None:
            del working[unit.name]
            continue
        selected -= rule.select_methods(frozenset(selected))
        if not selected:
            del working[unit.name]


def _include_tagged(
    rule: IncludeTaggedClassFilter, discovery: Sequence[DiscoveryUnit], working: WorkingSet
) -> None:
    for unit in discovery:
        if rule.matches_tags(unit.tags):
            working.setdefault(unit.name, set()).update(unit.methods)


def _exclude_tagged(
    rule: ExcludeTaggedClassFilter, discovery: Sequence[DiscoveryUnit], working: WorkingSet
) -> None:
    for unit in discovery:
        if unit.name in working and rule.matches_tags(unit.tags):
            del working[unit.name]


def apply_filter(
    rule: FilterRule, discovery: Sequence[DiscoveryUnit], working: WorkingSet
) -> None:
    """Apply one rule to ``working`` in place."""
    if isinstance(rule, IncludeClassFilter):
        _include_class(rule, discovery, working)
    elif isinstance(rule, ExcludeClassFilter):
        _exclude_class(rule, discovery, working)
    elif isinstance(rule, IncludeTaggedClassFilter):
        _include_tagged(rule, discovery, working)
    elif isinstance(rule, ExcludeTaggedClassFilter):
        _exclude_tagged(rule, discovery, working)
    else:
        raise InternalError.unexpected("unhandled filter variant", rule=repr(rule))


def apply_filters(
    filters: Iterable[FilterRule], discovery: Sequence[DiscoveryUnit]
) -> list[DiscoveryUnit]:
    """Evaluate ``filters`` in order and return the working set.

    Units keep discovery order; each unit's ``methods`` is narrowed to the
    methods that survived.
    """
    not_none(filters, "filters")
    not_none(discovery, "discovery")

    working: WorkingSet = {unit.name: set(unit.methods) for unit in discovery}
    for rule in filters:
        apply_filter(rule, discovery, working)

    return [
        replace(unit, methods=frozenset(working[unit.name]))
        for unit in discovery
        if unit.name in working
    ]
