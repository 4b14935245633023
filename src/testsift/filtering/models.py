"""Filter-rule models.

Each record in the filter-definitions file becomes one of four frozen
variants, selected by its ``type`` field:

    - type: ExcludeClass
      enabled: true
      classRegex: ".*"
      methodRegex: ".*"

    - type: IncludeTaggedClass
      enabled: true
      classTagRegex: "Tag1|Tag2"

Patterns are compiled during validation, so an invalid regex fails the load.
``enabled`` must be a real YAML boolean; a missing flag means disabled.
"""

from __future__ import annotations

import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, TypeAdapter

FILTER_TYPES = ("IncludeClass", "ExcludeClass", "IncludeTaggedClass", "ExcludeTaggedClass")
"""Accepted values of the ``type`` field, listed in unknown-type errors."""


class _FilterRule(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    enabled: StrictBool = False


class _ClassRule(_FilterRule):
    class_regex: re.Pattern[str] = Field(alias="classRegex")
    method_regex: re.Pattern[str] | None = Field(default=None, alias="methodRegex")

    def matches_class(self, name: str) -> bool:
        return self.class_regex.search(name) is not None

    def select_methods(self, methods: frozenset[str]) -> set[str]:
        """Methods this rule applies to; all of them without a method pattern."""
        if self.method_regex is None:
            return set(methods)
        return {m for m in methods if self.method_regex.search(m)}


class _TaggedRule(_FilterRule):
    class_tag_regex: re.Pattern[str] = Field(alias="classTagRegex")

    def matches_tags(self, tags: frozenset[str]) -> bool:
        return any(self.class_tag_regex.search(t) for t in tags)


class IncludeClassFilter(_ClassRule):
    type: Literal["IncludeClass"] = "IncludeClass"


class ExcludeClassFilter(_ClassRule):
    type: Literal["ExcludeClass"] = "ExcludeClass"


class IncludeTaggedClassFilter(_TaggedRule):
    type: Literal["IncludeTaggedClass"] = "IncludeTaggedClass"


class ExcludeTaggedClassFilter(_TaggedRule):
    type: Literal["ExcludeTaggedClass"] = "ExcludeTaggedClass"


FilterRule = Annotated[
    Union[
        IncludeClassFilter,
        ExcludeClassFilter,
        IncludeTaggedClassFilter,
        ExcludeTaggedClassFilter,
    ],
    Field(discriminator="type"),
]

FILTER_RULE_ADAPTER: TypeAdapter[FilterRule] = TypeAdapter(FilterRule)
