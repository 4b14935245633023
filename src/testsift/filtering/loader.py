"""Filter-definitions loading.

The definitions file is named in the configuration store under
FILTER_DEFINITIONS_FILENAME_KEY. No key (or a blank value) disables
filtering. Any problem with the file (unreadable, malformed YAML, an unknown
``type``, an invalid pattern) fails the whole load with ConfigError; a
partial rule list is never returned.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from testsift.config.constants import FILTER_DEFINITIONS_FILENAME_KEY
from testsift.config.store import ConfigurationStore
from testsift.core.arguments import not_none
from testsift.core.errors import ConfigError
from testsift.core.logging import get_logger
from testsift.discovery.units import DiscoveryUnit
from testsift.filtering.evaluator import apply_filters
from testsift.filtering.models import FILTER_RULE_ADAPTER, FILTER_TYPES, FilterRule

log = get_logger(__name__)

_TAG_ERRORS = frozenset(("union_tag_invalid", "union_tag_not_found"))


def _load_yaml(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError.file_not_found(str(path)) from e
    except OSError as e:
        raise ConfigError.load_failed(str(path), str(e)) from e
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


def parse_filters(records: Any) -> list[FilterRule]:
    """Validate raw records and return the enabled rules in declaration order.

    Raises:
        ConfigError: On an unknown type or any other invalid record.
    """
    if records is None:
        return []
    if not isinstance(records, list):
        raise ConfigError.invalid_filter(
            None, f"expected a sequence of filters, got {type(records).__name__}"
        )

    filters: list[FilterRule] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ConfigError.invalid_filter(
                index, f"expected a mapping, got {type(record).__name__}"
            )
        try:
            rule = FILTER_RULE_ADAPTER.validate_python(record)
        except ValidationError as e:
            err = e.errors()[0]
            if err["type"] in _TAG_ERRORS:
                raise ConfigError.invalid_filter_type(
                    index, record.get("type"), FILTER_TYPES
                ) from e
            field = ".".join(str(loc) for loc in err["loc"][1:]) or "record"
            raise ConfigError.invalid_filter(index, f"{field}: {err['msg']}") from e
        if rule.enabled:
            filters.append(rule)
    return filters


class FilterEngine:
    """Loads filter rules from configuration and applies them to a discovery set."""

    def __init__(self, configuration: ConfigurationStore) -> None:
        self._configuration = not_none(configuration, "configuration")

    def definitions_path(self) -> Path | None:
        value = self._configuration.get_optional(FILTER_DEFINITIONS_FILENAME_KEY)
        if value is None or not value.strip():
            return None
        return Path(value.strip()).absolute()

    def load_filters(self) -> list[FilterRule]:
        """Enabled rules in declaration order; empty when filtering is off."""
        path = self.definitions_path()
        if path is None:
            log.debug("filters_disabled")
            return []
        filters = parse_filters(_load_yaml(path))
        log.debug("filters_loaded", path=str(path), count=len(filters))
        return filters

    def working_set(self, discovery: Sequence[DiscoveryUnit]) -> list[DiscoveryUnit]:
        return apply_filters(self.load_filters(), discovery)
