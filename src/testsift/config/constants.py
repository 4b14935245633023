"""Configuration constants.

Well-known file names and configuration keys. These are protocol values
shared with the execution engine and are not user-configurable.
"""

# =============================================================================
# Properties file
# =============================================================================

PROPERTIES_FILENAME = "testsift.properties"
"""File name searched for from the working directory toward the root."""

PROPERTIES_FILENAME_KEY = "testsift.properties"
"""Key under which the absolute path of the loaded properties file is recorded."""

# =============================================================================
# Engine keys
# =============================================================================

FILTER_DEFINITIONS_FILENAME_KEY = "testsift.engine.filter.definitions.filename"
"""Key naming the YAML filter-definitions file. Absent means no filtering."""

# =============================================================================
# Classpath
# =============================================================================

ARCHIVE_SUFFIXES: frozenset[str] = frozenset((".zip", ".whl", ".egg", ".pyz", ".jar"))
"""Zip-format archive extensions treated as classpath archive roots."""

TRUE = "true"
