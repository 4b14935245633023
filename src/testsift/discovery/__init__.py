"""Classpath discovery: roots, classes, resources and discovery units."""

from testsift.discovery.classpath import (
    ClasspathScanner,
    default_classpath,
    default_scanner,
)
from testsift.discovery.resources import ResourceLocator
from testsift.discovery.units import (
    DiscoveryUnit,
    discover,
    find_test_methods,
    is_test_class,
    is_test_module,
    tag,
    tags_of,
)

__all__ = [
    # Scanner
    "ClasspathScanner",
    "default_classpath",
    "default_scanner",
    "ResourceLocator",
    # Units
    "DiscoveryUnit",
    "discover",
    "find_test_methods",
    "is_test_class",
    "is_test_module",
    "tag",
    "tags_of",
]
