"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and isolates tests from TESTSIFT_* variables in the developer's environment.
"""

import sys
from collections.abc import Callable, Iterator
from itertools import count
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local testsift package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of testsift modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("testsift"):
        del sys.modules[module_name]

_TESTSIFT_ENV = (
    "TESTSIFT_PROPERTIES",
    "TESTSIFT_CONFIGURATION_TRACE",
    "TESTSIFT_CLASSPATH",
    "TESTSIFT_LOG_LEVEL",
)

_package_ids = count()


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _TESTSIFT_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def unique_package() -> Iterator[Callable[[], str]]:
    """Factory for package names no other test has imported.

    Scanning imports modules by name, so every test that writes source files
    needs its own top-level package to avoid sys.modules collisions.
    """
    created: list[str] = []

    def make() -> str:
        name = f"sift_fixture_{next(_package_ids)}"
        created.append(name)
        return name

    yield make

    for module_name in list(sys.modules):
        if any(module_name == n or module_name.startswith(f"{n}.") for n in created):
            del sys.modules[module_name]


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    """Route structlog through stdlib at WARNING so debug events stay off stdout."""
    from testsift.core.logging import configure_logging

    configure_logging(level="WARNING")
