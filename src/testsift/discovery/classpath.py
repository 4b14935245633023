"""Classpath scanning for classes and resources.

The classpath is an ``os.pathsep``-separated list of import roots. Each
root is a directory or a zip-format archive (see ARCHIVE_SUFFIXES). The
root list is computed once per scanner and cached; later changes to the
classpath are not picked up.

Failure policy:
- a directory entry that cannot be visited, or a module whose import fails,
  is skipped and the scan continues
- a module whose name is already loaded from another location is skipped
  for this root, so a root only yields classes from its own files
- an archive root that exists but cannot be opened does not stop the other
  roots from being scanned, but the call raises ScanError afterwards with
  the partial results attached
"""

from __future__ import annotations

import importlib
import inspect
import os
import pkgutil
import re
import sys
import sysconfig
import threading
import zipfile
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from types import ModuleType
from typing import TypeVar

from testsift.config.constants import ARCHIVE_SUFFIXES
from testsift.config.settings import load_settings
from testsift.core.arguments import is_callable, not_blank, not_none
from testsift.core.errors import ArgumentError, ScanError
from testsift.core.logging import get_logger
from testsift.discovery.excludes import is_prunable
from testsift.discovery.resources import ResourceLocator

log = get_logger(__name__)

ClassPredicate = Callable[[type], bool]
NameFilter = Callable[[str], bool]
T = TypeVar("T")

_INTERPRETER_DIR_NAMES = frozenset(("site-packages", "dist-packages"))


# =============================================================================
# Classpath string
# =============================================================================


def _interpreter_paths() -> set[str]:
    paths = sysconfig.get_paths()
    return {
        os.path.normcase(os.path.abspath(paths[key]))
        for key in ("stdlib", "platstdlib", "purelib", "platlib")
        if key in paths
    }


def default_classpath() -> str:
    """Build a classpath from sys.path without the interpreter's own locations.

    The stdlib, its extension-module directories and any site-packages or
    dist-packages directory are left out so a scan never imports installed
    third-party or standard-library modules.
    """
    interpreter = _interpreter_paths()
    kept: list[str] = []
    for entry in sys.path:
        absolute = os.path.normcase(os.path.abspath(entry or os.curdir))
        if absolute in interpreter:
            continue
        if any(absolute.startswith(prefix + os.sep) for prefix in interpreter):
            continue
        if _INTERPRETER_DIR_NAMES & set(Path(absolute).parts):
            continue
        name = os.path.basename(absolute)
        if name.startswith("python") and name.endswith(".zip"):
            continue
        kept.append(entry)
    return os.pathsep.join(kept)


def _is_archive(root: Path) -> bool:
    return root.suffix.lower() in ARCHIVE_SUFFIXES


def _log_walk_error(error: OSError) -> None:
    log.debug("scan_skipped_entry", path=getattr(error, "filename", None), error=str(error))


# =============================================================================
# Module enumeration
# =============================================================================


def _directory_modules(root: Path) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames[:] = sorted(d for d in dirnames if not is_prunable(d))
        parts = Path(dirpath).relative_to(root).parts
        for filename in sorted(filenames):
            if not filename.endswith(".py"):
                continue
            stem = filename[:-3]
            if not stem.isidentifier():
                continue
            if stem == "__init__":
                if parts:
                    yield ".".join(parts)
            else:
                yield ".".join((*parts, stem))


def _archive_modules(archive: Path) -> list[str]:
    with zipfile.ZipFile(archive) as zf:
        names = [info.filename for info in zf.infolist() if not info.is_dir()]

    modules: list[str] = []
    for name in names:
        if not name.endswith(".py"):
            continue
        parts = name[:-3].split("/")
        if parts[-1] == "__init__":
            parts = parts[:-1]
        if parts and all(part.isidentifier() for part in parts):
            modules.append(".".join(parts))
    return modules


def _ensure_importable(root: Path) -> None:
    entry = str(root)
    if entry not in sys.path:
        sys.path.append(entry)
        importlib.invalidate_caches()


def _log_walk_package_error(name: str) -> None:
    log.debug("scan_skipped_module", module=name)


def _import_module(name: str) -> ModuleType | None:
    try:
        return importlib.import_module(name)
    except Exception as e:  # noqa: BLE001
        log.debug("scan_skipped_module", module=name, error=f"{type(e).__name__}: {e}")
        return None


def _loaded_from(module: ModuleType, root: Path) -> bool:
    """Whether ``module`` was loaded from a file under ``root``."""
    filename = getattr(module, "__file__", None)
    return filename is not None and Path(os.path.abspath(filename)).is_relative_to(root)


def _classes_in(module: ModuleType, predicate: ClassPredicate) -> Iterator[type]:
    """Classes defined (not merely imported) in ``module``, in definition order."""
    for obj in list(vars(module).values()):
        if inspect.isclass(obj) and obj.__module__ == module.__name__ and predicate(obj):
            yield obj


# =============================================================================
# Scanner
# =============================================================================


class ClasspathScanner:
    """Finds classes and resources across the classpath roots."""

    def __init__(self, classpath: str | None = None) -> None:
        self._classpath = classpath
        self._roots: tuple[Path, ...] | None = None
        self._lock = threading.Lock()

    def classpath_roots(self) -> tuple[Path, ...]:
        """Absolute, de-duplicated roots in classpath order. Computed once."""
        roots = self._roots
        if roots is not None:
            return roots
        with self._lock:
            if self._roots is None:
                self._roots = self._compute_roots()
                log.debug("classpath_roots_resolved", count=len(self._roots))
            return self._roots

    def _compute_roots(self) -> tuple[Path, ...]:
        classpath = self._classpath
        if classpath is None:
            classpath = load_settings().classpath
        if classpath is None:
            classpath = default_classpath()
        segments = classpath.split(os.pathsep)
        unique = dict.fromkeys(
            Path(os.path.abspath(segment.strip() or os.curdir)) for segment in segments
        )
        return tuple(unique)

    # -------------------------------------------------------------------------
    # Classes
    # -------------------------------------------------------------------------

    def find_classes(
        self, predicate: ClassPredicate, name_filter: NameFilter | None = None
    ) -> list[type]:
        """Classes from every root that satisfy ``predicate``.

        Args:
            predicate: Class filter.
            name_filter: Module-name filter deciding which modules are imported.

        Raises:
            ArgumentError: When predicate is missing or not callable.
            ScanError: When an archive root could not be opened.
        """
        is_callable(predicate, "predicate")
        return self._collect(
            self.classpath_roots(),
            lambda root: self._scan_root(root, predicate, name_filter),
        )

    def find_classes_in_root(
        self,
        root: str | Path,
        predicate: ClassPredicate,
        name_filter: NameFilter | None = None,
    ) -> list[type]:
        root = Path(os.path.abspath(not_none(root, "root")))
        is_callable(predicate, "predicate")
        return self._collect((root,), lambda r: self._scan_root(r, predicate, name_filter))

    def find_classes_in_package(self, package_name: str, predicate: ClassPredicate) -> list[type]:
        """Classes in ``package_name`` and all of its subpackages.

        An unimportable package yields no classes.
        """
        package_name = not_blank(package_name, "package_name")
        is_callable(predicate, "predicate")

        package = _import_module(package_name)
        if package is None:
            return []

        modules: list[ModuleType] = [package]
        search_path = getattr(package, "__path__", None)
        if search_path is not None:
            for info in pkgutil.walk_packages(
                search_path, prefix=f"{package_name}.", onerror=_log_walk_package_error
            ):
                module = _import_module(info.name)
                if module is not None:
                    modules.append(module)

        found: dict[type, None] = {}
        for module in modules:
            for cls in _classes_in(module, predicate):
                found.setdefault(cls)
        return list(found)

    def _scan_root(
        self, root: Path, predicate: ClassPredicate, name_filter: NameFilter | None
    ) -> Iterator[type]:
        if root.is_dir():
            module_names: Iterable[str] = _directory_modules(root)
        elif _is_archive(root) and root.exists():
            module_names = _archive_modules(root)
        else:
            return

        _ensure_importable(root)
        for name in module_names:
            if name_filter is not None and not name_filter(name):
                continue
            module = _import_module(name)
            if module is None:
                continue
            if not _loaded_from(module, root):
                # an earlier root or sys.path entry provides the same module name
                log.debug("scan_skipped_module", module=name, root=str(root), reason="shadowed")
                continue
            yield from _classes_in(module, predicate)

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    def find_resources(self, pattern: str) -> list[ResourceLocator]:
        """Resources whose name fully matches ``pattern``.

        Directory roots match the bare file name; archive roots match the
        full entry name.

        Raises:
            ArgumentError: When pattern is blank or not a valid regex.
            ScanError: When an archive root could not be opened.
        """
        text = not_blank(pattern, "pattern")
        try:
            regex = re.compile(text)
        except re.error as e:
            raise ArgumentError.invalid("pattern", str(e)) from e

        def scan(root: Path) -> Iterator[ResourceLocator]:
            if root.is_dir():
                yield from _scan_directory(regex, root)
            elif _is_archive(root) and root.exists():
                yield from _scan_archive(regex, root)

        return self._collect(self.classpath_roots(), scan)

    # -------------------------------------------------------------------------

    @staticmethod
    def _collect(roots: Iterable[Path], scan: Callable[[Path], Iterable[T]]) -> list[T]:
        found: dict[T, None] = {}
        failures: dict[str, str] = {}
        first_error: Exception | None = None

        for root in roots:
            try:
                for item in scan(root):
                    found.setdefault(item)
            except (OSError, zipfile.BadZipFile) as e:
                log.warning("scan_root_unreadable", root=str(root), error=str(e))
                failures[str(root)] = str(e)
                first_error = first_error or e

        results = list(found)
        if failures:
            raise ScanError.archive_unreadable(failures, results) from first_error
        return results


def _scan_directory(regex: re.Pattern[str], root: Path) -> Iterator[ResourceLocator]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames.sort()
        directory = Path(dirpath)
        relative = directory.relative_to(root)
        for filename in sorted(filenames):
            if not regex.fullmatch(filename):
                continue
            if not (directory / filename).is_file():
                continue
            yield ResourceLocator(root=root, name=(relative / filename).as_posix())


def _scan_archive(regex: re.Pattern[str], archive: Path) -> list[ResourceLocator]:
    with zipfile.ZipFile(archive) as zf:
        return [
            ResourceLocator(root=archive, name=info.filename, archive=True)
            for info in zf.infolist()
            if not info.is_dir() and regex.fullmatch(info.filename)
        ]


# =============================================================================
# Process-wide scanner
# =============================================================================

_default: ClasspathScanner | None = None
_default_lock = threading.Lock()


def default_scanner() -> ClasspathScanner:
    """Process-wide scanner over the default classpath, created on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = ClasspathScanner()
    return _default
