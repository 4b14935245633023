"""Tests for config/loader.py module.

Covers:
- find_properties_file() upward search
- load_configuration() resolution order, errors and tracing
- get_configuration() process-wide singleton
"""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from testsift.config import loader
from testsift.config.constants import PROPERTIES_FILENAME, PROPERTIES_FILENAME_KEY
from testsift.config.loader import find_properties_file, get_configuration, load_configuration
from testsift.core.errors import ConfigError, ErrorCode


class _RecordingTracer:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def debug(self, event: str) -> None:
        self.lines.append(event)


@pytest.fixture
def nested(tmp_path: Path) -> Path:
    """tmp/a/b/c with no properties file anywhere yet."""
    leaf = tmp_path / "a" / "b" / "c"
    leaf.mkdir(parents=True)
    return leaf


class TestFindPropertiesFile:
    def test_given_file_in_grandparent_when_search_then_found(
        self, tmp_path: Path, nested: Path
    ) -> None:
        # Given
        target = tmp_path / "a" / PROPERTIES_FILENAME
        target.write_text("k=v\n")

        # When
        found = find_properties_file(nested)

        # Then
        assert found == target

    def test_nearest_file_wins(self, tmp_path: Path, nested: Path) -> None:
        (tmp_path / "a" / PROPERTIES_FILENAME).write_text("k=far\n")
        near = tmp_path / "a" / "b" / PROPERTIES_FILENAME
        near.write_text("k=near\n")
        assert find_properties_file(nested) == near

    def test_directory_with_matching_name_is_skipped(self, tmp_path: Path, nested: Path) -> None:
        (nested / PROPERTIES_FILENAME).mkdir()
        target = tmp_path / PROPERTIES_FILENAME
        target.write_text("k=v\n")
        assert find_properties_file(nested) == target

    def test_traces_each_searched_directory(self, tmp_path: Path, nested: Path) -> None:
        (tmp_path / "a" / PROPERTIES_FILENAME).write_text("k=v\n")
        tracer = _RecordingTracer()

        find_properties_file(nested, tracer=tracer)

        assert tracer.lines[0] == f"searching path [{nested.as_posix()}/]"
        assert tracer.lines[-1].startswith("found [")
        assert sum(line.startswith("searching path") for line in tracer.lines) == 3


class TestLoadConfiguration:
    def test_given_no_file_when_load_then_empty_store(self, nested: Path) -> None:
        store = load_configuration(nested)
        assert store.is_empty()

    def test_given_file_when_load_then_entries_and_path_recorded(
        self, tmp_path: Path, nested: Path
    ) -> None:
        # Given
        target = tmp_path / "a" / PROPERTIES_FILENAME
        target.write_text("# engine\ntestsift.engine.filter.definitions.filename=f.yaml\n")

        # When
        store = load_configuration(nested)

        # Then
        assert store.get("testsift.engine.filter.definitions.filename") == "f.yaml"
        assert store.get(PROPERTIES_FILENAME_KEY) == str(target)
        assert store.size() == 2

    def test_searches_from_cwd_by_default(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, nested: Path
    ) -> None:
        (tmp_path / "a" / PROPERTIES_FILENAME).write_text("k=v\n")
        monkeypatch.chdir(nested)
        assert load_configuration().get("k") == "v"

    def test_explicit_override(self, tmp_path: Path, nested: Path) -> None:
        (tmp_path / "a" / PROPERTIES_FILENAME).write_text("k=searched\n")
        override = tmp_path / "elsewhere.properties"
        override.write_text("k=override\n")

        store = load_configuration(nested, override=override)

        assert store.get("k") == "override"
        assert store.get(PROPERTIES_FILENAME_KEY) == str(override)

    def test_override_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, nested: Path
    ) -> None:
        override = tmp_path / "env.properties"
        override.write_text("k=env\n")
        monkeypatch.setenv("TESTSIFT_PROPERTIES", str(override))
        assert load_configuration(nested).get("k") == "env"

    def test_blank_keys_skipped(self, tmp_path: Path, nested: Path) -> None:
        (nested / PROPERTIES_FILENAME).write_text("=orphan\nk=v\n")
        store = load_configuration(nested)
        expected = {"k": "v", PROPERTIES_FILENAME_KEY: str(nested / PROPERTIES_FILENAME)}
        assert store.as_dict() == expected

    def test_missing_override_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_configuration(tmp_path, override=tmp_path / "nope.properties")
        assert exc_info.value.code == ErrorCode.CONFIG_LOAD_ERROR
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_undecodable_file_raises(self, nested: Path) -> None:
        (nested / PROPERTIES_FILENAME).write_bytes(b"k=\xff\n")
        with pytest.raises(ConfigError) as exc_info:
            load_configuration(nested)
        assert exc_info.value.code == ErrorCode.CONFIG_LOAD_ERROR

    def test_trace_lines_written_when_enabled(
        self, capsys: pytest.CaptureFixture[str], nested: Path
    ) -> None:
        (nested / PROPERTIES_FILENAME).write_text("k=v\n")

        load_configuration(nested, trace=True)

        out = capsys.readouterr().out
        assert "| TRACE |" in out
        assert f"searching path [{nested.as_posix()}/]" in out
        assert "configuration property [k] = [v]" in out

    def test_trace_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], nested: Path
    ) -> None:
        monkeypatch.setenv("TESTSIFT_CONFIGURATION_TRACE", "TRUE")
        load_configuration(nested)
        assert "load_configuration()" in capsys.readouterr().out

    def test_no_trace_by_default(self, capsys: pytest.CaptureFixture[str], nested: Path) -> None:
        load_configuration(nested)
        assert capsys.readouterr().out == ""


class TestGetConfiguration:
    def test_concurrent_first_access_yields_single_instance(
        self, monkeypatch: pytest.MonkeyPatch, nested: Path
    ) -> None:
        monkeypatch.setattr(loader, "_instance", None)
        monkeypatch.chdir(nested)
        results: list[object] = []
        barrier = threading.Barrier(8)

        def access() -> None:
            barrier.wait()
            results.append(get_configuration())

        threads = [threading.Thread(target=access) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert len(results) == 8
        assert all(r is results[0] for r in results)
        assert get_configuration() is results[0]
