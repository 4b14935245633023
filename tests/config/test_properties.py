"""Tests for properties-file parsing."""

from pathlib import Path

import pytest

from testsift.config.properties import load_properties, parse_properties


class TestParseProperties:
    @pytest.mark.parametrize(
        "line",
        ["key=value", "key = value", "key:value", "key : value", "key value", "   key=value"],
    )
    def test_separators(self, line: str) -> None:
        assert parse_properties(line) == {"key": "value"}

    def test_comments_and_blank_lines_skipped(self) -> None:
        text = "# comment\n! also comment\n\n   \na=1\n"
        assert parse_properties(text) == {"a": "1"}

    def test_later_duplicate_wins(self) -> None:
        assert parse_properties("a=1\na=2\n") == {"a": "2"}

    def test_value_keeps_trailing_whitespace(self) -> None:
        assert parse_properties("a=1  ") == {"a": "1  "}

    def test_key_without_value(self) -> None:
        assert parse_properties("lonely") == {"lonely": ""}

    def test_only_first_separator_splits(self) -> None:
        assert parse_properties("url=http://host:80/a=b") == {"url": "http://host:80/a=b"}

    def test_continuation_lines(self) -> None:
        text = "list=a,\\\n    b,\\\n    c\nnext=1\n"
        assert parse_properties(text) == {"list": "a,b,c", "next": "1"}

    def test_escaped_backslash_is_not_continuation(self) -> None:
        assert parse_properties("path=C:\\\\\nnext=1") == {"path": "C:\\", "next": "1"}

    def test_escapes(self) -> None:
        assert parse_properties("a=tab\\there\\nline\\u0041") == {"a": "tab\there\nlineA"}

    def test_escaped_separator_in_key(self) -> None:
        assert parse_properties("my\\ key\\=x=value") == {"my key=x": "value"}

    def test_malformed_unicode_escape_raises(self) -> None:
        with pytest.raises(ValueError, match="Malformed"):
            parse_properties("a=\\u12")

    def test_comment_marker_inside_value_kept(self) -> None:
        assert parse_properties("a=1 # not a comment") == {"a": "1 # not a comment"}

    @pytest.mark.parametrize("separator", ["\x0c", "\x85", "\u2028", "\u2029", "\x1c"])
    def test_unicode_separators_stay_inside_value(self, separator: str) -> None:
        text = f"a=p{separator}q\nb=2\n"
        assert parse_properties(text) == {"a": f"p{separator}q", "b": "2"}

    @pytest.mark.parametrize("newline", ["\n", "\r", "\r\n"])
    def test_line_terminators(self, newline: str) -> None:
        assert parse_properties(f"a=1{newline}b=2{newline}") == {"a": "1", "b": "2"}

    def test_form_feed_is_leading_whitespace(self) -> None:
        assert parse_properties("\x0ckey=value") == {"key": "value"}


class TestLoadProperties:
    def test_reads_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "testsift.properties"
        path.write_text("greeting=héllo\n", encoding="utf-8")
        assert load_properties(path) == {"greeting": "héllo"}

    def test_invalid_utf8_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "testsift.properties"
        path.write_bytes(b"a=\xff\xfe\n")
        with pytest.raises(UnicodeDecodeError):
            load_properties(path)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            load_properties(tmp_path / "absent.properties")

    def test_file_with_crlf_and_line_separator(self, tmp_path: Path) -> None:
        path = tmp_path / "testsift.properties"
        path.write_bytes("a=x\u2028y\r\nb=2\r\n".encode())
        assert load_properties(path) == {"a": "x\u2028y", "b": "2"}
