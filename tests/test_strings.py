"""Test C literal quoting."""

from __future__ import annotations

import pytest

from scangen.strings import cchar, contains_c_comment_marker, cstring


class TestCString:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("if", '"if"'),
            ("", '""'),
            ('a"b', '"a\\"b"'),
            ("a\\b", '"a\\\\b"'),
            ("'", '"\'"'),
            ("\n\t\r", '"\\n\\t\\r"'),
            ("\x01", '"\\001"'),
            ("\x7f", '"\\177"'),
            ("é", '"é"'),
        ],
    )
    def test_quoting(self, text, expected):
        assert cstring(text) == expected

    def test_octal_escape_does_not_absorb_digit(self):
        assert cstring("\x001") == '"\\0001"'


class TestCChar:
    @pytest.mark.parametrize(
        "ch,expected",
        [
            ("a", "'a'"),
            ("'", "'\\''"),
            ('"', "'\"'"),
            ("\\", "'\\\\'"),
            ("\n", "'\\n'"),
            ("\t", "'\\t'"),
        ],
    )
    def test_quoting(self, ch, expected):
        assert cchar(ch) == expected

    @pytest.mark.parametrize("text", ["", "ab"])
    def test_rejects_non_single(self, text):
        with pytest.raises(ValueError):
            cchar(text)


class TestCommentMarker:
    @pytest.mark.parametrize("text", ["/*", "*/", "a/*b", "x*/"])
    def test_detected(self, text):
        assert contains_c_comment_marker(text)

    @pytest.mark.parametrize("text", ["--", "//", "/ *", "{-"])
    def test_not_detected(self, text):
        assert not contains_c_comment_marker(text)
