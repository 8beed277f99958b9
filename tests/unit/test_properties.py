"""Unit tests for the marker file parser"""

import logging

import pytest

from stagegate.properties import ConfigParseError, parse_properties, to_bool


class TestParseProperties:
    """Line handling of key=value files"""

    def test_basic_pairs(self):
        text = "stage.build.enabled=true\nstage.test.enabled=false\n"
        assert parse_properties(text) == {
            "stage.build.enabled": "true",
            "stage.test.enabled": "false",
        }

    def test_comments_and_blank_lines_ignored(self):
        text = "# header\n\n   \n  # indented comment\nkey=value\n"
        assert parse_properties(text) == {"key": "value"}

    def test_value_keeps_text_after_first_separator(self):
        assert parse_properties("url=a=b=c") == {"url": "a=b=c"}

    def test_whitespace_trimmed_quotes_preserved(self):
        parsed = parse_properties('  spaced.key =  true  \nquoted="true"\n')
        assert parsed["spaced.key"] == "true"
        assert parsed["quoted"] == '"true"'

    def test_leading_bom_stripped(self):
        assert parse_properties("\ufeffstage.build.enabled=true\n") == {"stage.build.enabled": "true"}

    def test_leading_bom_before_comment(self):
        assert parse_properties("\ufeff# header\nk=v\n") == {"k": "v"}

    def test_empty_value_allowed(self):
        assert parse_properties("stage.build.enabled=") == {"stage.build.enabled": ""}

    def test_missing_separator_raises(self):
        with pytest.raises(ConfigParseError) as excinfo:
            parse_properties("# ok\nstage.a.enabled=true\nstage.build.enabled\n")
        assert excinfo.value.line_number == 3
        assert excinfo.value.line == "stage.build.enabled"
        assert "line 3" in str(excinfo.value)

    def test_empty_key_raises(self):
        with pytest.raises(ConfigParseError, match="empty key"):
            parse_properties("=true")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_properties("garbage")

    def test_duplicate_last_wins_by_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger="stagegate.properties"):
            parsed = parse_properties("k=false\nk=true\n")
        assert parsed == {"k": "true"}
        assert "duplicate key k" in caplog.text

    def test_duplicate_first_wins(self):
        assert parse_properties("k=false\nk=true\n", on_duplicate="first") == {"k": "false"}

    def test_duplicate_error(self):
        with pytest.raises(ConfigParseError, match="duplicate key k"):
            parse_properties("k=false\nk=true\n", on_duplicate="error")

    def test_unknown_duplicate_policy(self):
        with pytest.raises(ValueError, match="unknown duplicate policy"):
            parse_properties("k=v", on_duplicate="merge")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("true", True),
        ("false", False),
        ("True", False),
        ("TRUE", False),
        ("yes", False),
        ("1", False),
        ("", False),
        (None, False),
        (True, True),
        (False, False),
    ],
)
def test_to_bool_exact_match(value, expected):
    assert to_bool(value) is expected
