"""Tests for gofr_dotenv.parser.

These tests verify:
1. Which lines are considered assignments and which are skipped
2. Quoted and unquoted value extraction
3. Escaped newline expansion
4. Malformed line reporting
5. Serialization back to .env text
"""

import re
from unittest.mock import patch

import pytest

from gofr_dotenv import parser
from gofr_dotenv.exceptions import DotenvError, ParseError
from gofr_dotenv.parser import parse, stringify


class TestLineSelection:
    """Tests for the variable-start shape test."""

    def test_simple_assignment(self):
        """Test a single KEY=value line."""
        assert parse("FOO=bar") == {"FOO": "bar"}

    def test_comments_and_blank_lines_skipped(self):
        """Test that comment and blank lines produce nothing."""
        text = "# a comment\n\n   \nFOO=bar\n  # indented comment\n"
        assert parse(text) == {"FOO": "bar"}

    def test_line_without_equals_skipped(self):
        """Test that a line with no '=' is silently ignored."""
        assert parse("BADLINE\nFOO=bar") == {"FOO": "bar"}

    def test_key_starting_with_digit_skipped(self):
        """Test that identifiers must start with a letter or underscore."""
        assert parse("1FOO=bar") == {}

    def test_key_with_punctuation_skipped(self):
        """Test that dots and dashes are not part of identifiers."""
        assert parse("FOO.BAR=1\nFOO-BAR=2") == {}

    def test_underscore_key(self):
        """Test keys starting with an underscore."""
        assert parse("_PRIVATE=1") == {"_PRIVATE": "1"}

    def test_indented_assignment(self):
        """Test leading whitespace before the key."""
        assert parse("   FOO=bar") == {"FOO": "bar"}

    def test_spaces_around_equals(self):
        """Test whitespace between key, '=' and value."""
        assert parse("FOO = bar") == {"FOO": "bar"}

    def test_export_prefix_uses_last_word_as_key(self):
        """Test that 'export FOO=bar' yields key FOO."""
        assert parse("export FOO=bar") == {"FOO": "bar"}

    def test_empty_input(self):
        """Test that empty text parses to an empty mapping."""
        assert parse("") == {}


class TestUnquotedValues:
    """Tests for values without quotes."""

    def test_trailing_comment_removed(self):
        """Test that '#' starts a comment in unquoted values."""
        assert parse("FOO=bar # comment") == {"FOO": "bar"}

    def test_whitespace_trimmed(self):
        """Test that surrounding whitespace is trimmed."""
        assert parse("FOO=   bar baz   ") == {"FOO": "bar baz"}

    def test_carriage_return_trimmed(self):
        """Test CRLF input leaves no carriage return in values."""
        assert parse("FOO=bar\r\nBAZ=qux\r\n") == {"FOO": "bar", "BAZ": "qux"}

    def test_empty_value(self):
        """Test that an empty value is kept as an empty string."""
        result = parse("EMPTY=")
        assert "EMPTY" in result
        assert result["EMPTY"] == ""

    def test_only_comment_after_equals(self):
        """Test a value consisting of only a comment."""
        assert parse("FOO=#nothing") == {"FOO": ""}

    def test_equals_in_value(self):
        """Test that only the first '=' separates key and value."""
        assert parse("URL=postgres://u:p@host/db?sslmode=require") == {
            "URL": "postgres://u:p@host/db?sslmode=require"
        }

    def test_escaped_newline_not_expanded(self):
        """Test that unquoted values keep backslash-n literally."""
        assert parse("FOO=a\\nb") == {"FOO": "a\\nb"}

    def test_unterminated_quote_is_unquoted(self):
        """Test that a lone opening quote is part of the value."""
        assert parse('FOO="bar') == {"FOO": '"bar'}


class TestQuotedValues:
    """Tests for single and double quoted values."""

    def test_double_quoted(self):
        """Test a double quoted value."""
        assert parse('FOO="bar baz"') == {"FOO": "bar baz"}

    def test_single_quoted(self):
        """Test a single quoted value."""
        assert parse("FOO='bar baz'") == {"FOO": "bar baz"}

    def test_quoted_preserves_whitespace(self):
        """Test that whitespace inside quotes is kept."""
        assert parse('FOO="  padded  "') == {"FOO": "  padded  "}

    def test_quoted_hash_is_not_comment(self):
        """Test that '#' inside quotes is part of the value."""
        assert parse('FOO="bar # not a comment"') == {"FOO": "bar # not a comment"}

    def test_comment_after_closing_quote_ignored(self):
        """Test a trailing comment after a quoted value."""
        assert parse('FOO="bar" # comment') == {"FOO": "bar"}

    def test_inner_quotes_kept(self):
        """Test that only the outermost delimiter pair is removed."""
        assert parse('FOO="say "hi" now"') == {"FOO": 'say "hi" now'}
        assert parse("FOO='it's'") == {"FOO": "it's"}

    def test_mixed_delimiters_not_quoted(self):
        """Test that mismatched delimiters do not form a quoted value."""
        assert parse("FOO=\"bar'") == {"FOO": "\"bar'"}

    def test_empty_quoted(self):
        """Test that "" yields an empty string."""
        assert parse('FOO=""') == {"FOO": ""}
        assert parse("FOO=''") == {"FOO": ""}

    def test_escaped_newline_expanded(self):
        """Test that backslash-n becomes a newline in quoted values."""
        assert parse('FOO="line1\\nline2"') == {"FOO": "line1\nline2"}
        assert parse("FOO='line1\\nline2'") == {"FOO": "line1\nline2"}

    def test_other_escapes_untouched(self):
        """Test that no escape other than backslash-n is processed."""
        assert parse('FOO="a\\tb\\\\c"') == {"FOO": "a\\tb\\\\c"}


class TestDocumentLevel:
    """Tests covering whole documents."""

    def test_last_duplicate_wins(self):
        """Test that a later line overrides an earlier one."""
        assert parse("FOO=first\nFOO=second") == {"FOO": "second"}

    def test_mixed_document(self):
        """Test the reference document from the loader contract."""
        text = 'FOO=bar\nBAZ="qux\\nquux"\n# comment\nBADLINE'
        assert parse(text) == {"FOO": "bar", "BAZ": "qux\nquux"}

    def test_order_preserved(self):
        """Test that keys keep the order of their first appearance."""
        result = parse("B=2\nA=1\nC=3\nB=4")
        assert list(result) == ["B", "A", "C"]

    def test_unicode_values(self):
        """Test that non-ASCII values pass through."""
        assert parse("GREETING=héllo wörld") == {"GREETING": "héllo wörld"}

    def test_deterministic(self):
        """Test that parsing the same text twice gives equal results."""
        text = "A=1\nB='two'\nC=\"3\\n4\""
        assert parse(text) == parse(text)


class TestMalformedLines:
    """Tests for lines that start like an assignment but cannot be split."""

    def test_extraction_failure_raises(self):
        """Test that a failed key/value extraction raises ParseError."""
        never_matches = re.compile(r"(?!)")
        with patch.object(parser, "_KEY_VALUE", never_matches):
            with pytest.raises(ParseError) as exc_info:
                parse("# header\nFOO=bar")

        error = exc_info.value
        assert error.code == "MALFORMED_LINE"
        assert error.line_number == 2
        assert error.line == "FOO=bar"
        assert error.details == {"line_number": 2, "line": "FOO=bar"}

    def test_parse_error_is_dotenv_error(self):
        """Test that ParseError can be caught as DotenvError."""
        with patch.object(parser, "_KEY_VALUE", re.compile(r"(?!)")):
            with pytest.raises(DotenvError):
                parse("FOO=bar")

    def test_skipped_lines_never_raise(self):
        """Test that lines failing the shape test never reach extraction."""
        with patch.object(parser, "_KEY_VALUE", re.compile(r"(?!)")):
            assert parse("# only\nnot an assignment\n") == {}


class TestStringify:
    """Tests for serializing mappings back to .env text."""

    def test_simple_values(self):
        """Test that plain values are written bare."""
        assert stringify({"A": "1", "B": "two"}) == "A=1\nB=two\n"

    def test_empty_mapping(self):
        """Test that an empty mapping gives empty text."""
        assert stringify({}) == ""

    def test_empty_value_bare(self):
        """Test that an empty value is written without quotes."""
        assert stringify({"A": ""}) == "A=\n"

    def test_newline_escaped_and_quoted(self):
        """Test that newlines are escaped inside double quotes."""
        assert stringify({"A": "x\ny"}) == 'A="x\\ny"\n'

    def test_hash_quoted(self):
        """Test that values with '#' are quoted."""
        assert stringify({"A": "a#b"}) == 'A="a#b"\n'

    def test_surrounding_whitespace_quoted(self):
        """Test that leading/trailing whitespace is preserved through quotes."""
        assert stringify({"A": " a "}) == 'A=" a "\n'

    def test_leading_quote_quoted(self):
        """Test that a value starting with a quote character is wrapped."""
        assert stringify({"A": "'x'"}) == "A=\"'x'\"\n"

    def test_invalid_key_rejected(self):
        """Test that keys that would not read back raise ValueError."""
        with pytest.raises(ValueError, match="MY KEY"):
            stringify({"MY KEY": "1"})
        with pytest.raises(ValueError):
            stringify({"1ABC": "1"})

    def test_reparse_is_stable(self):
        """Test that serialized text parses back to the same mapping."""
        original = {
            "PLAIN": "value",
            "EMPTY": "",
            "SPACED": "  keep me  ",
            "HASH": "pa#ss",
            "MULTI": "line1\nline2",
            "QUOTES": 'he said "hi"',
            "LEADING": "'quoted'",
            "URL": "http://example.com/?a=b",
        }
        assert parse(stringify(original)) == original

    def test_reserialize_parsed_document(self):
        """Test that parse -> stringify -> parse is a fixed point."""
        parsed = parse('A=1\nB="x\\ny"\nC=\'z\' # c\nD= spaced ')
        assert parse(stringify(parsed)) == parsed
