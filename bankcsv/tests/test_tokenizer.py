"""
Tests for delimiter inference and line tokenization.
"""
import pytest

from bankcsv.core.tokenizer import (
    detect_delimiter,
    is_quoted_row,
    split_line,
    split_quoted_line,
    tokenize,
)


class TestDetectDelimiter:

    @pytest.mark.parametrize("line,expected", [
        ("a,b,c", ","),
        ("a;b;c", ";"),
        ("a|b|c", "|"),
        ("a\tb\tc", "\t"),
        ("a,b;c;d", ";"),
    ])
    def test_highest_count_wins(self, line, expected):
        assert detect_delimiter(line) == expected

    def test_tie_between_comma_and_semicolon_prefers_semicolon(self):
        assert detect_delimiter("a,b;c,d;e") == ";"

    def test_tie_order_tab_first(self):
        assert detect_delimiter("a\tb|c;d,e") == "\t"

    def test_no_candidate_defaults_to_comma(self):
        assert detect_delimiter("plain text line") == ","


class TestSplitLine:

    def test_quoted_delimiter_is_literal(self):
        assert split_line('a,"b,c",d', ",") == ["a", "b,c", "d"]

    def test_doubled_quote_unescapes(self):
        assert split_line('a,"b""c",d', ",") == ["a", 'b"c', "d"]

    def test_empty_line_yields_one_field(self):
        assert split_line("", ",") == [""]

    def test_trailing_delimiter_keeps_empty_field(self):
        assert split_line("a,b,", ",") == ["a", "b", ""]

    def test_unterminated_quote_runs_to_end(self):
        assert split_line('a,"b,c', ",") == ["a", "b,c"]


class TestSplitQuotedLine:

    def test_fields_without_quotes(self):
        assert split_quoted_line('"HIST","020230501","REF1"') == ["HIST", "020230501", "REF1"]

    def test_trailing_empty_field_dropped(self):
        assert split_quoted_line('"a","b",""') == ["a", "b"]

    def test_doubled_quotes_not_unescaped(self):
        assert split_quoted_line('"a","b""c"') == ["a", "bc"]

    def test_line_ending_inside_quotes_keeps_field(self):
        assert split_quoted_line('"a","') == ["a", ""]


class TestTokenize:

    def test_delimited_fields_are_stripped(self):
        assert tokenize(' "x" , "y" ') == ["x", "y"]

    def test_multi_space_aligned(self):
        assert tokenize("20230501   DT   1500.00  SUPPLIER PAYMENT") == [
            "20230501", "DT", "1500.00", "SUPPLIER PAYMENT"
        ]

    def test_single_space_fallback(self):
        assert tokenize("one two three") == ["one", "two", "three"]

    def test_whole_line_fallback(self):
        assert tokenize(" one two ", strip=None, fallback="whole") == ["one two"]

    def test_empty_line(self):
        assert tokenize("") == []


class TestQuotedRow:

    def test_heavily_quoted_row(self):
        assert is_quoted_row('"HIST","020230501","REF0001","+000000001250.00","DEPOSIT"')

    def test_short_or_unquoted_rows(self):
        assert not is_quoted_row('"a","b"')
        assert not is_quoted_row("HIST,020230501,REF0001,+000000001250.00,DEPOSIT RECEIVED")
