"""
Tests for date, amount, reference and description normalization.
"""
import pytest
from datetime import date
from decimal import Decimal

from bankcsv.core.normalize import (
    ABSA_AMOUNT_RULES,
    FNB_AMOUNT_RULES,
    FNB_REFERENCE_PATTERNS,
    STANDARD_BANK_AMOUNT_RULES,
    clean_description,
    extract_reference,
    format_amount,
    is_compact_date,
    is_date_like,
    is_padded_compact_date,
    is_signed_padded_amount,
    normalize_amount,
    normalize_date,
    parse_amount,
    parse_date,
    remove_leading_zeros,
)


class TestNormalizeDate:

    @pytest.mark.parametrize("token,expected", [
        ("020241101", "2024-11-01"),
        ("20230501", "2023-05-01"),
        ("2023/05/01", "2023-05-01"),
        ("01/05/2023", "2023-05-01"),
        ("01-05-2023", "2023-05-01"),
        ("1 May 2023", "2023-05-01"),
        ("2023-05-01 14:30", "2023-05-01"),
    ])
    def test_supported_formats(self, token, expected):
        assert normalize_date(token) == expected

    def test_blank_input(self):
        assert normalize_date("") == ""
        assert normalize_date("   ") == ""

    def test_idempotent_on_iso_output(self):
        once = normalize_date("01/05/2023")
        assert normalize_date(once) == once

    def test_unparseable_passes_through_trimmed(self):
        assert normalize_date("  not a date ") == "not a date"

    def test_invalid_compact_date_passes_through(self):
        assert normalize_date("20231345") == "20231345"

    def test_plain_number_is_not_a_date(self):
        assert parse_date("12345") is None

    def test_parse_date_returns_date(self):
        assert parse_date("20240229") == date(2024, 2, 29)


class TestDateShapes:

    def test_is_date_like(self):
        assert is_date_like("2023-05-01")
        assert is_date_like("01/05/2023")
        assert not is_date_like("hello")
        assert not is_date_like("12345")
        assert not is_date_like("")

    def test_is_date_like_accepts_twenty_prefix(self):
        assert is_date_like("20230501")

    def test_compact_dates(self):
        assert is_compact_date("20230501")
        assert not is_compact_date("020230501")
        assert is_padded_compact_date("020230501")
        assert is_padded_compact_date("20230501")
        assert not is_padded_compact_date("19990501")

    def test_signed_padded_amount(self):
        assert is_signed_padded_amount("+000000001250.00")
        assert is_signed_padded_amount("-000000000300.50")
        assert not is_signed_padded_amount("000000001250.00")
        assert not is_signed_padded_amount("+12A")


class TestNormalizeAmount:

    @pytest.mark.parametrize("token,expected", [
        ("R 1,234.56", ("1234.56", "0.00")),
        ("(100.00)", ("0.00", "100.00")),
        ("+75", ("75.00", "0.00")),
        ("00045.00", ("45.00", "0.00")),
        ("abc", ("0.00", "0.00")),
        ("", ("0.00", "0.00")),
        ("-1200.00", ("0.00", "1200.00")),
        ("150.00 DR", ("0.00", "150.00")),
        ("150.00 CR", ("150.00", "0.00")),
        ("1,000", ("1000.00", "0.00")),
        ("0.005", ("0.01", "0.00")),
    ])
    def test_default_rules(self, token, expected):
        assert normalize_amount(token) == expected

    def test_fnb_trailing_minus_and_comma_decimal(self):
        assert normalize_amount("150.00-", FNB_AMOUNT_RULES) == ("0.00", "150.00")
        assert normalize_amount("12,50", FNB_AMOUNT_RULES) == ("12.50", "0.00")

    def test_absa_rejects_compact_dates(self):
        assert parse_amount("20230501", ABSA_AMOUNT_RULES) is None
        assert parse_amount("1,234,567.00", ABSA_AMOUNT_RULES) == Decimal("1234567.00")

    def test_standard_bank_has_no_currency_markers(self):
        assert parse_amount("R100", STANDARD_BANK_AMOUNT_RULES) is None
        assert parse_amount("+000000001250.00", STANDARD_BANK_AMOUNT_RULES) == Decimal("1250.00")

    @pytest.mark.parametrize("value,expected", [
        ("000123.45", "123.45"),
        ("0000", "0"),
        ("000.50", "0.50"),
        ("", ""),
    ])
    def test_remove_leading_zeros(self, value, expected):
        assert remove_leading_zeros(value) == expected

    def test_out_of_range_amount_is_zero(self):
        assert format_amount(Decimal("1" * 30)) == "0.00"
        assert normalize_amount("-" + "9" * 40) == ("0.00", "0.00")


class TestExtractReference:

    def test_ref_prefix(self):
        assert extract_reference("Payment REF:12345 thanks") == "12345"

    def test_no_numbers(self):
        assert extract_reference("no numbers here") == ""
        assert extract_reference("") == ""

    def test_trailing_number(self):
        assert extract_reference("SETTLEMENT FROM CUSTOMER 1234567") == "1234567"

    def test_number_after_parenthesis(self):
        assert extract_reference("TRANSFER (SAVINGS)889912 MONTHLY") == "889912"

    def test_fnb_patterns(self):
        assert extract_reference("12345678 PAYMENT", FNB_REFERENCE_PATTERNS) == "12345678"
        assert extract_reference("EFT CREDIT REF 99887", FNB_REFERENCE_PATTERNS) == "99887"
        assert extract_reference("PMT 4455 RECEIVED", FNB_REFERENCE_PATTERNS) == "4455"


class TestCleanDescription:

    def test_collapses_whitespace_and_trims_punctuation(self):
        assert clean_description("  Hello   world ., ") == "Hello world"

    def test_only_spaces_dots_and_commas_are_trimmed(self):
        assert clean_description("hello world!!") == "hello world!!"
        assert clean_description("-- x --") == "-- x --"
        assert clean_description(". (REF 12)") == "(REF 12)"

    def test_empty(self):
        assert clean_description("") == ""
