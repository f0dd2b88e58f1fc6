"""
Unit tests for value coercion helpers.

Run: pytest tests/unit/test_text_utils.py -v
"""

import math
import pytest

from utils.text_utils import (
    normalize_header,
    is_blank,
    clean_text,
    parse_price,
    parse_int,
    split_list,
    parse_bool,
    parse_currency,
)


class TestNormalizeHeader:
    """Tests for normalize_header()"""

    @pytest.mark.parametrize("raw,expected", [
        ("  Product_Name ", "product name"),
        ("amazon-product-link", "amazon product link"),
        ("IMAGE   URL", "image url"),
        ("s-image src (2)", "s image src (2)"),
    ])
    def test_normalizes(self, raw, expected):
        assert normalize_header(raw) == expected

    def test_none_is_empty(self):
        assert normalize_header(None) == ""

    def test_numeric_header(self):
        assert normalize_header(2024) == "2024"


class TestBlankAndText:
    """Tests for is_blank() and clean_text()"""

    def test_blank_values(self):
        assert is_blank(None)
        assert is_blank(float("nan"))
        assert is_blank("   ")
        assert is_blank(" ")

    def test_non_blank_values(self):
        assert not is_blank(0)
        assert not is_blank("x")

    def test_clean_text_trims(self):
        assert clean_text("  Sauvage  ") == "Sauvage"

    def test_clean_text_drops_integral_float_suffix(self):
        assert clean_text(123.0) == "123"

    def test_clean_text_keeps_real_float(self):
        assert clean_text(1.5) == "1.5"

    def test_clean_text_blank_is_none(self):
        assert clean_text("") is None


class TestParsePrice:
    """Tests for parse_price()"""

    @pytest.mark.parametrize("raw,expected", [
        ("R1,250.00", 1250.0),
        ("R 999", 999.0),
        ("€ 1.250,50", 1250.5),
        ("1899.99", 1899.99),
        (450, 450.0),
        (12.5, 12.5),
        ("R 2 100,00", 2100.0),
    ])
    def test_parses(self, raw, expected):
        assert parse_price(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "", "N/A", "Currently unavailable", True])
    def test_unparseable_is_none(self, raw):
        assert parse_price(raw) is None

    def test_nan_is_none(self):
        assert parse_price(math.nan) is None


class TestParseInt:
    """Tests for parse_int()"""

    @pytest.mark.parametrize("raw,expected", [
        (4, 4),
        (4.0, 4),
        (" 3 ", 3),
        ("5.0", 5),
        ("7", 7),
    ])
    def test_parses(self, raw, expected):
        assert parse_int(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "4.5", "strong", 3.2])
    def test_rejects(self, raw):
        assert parse_int(raw) is None


class TestSplitList:
    """Tests for split_list()"""

    def test_mixed_delimiters(self):
        assert split_list("bergamot, pepper; ambroxan | vetiver") == [
            "bergamot", "pepper", "ambroxan", "vetiver"
        ]

    def test_empty_tokens_dropped(self):
        assert split_list("rose,, ;oud") == ["rose", "oud"]

    def test_only_delimiters_is_none(self):
        assert split_list(" , ; ") is None

    def test_list_input(self):
        assert split_list([" summer ", "", None]) == ["summer"]


class TestParseBool:
    """Tests for parse_bool()"""

    @pytest.mark.parametrize("raw", ["yes", "In Stock", "TRUE", 1, "1", True])
    def test_true(self, raw):
        assert parse_bool(raw) is True

    @pytest.mark.parametrize("raw", ["no", "Out of stock", "false", 0, False])
    def test_false(self, raw):
        assert parse_bool(raw) is False

    def test_unknown_is_none(self):
        assert parse_bool("maybe") is None


class TestParseCurrency:
    """Tests for parse_currency()"""

    def test_upper_cases(self):
        assert parse_currency(" zar ") == "ZAR"

    def test_symbol_is_none(self):
        assert parse_currency("R") is None
