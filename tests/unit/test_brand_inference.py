"""
Unit tests for brand inference.

Run: pytest tests/unit/test_brand_inference.py -v
"""

import pytest

from parsers.brand_inference import infer_brand_from_title, brand_hint_from_query


class TestInferBrandFromTitle:
    """Tests for infer_brand_from_title()"""

    @pytest.mark.parametrize("title,expected", [
        ("Tom Ford Oud Wood", "Tom Ford"),
        ("Yves Saint Laurent Libre Eau de Parfum", "Yves Saint Laurent"),
        ("yves saint laurent Y EDP", "Yves Saint Laurent"),
        ("Dolce & Gabbana Light Blue", "Dolce & Gabbana"),
        ("Jean Paul Gaultier Le Male 125ml", "Jean Paul Gaultier"),
    ])
    def test_known_multi_word_brands(self, title, expected):
        assert infer_brand_from_title(title) == expected

    def test_leading_product_line_gives_product_line(self):
        # Known limitation: the brand after the dash is not recovered
        assert infer_brand_from_title("Sauvage - Dior") == "Sauvage"

    def test_unspaced_hyphen_is_not_a_stop_token(self):
        # Only " - " cuts the title, so hyphenated names stay whole
        assert infer_brand_from_title("Sauvage-Dior 100ml") == "Sauvage-Dior"
        assert infer_brand_from_title("Jean-Paul Gaultier Le Male") == "Jean-Paul Gaultier"

    def test_two_capitalized_words_joined(self):
        assert infer_brand_from_title("Versace Eros for Men, 100ml") == "Versace Eros"

    def test_second_word_not_capitalized(self):
        assert infer_brand_from_title("Chanel no. 5 Eau de Parfum") == "Chanel"

    def test_cut_at_comma(self):
        assert infer_brand_from_title("Creed, Aventus 100ml") == "Creed"

    def test_cut_at_by(self):
        assert infer_brand_from_title("Aventus by Creed") == "Aventus"

    def test_single_word_title(self):
        assert infer_brand_from_title("Montblanc") == "Montblanc"

    def test_lower_case_first_word(self):
        assert infer_brand_from_title("adidas team force") == "adidas"

    def test_known_brand_needs_word_boundary(self):
        assert infer_brand_from_title("Tom Fordham Cologne") == "Tom Fordham"

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_empty_title_is_none(self, title):
        assert infer_brand_from_title(title) is None


class TestBrandHintFromQuery:
    """Tests for brand_hint_from_query()"""

    @pytest.mark.parametrize("query,expected", [
        ("Dior perfume", "Dior"),
        ("Paco Rabanne perfume", "Paco Rabanne"),
        ("Tom Ford Perfumes", "Tom Ford"),
    ])
    def test_brand_queries(self, query, expected):
        assert brand_hint_from_query(query) == expected

    @pytest.mark.parametrize("query", ["perfume for men", "oud", "", None])
    def test_other_queries(self, query):
        assert brand_hint_from_query(query) is None
