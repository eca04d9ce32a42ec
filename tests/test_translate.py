"""Tests for value translation helpers."""

from datetime import date

import pytest

from phenogrid.cells import CellValue, StyleTag
from phenogrid.translate import (
    GENE_VALUES,
    VARIANT_VALUES,
    ValueTranslator,
    allergy,
    format_date,
    integer_to_str_bool,
    parse_evidence,
    presence,
    str_integer_to_str_bool,
    username,
)


class TestValueTranslator:
    def test_table_lookup(self):
        assert VARIANT_VALUES("likely_pathogenic") == "Likely Pathogenic"
        assert VARIANT_VALUES("denovo_germline") == "de novo germline"

    def test_self_descriptive_tokens_are_capitalized(self):
        assert VARIANT_VALUES("pathogenic") == "Pathogenic"
        assert VARIANT_VALUES("maternal") == "Maternal"

    def test_unresolved_token_passes_through(self):
        assert VARIANT_VALUES("some_new_token") == "some_new_token"

    def test_missing_value(self):
        assert VARIANT_VALUES(None) == ""
        assert VARIANT_VALUES("") == ""

    def test_list_values_are_joined(self):
        assert GENE_VALUES(["sequencing", "deletion"]) == "Sequencing, Deletion/duplication"

    def test_table_wins_over_capitalization(self):
        translator = ValueTranslator({"solved": "Confirmed causal"}, self_descriptive=["solved"])
        assert translator("solved") == "Confirmed causal"

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            GENE_VALUES.table["new"] = "value"


@pytest.mark.parametrize(
    "value, expected",
    [(1, "Yes"), (0, "No"), (None, ""), (-1, ""), (True, "Yes"), (False, "No")],
)
def test_integer_to_str_bool(value, expected):
    assert integer_to_str_bool(value) == expected


@pytest.mark.parametrize("value, expected", [("1", "Yes"), ("0", "No"), ("", ""), ("x", ""), (None, "")])
def test_str_integer_to_str_bool(value, expected):
    assert str_integer_to_str_bool(value) == expected


def test_parse_evidence_order_is_fixed():
    assert parse_evidence(["reported", "rare"]) == (
        "Rare (MAF<0.01); Reported in other affected individuals; "
    )
    assert parse_evidence("predicted") == "Predicted damaging by in silico models; "
    assert parse_evidence("   ") == ""
    assert parse_evidence(None) == ""


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-03-05T09:12:44+00:00", "2024.03.05"),
        ("2024-03-05T09:12:44Z", "2024.03.05"),
        ("2019-11-02", "2019.11.02"),
        (date(2020, 1, 9), "2020.01.09"),
        ("", ""),
        (None, ""),
        ("sometime in 2019", "sometime in 2019"),
    ],
)
def test_format_date(value, expected):
    assert format_date(value) == expected


def test_username():
    assert username("XWiki.jdoe") == "jdoe"
    assert username("jdoe") == "jdoe"
    assert username(None) == "Unknown user"
    assert username("  ") == "Unknown user"


def test_presence_styles():
    assert presence(True) == CellValue("Yes", frozenset({StyleTag.YES}))
    no = presence(False)
    assert no.text == "No"
    assert no.styles == {StyleTag.NO, StyleTag.YES_NO_SEPARATOR}


def test_allergy_nkda_is_highlighted():
    assert allergy("NKDA") == CellValue("NKDA", frozenset({StyleTag.YES}))
    assert allergy("Penicillin") == "Penicillin"
