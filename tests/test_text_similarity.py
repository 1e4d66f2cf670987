import pytest

from product_compare.models.product import ProductVariant
from product_compare.modules.similarity import (
    array_similarity,
    round_half_up,
    similarity,
    tokenize,
    variant_similarity,
    variant_text,
)


def test_tokenize_lowercases_and_collapses_duplicates():
    assert tokenize("Red  red\tBLUE\nblue") == {"red", "blue"}
    assert tokenize("") == set()


def test_tokenize_keeps_empty_token_for_edge_whitespace():
    assert tokenize(" Red blue ") == {"", "red", "blue"}
    assert tokenize("   ") == {""}


def test_similarity_counts_trailing_whitespace():
    # {a, ""} vs {a}
    assert similarity("a ", "a") == 50
    assert similarity(" a", "a ") == 100


@pytest.mark.parametrize("a, b, expected", [
    ("", "", 100),
    (None, None, 100),
    ("", "x", 0),
    ("x", "", 0),
    (None, "x", 0),
])
def test_similarity_empty_inputs(a, b, expected):
    assert similarity(a, b) == expected


def test_similarity_partial_overlap():
    # {red, blue, green} vs {red, blue, yellow}: 2 shared out of 4
    assert similarity("red blue green", "red blue yellow") == 50


def test_similarity_is_case_insensitive_and_perfect_on_self():
    assert similarity("Wireless Headphones", "wireless HEADPHONES") == 100
    text = "Over-ear wireless headphones with noise cancellation"
    assert similarity(text, text) == 100


def test_similarity_disjoint_is_zero():
    assert similarity("red", "blue") == 0


def test_similarity_is_symmetric():
    pairs = [
        ("a b c", "b c d e"),
        ("$199.99", "$149.99"),
        ("2 year limited warranty", "1 year warranty"),
    ]
    for a, b in pairs:
        assert similarity(a, b) == similarity(b, a)


def test_similarity_rounds_ties_up():
    # 1 shared token out of 8 = 12.5
    assert similarity("t1", "t1 t2 t3 t4 t5 t6 t7 t8") == 13


def test_similarity_whitespace_only_on_both_sides():
    assert similarity("   ", "\t") == 100
    assert similarity("   ", "word") == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(83.333) == 83
    assert round_half_up(-2.5) == -3


def test_array_similarity_empty_rules():
    assert array_similarity([], []) == 100
    assert array_similarity([], ["x"]) == 0
    assert array_similarity(["x"], None) == 0


def test_array_similarity_joins_then_tokenizes():
    # {noise, cancellation, 30-hour, battery} vs {noise, cancellation, technology, 28-hour, battery}
    score = array_similarity(
        ["Noise Cancellation", "30-hour battery"],
        ["Noise Cancellation Technology", "28-hour battery"],
    )
    assert score == 50


def test_variant_text_keeps_blank_fields():
    variants = [
        ProductVariant(name="Color", options=["Red", "Blue"]),
        ProductVariant(options=["S"], price="$5"),
    ]
    assert variant_text(variants) == "Color Red Blue   S $5"


def test_variant_similarity_empty_rules():
    v = [ProductVariant(name="Color", options=["Red"])]
    assert variant_similarity([], []) == 100
    assert variant_similarity(None, []) == 100
    assert variant_similarity(None, v) == 0
    assert variant_similarity(v, []) == 0


def test_variant_similarity_scores_flattened_text():
    a = [ProductVariant(name="Color", options=["Black", "Silver"])]
    b = [ProductVariant(name="Color", options=["Black", "White"])]
    # no price: trailing space adds an empty token to both sides
    # {color, black, silver, ""} vs {color, black, white, ""}
    assert variant_similarity(a, b) == 60
