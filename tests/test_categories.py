# tests/test_categories.py
import pytest

from stockmeta.ml.categories import (
    CATEGORIES,
    DEFAULT_RULES,
    CategoryRule,
    build_haystack,
    category_name,
    classify,
    coerce_category,
)


def test_taxonomy_has_21_entries_in_order():
    assert list(CATEGORIES) == list(range(1, 22))
    assert category_name(1) == "Animals"
    assert category_name(11) == "Landscape"
    assert category_name(21) == "Travel"


def test_rule_table_keeps_canonical_priority_order():
    order = [rule.category for rule in DEFAULT_RULES]
    assert order == [1, 14, 11, 21, 2, 13, 12, 3, 7, 4, 18, 19, 8, 10, 5, 17, 16, 15, 9]


def test_haystack_is_lowercase_padded_and_punctuation_free():
    hay = build_haystack("Dog, on a Mountain!", ["Snow-capped", "  Peak "])
    assert hay == " dog on a mountain snow capped peak "


def test_animal_rule_precedes_landscape():
    assert classify("Dog on a mountain trail", ["dog", "mountain", "hiking"], 11) == 1


def test_flower_rule_suppressed_by_panorama_falls_to_landscape():
    assert classify("Wild flower", ["flower", "mountain panorama"], 14) == 11


def test_flower_closeup_is_plants():
    assert classify("Pink tulip close up", ["tulip", "petal", "spring"], 11) == 14


def test_building_rule_suppressed_by_tourism_wording():
    title = "Gothic cathedral facade"
    assert classify(title, ["architecture"], 15) == 2
    assert classify(title, ["architecture", "destination"], 15) == 15


def test_travel_precedes_buildings():
    assert classify("Eiffel Tower at dusk", ["architecture", "paris"], 2) == 21


def test_people_precede_business():
    assert classify("Businesswoman in office", ["woman", "office"], 3) == 13


def test_terms_match_from_word_start_only():
    # "hotdog" 不該命中 Animals 的 "dog"
    assert classify("Hotdog with mustard", ["hotdog", "street food"], 1) == 7
    # "cat " 要求整個字
    assert classify("Category chart", ["catalog"], 8) == 8


def test_compound_words_do_not_match_inner_terms():
    # 只比對字首：合成字 "seabirds" 不含 " bird"，也不是整個字 "sea"
    assert classify("Seabirds", ["seabirds"], 20) == 20
    # 拆開寫或列在規則裡的合成字才會命中
    assert classify("Sea birds", ["sea birds"], 20) == 1
    assert classify("Seagull", ["seagull"], 20) == 1


def test_technology_and_graphic_resources():
    assert classify("Laptop on desk", ["laptop", "computer"], 3) == 19
    assert classify("Seamless geometric pattern", ["vector", "texture"], 1) == 8


@pytest.mark.parametrize(
    "model_category, expected",
    [(6, 6), (20, 20), ("abc", 11), (99, 21), (-3, 1), (None, 11)],
)
def test_no_match_falls_back_to_model_category(model_category, expected):
    assert classify("Untitled", ["xyzzy"], model_category) == expected


def test_fallback_default_is_configurable():
    assert classify("", [], "n/a", fallback=13) == 13


def test_classify_is_deterministic():
    args = ("Family picnic in the park", ["family", "picnic", "summer"], 12)
    assert classify(*args) == classify(*args) == 13


def test_custom_rules_first_match_wins():
    rules = [
        CategoryRule(20, ("car ", "train")),
        CategoryRule(19, ("car ",)),
    ]
    assert classify("Red car", ["car"], 11, rules=rules) == 20
    assert classify("Blue boat", ["boat"], 11, rules=rules) == 11


def test_coerce_category_clamps_and_falls_back():
    assert coerce_category("12abc") == 12
    assert coerce_category(float("nan")) == 11
    assert coerce_category(float("inf"), fallback=13) == 13
    assert coerce_category(22.5) == 21
