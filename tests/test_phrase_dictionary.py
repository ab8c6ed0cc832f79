import dataclasses
import json

import pytest

from src.models.live import RiskLevel
from src.services.phrase_dictionary import (
    PhraseDictionary,
    default_phrase_dictionary,
    load_phrase_dictionary,
    normalize_text,
)


def test_default_tiers_are_non_empty_and_bilingual():
    dictionary = default_phrase_dictionary()

    for level in RiskLevel:
        phrases = dictionary.tier(level)
        assert phrases
        assert any(p.isascii() for p in phrases)
        assert any(not p.isascii() for p in phrases)


def test_default_phrases_are_lower_case():
    dictionary = default_phrase_dictionary()

    for level in RiskLevel:
        assert all(p == normalize_text(p) for p in dictionary.tier(level))


def test_phrases_are_normalized_and_deduplicated():
    dictionary = PhraseDictionary(
        high=["Wire Transfer", "wire transfer", "  GIFT CARD "],
        medium=["Act Now"],
        low=["Urgent"],
    )

    assert dictionary.high == ("wire transfer", "gift card")
    assert dictionary.medium == ("act now",)


@pytest.mark.parametrize("tier", ["high", "medium", "low"])
def test_empty_tier_is_rejected(tier):
    tiers = {"high": ["a"], "medium": ["b"], "low": ["c"]}
    tiers[tier] = ["", "   "]

    with pytest.raises(ValueError):
        PhraseDictionary(**tiers)


def test_bare_string_tier_is_rejected():
    with pytest.raises(ValueError):
        PhraseDictionary(high="send money", medium=["b"], low=["c"])


def test_dictionary_is_frozen():
    dictionary = default_phrase_dictionary()

    with pytest.raises(dataclasses.FrozenInstanceError):
        dictionary.high = ("anything",)


def test_normalize_text_keeps_arabic():
    assert normalize_text("رمز التحقق") == "رمز التحقق"
    assert normalize_text("SEND Money") == "send money"


def test_load_from_json(tmp_path):
    path = tmp_path / "phrases.json"
    path.write_text(
        json.dumps({"high": ["Send Money"], "medium": ["act now", "لقد ربحت"], "low": ["urgent"]}),
        encoding="utf-8",
    )

    dictionary = load_phrase_dictionary(path)

    assert dictionary.high == ("send money",)
    assert dictionary.medium == ("act now", "لقد ربحت")
    assert dictionary.low == ("urgent",)


def test_load_rejects_missing_tier(tmp_path):
    path = tmp_path / "phrases.json"
    path.write_text(json.dumps({"high": ["a"], "medium": ["b"]}), encoding="utf-8")

    with pytest.raises(ValueError, match="low"):
        load_phrase_dictionary(path)


def test_load_rejects_invalid_json(tmp_path):
    path = tmp_path / "phrases.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError):
        load_phrase_dictionary(path)


def test_load_rejects_missing_file(tmp_path):
    with pytest.raises(ValueError):
        load_phrase_dictionary(tmp_path / "nope.json")
