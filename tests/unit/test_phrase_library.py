"""Tests for the phrase-pattern library and YAML rule loading."""

import pytest

from contentlens.scoring.patterns import (
    PhraseLibrary,
    PhraseRule,
    default_phrase_rules,
    load_phrase_rules,
)
from contentlens.scoring.phrase_data import HIGH_SIGNAL_RULES, PHRASE_RULES


def test_default_rules_include_high_signal_subset():
    rules = default_phrase_rules()
    assert len(rules) == len(PHRASE_RULES) + len(HIGH_SIGNAL_RULES)
    assert sum(1 for r in rules if r.category == "high_signal") == len(HIGH_SIGNAL_RULES)


def test_default_library_compiles_every_rule():
    assert len(PhraseLibrary()) == len(default_phrase_rules())


def test_high_signal_phrase_counts_twice():
    library = PhraseLibrary()
    # "spot on": one base rule plus its high-signal twin
    assert library.raw_score("spot on") == 2.0


def test_matches_are_capped_per_rule():
    library = PhraseLibrary([PhraseRule(pattern=r"\bnailed it\b")], match_cap=2)
    assert library.raw_score("nailed it. nailed it. nailed it. nailed it.") == 2.0


def test_density_normalized_and_clamped():
    library = PhraseLibrary([PhraseRule(pattern=r"\bdelve\b", weight=1.0)], ceiling=4.0)
    assert library.density("we delve") == pytest.approx(0.25)
    heavy = PhraseLibrary([PhraseRule(pattern=r"\bdelve\b", weight=10.0)], ceiling=4.0)
    assert heavy.density("we delve") == 1.0


def test_matching_is_case_insensitive():
    library = PhraseLibrary([PhraseRule(pattern=r"\bas an ai\b")])
    assert library.raw_score("As An AI, I cannot") == 1.0


def test_invalid_pattern_is_skipped():
    library = PhraseLibrary([PhraseRule(pattern="(unclosed"), PhraseRule(pattern=r"\bok\b")])
    assert len(library) == 1
    assert library.raw_score("ok then") == 1.0


def test_non_positive_ceiling_rejected():
    with pytest.raises(ValueError):
        PhraseLibrary([], ceiling=0)


def test_category_hits():
    library = PhraseLibrary()
    hits = library.category_hits("great point! feel free to ask")
    assert hits["sycophantic_opener"] >= 1
    assert hits["assistant_voice"] >= 1
    assert hits["high_signal"] >= 2


def test_load_phrase_rules_from_yaml(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(
        "rules:\n"
        "  - pattern: '\\bbased\\b'\n"
        "    weight: 2.5\n"
        "    category: slang\n"
        "  - weight: 1.0\n"
        "  - pattern: '\\bvibes\\b'\n"
    )
    rules = load_phrase_rules(path)
    assert rules == [
        PhraseRule(pattern=r"\bbased\b", weight=2.5, category="slang"),
        PhraseRule(pattern=r"\bvibes\b", weight=1.0, category="uncategorized"),
    ]
    assert PhraseLibrary(rules).raw_score("based vibes") == 3.5


def test_load_phrase_rules_missing_file_falls_back(tmp_path):
    assert load_phrase_rules(tmp_path / "nope.yaml") == default_phrase_rules()


def test_load_phrase_rules_without_rules_list_falls_back(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("something: else\n")
    assert load_phrase_rules(path) == default_phrase_rules()
