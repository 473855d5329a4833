"""
test_scoring.py — Rule-by-rule checks of the confidence heuristic,
plus the similarity metric and question classifier it feeds.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tender_questions.classification import classify_question
from tender_questions.config import Config, ScoringConfig
from tender_questions.dedup import find_duplicate, jaccard_similarity, set_similarity, tokenize
from tender_questions.scoring import build_rules, explain, score_text
from tender_questions.segmentation import is_sub_question, match_patterns, split_lines


# ── Scoring ───────────────────────────────────────────────────────────────

def test_neutral_text_scores_base():
    assert score_text("The contract runs for three years.") == pytest.approx(0.15)
    assert explain("The contract runs for three years.") == []


def test_business_continuity_question_saturates():
    text = "Do you have a business continuity plan?"
    assert explain(text) == [
        "question_mark", "modal_you", "domain_noun", "business_continuity",
    ]
    assert score_text(text) == 1.0


def test_boilerplate_clamps_to_zero():
    text = "Please see attached document for details"
    assert explain(text) == ["structural", "boilerplate"]
    assert score_text(text) == 0.0


def test_role_abbreviation_is_case_sensitive():
    assert "role_abbreviation" in explain("Name your CEO and CFO")
    assert "role_abbreviation" not in explain("see readme.md for the hr tables")


def test_yes_no_marker():
    assert "yes_no_marker" in explain("ISO 9001 certified (Y/N)")
    assert "yes_no_marker" in explain("Insurance in place ( yes / no )")
    assert score_text("ISO 9001 certified (Y/N)") == pytest.approx(0.55)


def test_time_you_experienced():
    fired = explain("Give an example of a time you experienced a data breach")
    assert "time_you_experienced" in fired


def test_length_penalties():
    assert explain("Yes") == ["short_text"]
    assert score_text("Yes") == pytest.approx(0.05)
    long_text = "x " * 300
    assert "long_text" in explain(long_text)
    assert score_text(long_text) == pytest.approx(0.0)


def test_sub_question_boost_needs_parent():
    assert score_text("Yes", is_sub_question=True) == pytest.approx(0.05)
    assert score_text("Yes", is_sub_question=False, has_parent_context=True) == pytest.approx(0.05)
    assert score_text("Yes", is_sub_question=True, has_parent_context=True) == pytest.approx(0.35)


def test_rule_weights_follow_config():
    cfg = Config(scoring=ScoringConfig(question_mark=0.05))
    assert score_text("Ready?", cfg=cfg) == pytest.approx(0.15 + 0.05 - 0.1)


def test_rules_have_unique_names():
    names = [r.name for r in build_rules(ScoringConfig())]
    assert len(names) == len(set(names))


def test_question_mark_is_largest_question_signal():
    scoring = ScoringConfig()
    signals = [scoring.interrogative, scoring.modal_you, scoring.directive, scoring.domain_noun]
    assert all(scoring.question_mark > s for s in signals)
    assert scoring.domain_noun < scoring.directive


# ── Segmentation ──────────────────────────────────────────────────────────

def test_split_lines_trims_and_indexes():
    lines = split_lines("  first  \n\n\t\nsecond\r\nthird\x0cfourth")
    assert [l.text for l in lines] == ["first", "second", "third", "fourth"]
    assert [l.index for l in lines] == [0, 1, 2, 3]


@pytest.mark.parametrize("text,expected", [
    ("a. How long?", True),
    ("b) Which provider?", True),
    ("A. Company details", False),
    ("a.m. start time", False),
    ("a)Do you hold public liability insurance?", True),
    ("c.Describe your escalation route", True),
    ("e.g. two references from public sector clients", False),
    ("i.e.the named contract manager", False),
    ("a.", False),
    ("1. Do you?", False),
    ("about your company", False),
])
def test_is_sub_question(text, expected):
    assert is_sub_question(text) is expected


def test_match_patterns_priority_order():
    names = [name for name, _ in match_patterns("1. Do you have insurance?")]
    assert names == ["numbered", "question_mark", "whole_line"]

    captured = dict(match_patterns("Question 7: Describe your approach"))
    assert captured["question_label"] == "Describe your approach"
    assert captured["whole_line"] == "Question 7: Describe your approach"


def test_whole_line_always_matches():
    assert list(match_patterns("Page 4 of 12")) == [("whole_line", "Page 4 of 12")]


# ── Similarity ────────────────────────────────────────────────────────────

def test_tokenize_ignores_case_and_punctuation():
    assert tokenize("Describe YOUR process.") == {"describe", "your", "process"}


def test_jaccard_similarity():
    assert jaccard_similarity("a b c", "a b c") == 1.0
    assert jaccard_similarity("a b", "c d") == 0.0
    assert jaccard_similarity("a b c d", "a b c e") == pytest.approx(3 / 5)
    assert jaccard_similarity("???", "--") == 1.0
    assert jaccard_similarity("???", "What?") == 0.0


def test_set_similarity_matches_string_form():
    a, b = "Describe your quality process.", "describe the quality process"
    assert set_similarity(tokenize(a), tokenize(b)) == jaccard_similarity(a, b)
    assert set_similarity(set(), set()) == 1.0


def test_find_duplicate_checks_all_accepted():
    accepted = [
        tokenize(text) for text in (
            "Describe your quality assurance process.",
            "What is your annual turnover?",
            "Do you hold Cyber Essentials?",
        )
    ]
    assert find_duplicate(tokenize("describe your quality assurance process"), accepted, 0.85) == 0
    assert find_duplicate(tokenize("Do you hold cyber essentials"), accepted, 0.85) == 2
    assert find_duplicate(tokenize("Do you hold Cyber Essentials Plus?"), accepted, 0.85) is None


def test_find_duplicate_skips_sizes_that_cannot_match():
    # {"a"} vs {"a","b"}: size ratio 0.5 caps Jaccard at 0.5
    accepted = [{"a", "b"}]
    assert find_duplicate({"a"}, accepted, 0.5) is None
    assert find_duplicate({"a"}, accepted, 0.49) == 0
    assert find_duplicate(set(), [set()], 0.85) == 0


# ── Classification ────────────────────────────────────────────────────────

@pytest.mark.parametrize("question,expected", [
    ("Do you hold ISO 9001?", "closed"),
    ("1. Are you registered with Companies House?", "closed"),
    ("Confirm you accept the terms (Y/N)", "closed"),
    ("Describe your approach to risk management.", "open"),
    ("Do you have a documented complaints process?", "open"),
    ("Tell us about your team.", "open"),
])
def test_classify_question(question, expected):
    assert classify_question(question).question_type == expected


def test_classification_default_reasoning():
    result = classify_question("Tell us about your team.")
    assert result.reasoning.startswith("Unclear pattern")
