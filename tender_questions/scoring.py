"""
scoring.py — Rule-based confidence scoring for candidate questions.

Confidence is an additive heuristic: start from a small base, add the
weight of every rule whose predicate fires, clamp into [0, 1]. The rules
are kept as a flat, ordered list of (name, predicate, weight) so each one
can be tested alone and ``explain()`` can report exactly why a line
scored the way it did when someone asks why a question went missing.

Weights come from ``ScoringConfig``; nothing numeric is hard-coded here.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from tender_questions.config import Config, ScoringConfig, config as default_config

logger = logging.getLogger(__name__)

_INTERROGATIVE_RE = re.compile(r"\b(what|how|when|where|why|which|who)\b", re.IGNORECASE)
_MODAL_YOU_RE = re.compile(r"\b(do|does|can|will|are|is|have|has)\s+you\b", re.IGNORECASE)
_DIRECTIVE_RE = re.compile(
    r"\b(describe|explain|provide|outline|detail|demonstrate|list|tell|confirm)\b",
    re.IGNORECASE,
)
_DOMAIN_NOUN_RE = re.compile(
    r"\b(company|organisation|organization|business|service|policy|procedure|process"
    r"|approach|experience|capability|compliant|certified|accredited)\b",
    re.IGNORECASE,
)

# Role abbreviations are matched case-sensitively so "md" in a file name
# or "hr" in "3 hr" does not count.
_ROLE_ABBREVIATION_RE = re.compile(r"\b(CEO|CFO|COO|CTO|CIO|MD|HR|DPO|SIRO|QHSE|SHEQ)\b")
_CONFIRM_RE = re.compile(r"\bconfirm\b", re.IGNORECASE)
_YES_NO_RE = re.compile(r"\(\s*y\s*/\s*n\s*\)|\(\s*yes\s*/\s*no\s*\)", re.IGNORECASE)
_BUSINESS_CONTINUITY_RE = re.compile(r"\bbusiness\s+continuity\b", re.IGNORECASE)
_TIME_YOU_EXPERIENCED_RE = re.compile(r"\btime\s+you\s+experienced\b", re.IGNORECASE)

_STRUCTURAL_RE = re.compile(
    r"\b(section|chapter|part|page|document|file|attachment)\b", re.IGNORECASE
)
_BOILERPLATE_RE = re.compile(
    r"\b(note|important|please|thank|regards|sincerely)\b", re.IGNORECASE
)


@dataclass(frozen=True)
class ScoringContext:
    """What a rule may look at besides the text itself."""
    is_sub_question: bool = False
    has_parent_context: bool = False


Predicate = Callable[[str, ScoringContext], bool]


@dataclass(frozen=True)
class ScoringRule:
    name: str
    predicate: Predicate
    weight: float

    def applies(self, text: str, ctx: ScoringContext) -> bool:
        return self.predicate(text, ctx)


def _matches(pattern: re.Pattern) -> Predicate:
    return lambda text, ctx: bool(pattern.search(text))


def build_rules(scoring: ScoringConfig) -> List[ScoringRule]:
    """Build the ordered rule list from a scoring config."""
    return [
        ScoringRule("question_mark", lambda text, ctx: "?" in text, scoring.question_mark),
        ScoringRule("interrogative", _matches(_INTERROGATIVE_RE), scoring.interrogative),
        ScoringRule("modal_you", _matches(_MODAL_YOU_RE), scoring.modal_you),
        ScoringRule("directive", _matches(_DIRECTIVE_RE), scoring.directive),
        ScoringRule("domain_noun", _matches(_DOMAIN_NOUN_RE), scoring.domain_noun),
        ScoringRule("role_abbreviation", _matches(_ROLE_ABBREVIATION_RE), scoring.role_abbreviation),
        ScoringRule("confirm", _matches(_CONFIRM_RE), scoring.confirm),
        ScoringRule("yes_no_marker", _matches(_YES_NO_RE), scoring.yes_no_marker),
        ScoringRule("business_continuity", _matches(_BUSINESS_CONTINUITY_RE), scoring.business_continuity),
        ScoringRule("time_you_experienced", _matches(_TIME_YOU_EXPERIENCED_RE), scoring.time_you_experienced),
        ScoringRule(
            "short_text",
            lambda text, ctx: len(text) < scoring.short_length,
            scoring.short_penalty,
        ),
        ScoringRule(
            "long_text",
            lambda text, ctx: len(text) > scoring.long_length,
            scoring.long_penalty,
        ),
        ScoringRule("structural", _matches(_STRUCTURAL_RE), scoring.structural_penalty),
        ScoringRule("boilerplate", _matches(_BOILERPLATE_RE), scoring.boilerplate_penalty),
        ScoringRule(
            "sub_question_with_parent",
            lambda text, ctx: ctx.is_sub_question and ctx.has_parent_context,
            scoring.sub_question_boost,
        ),
    ]


def explain(
    text: str,
    is_sub_question: bool = False,
    has_parent_context: bool = False,
    cfg: Optional[Config] = None,
) -> List[str]:
    """Names of the rules that fire for ``text``, in rule order."""
    ctx = ScoringContext(is_sub_question, has_parent_context)
    rules = build_rules((cfg or default_config).scoring)
    return [rule.name for rule in rules if rule.applies(text, ctx)]


def score_text(
    text: str,
    is_sub_question: bool = False,
    has_parent_context: bool = False,
    cfg: Optional[Config] = None,
    rules: Optional[List[ScoringRule]] = None,
) -> float:
    """
    Confidence in [0, 1] that ``text`` is a tender question.

    The sub-question boost only fires when both flags are set: a lettered
    item with no preceding main question is scored like any other line.
    Pass ``rules`` to reuse a list built once per extraction call.
    """
    cfg = cfg or default_config
    if rules is None:
        rules = build_rules(cfg.scoring)
    ctx = ScoringContext(is_sub_question, has_parent_context)
    total = cfg.scoring.base_confidence
    for rule in rules:
        if rule.applies(text, ctx):
            total += rule.weight
    return max(0.0, min(1.0, total))
