"""
extractor.py — Tender question extraction engine.

One pass over the lines of the raw text, in document order:

  1. Split into trimmed, non-empty lines.
  2. Flag lettered sub-question lines ("a.", "b)").
  3. Score every matching pattern's captured text; keep the best.
  4. Accept if confidence clears the (low) acceptance threshold.
  5. Link accepted sub-questions to the current parent question.
  6. Drop near-duplicates of anything already accepted.
  7. An accepted main question becomes the new parent.

The engine degrades by omission: a line that scores low is dropped and
logged at DEBUG, it never fails the document. The only exception raised
is for input that is not a string at all.

The parent context lives inside one call. Extraction is single-pass: the
output of one call is not meant to be fed back in. If it is, linked
questions are not re-linked: they start with their parent's text, and a
parent is never a lettered line.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from tender_questions.classification import classify_question
from tender_questions.config import Config, config as default_config
from tender_questions.dedup import find_duplicate, tokenize
from tender_questions.schemas import (
    Candidate,
    ExtractedQuestion,
    ExtractionResult,
    Line,
)
from tender_questions.scoring import ScoringRule, build_rules, score_text
from tender_questions.segmentation import is_sub_question, match_patterns, split_lines

logger = logging.getLogger(__name__)


def extract_questions(raw_text: str, cfg: Optional[Config] = None) -> List[str]:
    """
    Ordered list of distinct questions found in ``raw_text``.

    Deterministic, no I/O. Empty or whitespace-only text gives ``[]``.
    """
    return extract_detailed(raw_text, cfg).question_texts()


def extract_detailed(raw_text: str, cfg: Optional[Config] = None) -> ExtractionResult:
    """Same as ``extract_questions`` but keeps confidence, linkage and type."""
    if not isinstance(raw_text, str):
        raise TypeError(f"raw_text must be str, got {type(raw_text).__name__}")

    cfg = cfg or default_config
    ext = cfg.extraction
    rules = build_rules(cfg.scoring)

    lines = split_lines(raw_text)
    accepted: List[ExtractedQuestion] = []
    accepted_tokens: List[Set[str]] = []
    parent_context: Optional[str] = None
    dropped_low = dropped_dup = 0

    for line in lines:
        candidate = best_candidate(line, parent_context is not None, cfg, rules)

        if candidate.confidence <= ext.acceptance_threshold:
            dropped_low += 1
            logger.debug(
                "Line %d below threshold (%.2f): '%s'",
                line.index, candidate.confidence, line.text[:80],
            )
            continue

        text = candidate.text
        if candidate.is_sub_question and parent_context is not None:
            text = link_to_parent(parent_context, text, cfg)

        tokens = tokenize(text)
        if find_duplicate(tokens, accepted_tokens, ext.duplicate_threshold) is not None:
            dropped_dup += 1
            logger.debug("Line %d skipped as duplicate: '%s'", line.index, text[:80])
            continue

        accepted_tokens.append(tokens)
        accepted.append(ExtractedQuestion(
            position=len(accepted) + 1,
            text=text,
            confidence=candidate.confidence,
            is_sub_question=candidate.is_sub_question,
            line_index=line.index,
            # typed on its own line, not the parent-prefixed text
            classification=classify_question(candidate.text),
        ))
        logger.debug(
            "Added question %d (confidence %.2f, via %s): %s",
            len(accepted), candidate.confidence, candidate.pattern, text[:100],
        )

        if not candidate.is_sub_question:
            parent_context = text

    logger.info(
        "Extracted %d questions from %d lines (%d below threshold, %d duplicates)",
        len(accepted), len(lines), dropped_low, dropped_dup,
    )
    return ExtractionResult(questions=accepted, lines_processed=len(lines))


def best_candidate(
    line: Line,
    has_parent_context: bool,
    cfg: Optional[Config] = None,
    rules: Optional[List[ScoringRule]] = None,
) -> Candidate:
    """
    Highest-confidence reading of ``line`` across all matching patterns.

    Patterns only decide what text gets scored (e.g. the part after
    "Q3:"). The candidate keeps the full line as its text so the
    document's own numbering survives into the output. Ties keep the
    higher-priority pattern.
    """
    cfg = cfg or default_config
    sub = is_sub_question(line.text)

    best_pattern = "whole_line"
    best_score = -1.0
    for pattern_name, captured in match_patterns(line.text):
        score = score_text(captured, sub, has_parent_context, cfg, rules)
        if score > best_score:
            best_pattern, best_score = pattern_name, score

    return Candidate(
        text=line.text,
        confidence=max(best_score, 0.0),
        is_sub_question=sub,
        line_index=line.index,
        pattern=best_pattern,
    )


def link_to_parent(parent_text: str, sub_text: str, cfg: Optional[Config] = None) -> str:
    """``<first N chars of parent><separator><sub_text>``; a plain cut, mid-word is fine."""
    ext = (cfg or default_config).extraction
    return f"{parent_text[:ext.parent_prefix_chars]}{ext.parent_separator}{sub_text}"
