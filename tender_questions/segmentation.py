"""
segmentation.py — Line splitting and question-shaped pattern matching.

Tender text arrives as whatever the upstream converter produced: flattened
tables, page headers, numbered and lettered lists, "Q3:" prefixes. We do
not try to parse any of that structurally. Each non-empty line is run
against a small family of patterns in a fixed priority order, and every
pattern that matches hands its captured text to the scorer. The last
pattern matches any line at all, so no line is lost here; the acceptance
threshold decides what survives.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, List, Tuple

from tender_questions.schemas import Line

logger = logging.getLogger(__name__)

# Lettered sub-items: "a. ...", "b) ...". Lowercase only, "A." is more
# often a top-level heading than a child of the previous question.
# Flattened PDF text drops the space ("a)Do you ..."), so a marker glued
# to a capital, digit or bracket also counts. A glued lowercase letter does
# not: that is "a.m.", "e.g." or "i.e.", not a list item.
_SUB_QUESTION_RE = re.compile(r"^[a-z][.)](?:\s|(?=[A-Z0-9(]))")

# Priority order matters: ties in score keep the earlier pattern.
QUESTION_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("numbered", re.compile(r"^\d+[.)]\s*(.+)")),
    ("lettered", re.compile(r"^[a-z][.)]\s*(.+)", re.IGNORECASE)),
    ("question_label", re.compile(r"^Question\s*\d+[:.]?\s*(.+)", re.IGNORECASE)),
    ("q_label", re.compile(r"^Q\s*\d+[:.]?\s*(.+)", re.IGNORECASE)),
    ("question_mark", re.compile(r"(.+\?)\s*$")),
    ("whole_line", re.compile(r"^.+$")),
]


def split_lines(raw_text: str) -> List[Line]:
    """
    Split raw text on line boundaries, trim, and drop empty lines.

    ``str.splitlines`` also breaks on form feeds and the other separators
    PDF converters emit between pages, which a plain split on "\\n" misses.
    """
    lines: List[Line] = []
    for raw_line in raw_text.splitlines():
        stripped = raw_line.strip()
        if not stripped:
            continue
        lines.append(Line(text=stripped, index=len(lines)))
    return lines


def is_sub_question(text: str) -> bool:
    """True if the line opens with a lowercase letter and "." or ")"."""
    return bool(_SUB_QUESTION_RE.match(text))


def match_patterns(text: str) -> Iterator[Tuple[str, str]]:
    """
    Yield (pattern_name, captured_text) for every pattern matching ``text``.

    Patterns without a capture group yield the whole match. The
    whole_line pattern guarantees at least one result for non-empty text.
    """
    for name, pattern in QUESTION_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        captured = match.group(1) if pattern.groups else match.group(0)
        captured = captured.strip()
        if captured:
            yield name, captured
