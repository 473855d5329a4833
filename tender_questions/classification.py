"""
classification.py — Closed vs open question classification.

The answer writer downstream sizes its response by question type: a
closed question ("Do you hold ISO 9001? (Y/N)") wants a short factual
answer, an open one ("Describe your approach to...") wants a worked
explanation. Anything ambiguous defaults to open, since a longer answer
can be trimmed by the reviewer but a missing explanation cannot.
"""

from __future__ import annotations

import re

from tender_questions.schemas import QuestionClassification

_CLOSED_PATTERNS = [
    re.compile(r"^(do\s+you|have\s+you|can\s+you|will\s+you|are\s+you|is\s+your)\b"),
    re.compile(r"\b(yes\s*/\s*no|y\s*/\s*n)\b"),
    re.compile(r"\b(certified|accredited|compliant|registered|licensed)\b"),
    re.compile(r"\b(how\s+many|what\s+is\s+your|when\s+did)\b"),
]

_OPEN_PATTERNS = [
    re.compile(r"^(describe|explain|outline|detail|demonstrate|provide\s+details)\b"),
    re.compile(r"\b(approach|strategy|method|process|procedure|plan)\b"),
    re.compile(r"\b(how\s+do\s+you|how\s+would\s+you|what\s+steps)\b"),
    re.compile(r"\b(experience|capability|ability|expertise)\b"),
]

# Leading list markers ("1.", "a)", "Q3:") would hide a "Do you ..." opening.
_LIST_MARKER_RE = re.compile(r"^(?:\d+[.)]|[a-z][.)]|q(?:uestion)?\s*\d+[:.]?)\s*")


def classify_question(question: str) -> QuestionClassification:
    text = question.lower().strip()
    text = _LIST_MARKER_RE.sub("", text, count=1)

    is_closed = any(p.search(text) for p in _CLOSED_PATTERNS)
    is_open = any(p.search(text) for p in _OPEN_PATTERNS)

    if is_closed and not is_open:
        return QuestionClassification(
            question_type="closed",
            reasoning="Detected Yes/No or factual question pattern",
        )
    if is_open:
        return QuestionClassification(
            question_type="open",
            reasoning="Detected explanatory or process question pattern",
        )
    return QuestionClassification(
        question_type="open",
        reasoning="Unclear pattern, defaulting to detailed response",
    )
