"""
dedup.py — Token-set similarity for near-duplicate suppression.

Tender documents repeat themselves: the same question shows up in a
summary table and again in the body, or once with a trailing period and
once without. We compare unique lowercase word tokens (Jaccard, i.e.
intersection over union) rather than characters, so punctuation and
word order never make two copies of a question look different.

We use plain set arithmetic instead of difflib here: SequenceMatcher is
order-sensitive, and a reordered copy of a question is still a copy.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence, Set

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\w+")


def tokenize(text: str) -> Set[str]:
    """Unique lowercase word tokens of ``text``."""
    return set(_TOKEN_RE.findall(text.lower()))


def set_similarity(tokens_a: Set[str], tokens_b: Set[str]) -> float:
    """Jaccard of two already-tokenized questions."""
    shared = len(tokens_a & tokens_b)
    union_size = len(tokens_a) + len(tokens_b) - shared
    if not union_size:
        return 1.0
    return shared / union_size


def jaccard_similarity(a: str, b: str) -> float:
    """
    |A ∩ B| / |A ∪ B| over the word sets of ``a`` and ``b``.

    Two strings without any word tokens ("???", "--") are treated as the
    same question; one token-less string against a worded one scores 0.
    """
    return set_similarity(tokenize(a), tokenize(b))


def find_duplicate(
    tokens: Set[str],
    accepted: Sequence[Set[str]],
    threshold: float,
) -> Optional[int]:
    """
    Index of the first accepted token set more similar than ``threshold``.

    Takes token sets, not strings, so each accepted question is tokenized
    once per document. Jaccard can never exceed min(|A|, |B|) / max(|A|, |B|),
    so pairs whose sizes are too far apart are skipped without building
    the intersection.
    """
    size = len(tokens)
    for index, existing in enumerate(accepted):
        other = len(existing)
        smaller, larger = (size, other) if size <= other else (other, size)
        if larger and smaller / larger <= threshold:
            continue
        similarity = set_similarity(tokens, existing)
        if similarity > threshold:
            logger.debug(
                "Duplicate of accepted question %d (%.2f > %.2f)",
                index + 1, similarity, threshold,
            )
            return index
    return None
