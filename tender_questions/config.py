"""
config.py — Central configuration for the question extraction engine.

Every tunable number lives here: the scoring base and deltas, the
acceptance and duplicate thresholds, the parent prefix length used when
linking sub-questions, and the per-user rate-limit window. None of these
have a derivation beyond "they work on the tenders we have seen", so they
are kept as named fields that callers can override instead of literals
scattered through the scoring code.

Engine functions accept an optional ``Config``; when omitted they use the
module-level ``config`` singleton.
"""

from dataclasses import dataclass, field
import os
import logging

logger = logging.getLogger(__name__)


@dataclass
class ScoringConfig:
    """
    Additive confidence deltas.

    Each field is the weight of one rule in ``scoring.build_rules()``.
    The final score is base + sum(fired weights), clamped into [0, 1],
    so the order rules are applied in never matters.
    """
    base_confidence: float = 0.15

    # Question signals
    question_mark: float = 0.35
    interrogative: float = 0.2
    modal_you: float = 0.25
    directive: float = 0.2
    domain_noun: float = 0.1

    # Tender-specific phrases that are almost always a real question,
    # even when the line has no "?".
    role_abbreviation: float = 0.3
    confirm: float = 0.3
    yes_no_marker: float = 0.3
    business_continuity: float = 0.3
    time_you_experienced: float = 0.3

    # Penalties
    short_length: int = 10
    short_penalty: float = -0.1
    long_length: int = 500
    long_penalty: float = -0.15
    structural_penalty: float = -0.3
    boilerplate_penalty: float = -0.2

    # Lettered items under an accepted main question
    sub_question_boost: float = 0.3


@dataclass
class ExtractionConfig:
    """
    Acceptance, dedup and linkage settings.

    The acceptance threshold is deliberately low: a reviewer dismisses a
    spurious question in a second, a missed one can lose a bid.
    parent_prefix_chars is a plain character cut, mid-word cuts included.
    """
    acceptance_threshold: float = 0.1
    duplicate_threshold: float = 0.85
    parent_prefix_chars: int = 39
    parent_separator: str = " - "
    max_text_chars: int = int(os.getenv("MAX_TEXT_CHARS", "500000"))


@dataclass
class RateLimitConfig:
    """Per-user fixed window for the extraction endpoint."""
    max_requests: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "10"))
    window_seconds: float = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "3600"))
    # Stale keys are purged lazily once the map grows past this size.
    max_tracked_keys: int = 10_000


@dataclass
class Config:
    """Master config — instantiated once, used everywhere."""
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)

    max_file_size_mb: int = 20
    supported_formats: tuple = (".txt", ".text", ".md", ".csv")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        """Validate on startup so a bad override fails at import time,
        not halfway through a batch of documents."""
        ext = self.extraction
        for name in ("acceptance_threshold", "duplicate_threshold"):
            value = getattr(ext, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be in [0,1], got {value}")
        if ext.parent_prefix_chars <= 0:
            raise ValueError(
                f"parent_prefix_chars must be positive, got {ext.parent_prefix_chars}"
            )
        if ext.max_text_chars <= 0:
            raise ValueError(f"max_text_chars must be positive, got {ext.max_text_chars}")

        rl = self.rate_limit
        if rl.max_requests <= 0:
            raise ValueError(f"Rate limit max_requests must be positive, got {rl.max_requests}")
        if rl.window_seconds <= 0:
            raise ValueError(f"Rate limit window must be positive, got {rl.window_seconds}")

        if self.scoring.base_confidence <= ext.acceptance_threshold:
            logger.warning(
                "Base confidence %.2f is not above the acceptance threshold %.2f; "
                "lines with no question signal will all be dropped.",
                self.scoring.base_confidence, ext.acceptance_threshold,
            )


# Singleton — every module imports this same instance
config = Config()
