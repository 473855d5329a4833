"""
ingestion.py — Boundary checks on the raw text handed to the engine.

Turning PDFs, Word files and spreadsheets into text happens upstream;
by the time a document reaches us it is a plain UTF-8 string (or the
bytes of one). This module is where malformed input is rejected, before
any line is scored: bytes that are not valid UTF-8, values that are not
text at all, and documents far larger than any real tender.

Everything past this point assumes a well-formed ``str`` and never
raises for document content.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from tender_questions.config import Config, config as default_config

logger = logging.getLogger(__name__)


class InvalidInput(ValueError):
    """Raw input refused before any line is scored."""


def load_text(data: Union[str, bytes], cfg: Optional[Config] = None) -> str:
    """
    Validate and normalise raw input to ``str``.

    Raises:
        InvalidInput: not text, not valid UTF-8, or over the size limit.
    """
    cfg = cfg or default_config

    if isinstance(data, (bytes, bytearray)):
        try:
            # utf-8-sig drops the BOM Windows editors prepend
            text = bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise InvalidInput(
                f"Input is not valid UTF-8 text (byte {exc.start}): "
                "convert the document to text before extraction"
            ) from exc
    elif isinstance(data, str):
        text = data
    else:
        raise InvalidInput(f"Expected text or bytes, got {type(data).__name__}")

    if "\x00" in text:
        raise InvalidInput("Input contains NUL bytes; looks like an unconverted binary file")

    limit = cfg.extraction.max_text_chars
    if len(text) > limit:
        raise InvalidInput(f"Text too large ({len(text):,} chars). Max: {limit:,} chars")

    return text


def read_text_file(file_path: Union[str, Path], cfg: Optional[Config] = None) -> str:
    """
    Read a converted tender document from disk.

    Raises:
        FileNotFoundError: Self-explanatory.
        InvalidInput: Unsupported format, file too large, or not UTF-8.
    """
    cfg = cfg or default_config
    path = Path(file_path)
    _validate_file(path, cfg)

    text = load_text(path.read_bytes(), cfg)
    logger.info("Loaded %s (%d chars)", path.name, len(text))
    return text


def _validate_file(path: Path, cfg: Config) -> None:
    """Fail fast on missing, oversize or non-text files."""
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    size_mb = path.stat().st_size / (1024 * 1024)
    if size_mb > cfg.max_file_size_mb:
        raise InvalidInput(
            f"File too large ({size_mb:.1f} MB). Max: {cfg.max_file_size_mb} MB"
        )

    if path.suffix.lower() not in cfg.supported_formats:
        raise InvalidInput(
            f"Unsupported format '{path.suffix}'. "
            f"Supported: {', '.join(cfg.supported_formats)}"
        )
