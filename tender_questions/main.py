"""
main.py — Pipeline orchestration and CLI.

Three stages, each timed and logged:

  1. Ingest: read and validate the converted text file.
  2. Extract: recover the ordered, deduplicated question list.
  3. Summarise: count closed/open questions for the answer writer.

The pipeline is a class so callers can run it from their own code as
well as from the command line, and so batch runs share one config.

Usage:
    tender-questions tender.txt -o questions.json
    python -m tender_questions.main tender.txt --texts-only
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

from tender_questions.config import Config, config
from tender_questions.extractor import extract_detailed
from tender_questions.ingestion import load_text, read_text_file

logger = logging.getLogger("tender_questions")


class QuestionExtractionPipeline:
    """
    End-to-end question extraction for one converted tender document.

    Usage:
        pipeline = QuestionExtractionPipeline()
        result = pipeline.run("tenders/itt_questionnaire.txt")
        for q in result["questions"]:
            print(q["text"])
    """

    def __init__(self, cfg: Optional[Config] = None):
        self.cfg = cfg or config

    def run(
        self,
        file_path: str,
        output_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Run the pipeline on a text file.

        Returns the ExtractionResult as a dict plus summary counts.
        Optionally writes it to ``output_path`` as indented JSON.
        """
        overall_start = time.time()
        path = Path(file_path)
        logger.info("Processing: %s", path.name)

        # ── Stage 1: Ingestion ────────────────────────────────────
        t0 = time.time()
        logger.info("[1/3] Reading text ...")
        text = read_text_file(file_path, self.cfg)
        logger.info("  ✓ %d chars in %.2fs", len(text), time.time() - t0)

        return self._process(text, overall_start, output_path)

    def run_text(self, text: str, output_path: Optional[str] = None) -> Dict[str, Any]:
        """Same as ``run`` for text already in memory."""
        return self._process(load_text(text, self.cfg), time.time(), output_path)

    def _process(
        self,
        text: str,
        overall_start: float,
        output_path: Optional[str],
    ) -> Dict[str, Any]:
        # ── Stage 2: Extraction ───────────────────────────────────
        t0 = time.time()
        logger.info("[2/3] Extracting questions ...")
        result = extract_detailed(text, self.cfg)
        logger.info(
            "  ✓ %d questions from %d lines in %.2fs",
            result.questions_found, result.lines_processed, time.time() - t0,
        )

        # ── Stage 3: Summary ──────────────────────────────────────
        data = result.model_dump()
        closed = sum(1 for q in result.questions if q.classification.question_type == "closed")
        data["questions_found"] = result.questions_found
        data["closed_questions"] = closed
        data["open_questions"] = result.questions_found - closed

        if result.questions_found == 0:
            logger.warning(
                "No questions found; the document may need manual question entry."
            )

        logger.info(
            "[3/3] DONE in %.2fs | %d questions (%d closed, %d open)",
            time.time() - overall_start, result.questions_found,
            closed, result.questions_found - closed,
        )

        if output_path:
            os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            logger.info("Output written to: %s", output_path)

        return data


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="tender-questions",
        description="Extract the questions a bidder must answer from a converted tender document",
    )
    parser.add_argument("file", help="Path to the tender text (TXT, MD, CSV)")
    parser.add_argument("--output", "-o", default=None, help="JSON output path (default: stdout)")
    parser.add_argument(
        "--texts-only", action="store_true",
        help="Print one question per line instead of JSON",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    pipeline = QuestionExtractionPipeline()

    try:
        result = pipeline.run(args.file, args.output)
    except FileNotFoundError as exc:
        logger.error("File not found: %s", exc)
        sys.exit(1)
    except ValueError as exc:
        logger.error("Invalid input: %s", exc)
        sys.exit(1)

    if args.output is None:
        if args.texts_only:
            for q in result["questions"]:
                print(q["text"])
        else:
            print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
