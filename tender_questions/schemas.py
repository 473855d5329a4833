"""
schemas.py — Pydantic v2 models for the extraction engine and its API.

Line and Candidate only live for the duration of one extraction pass.
ExtractionResult is the externally visible artifact; the plain
``List[str]`` returned by ``extract_questions`` is just its texts.
"""

from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator


class Line(BaseModel):
    """A trimmed, non-empty line of the raw text and its position."""
    text: str
    index: int = Field(..., ge=0, description="0-based position among kept lines")

    @field_validator("text")
    @classmethod
    def text_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("line text cannot be empty or whitespace")
        return v


class Candidate(BaseModel):
    """Best-scoring reading of one line."""
    text: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    is_sub_question: bool = False
    line_index: int = 0
    pattern: str = Field(default="whole_line", description="Pattern that produced the score")


class QuestionClassification(BaseModel):
    """Closed (yes/no, factual) or open (explanatory) question."""
    question_type: Literal["closed", "open"] = "open"
    reasoning: str = ""


class ExtractedQuestion(BaseModel):
    """An accepted question as stored in the output list."""
    position: int = Field(..., ge=1, description="1-based order of acceptance")
    text: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    is_sub_question: bool = False
    line_index: int = 0
    classification: QuestionClassification = Field(default_factory=QuestionClassification)


class ExtractionResult(BaseModel):
    """Top-level output of one extraction call."""
    questions: List[ExtractedQuestion] = Field(default_factory=list)
    lines_processed: int = 0

    @property
    def questions_found(self) -> int:
        return len(self.questions)

    def question_texts(self) -> List[str]:
        return [q.text for q in self.questions]


# HTTP layer

class ExtractRequest(BaseModel):
    """Body of POST /extract. Empty text is legal and yields no questions."""
    text: str


class ExtractResponse(BaseModel):
    questions: List[str] = Field(default_factory=list)
    questions_found: int = 0
    details: Optional[List[ExtractedQuestion]] = None
