"""
Pydantic models for the Q&A Checker.

These models define the schemas for:
- Question blocks and the structured questions/answers parsed from them
- Scoring oracle verdicts and per-question graded results
- Persisted quiz and submission records

Value objects are frozen; the two persisted records are mutable so the
grading pipeline can advance them, with assignments validated.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

NO_ANSWER_PROVIDED = "No answer provided."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up."""
    return int(math.floor(value + 0.5))


# ==============================================================================
# Parsing Models
# ==============================================================================


class QuestionBlock(BaseModel):
    """
    A contiguous span of text believed to belong to one numbered question.

    `number` is the leading "N." of the block, or None for text that
    precedes the first numbered question.
    """

    model_config = ConfigDict(frozen=True)

    number: int | None = Field(default=None, ge=1)
    raw_text: str


class SolutionQuestion(BaseModel):
    """A question from the solution key together with its canonical answer."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1)
    question_text: str
    canonical_answer: str = Field(..., min_length=1)


class DropReason(str, Enum):
    """Why a solution block did not yield a question."""

    NO_ANSWER_MARKER = "no_answer_marker"
    NO_QUESTION_NUMBER = "no_question_number"


class DroppedBlock(BaseModel):
    """A solution block that was excluded from the question set."""

    model_config = ConfigDict(frozen=True)

    block: QuestionBlock
    reason: DropReason


class SolutionExtraction(BaseModel):
    """Questions extracted from a solution document plus the blocks left out."""

    model_config = ConfigDict(frozen=True)

    questions: tuple[SolutionQuestion, ...] = ()
    dropped: tuple[DroppedBlock, ...] = ()


class AnswerSource(str, Enum):
    """How a student answer was located in the answer sheet."""

    ANSWER_MARKER = "answer_marker"  # Found after an "Answer:" marker
    QUESTION_REMOVED = "question_removed"  # Block minus the question text
    MISSING_BLOCK = "missing_block"  # No block with this number
    UNRECOVERABLE = "unrecoverable"  # Block found but nothing usable in it

    @property
    def answered(self) -> bool:
        return self in (AnswerSource.ANSWER_MARKER, AnswerSource.QUESTION_REMOVED)


class StudentAnswer(BaseModel):
    """The student's answer aligned to one solution question."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1)
    answer_text: str = NO_ANSWER_PROVIDED
    source: AnswerSource = AnswerSource.MISSING_BLOCK


# ==============================================================================
# Scoring Models
# ==============================================================================


class ScoreOutcome(str, Enum):
    """How a scoring oracle call ended."""

    SCORED = "scored"
    MALFORMED_RESPONSE = "malformed_response"
    ORACLE_ERROR = "oracle_error"
    RETRIES_EXHAUSTED = "retries_exhausted"


class OracleVerdict(BaseModel):
    """
    Score and feedback returned by the scoring oracle client.

    Degraded verdicts (anything but SCORED) always carry a score of 0
    and a diagnostic feedback string.
    """

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100)
    feedback: str
    outcome: ScoreOutcome = ScoreOutcome.SCORED
    attempts: int = Field(default=1, ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def degraded(self) -> bool:
        """True when the verdict did not come from a usable oracle response."""
        return self.outcome is not ScoreOutcome.SCORED


class GradedResult(BaseModel):
    """The graded outcome for one solution question."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1)
    student_answer: str
    correct_answer: str
    score: int = Field(..., ge=0, le=100)
    feedback: str = ""


# ==============================================================================
# Persisted Records
# ==============================================================================


class SubmissionStatus(str, Enum):
    """Lifecycle of a submission: pending -> processing -> completed | failed."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SubmissionStatus.COMPLETED, SubmissionStatus.FAILED)


class Quiz(BaseModel):
    """A solution key and the questions parsed from it."""

    model_config = ConfigDict(validate_assignment=True)

    quiz_id: UUID = Field(default_factory=uuid4)
    file_name: str
    solution_path: str
    questions: list[SolutionQuestion] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)


class Submission(BaseModel):
    """
    A student's answer sheet graded against a quiz.

    Only the grading orchestrator mutates a submission. Once it reaches a
    terminal status it is never moved again.
    """

    model_config = ConfigDict(validate_assignment=True)

    submission_id: UUID = Field(default_factory=uuid4)
    quiz_id: UUID
    file_name: str
    student_path: str
    status: SubmissionStatus = SubmissionStatus.PENDING
    results: list[GradedResult] = Field(default_factory=list)
    overall_score: int = Field(default=0, ge=0, le=100)
    created_at: datetime = Field(default_factory=_utcnow)

    @staticmethod
    def compute_overall_score(results: list[GradedResult]) -> int:
        """Mean of the result scores rounded to the nearest integer, 0 when empty."""
        if not results:
            return 0
        return round_half_up(sum(r.score for r in results) / len(results))


# ==============================================================================
# Document Extraction Models
# ==============================================================================


class ExtractedDocument(BaseModel):
    """
    Result of extracting text from a document.

    Contains the extracted text and metadata about the source. Empty
    content is a valid extraction result; check `is_empty`.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    content: str = Field(
        ...,
        description="Extracted text content",
    )

    source_path: str = Field(
        ...,
        description="Path to the source document",
    )

    file_extension: str = Field(
        ...,
        description="File extension of the source document",
    )

    extraction_timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the extraction was performed",
    )

    character_count: int = Field(
        default=0,
        ge=0,
        description="Number of characters in extracted content",
    )

    @model_validator(mode="after")
    def set_character_count(self) -> "ExtractedDocument":
        """Set character count from content."""
        # Use object.__setattr__ because model is frozen
        object.__setattr__(self, "character_count", len(self.content))
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_empty(self) -> bool:
        """Check if extracted content is empty or whitespace-only."""
        return len(self.content.strip()) == 0
