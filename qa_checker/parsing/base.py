"""
Document structure parser interface.

The grading pipeline only depends on this three-step capability
(segment -> extract solution -> align answers), so a stricter parser for
marked-up input can replace the heuristic one without touching grading.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from qa_checker.models import (
    DroppedBlock,
    QuestionBlock,
    SolutionExtraction,
    SolutionQuestion,
    StudentAnswer,
)


class SolutionParseError(Exception):
    """Raised when a solution document yields no usable questions."""

    def __init__(self, message: str, dropped: Sequence[DroppedBlock] = ()):
        self.dropped = tuple(dropped)
        super().__init__(message)


class DocumentStructureParser(ABC):
    """Turns solution and student text into aligned question/answer records."""

    @abstractmethod
    def segment(self, text: str) -> Iterable[QuestionBlock]:
        """Split document text into question blocks, in document order."""
        ...

    @abstractmethod
    def extract_solution(self, blocks: Iterable[QuestionBlock]) -> SolutionExtraction:
        """
        Build the question set from a solution document's blocks.

        Raises:
            SolutionParseError: If no block yields a question.
        """
        ...

    @abstractmethod
    def align_answers(
        self, blocks: Iterable[QuestionBlock], questions: Sequence[SolutionQuestion]
    ) -> list[StudentAnswer]:
        """Return exactly one StudentAnswer per question, in question order."""
        ...

    def extract_solution_questions(self, blocks: Iterable[QuestionBlock]) -> list[SolutionQuestion]:
        """Questions only, for callers that do not inspect dropped blocks."""
        return list(self.extract_solution(blocks).questions)

    def parse_solution(self, text: str) -> SolutionExtraction:
        """Segment and extract a solution document in one step."""
        return self.extract_solution(self.segment(text))

    def parse_student(self, text: str, questions: Sequence[SolutionQuestion]) -> list[StudentAnswer]:
        """Segment and align a student document in one step."""
        return self.align_answers(self.segment(text), questions)
