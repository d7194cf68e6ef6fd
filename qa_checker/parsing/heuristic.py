"""
Heuristic document structure parser.

Pattern-matching implementation of DocumentStructureParser for loosely
structured text: numbered lines start questions and an "Answer" marker
separates a question from its answer.
"""

from collections.abc import Iterable, Sequence

from qa_checker.models import QuestionBlock, SolutionExtraction, SolutionQuestion, StudentAnswer
from qa_checker.parsing.alignment import AnswerAligner
from qa_checker.parsing.base import DocumentStructureParser
from qa_checker.parsing.segmenter import segment_text
from qa_checker.parsing.solution import SolutionExtractor


class HeuristicStructureParser(DocumentStructureParser):
    """Regex-based segmenter, solution extractor and answer aligner."""

    def __init__(self) -> None:
        self._extractor = SolutionExtractor()
        self._aligner = AnswerAligner()

    def segment(self, text: str) -> Iterable[QuestionBlock]:
        return segment_text(text)

    def extract_solution(self, blocks: Iterable[QuestionBlock]) -> SolutionExtraction:
        return self._extractor.extract(blocks)

    def align_answers(
        self, blocks: Iterable[QuestionBlock], questions: Sequence[SolutionQuestion]
    ) -> list[StudentAnswer]:
        return self._aligner.align(blocks, questions)
