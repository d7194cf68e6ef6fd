"""
Answer aligner.

Pairs each solution question with the student's answer to it. Student
sheets often drop or reformat the "Answer:" marker, so two strategies
are tried in order:

1. the text after an answer marker in the student's block;
2. the student's block with the solution's question text cut out.

When neither yields anything the sentinel answer is used. Alignment
never raises.
"""

import logging
from collections.abc import Iterable, Sequence

from qa_checker.models import (
    NO_ANSWER_PROVIDED,
    AnswerSource,
    QuestionBlock,
    SolutionQuestion,
    StudentAnswer,
)
from qa_checker.parsing.solution import ANSWER_MARKER

logger = logging.getLogger(__name__)


class AnswerAligner:
    """Aligns student answer blocks to solution questions by number."""

    def align(
        self, blocks: Iterable[QuestionBlock], questions: Sequence[SolutionQuestion]
    ) -> list[StudentAnswer]:
        """
        Produce one StudentAnswer per solution question.

        Args:
            blocks: Question blocks from the student document.
            questions: Solution questions, in the order results should follow.

        Returns:
            StudentAnswer list, same length and order as `questions`.
        """
        index = self._index_blocks(blocks)
        answers = [self._answer_for(question, index.get(question.number)) for question in questions]

        missing = sum(1 for a in answers if not a.source.answered)
        if missing:
            logger.info("%d of %d questions have no student answer", missing, len(answers))

        return answers

    @staticmethod
    def _index_blocks(blocks: Iterable[QuestionBlock]) -> dict[int, str]:
        # Unnumbered blocks cannot be aligned; a repeated number keeps the last block
        return {block.number: block.raw_text for block in blocks if block.number is not None}

    @staticmethod
    def _answer_for(question: SolutionQuestion, block_text: str | None) -> StudentAnswer:
        if block_text is None:
            return StudentAnswer(number=question.number, source=AnswerSource.MISSING_BLOCK)

        match = ANSWER_MARKER.search(block_text)
        if match and match.group(1).strip():
            return StudentAnswer(
                number=question.number,
                answer_text=match.group(1).strip(),
                source=AnswerSource.ANSWER_MARKER,
            )

        remainder = block_text.replace(question.question_text, "", 1)
        if remainder != block_text and remainder.strip():
            return StudentAnswer(
                number=question.number,
                answer_text=remainder.strip(),
                source=AnswerSource.QUESTION_REMOVED,
            )

        return StudentAnswer(
            number=question.number,
            answer_text=NO_ANSWER_PROVIDED,
            source=AnswerSource.UNRECOVERABLE,
        )
