"""
Solution extractor.

Turns the blocks of a solution key into SolutionQuestion records. A block
contributes a question only when it has both a leading "N." and an answer
marker ("Answer:", "Answer -", "Answer " ...) with something after it.
Blocks missing either are left out without raising; they are reported
in SolutionExtraction.dropped.
"""

import logging
import re
from collections.abc import Iterable

from qa_checker.models import (
    DroppedBlock,
    DropReason,
    QuestionBlock,
    SolutionExtraction,
    SolutionQuestion,
)
from qa_checker.parsing.base import SolutionParseError
from qa_checker.parsing.segmenter import leading_number

logger = logging.getLogger(__name__)

# "Answer" followed by colons, en-dashes or whitespace; captures the rest of the block
ANSWER_MARKER = re.compile(r"Answer[:–\s]+(.*)", re.IGNORECASE | re.DOTALL)


class SolutionExtractor:
    """Extracts numbered questions and their canonical answers."""

    def extract(self, blocks: Iterable[QuestionBlock]) -> SolutionExtraction:
        """
        Extract questions from solution blocks, in document order.

        Args:
            blocks: Question blocks from the solution document.

        Returns:
            The extracted questions and the dropped blocks.

        Raises:
            SolutionParseError: If no block yields a question.
        """
        questions: list[SolutionQuestion] = []
        dropped: list[DroppedBlock] = []

        for block in blocks:
            question = self._extract_question(block)
            if isinstance(question, DropReason):
                logger.debug("Dropped solution block (%s): %.60r", question.value, block.raw_text)
                dropped.append(DroppedBlock(block=block, reason=question))
            else:
                questions.append(question)

        if not questions:
            raise SolutionParseError(
                "Could not parse any questions from the solution document", dropped
            )

        return SolutionExtraction(questions=tuple(questions), dropped=tuple(dropped))

    def _extract_question(self, block: QuestionBlock) -> SolutionQuestion | DropReason:
        text = block.raw_text
        match = ANSWER_MARKER.search(text)
        if not match:
            return DropReason.NO_ANSWER_MARKER

        answer = match.group(1).strip()
        if not answer:
            return DropReason.NO_ANSWER_MARKER

        question_text = text[: match.start()].strip()
        number = leading_number(question_text)
        if number is None:
            return DropReason.NO_QUESTION_NUMBER

        return SolutionQuestion(
            number=number,
            question_text=question_text,
            canonical_answer=answer,
        )
