"""
Text segmenter.

Splits extracted document text into one block per numbered question. A
question starts at any line beginning with "N. " (digits, a period and
whitespace). This is a heuristic: a line inside an answer that happens to
start with "3. " opens a new block too.
"""

import re
from collections.abc import Iterator

from qa_checker.models import QuestionBlock

QUESTION_START = re.compile(r"^\d+\.\s", re.MULTILINE)
LEADING_NUMBER = re.compile(r"^(\d+)\.")


def leading_number(text: str) -> int | None:
    """
    Return the question number a text starts with.

    Args:
        text: Trimmed block or question text.

    Returns:
        The positive integer before the first period, or None.
    """
    match = LEADING_NUMBER.match(text)
    if not match:
        return None
    number = int(match.group(1))
    return number if number > 0 else None


class SegmentedText:
    """
    Lazily segmented view over a document's text.

    Each iteration re-scans the text, so the blocks can be walked any
    number of times and always come out the same.
    """

    def __init__(self, text: str):
        self._text = text

    def __iter__(self) -> Iterator[QuestionBlock]:
        text = self._text
        start = 0

        for match in QUESTION_START.finditer(text):
            if match.start() > start:
                yield from self._make_block(text[start : match.start()])
            start = match.start()

        yield from self._make_block(text[start:])

    @staticmethod
    def _make_block(chunk: str) -> Iterator[QuestionBlock]:
        stripped = chunk.strip()
        if stripped:
            yield QuestionBlock(number=leading_number(stripped), raw_text=stripped)


def segment_text(text: str) -> SegmentedText:
    """
    Split text into question blocks at every numbered line.

    The "N. " prefix stays at the start of its block. Empty and
    whitespace-only blocks are discarded.

    Args:
        text: Extracted document text.

    Returns:
        A restartable iterable of QuestionBlock.
    """
    return SegmentedText(text)
