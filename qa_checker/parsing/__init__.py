"""
Question paper parsing.

Segments extracted text into numbered question blocks, extracts the
solution key's questions and answers, and aligns a student's answers
to them.
"""

from qa_checker.parsing.alignment import AnswerAligner
from qa_checker.parsing.base import DocumentStructureParser, SolutionParseError
from qa_checker.parsing.heuristic import HeuristicStructureParser
from qa_checker.parsing.segmenter import SegmentedText, leading_number, segment_text
from qa_checker.parsing.solution import ANSWER_MARKER, SolutionExtractor

__all__ = [
    "ANSWER_MARKER",
    "AnswerAligner",
    "DocumentStructureParser",
    "HeuristicStructureParser",
    "SegmentedText",
    "SolutionExtractor",
    "SolutionParseError",
    "leading_number",
    "segment_text",
]
