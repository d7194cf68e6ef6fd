"""
Grading Module.

Scoring oracle client and the orchestrator that grades a submission
question by question.
"""

from qa_checker.grading.engine import GradingOrchestrator, SubmissionNotFoundError
from qa_checker.grading.llm_client import LLMClient, LLMError
from qa_checker.grading.oracle import ScoringOracle
from qa_checker.grading.prompt_builder import PromptBuilder
from qa_checker.grading.scorer import ResponseParser, ScoringError

__all__ = [
    "GradingOrchestrator",
    "LLMClient",
    "LLMError",
    "PromptBuilder",
    "ResponseParser",
    "ScoringError",
    "ScoringOracle",
    "SubmissionNotFoundError",
]
