"""
Scoring oracle client.

Scores one (correct answer, student answer) pair. The oracle may be
overloaded or return garbage; neither is allowed to escape. Every path
returns a well-formed OracleVerdict, degraded ones with a score of 0 and
a diagnostic feedback string.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from qa_checker.config import Settings
from qa_checker.grading.llm_client import LLMClient, LLMError
from qa_checker.grading.prompt_builder import PromptBuilder
from qa_checker.grading.scorer import NO_FEEDBACK, ResponseParser, ScoringError
from qa_checker.models import OracleVerdict, ScoreOutcome

logger = logging.getLogger(__name__)

ERROR_FEEDBACK = "Error during AI grading."
UNAVAILABLE_FEEDBACK = "AI model is currently unavailable after multiple retries."


class ScoringOracle:
    """
    Scores answers through the LLM with retry on overload.

    Overload responses are retried with exponential backoff
    (base, 2*base, ... seconds) up to `max_attempts` calls in total.
    Any other failure ends the call immediately. No state is kept between
    calls.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        max_attempts: int = 3,
        backoff_base_seconds: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        parser: ResponseParser | None = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._llm_client = llm_client
        self._max_attempts = max_attempts
        self._backoff_base = backoff_base_seconds
        self._sleep = sleep
        self._parser = parser or ResponseParser()

    @classmethod
    def from_settings(cls, settings: Settings, llm_client: LLMClient | None = None) -> "ScoringOracle":
        return cls(
            llm_client or LLMClient(settings),
            max_attempts=settings.oracle_max_attempts,
            backoff_base_seconds=settings.oracle_backoff_base_seconds,
        )

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retrying after a failed 0-indexed attempt."""
        return self._backoff_base * (2**attempt)

    async def score(self, correct_answer: str, student_answer: str) -> OracleVerdict:
        """
        Score a student answer against the correct answer.

        Args:
            correct_answer: Canonical answer from the solution key.
            student_answer: The student's answer.

        Returns:
            The oracle's verdict, or a degraded verdict on failure.
        """
        prompt = PromptBuilder.build_scoring_prompt(correct_answer, student_answer)

        for attempt in range(self._max_attempts):
            attempts = attempt + 1
            try:
                raw_response = await self._llm_client.generate(prompt)
            except LLMError as e:
                if not e.overloaded:
                    logger.error("Scoring oracle call failed: %s", e)
                    return self._degraded(ERROR_FEEDBACK, ScoreOutcome.ORACLE_ERROR, attempts)

                if attempts < self._max_attempts:
                    delay = self.backoff_delay(attempt)
                    logger.warning(
                        "Scoring oracle is overloaded. Retrying in %.0f seconds (attempt %d of %d)",
                        delay,
                        attempts,
                        self._max_attempts,
                    )
                    await self._sleep(delay)
                    continue

                logger.error("Scoring oracle still overloaded after %d attempts", attempts)
                return self._degraded(UNAVAILABLE_FEEDBACK, ScoreOutcome.RETRIES_EXHAUSTED, attempts)

            try:
                verdict = self._parser.parse(raw_response)
            except ScoringError as e:
                logger.warning("Malformed scoring oracle response: %s", e)
                return self._degraded(NO_FEEDBACK, ScoreOutcome.MALFORMED_RESPONSE, attempts)
            except Exception:
                logger.exception("Could not read scoring oracle response")
                return self._degraded(ERROR_FEEDBACK, ScoreOutcome.ORACLE_ERROR, attempts)

            return verdict.model_copy(update={"attempts": attempts})

        # Unreachable while max_attempts >= 1
        return self._degraded(UNAVAILABLE_FEEDBACK, ScoreOutcome.RETRIES_EXHAUSTED, self._max_attempts)

    @staticmethod
    def _degraded(feedback: str, outcome: ScoreOutcome, attempts: int) -> OracleVerdict:
        return OracleVerdict(score=0, feedback=feedback, outcome=outcome, attempts=attempts)
