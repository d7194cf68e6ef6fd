"""
Response parser for scoring oracle output.

The oracle is asked for {"score": number, "feedback": string} but is not
trusted to comply: code fences are stripped, the score is coerced and
clamped to 0-100, and missing feedback gets a placeholder.
"""

import json
import math
import re
from typing import Any

from qa_checker.models import OracleVerdict, round_half_up

NO_FEEDBACK = "Could not generate feedback."

CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class ScoringError(Exception):
    """Raised when the oracle's response cannot be read as a verdict."""

    def __init__(self, message: str, raw_response: str | None = None):
        self.raw_response = raw_response
        super().__init__(message)


class ResponseParser:
    """Parses scoring oracle responses into OracleVerdict."""

    def parse(self, response: str) -> OracleVerdict:
        """
        Parse an oracle response.

        Args:
            response: Raw oracle text, optionally fenced.

        Returns:
            A SCORED verdict.

        Raises:
            ScoringError: If the response is not a JSON object.
        """
        json_str = CODE_FENCE.sub("", response).strip()

        try:
            data = json.loads(json_str)
        # ValueError covers JSONDecodeError and over-long integer literals
        except (ValueError, RecursionError) as e:
            raise ScoringError(f"Invalid JSON in response: {e}", raw_response=response) from e

        if not isinstance(data, dict):
            raise ScoringError(
                f"Expected a JSON object, got {type(data).__name__}", raw_response=response
            )

        return OracleVerdict(
            score=self._coerce_score(data.get("score")),
            feedback=self._coerce_feedback(data.get("feedback")),
        )

    @staticmethod
    def _coerce_score(value: Any) -> int:
        """Numeric value of the score field, 0 when it is not a number."""
        if value is None or isinstance(value, bool):
            return 0
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            return 0
        if not math.isfinite(number):
            return 0
        return min(100, max(0, round_half_up(number)))

    @staticmethod
    def _coerce_feedback(value: Any) -> str:
        if not value:
            return NO_FEEDBACK
        return value if isinstance(value, str) else str(value)
