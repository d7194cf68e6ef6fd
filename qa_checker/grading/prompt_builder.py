"""
Prompt builder for answer scoring.

Builds the single instruction sent to the scoring oracle for one
(correct answer, student answer) pair.
"""


class PromptBuilder:
    """
    Builds scoring prompts.

    The prompt asks for a 0-100 score judged on semantic similarity,
    correctness and completeness, plus short feedback, as a bare JSON
    object.
    """

    SCORING_TEMPLATE = """Please act as an expert grader. Compare the following student's answer to the correct solution.
Provide a score from 0 to 100 based on semantic similarity, correctness, and completeness.
Also, provide concise, constructive feedback for the student.

Correct Solution: "{correct_answer}"
Student's Answer: "{student_answer}"

Your entire response MUST be a valid JSON object with two keys: "score" (a number from 0-100) and "feedback" (a string).
Example: {{"score": 85, "feedback": "Your answer is mostly correct but could include more detail on..."}}"""

    @staticmethod
    def build_scoring_prompt(correct_answer: str, student_answer: str) -> str:
        """
        Build the prompt for scoring one answer.

        Args:
            correct_answer: Canonical answer from the solution key.
            student_answer: The student's answer, or the sentinel text.

        Returns:
            The formatted prompt.
        """
        return PromptBuilder.SCORING_TEMPLATE.format(
            correct_answer=correct_answer,
            student_answer=student_answer,
        )
