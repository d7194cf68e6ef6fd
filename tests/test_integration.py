"""
Integration tests for the full grading pipeline.

Tests end-to-end grading scenarios with mocked LLM responses
to verify the complete system works correctly.
"""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from conftest import oracle_response, overloaded_error
from qa_checker.config import Settings
from qa_checker.grading import GradingOrchestrator, ScoringOracle
from qa_checker.grading.oracle import UNAVAILABLE_FEEDBACK
from qa_checker.main import app
from qa_checker.models import NO_ANSWER_PROVIDED, Submission, SubmissionStatus
from qa_checker.storage import JsonRecordStore

runner = CliRunner()

PAGED_SOLUTION = """Algebra Quiz
1. What is 2+2?
Answer: 4
----------------Page (1) Break----------------
2. What is 3+3?
Answer: 6
----------------Page (2) Break----------------
3. Solve x + 1 = 3.
Answer: x = 2
"""

PAGED_STUDENT = """1. What is 2+2?
Answer: four
----------------Page (1) Break----------------
3. Solve x + 1 = 3. x is 2
"""


class TestFullPipeline:
    """Integration tests for the complete grading pipeline."""

    @pytest.mark.asyncio
    async def test_full_grading_pipeline(
        self,
        write_file,
        temp_dir: Path,
        mock_llm_client: MagicMock,
        no_sleep: AsyncMock,
    ) -> None:
        """Files on disk through extraction, parsing, scoring and JSON storage."""
        solution = write_file("algebra_key.txt", PAGED_SOLUTION)
        student = write_file("sam.txt", PAGED_STUDENT)
        mock_llm_client.generate.side_effect = [
            oracle_response(100, "Correct."),
            oracle_response(0, "No answer was given."),
            oracle_response(95, "Correct, stated informally."),
        ]
        store = JsonRecordStore(temp_dir / "data")
        orchestrator = GradingOrchestrator(
            store=store, oracle=ScoringOracle(mock_llm_client, sleep=no_sleep)
        )

        submission, task = orchestrator.submit(solution, student)
        graded = await task

        assert graded is not None
        assert graded.status == SubmissionStatus.COMPLETED
        assert [(r.number, r.student_answer) for r in graded.results] == [
            (1, "four"),
            (2, NO_ANSWER_PROVIDED),
            (3, "x is 2"),
        ]
        assert [r.correct_answer for r in graded.results] == ["4", "6", "x = 2"]
        assert graded.overall_score == 65

        # Page-break markers never reach the oracle
        for prompt_call in mock_llm_client.generate.await_args_list:
            assert "Break" not in prompt_call.args[0]

        reloaded = JsonRecordStore(temp_dir / "data").get_submission(submission.submission_id)
        assert reloaded == graded
        quiz = store.get_quiz(submission.quiz_id)
        assert quiz is not None
        assert len(quiz.questions) == 3

    @pytest.mark.asyncio
    async def test_oracle_outage_mid_submission(
        self,
        solution_file: Path,
        student_file: Path,
        mock_llm_client: MagicMock,
        no_sleep: AsyncMock,
    ) -> None:
        """An exhausted question scores 0 and grading carries on."""
        mock_llm_client.generate.side_effect = [
            oracle_response(100, "Correct."),
            overloaded_error(),
            overloaded_error(),
            overloaded_error(),
            oracle_response(0, "Missing."),
        ]
        orchestrator = GradingOrchestrator(
            store=JsonRecordStore(solution_file.parent / "data"),
            oracle=ScoringOracle(mock_llm_client, sleep=no_sleep),
        )
        submission = orchestrator.create_submission(solution_file, student_file)

        graded = await orchestrator.grade_submission(submission.submission_id)

        assert graded is not None
        assert graded.status == SubmissionStatus.COMPLETED
        assert [r.score for r in graded.results] == [100, 0, 0]
        assert graded.results[1].feedback == UNAVAILABLE_FEEDBACK
        assert graded.overall_score == 33
        assert mock_llm_client.generate.await_count == 5


class TestCli:
    """Tests for the command-line interface."""

    @pytest.fixture
    def cli_settings(self, test_settings: Settings, mock_llm_client: MagicMock):
        with patch("qa_checker.main.get_settings", return_value=test_settings), patch(
            "qa_checker.main.LLMClient", return_value=mock_llm_client
        ):
            yield test_settings

    def test_grade_and_results(
        self,
        cli_settings: Settings,
        mock_llm_client: MagicMock,
        solution_file: Path,
        student_file: Path,
        temp_dir: Path,
    ) -> None:
        output = temp_dir / "out" / "submission.json"

        result = runner.invoke(
            app, ["grade", str(solution_file), str(student_file), "--output", str(output)]
        )

        assert result.exit_code == 0, result.output
        submission = Submission.model_validate_json(output.read_text(encoding="utf-8"))
        assert submission.status == SubmissionStatus.COMPLETED
        assert submission.overall_score == 90
        assert len(submission.results) == 3
        mock_llm_client.close.assert_awaited_once()

        shown = runner.invoke(app, ["results", str(submission.submission_id)])

        assert shown.exit_code == 0, shown.output
        assert "90 / 100" in shown.output

    def test_grade_missing_file(self, cli_settings: Settings, solution_file: Path, temp_dir: Path) -> None:
        result = runner.invoke(app, ["grade", str(solution_file), str(temp_dir / "nope.txt")])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_grade_unparseable_solution(
        self, cli_settings: Settings, write_file, student_file: Path
    ) -> None:
        solution = write_file("bad_key.txt", "Just a title, no questions")

        result = runner.invoke(app, ["grade", str(solution), str(student_file)])

        assert result.exit_code == 1
        assert "Grading failed" in result.output

    def test_results_unknown_submission(self, cli_settings: Settings) -> None:
        result = runner.invoke(app, ["results", "00000000-0000-4000-8000-000000000000"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_results_not_an_id(self, cli_settings: Settings) -> None:
        result = runner.invoke(app, ["results", "abc"])

        assert result.exit_code == 1

    @pytest.mark.parametrize(("reachable", "exit_code"), [(True, 0), (False, 1)])
    def test_health(self, cli_settings: Settings, reachable: bool, exit_code: int) -> None:
        llm_client = MagicMock()
        llm_client.health_check = AsyncMock(return_value=reachable)
        llm_client.close = AsyncMock()

        with patch("qa_checker.main.LLMClient", return_value=llm_client):
            result = runner.invoke(app, ["health"])

        assert result.exit_code == exit_code
        assert "test-model" in result.output
        llm_client.close.assert_awaited_once()

    def test_grade_output_is_json(
        self, cli_settings: Settings, solution_file: Path, student_file: Path, temp_dir: Path
    ) -> None:
        output = temp_dir / "submission.json"

        runner.invoke(app, ["grade", str(solution_file), str(student_file), "-o", str(output)])

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["status"] == "completed"
        assert [r["number"] for r in data["results"]] == [1, 2, 3]
