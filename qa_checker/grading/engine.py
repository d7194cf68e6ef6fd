"""
Grading orchestrator.

Drives one submission through the pipeline and owns its status:

    pending -> processing -> completed | failed

Creating a submission only writes the records; the slow part (document
extraction and one oracle call per question) runs as a detached asyncio
task. Progress is visible only through the record store.
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from uuid import UUID

from qa_checker.config import Settings
from qa_checker.extractors import extract_document
from qa_checker.grading.oracle import ScoringOracle
from qa_checker.models import (
    NO_ANSWER_PROVIDED,
    ExtractedDocument,
    GradedResult,
    Quiz,
    StudentAnswer,
    Submission,
    SubmissionStatus,
)
from qa_checker.parsing import DocumentStructureParser, HeuristicStructureParser
from qa_checker.storage import JsonRecordStore, RecordStore, StorageError

logger = logging.getLogger(__name__)

Extractor = Callable[[Path], ExtractedDocument]


class SubmissionNotFoundError(Exception):
    """Raised when asked to grade a submission the store does not know."""

    def __init__(self, submission_id: UUID):
        self.submission_id = submission_id
        super().__init__(f"Submission {submission_id} not found")


class GradingOrchestrator:
    """
    Runs the grading pipeline for submissions.

    Each submission is graded by a single task that scores its questions
    one after another, in solution order. Different submissions share no
    mutable state and may run concurrently. There is no timeout: a
    submission whose extraction or oracle calls never return stays
    `processing`.
    """

    def __init__(
        self,
        store: RecordStore,
        oracle: ScoringOracle,
        parser: DocumentStructureParser | None = None,
        extractor: Extractor = extract_document,
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Where quiz and submission records live.
            oracle: Scoring oracle client, configured once per process.
            parser: Document structure parser. Defaults to the heuristic one.
            extractor: Document-to-text function, run in a worker thread.
        """
        self._store = store
        self._oracle = oracle
        self._parser = parser or HeuristicStructureParser()
        self._extractor = extractor
        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def from_settings(
        cls, settings: Settings, store: RecordStore | None = None
    ) -> "GradingOrchestrator":
        return cls(
            store=store or JsonRecordStore(settings.data_directory),
            oracle=ScoringOracle.from_settings(settings),
        )

    @property
    def store(self) -> RecordStore:
        return self._store

    def create_submission(
        self,
        solution_path: Path | str,
        student_path: Path | str,
        solution_name: str | None = None,
        student_name: str | None = None,
    ) -> Submission:
        """
        Persist a new quiz and submission, ready to be graded.

        Args:
            solution_path: Stored solution document.
            student_path: Stored student document.
            solution_name: Original file name of the solution upload.
            student_name: Original file name of the student upload.

        Returns:
            The submission, already in `processing`.
        """
        quiz = Quiz(
            file_name=solution_name or Path(solution_path).name,
            solution_path=str(solution_path),
        )
        submission = Submission(
            quiz_id=quiz.quiz_id,
            file_name=student_name or Path(student_path).name,
            student_path=str(student_path),
            status=SubmissionStatus.PROCESSING,
        )
        self._store.save_quiz(quiz)
        self._store.save_submission(submission)
        logger.info("Created submission %s for quiz %s", submission.submission_id, quiz.quiz_id)
        return submission

    def submit(
        self,
        solution_path: Path | str,
        student_path: Path | str,
        solution_name: str | None = None,
        student_name: str | None = None,
    ) -> tuple[Submission, "asyncio.Task[Submission | None]"]:
        """
        Create a submission and start grading it in the background.

        Must be called from a running event loop. Returns as soon as the
        records are saved; the pipeline has not started yet.

        Returns:
            The new submission and the task grading it.
        """
        submission = self.create_submission(solution_path, student_path, solution_name, student_name)
        task = asyncio.create_task(
            self.grade_submission(submission.submission_id),
            name=f"grade-{submission.submission_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return submission, task

    async def grade_submission(self, submission_id: UUID) -> Submission | None:
        """
        Grade a stored submission and record the outcome.

        Any failure after the submission is loaded is recorded as status
        `failed`, with no partial results.

        Args:
            submission_id: Submission to grade.

        Returns:
            The final submission record, or None if the record could not
            be read or the failure could not be recorded.

        Raises:
            SubmissionNotFoundError: If the submission does not exist.
        """
        try:
            submission = self._store.get_submission(submission_id)
        except StorageError:
            logger.exception("Could not load submission %s; not grading", submission_id)
            return None
        if submission is None:
            raise SubmissionNotFoundError(submission_id)

        if submission.status.is_terminal:
            logger.warning(
                "Submission %s is already %s; not grading again",
                submission_id,
                submission.status.value,
            )
            return submission

        try:
            if submission.status is SubmissionStatus.PENDING:
                submission.status = SubmissionStatus.PROCESSING
                self._store.save_submission(submission)

            quiz = self._store.get_quiz(submission.quiz_id)
            if quiz is None:
                raise LookupError(f"Quiz {submission.quiz_id} not found")

            return await self._run_pipeline(quiz, submission)
        except Exception:
            logger.exception("An error occurred while grading submission %s", submission_id)
            return self._mark_failed(submission_id)

    async def _run_pipeline(self, quiz: Quiz, submission: Submission) -> Submission:
        solution_doc = await self._extract(quiz.solution_path)
        student_doc = await self._extract(submission.student_path)

        extraction = self._parser.parse_solution(solution_doc.content)
        questions = list(extraction.questions)
        if extraction.dropped:
            logger.info(
                "Quiz %s: %d solution blocks had no usable question",
                quiz.quiz_id,
                len(extraction.dropped),
            )

        quiz.questions = questions
        self._store.save_quiz(quiz)

        answers = self._parser.parse_student(student_doc.content, questions)
        answer_lookup: dict[int, StudentAnswer] = {}
        for answer in answers:
            answer_lookup.setdefault(answer.number, answer)

        results: list[GradedResult] = []
        total_score = 0
        for question in questions:
            answer = answer_lookup.get(question.number)
            answer_text = answer.answer_text if answer else NO_ANSWER_PROVIDED

            verdict = await self._oracle.score(question.canonical_answer, answer_text)
            results.append(
                GradedResult(
                    number=question.number,
                    student_answer=answer_text,
                    correct_answer=question.canonical_answer,
                    score=verdict.score,
                    feedback=verdict.feedback,
                )
            )
            total_score += verdict.score

        submission.results = results
        submission.overall_score = Submission.compute_overall_score(results)
        submission.status = SubmissionStatus.COMPLETED
        self._store.save_submission(submission)

        logger.info(
            "Grading completed for submission %s: %d questions, overall %d (total %d)",
            submission.submission_id,
            len(results),
            submission.overall_score,
            total_score,
        )
        return submission

    async def _extract(self, path: str) -> ExtractedDocument:
        return await asyncio.to_thread(self._extractor, Path(path))

    def _mark_failed(self, submission_id: UUID) -> Submission | None:
        try:
            submission = self._store.get_submission(submission_id)
            if submission is None:
                logger.error("Submission %s disappeared; cannot record failure", submission_id)
                return None

            submission.status = SubmissionStatus.FAILED
            submission.results = []
            submission.overall_score = 0
            self._store.save_submission(submission)
        except StorageError:
            logger.exception("Could not record failure for submission %s", submission_id)
            return None

        logger.info("Submission %s marked as failed", submission_id)
        return submission
