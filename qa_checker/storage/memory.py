"""In-process record store."""

from uuid import UUID

from qa_checker.models import Quiz, Submission
from qa_checker.storage.base import RecordStore


class InMemoryRecordStore(RecordStore):
    """
    Keeps records in dictionaries for the lifetime of the process.

    Records are copied on the way in and out, so a caller holding a
    Submission cannot change the stored one without saving it.
    """

    def __init__(self) -> None:
        self._quizzes: dict[UUID, Quiz] = {}
        self._submissions: dict[UUID, Submission] = {}

    def save_quiz(self, quiz: Quiz) -> None:
        self._quizzes[quiz.quiz_id] = quiz.model_copy(deep=True)

    def get_quiz(self, quiz_id: UUID) -> Quiz | None:
        quiz = self._quizzes.get(quiz_id)
        return quiz.model_copy(deep=True) if quiz else None

    def save_submission(self, submission: Submission) -> None:
        self._submissions[submission.submission_id] = submission.model_copy(deep=True)

    def get_submission(self, submission_id: UUID) -> Submission | None:
        submission = self._submissions.get(submission_id)
        return submission.model_copy(deep=True) if submission else None
