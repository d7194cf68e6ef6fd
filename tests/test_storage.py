"""
Unit tests for record stores.

Both stores are run through the same behavior checks; the JSON store
additionally gets file layout and corruption tests.
"""

from pathlib import Path
from uuid import uuid4

import pytest

from qa_checker.models import GradedResult, Quiz, SolutionQuestion, Submission, SubmissionStatus
from qa_checker.storage import InMemoryRecordStore, JsonRecordStore, RecordStore, StorageError


@pytest.fixture(params=["memory", "json"])
def any_store(request: pytest.FixtureRequest, temp_dir: Path) -> RecordStore:
    if request.param == "memory":
        return InMemoryRecordStore()
    return JsonRecordStore(temp_dir / "records")


@pytest.fixture
def quiz() -> Quiz:
    return Quiz(
        file_name="key.pdf",
        solution_path="/uploads/solution-1.pdf",
        questions=[SolutionQuestion(number=1, question_text="1. Q", canonical_answer="A")],
    )


@pytest.fixture
def submission(quiz: Quiz) -> Submission:
    return Submission(quiz_id=quiz.quiz_id, file_name="alex.pdf", student_path="/uploads/student-1.pdf")


class TestRecordStores:
    """Behavior shared by every RecordStore."""

    def test_quiz_roundtrip(self, any_store: RecordStore, quiz: Quiz) -> None:
        any_store.save_quiz(quiz)

        assert any_store.get_quiz(quiz.quiz_id) == quiz

    def test_submission_roundtrip(self, any_store: RecordStore, submission: Submission) -> None:
        submission.status = SubmissionStatus.COMPLETED
        submission.results = [
            GradedResult(number=1, student_answer="a", correct_answer="A", score=75, feedback="Close.")
        ]
        submission.overall_score = 75

        any_store.save_submission(submission)

        assert any_store.get_submission(submission.submission_id) == submission

    def test_unknown_ids(self, any_store: RecordStore) -> None:
        assert any_store.get_quiz(uuid4()) is None
        assert any_store.get_submission(uuid4()) is None

    def test_save_overwrites(self, any_store: RecordStore, submission: Submission) -> None:
        any_store.save_submission(submission)
        submission.status = SubmissionStatus.FAILED
        any_store.save_submission(submission)

        stored = any_store.get_submission(submission.submission_id)

        assert stored is not None
        assert stored.status == SubmissionStatus.FAILED

    def test_returned_records_are_copies(self, any_store: RecordStore, submission: Submission) -> None:
        """Changing a record without saving it leaves the stored one alone."""
        any_store.save_submission(submission)

        fetched = any_store.get_submission(submission.submission_id)
        assert fetched is not None
        fetched.status = SubmissionStatus.COMPLETED

        assert any_store.get_submission(submission.submission_id).status == SubmissionStatus.PENDING


class TestJsonRecordStore:
    """Tests specific to JsonRecordStore."""

    def test_file_layout(self, temp_dir: Path, quiz: Quiz, submission: Submission) -> None:
        store = JsonRecordStore(temp_dir / "records")

        store.save_quiz(quiz)
        store.save_submission(submission)

        assert (store.root / "quizzes" / f"{quiz.quiz_id}.json").is_file()
        assert (store.root / "submissions" / f"{submission.submission_id}.json").is_file()
        assert not list(store.root.rglob("*.tmp"))

    def test_records_survive_a_new_instance(self, temp_dir: Path, submission: Submission) -> None:
        JsonRecordStore(temp_dir / "records").save_submission(submission)

        reopened = JsonRecordStore(temp_dir / "records")

        assert reopened.get_submission(submission.submission_id) == submission

    def test_corrupt_record(self, temp_dir: Path) -> None:
        store = JsonRecordStore(temp_dir / "records")
        submission_id = uuid4()
        (store.root / "submissions" / f"{submission_id}.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError) as exc_info:
            store.get_submission(submission_id)

        assert exc_info.value.record_id == str(submission_id)
