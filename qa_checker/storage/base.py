"""
Record store interface.

Quizzes and submissions are the only persisted state. The store is also
the single channel through which progress of a background grading run
can be observed, so readers must expect a submission to still be
`processing` for a while.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from qa_checker.models import Quiz, Submission


class StorageError(Exception):
    """Raised when a record cannot be written or read back."""

    def __init__(self, message: str, record_id: UUID | str | None = None, cause: Exception | None = None):
        self.record_id = str(record_id) if record_id is not None else None
        self.cause = cause
        super().__init__(message)


class RecordStore(ABC):
    """Persistence for Quiz and Submission records."""

    @abstractmethod
    def save_quiz(self, quiz: Quiz) -> None: ...

    @abstractmethod
    def get_quiz(self, quiz_id: UUID) -> Quiz | None: ...

    @abstractmethod
    def save_submission(self, submission: Submission) -> None: ...

    @abstractmethod
    def get_submission(self, submission_id: UUID) -> Submission | None: ...
