"""
JSON file record store.

One file per record under `<root>/quizzes/<id>.json` and
`<root>/submissions/<id>.json`. Writes go to a temporary file first and
are renamed into place, so a poller never reads a half-written record.
"""

import logging
import os
from pathlib import Path
from typing import TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError

from qa_checker.models import Quiz, Submission
from qa_checker.storage.base import RecordStore, StorageError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class JsonRecordStore(RecordStore):
    """Stores quizzes and submissions as pretty-printed JSON files."""

    def __init__(self, root: Path | str):
        self._root = Path(root)
        self._quiz_dir = self._root / "quizzes"
        self._submission_dir = self._root / "submissions"
        self._quiz_dir.mkdir(parents=True, exist_ok=True)
        self._submission_dir.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def save_quiz(self, quiz: Quiz) -> None:
        self._write(self._quiz_dir / f"{quiz.quiz_id}.json", quiz, quiz.quiz_id)

    def get_quiz(self, quiz_id: UUID) -> Quiz | None:
        return self._read(self._quiz_dir / f"{quiz_id}.json", Quiz, quiz_id)

    def save_submission(self, submission: Submission) -> None:
        self._write(
            self._submission_dir / f"{submission.submission_id}.json",
            submission,
            submission.submission_id,
        )

    def get_submission(self, submission_id: UUID) -> Submission | None:
        return self._read(self._submission_dir / f"{submission_id}.json", Submission, submission_id)

    def _write(self, path: Path, record: BaseModel, record_id: UUID) -> None:
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(record.model_dump_json(indent=2), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Could not write {path.name}: {e}", record_id, cause=e) from e
        logger.debug("Saved %s", path)

    def _read(self, path: Path, model: type[RecordT], record_id: UUID) -> RecordT | None:
        if not path.exists():
            return None
        try:
            return model.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise StorageError(f"Could not read {path.name}: {e}", record_id, cause=e) from e
