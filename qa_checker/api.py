"""
HTTP API for the Q&A Checker.

Two endpoints mirror the upload-then-poll flow:

- POST /api/upload stores both documents, creates the submission and
  answers 202 right away; grading runs as a background task after the
  response is sent.
- GET /api/results/{submission_id} returns the current record. Results
  and the overall score are only included once grading has completed.
"""

import logging
from pathlib import Path
from typing import Annotated, Any
from uuid import UUID, uuid4

from fastapi import BackgroundTasks, FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from qa_checker import __version__
from qa_checker.config import Settings, get_settings
from qa_checker.grading import GradingOrchestrator
from qa_checker.models import Submission, SubmissionStatus
from qa_checker.storage import RecordStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    store: RecordStore | None = None,
    orchestrator: GradingOrchestrator | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration settings. Uses global settings if not provided.
        store: Record store for a settings-built orchestrator. Defaults to
            JSON files under the data directory.
        orchestrator: Grading orchestrator. Built from settings if not provided.

    Returns:
        The configured application.
    """
    settings = settings or get_settings()
    orchestrator = orchestrator or GradingOrchestrator.from_settings(settings, store=store)

    app = FastAPI(title="Q&A Checker API", version=__version__)
    app.state.settings = settings
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Q&A Checker API is running..."

    @app.post("/api/upload", status_code=202)
    async def upload(
        background_tasks: BackgroundTasks,
        solution: Annotated[UploadFile | None, File()] = None,
        student: Annotated[UploadFile | None, File()] = None,
    ) -> dict[str, Any]:
        if solution is None or student is None:
            raise HTTPException(
                status_code=400, detail="Both solution and student files are required."
            )

        # Both files are checked before either is written
        solution_bytes = await _read_upload(solution, "solution", settings)
        student_bytes = await _read_upload(student, "student", settings)
        solution_path = _store_upload(solution, solution_bytes, "solution", settings)
        student_path = _store_upload(student, student_bytes, "student", settings)

        submission = orchestrator.create_submission(
            solution_path,
            student_path,
            solution_name=solution.filename,
            student_name=student.filename,
        )
        background_tasks.add_task(orchestrator.grade_submission, submission.submission_id)

        return {
            "message": "Files uploaded successfully! Grading is in progress.",
            "submissionId": str(submission.submission_id),
            "status": submission.status.value,
        }

    @app.get("/api/results/{submission_id}")
    async def get_results(submission_id: str) -> dict[str, Any]:
        try:
            key = UUID(submission_id)
        except ValueError:
            raise HTTPException(status_code=404, detail="Submission not found.")

        submission = orchestrator.store.get_submission(key)
        if submission is None:
            raise HTTPException(status_code=404, detail="Submission not found.")

        return submission_payload(submission)

    return app


def submission_payload(submission: Submission) -> dict[str, Any]:
    """Public view of a submission; results only once it has completed."""
    payload: dict[str, Any] = {
        "submissionId": str(submission.submission_id),
        "fileName": submission.file_name,
        "status": submission.status.value,
    }

    if submission.status is SubmissionStatus.COMPLETED:
        payload["overallScore"] = submission.overall_score
        payload["results"] = [
            {
                "questionNumber": r.number,
                "studentAnswer": r.student_answer,
                "correctAnswer": r.correct_answer,
                "score": r.score,
                "feedback": r.feedback,
            }
            for r in submission.results
        ]

    return payload


async def _read_upload(upload: UploadFile, field: str, settings: Settings) -> bytes:
    """
    Check an uploaded document's type and size and return its bytes.

    Raises:
        HTTPException: 400 for unsupported formats, 413 for oversized files.
    """
    suffix = Path(upload.filename or "").suffix.lower()
    if suffix not in settings.supported_extensions:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type for {field}. Supported formats: {', '.join(settings.supported_extensions)}",
        )

    content = await upload.read()
    if len(content) > settings.max_file_size_mb * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"{field} file exceeds {settings.max_file_size_mb:g} MB",
        )
    return content


def _store_upload(upload: UploadFile, content: bytes, field: str, settings: Settings) -> Path:
    """Write an accepted upload under a unique name."""
    suffix = Path(upload.filename or "").suffix.lower()
    path = settings.upload_directory / f"{field}-{uuid4().hex}{suffix}"
    path.write_bytes(content)
    logger.info("Stored %s upload %r as %s", field, upload.filename, path.name)
    return path
