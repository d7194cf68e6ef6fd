"""
Pytest configuration and fixtures.

Provides common test fixtures for all test modules.
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator
from unittest.mock import AsyncMock, MagicMock

import pytest

from qa_checker.config import Settings
from qa_checker.grading import GradingOrchestrator, ScoringOracle
from qa_checker.grading.llm_client import LLMError
from qa_checker.models import OracleVerdict, SolutionQuestion
from qa_checker.storage import InMemoryRecordStore


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ==============================================================================
# Sample Document Fixtures
# ==============================================================================


@pytest.fixture
def sample_solution_text() -> str:
    """A solution key with a title line and three questions."""
    return """Science Quiz - Solution Key

1. What is the chemical symbol for water?
Answer: H2O

2. Name the closest star to Earth.
Answer: The Sun

3. What gas do plants absorb from the air?
Answer: Carbon dioxide, which they use
in photosynthesis.
"""


@pytest.fixture
def sample_student_text() -> str:
    """A student's sheet: Q1 marked, Q2 without a marker, Q3 missing."""
    return """Name: Alex

1. What is the chemical symbol for water?
Answer: H2O

2. Name the closest star to Earth. It is the Sun.
"""


@pytest.fixture
def sample_questions() -> list[SolutionQuestion]:
    return [
        SolutionQuestion(
            number=1,
            question_text="1. What is the chemical symbol for water?",
            canonical_answer="H2O",
        ),
        SolutionQuestion(
            number=2,
            question_text="2. Name the closest star to Earth.",
            canonical_answer="The Sun",
        ),
        SolutionQuestion(
            number=3,
            question_text="3. What gas do plants absorb from the air?",
            canonical_answer="Carbon dioxide, which they use\nin photosynthesis.",
        ),
    ]


# ==============================================================================
# File Fixtures
# ==============================================================================


@pytest.fixture
def solution_file(temp_dir: Path, sample_solution_text: str) -> Path:
    file_path = temp_dir / "solution.txt"
    file_path.write_text(sample_solution_text, encoding="utf-8")
    return file_path


@pytest.fixture
def student_file(temp_dir: Path, sample_student_text: str) -> Path:
    file_path = temp_dir / "student.txt"
    file_path.write_text(sample_student_text, encoding="utf-8")
    return file_path


@pytest.fixture
def empty_file(temp_dir: Path) -> Path:
    """Create an empty file."""
    file_path = temp_dir / "empty.txt"
    file_path.write_text("", encoding="utf-8")
    return file_path


@pytest.fixture
def write_file(temp_dir: Path) -> Callable[[str, str], Path]:
    """Write text to a named file in the temp dir and return its path."""

    def _write(name: str, content: str) -> Path:
        path = temp_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Create test settings with mocked values."""
    return Settings(
        llm_api_key="test-api-key-for-testing",
        llm_base_url="https://test.api.local/",
        llm_model="test-model",
        llm_temperature=0.0,
        oracle_max_attempts=3,
        oracle_backoff_base_seconds=2.0,
        upload_directory=temp_dir / "uploads",
        data_directory=temp_dir / "data",
    )


# ==============================================================================
# Oracle Fixtures
# ==============================================================================


def oracle_response(score: Any, feedback: Any = "Looks good.") -> str:
    """JSON text as the oracle would return it."""
    return json.dumps({"score": score, "feedback": feedback})


def overloaded_error() -> LLMError:
    return LLMError("API error: The model is overloaded", status_code=503)


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """LLM client whose generate() returns a fixed verdict."""
    client = MagicMock()
    client.generate = AsyncMock(return_value=oracle_response(90, "Correct."))
    client.close = AsyncMock()
    return client


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Stand-in for asyncio.sleep that records the requested delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def oracle(mock_llm_client: MagicMock, no_sleep: AsyncMock) -> ScoringOracle:
    return ScoringOracle(mock_llm_client, max_attempts=3, backoff_base_seconds=2.0, sleep=no_sleep)


@pytest.fixture
def fake_oracle() -> MagicMock:
    """Oracle whose score() returns a fixed verdict without any LLM."""
    fake = MagicMock(spec=ScoringOracle)
    fake.score = AsyncMock(return_value=OracleVerdict(score=80, feedback="Good."))
    return fake


# ==============================================================================
# Orchestrator Fixtures
# ==============================================================================


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def orchestrator(store: InMemoryRecordStore, fake_oracle: MagicMock) -> GradingOrchestrator:
    return GradingOrchestrator(store=store, oracle=fake_oracle)
