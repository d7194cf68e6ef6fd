"""
Q&A Checker CLI Application.

Provides a command-line interface for grading a student's answer sheet
against a solution key, inspecting stored results and running the API.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from qa_checker.config import Settings, get_settings
from qa_checker.grading import GradingOrchestrator, LLMClient, ScoringOracle
from qa_checker.models import Submission, SubmissionStatus
from qa_checker.storage import JsonRecordStore, StorageError

app = typer.Typer(
    name="qa-checker",
    help="Grade numbered question papers against a solution key with an LLM",
    add_completion=False,
)

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.command()
def grade(
    solution_file: Annotated[Path, typer.Argument(help="Path to the solution key")],
    student_file: Annotated[Path, typer.Argument(help="Path to the student's answer sheet")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the submission record to this JSON file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show answers, feedback and debug logs"),
    ] = False,
) -> None:
    """
    Grade a student's answer sheet against a solution key.

    Every question found in the solution key is scored 0-100 by the LLM;
    the overall score is the rounded mean.
    """
    settings = get_settings()
    _configure_logging("DEBUG" if verbose else settings.log_level)

    for path, label in ((solution_file, "Solution"), (student_file, "Student")):
        if not path.exists():
            console.print(f"[red]Error:[/red] {label} file not found: {path}")
            raise typer.Exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Grading... (this may take a moment)", total=None)
        submission = asyncio.run(_grade(settings, solution_file, student_file))
        progress.update(task, description="Done")

    if submission is None or submission.status is not SubmissionStatus.COMPLETED:
        console.print("[red]Grading failed.[/red] See the log above for details.")
        raise typer.Exit(1)

    _display_submission(submission, verbose)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(submission.model_dump_json(indent=2), encoding="utf-8")
        console.print(f"\n[green]Submission saved to:[/green] {output}")


async def _grade(settings: Settings, solution_file: Path, student_file: Path) -> Submission | None:
    llm_client = LLMClient(settings)
    orchestrator = GradingOrchestrator(
        store=JsonRecordStore(settings.data_directory),
        oracle=ScoringOracle.from_settings(settings, llm_client=llm_client),
    )
    try:
        submission, task = orchestrator.submit(solution_file, student_file)
        console.print(f"[dim]Submission ID: {submission.submission_id}[/dim]")
        return await task
    finally:
        await llm_client.close()


async def _check_endpoint(settings: Settings) -> bool:
    llm_client = LLMClient(settings)
    try:
        return await llm_client.health_check()
    finally:
        await llm_client.close()


@app.command()
def results(
    submission_id: Annotated[str, typer.Argument(help="Submission ID printed by 'grade'")],
) -> None:
    """
    Show a stored submission.
    """
    settings = get_settings()

    try:
        key = UUID(submission_id)
    except ValueError:
        console.print(f"[red]Error:[/red] Not a submission ID: {submission_id}")
        raise typer.Exit(1)

    try:
        submission = JsonRecordStore(settings.data_directory).get_submission(key)
    except StorageError as e:
        console.print(f"[red]Storage Error:[/red] {e}")
        raise typer.Exit(1)

    if submission is None:
        console.print(f"[red]Error:[/red] Submission not found: {submission_id}")
        raise typer.Exit(1)

    if submission.status is not SubmissionStatus.COMPLETED:
        console.print(Panel(f"Status: [bold]{submission.status.value}[/bold]", title="Submission"))
        return

    _display_submission(submission, verbose=True)


@app.command()
def health() -> None:
    """
    Show the scoring endpoint configuration and check that it answers.
    """
    try:
        settings = get_settings()
        console.print("[bold]Q&A Checker Health Check[/bold]\n")

        console.print("[dim]Scoring endpoint[/dim]")
        console.print(f"  API Base URL: {settings.llm_base_url}")
        console.print(f"  Model: {settings.llm_model}")
        console.print(f"  Max Attempts: {settings.oracle_max_attempts}")
        console.print(f"  Data Directory: {settings.data_directory}")

        console.print("\n[dim]Sending a test prompt...[/dim]")
        if asyncio.run(_check_endpoint(settings)):
            console.print("[green]✓ Scoring endpoint answered[/green]")
        else:
            console.print("[red]✗ Scoring endpoint did not answer[/red]")
            raise typer.Exit(1)

        console.print("\n[green]Ready to grade[/green]")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port to listen on")] = 5001,
) -> None:
    """
    Run the HTTP API.
    """
    import uvicorn

    from qa_checker.api import create_app

    settings = get_settings()
    _configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


def _display_submission(submission: Submission, verbose: bool = False) -> None:
    """Display graded results in a formatted table."""

    score = submission.overall_score
    score_color = "green" if score >= 70 else "yellow" if score >= 50 else "red"
    console.print(
        Panel(
            f"[{score_color}][bold]{score} / 100[/bold][/{score_color}] "
            f"across {len(submission.results)} questions",
            title="Overall Score",
        )
    )

    table = Table(title="Per-Question Results")
    table.add_column("Q", justify="right", style="cyan")
    table.add_column("Score", justify="right")
    if verbose:
        table.add_column("Student Answer")
        table.add_column("Correct Answer")
    table.add_column("Feedback")

    for r in submission.results:
        row = [str(r.number), str(r.score)]
        if verbose:
            row += [r.student_answer[:60], r.correct_answer[:60]]
        row.append(r.feedback)
        table.add_row(*row)

    console.print(table)


if __name__ == "__main__":
    app()
