"""Shared CLI utilities."""

import asyncio
from functools import wraps

import click

from ..db import ExerciseRepository, get_db_path
from ..errors import PercentLiftError
from ..models.exercise import ExerciseProfile


def async_command(f):
    """Decorator to run async Click commands.

    Domain errors and invalid input are reported as ``[ERROR]`` lines and end
    the command with exit code 1.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return asyncio.run(f(*args, **kwargs))
        except (PercentLiftError, ValueError) as e:
            echo_error(str(e))
            raise click.exceptions.Exit(1) from e

    return wrapper


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path()
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'percent-lift init' first."
        )
        ctx.exit(1)


async def resolve_exercise(ref: str) -> ExerciseProfile | None:
    """Find an exercise by numeric ID or by name (case-insensitive)."""
    repo = ExerciseRepository()
    if ref.isdigit():
        exercise = await repo.get(int(ref))
        if exercise is not None:
            return exercise
    return await repo.get_by_name(ref)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append("".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)))

    return "\n".join(line.rstrip() for line in lines)
