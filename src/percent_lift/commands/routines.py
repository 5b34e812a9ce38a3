"""Routine commands."""

import click

from ..db import RoutineRepository
from ..models.routine import Routine, RoutineExercise, parse_set_plans
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    resolve_exercise,
)


@click.group()
@click.pass_context
def routine(ctx):
    """Build routines of percentage-based sets."""
    ensure_initialized(ctx)


@routine.command("create")
@click.argument("name")
@click.option(
    "--exercise",
    "-e",
    "entries",
    multiple=True,
    required=True,
    help='EXERCISE=SETS, e.g. "Squat=bar x10, 60%x5, 3*100%x5@180"',
)
@click.pass_context
@async_command
async def create(ctx, name: str, entries: tuple[str, ...]):
    """Create a routine.

    Each set is LOADxREPS with an optional N* repeat and @REST seconds.
    LOAD is a percentage of max (80%), a fixed weight (135) or ``bar``.
    """
    exercises = []
    for entry in entries:
        ref, sep, scheme = entry.partition("=")
        if not sep:
            echo_error(f"Expected EXERCISE=SETS, got '{entry}'")
            ctx.exit(1)

        found = await resolve_exercise(ref.strip())
        if found is None:
            echo_error(f"Exercise '{ref.strip()}' not found")
            ctx.exit(1)
        exercises.append(RoutineExercise(exercise=found, sets=parse_set_plans(scheme)))

    routine_id = await RoutineRepository().create(Routine(name=name, exercises=exercises))
    echo_success(f"Created routine {name} (ID: {routine_id})")


@routine.command("list")
@async_command
async def list_routines():
    """List routines."""
    routines = await RoutineRepository().list_all()
    if not routines:
        echo_info("No routines yet. Create one with 'percent-lift routine create'")
        return

    rows = [
        [
            str(r.id),
            r.name,
            str(len(r.exercises)),
            str(sum(len(e.sets) for e in r.exercises)),
        ]
        for r in routines
    ]
    click.echo()
    click.echo(format_table(["ID", "Name", "Exercises", "Sets"], rows))


@routine.command("show")
@click.argument("routine_id", type=int)
@click.pass_context
@async_command
async def show(ctx, routine_id: int):
    """Show a routine's exercises and set schemes."""
    found = await RoutineRepository().get(routine_id)
    if found is None:
        echo_error(f"Routine ID {routine_id} not found")
        ctx.exit(1)
    click.echo(found.get_summary())
