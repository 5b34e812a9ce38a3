"""Exercise library commands."""

import click

from ..db import BarbellRepository, ExerciseRepository, SettingsRepository
from ..models.exercise import ExerciseProfile
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
def exercise(ctx):
    """Manage exercises and their max weights."""
    ensure_initialized(ctx)


@exercise.command("add")
@click.argument("name")
@click.argument("max_weight", type=float)
@click.option("--increment", "-i", type=float, help="Smallest loadable increment (default from settings)")
@click.option("--rest", "-r", type=int, help="Default rest between sets, in seconds")
@click.option("--bar", "use_bar", is_flag=True, help="Loaded on the default barbell")
@click.option("--barbell-id", type=int, help="Loaded on a specific barbell")
@click.option("--manual", is_flag=True, help="Disable auto-progression")
@async_command
async def add(
    name: str,
    max_weight: float,
    increment: float | None,
    rest: int | None,
    use_bar: bool,
    barbell_id: int | None,
    manual: bool,
):
    """Add an exercise with its current max weight."""
    settings = await SettingsRepository().get_all()

    if use_bar and barbell_id is None:
        default_bar = await BarbellRepository().get_default()
        if default_bar is None:
            echo_error("No default barbell. Add one with 'percent-lift barbell add'.")
            raise click.exceptions.Exit(1)
        barbell_id = default_bar.id

    profile = ExerciseProfile(
        name=name,
        max_weight=max_weight,
        weight_increment=increment if increment is not None else settings.default_weight_increment,
        auto_progression=settings.auto_progression_default and not manual,
        default_rest_seconds=rest,
        barbell_id=barbell_id,
    )
    exercise_id = await ExerciseRepository().create(profile)
    echo_success(f"Added {name} (ID: {exercise_id})")


@exercise.command("list")
@async_command
async def list_exercises():
    """List all exercises."""
    settings = await SettingsRepository().get_all()
    exercises = await ExerciseRepository().list_all()
    if not exercises:
        echo_info("No exercises yet. Add one with 'percent-lift exercise add'")
        return

    rows = [
        [
            str(e.id),
            e.name,
            f"{e.max_weight:g} {settings.weight_unit}",
            f"{e.weight_increment:g}",
            f"{e.equipment_baseline:g}" if e.equipment_baseline is not None else "-",
            "auto" if e.auto_progression else "manual",
        ]
        for e in exercises
    ]
    click.echo()
    click.echo(format_table(["ID", "Name", "Max", "Increment", "Bar", "Progression"], rows))


@exercise.command("show")
@click.argument("ref")
@click.pass_context
@async_command
async def show(ctx, ref: str):
    """Show one exercise by ID or name."""
    found = await resolve_exercise(ref)
    if found is None:
        echo_error(f"Exercise '{ref}' not found")
        ctx.exit(1)

    settings = await SettingsRepository().get_all()
    click.echo(found.get_summary(settings.weight_unit))
    rest = found.default_rest_seconds
    click.echo(f"  Rest: {rest if rest is not None else settings.default_rest_time}s")


@exercise.command("set-max")
@click.argument("ref")
@click.argument("max_weight", type=float)
@click.pass_context
@async_command
async def set_max(ctx, ref: str, max_weight: float):
    """Set an exercise's max weight by hand."""
    found = await resolve_exercise(ref)
    if found is None:
        echo_error(f"Exercise '{ref}' not found")
        ctx.exit(1)

    await ExerciseRepository().update_max_weight(found.id, max_weight)
    echo_success(f"{found.name}: max {found.max_weight:g} -> {max_weight:g}")


@exercise.command("delete")
@click.argument("ref")
@click.confirmation_option(prompt="Delete this exercise?")
@click.pass_context
@async_command
async def delete(ctx, ref: str):
    """Delete an exercise that no routine or workout uses."""
    found = await resolve_exercise(ref)
    if found is None:
        echo_error(f"Exercise '{ref}' not found")
        ctx.exit(1)

    await ExerciseRepository().delete(found.id)
    echo_success(f"Deleted {found.name}")
