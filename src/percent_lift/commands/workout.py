"""Workout commands: run a session and review history."""

import asyncio

import click

from ..calculations.plates import format_plate_calculation
from ..calculations.progression import calculate_completion_rate
from ..config import get_config
from ..db import (
    GoalRepository,
    PlateInventoryRepository,
    ProgramRepository,
    RoutineRepository,
    SettingsRepository,
    WorkoutRepository,
)
from ..formatting import format_duration, format_rest_time, format_set_weight, format_workout_duration
from ..models.routine import Routine
from ..models.workout import SessionStatus
from ..session import ConsoleFeedback, SessionEngine
from .base import async_command, echo_error, echo_info, echo_success, ensure_initialized, format_table


@click.group()
@click.pass_context
def workout(ctx):
    """Run workouts and review your history."""
    ensure_initialized(ctx)


async def _pick_routine(ref: str | None) -> tuple[Routine | None, int | None]:
    """Routine by ID or name, or the active program's next routine."""
    routines = RoutineRepository()
    if ref is None:
        active = await ProgramRepository().get_active()
        if active is None or active.next_routine_id() is None:
            return None, None
        return await routines.get(active.next_routine_id()), active.id

    if ref.isdigit():
        found = await routines.get(int(ref))
        if found is not None:
            return found, None
    for candidate in await routines.list_all():
        if candidate.name.lower() == ref.lower():
            return candidate, None
    return None, None


async def _wait_for_rest(engine: SessionEngine, tick: float) -> None:
    while engine.state == SessionStatus.RESTING:
        remaining = engine.rest_timer.remaining_seconds
        click.echo(f"\r  Rest {format_duration(remaining)} ", nl=False)
        await asyncio.sleep(tick)
    click.echo()


@workout.command("run")
@click.argument("routine_ref", required=False)
@click.option("--auto", is_flag=True, help="Log every set at its target without prompting")
@click.option("--no-rest", is_flag=True, help="Do not wait out rest periods")
@click.pass_context
@async_command
async def run(ctx, routine_ref: str | None, auto: bool, no_rest: bool):
    """Run a workout from a routine (default: the active program's next routine)."""
    selected, program_id = await _pick_routine(routine_ref)
    if selected is None:
        if routine_ref is None:
            echo_error("No routine given and no active program")
        else:
            echo_error(f"Routine '{routine_ref}' not found")
        ctx.exit(1)

    config = get_config()
    settings_repo = SettingsRepository()
    settings = await settings_repo.get_all()
    feedback = ConsoleFeedback(
        audio=settings.rest_timer_audio,
        haptic=settings.rest_timer_haptic,
        notifications=settings.notifications_enabled,
    )
    engine = SessionEngine(
        WorkoutRepository(),
        settings_repo,
        feedback=feedback,
        tick_interval=config.rest_tick_seconds,
    )
    inventory = await PlateInventoryRepository().as_inventory()
    unit = settings.weight_unit

    session = await engine.start(selected, program_id=program_id)
    click.echo(click.style(f"\n{session.routine_name}", bold=True))

    for exercise_index, entry in enumerate(session.exercises):
        engine.set_current_exercise(exercise_index)
        click.echo(click.style(f"\n{entry.exercise.name}", bold=True) + f" (max {entry.exercise.max_weight:g})")

        for set_index, planned in enumerate(entry.sets):
            engine.set_current_set(set_index)
            plan = engine.plates_for(exercise_index, set_index, inventory)
            target = format_set_weight(planned.target_weight, planned.percentage_of_max, unit)
            click.echo(f"  Set {set_index + 1}: {target} x {planned.target_reps}  [{format_plate_calculation(plan)}]")

            if auto:
                weight, reps = planned.target_weight, planned.target_reps
            else:
                weight = click.prompt("    Weight", type=float, default=planned.target_weight)
                reps = click.prompt("    Reps", type=int, default=planned.target_reps)

            done = await engine.complete_set(exercise_index, set_index, weight, reps)
            if engine.state == SessionStatus.RESTING:
                if no_rest:
                    engine.skip_rest_timer()
                else:
                    click.echo(f"  Resting {format_rest_time(done.rest_seconds)}")
                    await _wait_for_rest(engine, config.rest_tick_seconds)

    if not auto and not click.confirm("\nFinish and save this workout?", default=True):
        await engine.cancel_workout()
        echo_info("Workout discarded")
        return

    results = await engine.complete_workout()
    echo_success(f"Workout saved ({format_workout_duration(session.started_at, session.completed_at)})")
    for result in results:
        if result.should_progress:
            click.echo(
                click.style("  + ", fg="green")
                + f"{result.exercise_name}: {result.previous_max:g} -> {result.new_max_weight:g}"
            )
        else:
            click.echo(f"  = {result.exercise_name}: {result.reason}")

    active_goal = await GoalRepository().check_and_update_streak()
    if active_goal is not None:
        click.echo(f"  Goal streak: {active_goal.current_streak} week(s)")


@workout.command("history")
@click.option("--limit", "-n", type=int, default=10, show_default=True)
@async_command
async def history(limit: int):
    """Show completed workouts, newest first."""
    workouts = await WorkoutRepository().history(limit)
    if not workouts:
        echo_info("No completed workouts yet")
        return

    rows = [
        [
            str(w.id),
            w.completed_at.strftime("%Y-%m-%d"),
            w.routine_name,
            format_workout_duration(w.started_at, w.completed_at),
            f"{calculate_completion_rate(w.all_sets):.0f}%",
            f"{w.total_volume:g}",
        ]
        for w in workouts
    ]
    click.echo()
    click.echo(format_table(["ID", "Date", "Routine", "Duration", "Success", "Volume"], rows))
