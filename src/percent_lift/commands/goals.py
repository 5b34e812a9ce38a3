"""Weekly goal commands."""

import click

from ..db import GoalRepository
from ..models.goal import WEEKDAY_NAMES, Goal, format_weekdays, parse_weekdays
from .base import async_command, echo_info, echo_success, echo_warning, ensure_initialized


@click.group()
@click.pass_context
def goal(ctx):
    """Set a weekly training goal and track your streak."""
    ensure_initialized(ctx)


@goal.command("set")
@click.option("--per-week", "workouts_per_week", type=int, required=True, help="Workouts per week")
@click.option("--days", required=True, help="Planned days, e.g. mon,wed,fri")
@click.option("--reminder", "reminder_time", help="Reminder time, HH:MM")
@click.option("--weeks", "total_weeks", type=int, help="Length of the goal; omit for no end")
@async_command
async def set_goal(workouts_per_week: int, days: str, reminder_time: str | None, total_weeks: int | None):
    """Start a new goal, replacing the active one."""
    new_goal = Goal(
        workouts_per_week=workouts_per_week,
        scheduled_days=parse_weekdays(days),
        reminder_time=reminder_time,
        total_weeks=total_weeks,
    )
    if len(new_goal.scheduled_days) < workouts_per_week:
        echo_warning(f"Only {len(new_goal.scheduled_days)} day(s) planned for {workouts_per_week} workouts")

    saved = await GoalRepository().create(new_goal)
    echo_success(f"Goal set: {saved.get_summary()}")


@goal.command("show")
@async_command
async def show():
    """Show this week's progress against the goal."""
    repo = GoalRepository()
    active = await repo.get_active()
    if active is None:
        echo_info("No active goal. Set one with 'percent-lift goal set'")
        return

    progress = await repo.get_progress()
    click.echo(click.style(active.get_summary(), bold=True))
    click.echo(f"  This week: {progress.workouts_this_week}/{progress.workouts_target} workouts")
    click.echo(f"  Streak:    {progress.streak_weeks} week(s)")
    status = click.style("on track", fg="green") if progress.is_on_track else click.style("behind", fg="yellow")
    click.echo(f"  Status:    {status}")
    if await repo.is_today_scheduled():
        click.echo("  Today is a training day")
    elif progress.next_scheduled_day is not None:
        click.echo(f"  Next:      {WEEKDAY_NAMES[progress.next_scheduled_day]}")


@goal.command("clear")
@async_command
async def clear():
    """Stop tracking the active goal (it is kept, not deleted)."""
    repo = GoalRepository()
    active = await repo.get_active()
    if active is None:
        echo_info("No active goal")
        return
    await repo.deactivate(active.id)
    echo_success(f"Goal on {format_weekdays(active.scheduled_days)} cleared")
