"""Program commands."""

import click

from ..db import ProgramRepository, RoutineRepository
from ..models.program import Program, ProgramKind
from .base import async_command, echo_error, echo_info, echo_success, ensure_initialized, format_table


@click.group()
@click.pass_context
def program(ctx):
    """Rotate through routines as a program."""
    ensure_initialized(ctx)


@program.command("create")
@click.argument("name")
@click.option("--routine", "-r", "routine_ids", type=int, multiple=True, required=True, help="Routine ID, in order")
@click.option("--workouts", "total_workouts", type=int, help="Total workouts; omit for a continuous program")
@click.option("--activate", is_flag=True, help="Make this the active program")
@click.pass_context
@async_command
async def create(ctx, name: str, routine_ids: tuple[int, ...], total_workouts: int | None, activate: bool):
    """Create a program from routines."""
    routines = RoutineRepository()
    for routine_id in routine_ids:
        if await routines.get(routine_id) is None:
            echo_error(f"Routine ID {routine_id} not found")
            ctx.exit(1)

    new_program = Program(
        name=name,
        kind=ProgramKind.FINITE if total_workouts else ProgramKind.CONTINUOUS,
        routine_ids=list(routine_ids),
        total_workouts=total_workouts,
        is_active=activate,
    )
    program_id = await ProgramRepository().create(new_program)
    echo_success(f"Created program {name} (ID: {program_id})")


@program.command("list")
@async_command
async def list_programs():
    """List programs."""
    programs = await ProgramRepository().list_all()
    if not programs:
        echo_info("No programs yet. Create one with 'percent-lift program create'")
        return

    rows = [
        [
            str(p.id),
            p.name,
            p.kind.value,
            p.get_progress_display(),
            "active" if p.is_active else ("complete" if p.is_complete else ""),
        ]
        for p in programs
    ]
    click.echo()
    click.echo(format_table(["ID", "Name", "Kind", "Progress", "Status"], rows))


@program.command("activate")
@click.argument("program_id", type=int)
@async_command
async def activate(program_id: int):
    """Make a program the active one."""
    activated = await ProgramRepository().activate(program_id)
    echo_success(f"{activated.name} is now active ({activated.get_progress_display()})")
