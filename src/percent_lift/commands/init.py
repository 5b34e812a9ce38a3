"""Initialize project command."""

import click

from ..db import BarbellRepository, get_db_path, init_db
from ..models.exercise import Barbell
from .base import async_command, echo_info, echo_success


@click.command()
@click.option("--bar-weight", type=float, default=45.0, show_default=True, help="Weight of your main barbell")
@async_command
async def init(bar_weight: float):
    """Initialize the percent-lift database.

    Creates the data directory and the SQLite database with default settings,
    a standard plate inventory and a default barbell.
    """
    db_path = get_db_path()
    echo_info(f"Initializing percent-lift in {db_path.parent}")

    await init_db(db_path)
    echo_success("Database initialized")

    barbells = BarbellRepository(db_path)
    if await barbells.get_default() is None:
        await barbells.create(Barbell(name="Barbell", weight=bar_weight, is_default=True))
        echo_success(f"Default barbell added ({bar_weight:g})")

    click.echo()
    click.echo("percent-lift is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Add exercises with their max weight:")
    click.echo('     percent-lift exercise add "Squat" 225 --bar')
    click.echo()
    click.echo("  2. Build a routine:")
    click.echo('     percent-lift routine create "Day A" -e "Squat=bar x10, 60%x5, 3*100%x5"')
    click.echo()
    click.echo("  3. Train:")
    click.echo('     percent-lift workout run "Day A"')
