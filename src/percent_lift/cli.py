"""CLI entry point for percent-lift."""

import click

from .commands import (
    barbell,
    bodycomp,
    exercise,
    goal,
    init,
    plates,
    program,
    routine,
    serve,
    settings,
    warmup,
    workout,
)
from .config import get_config
from .logger import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="percent-lift")
@click.option("--log-level", help="Override the configured log level (e.g. DEBUG)")
def main(log_level: str | None):
    """percent-lift: percentage-based strength training.

    Program every lift as a percentage of its max, get the plates for each set,
    and let the max go up when you hit every top set.

    Example usage:

        # Initialize the database
        percent-lift init

        # Add an exercise and a routine
        percent-lift exercise add "Squat" 225 --bar
        percent-lift routine create "Day A" -e "Squat=bar x10, 60%x5, 3*100%x5"

        # Train
        percent-lift workout run "Day A"
    """
    configure_logging(log_level or get_config().log_level)


# Register commands
main.add_command(init)
main.add_command(settings)
main.add_command(exercise)
main.add_command(barbell)
main.add_command(plates)
main.add_command(warmup)
main.add_command(routine)
main.add_command(program)
main.add_command(bodycomp)
main.add_command(goal)
main.add_command(workout)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
