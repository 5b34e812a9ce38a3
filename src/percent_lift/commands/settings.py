"""User settings commands."""

import click

from ..db import SettingsRepository
from ..models.settings import AppSettings, format_setting
from .base import async_command, echo_error, echo_success, ensure_initialized, format_table


@click.group()
@click.pass_context
def settings(ctx):
    """View and change user settings (units, defaults, feedback)."""
    ensure_initialized(ctx)


@settings.command("show")
@async_command
async def show():
    """Show all settings."""
    current = await SettingsRepository().get_all()
    rows = [[key, format_setting(getattr(current, key))] for key in AppSettings.keys()]
    click.echo()
    click.echo(format_table(["Setting", "Value"], rows))


@settings.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
@async_command
async def set_setting(ctx, key: str, value: str):
    """Change a setting, e.g. ``percent-lift settings set default_rest_time 120``."""
    try:
        stored = await SettingsRepository().set(key, value)
    except KeyError:
        echo_error(f"Unknown setting '{key}'. Known: {', '.join(AppSettings.keys())}")
        ctx.exit(1)
    echo_success(f"{key} = {format_setting(stored)}")
