"""Body composition commands."""

from dataclasses import replace
from datetime import datetime

import click

from ..calculations.body_fat import (
    calculate_us_navy_body_fat,
    convert_metric_to_imperial,
    get_bmi_category,
    get_body_fat_category,
)
from ..db import BodyCompositionRepository, SettingsRepository
from ..errors import RecordNotFound
from ..models.body_composition import BodyCompositionEntry, BodyFatInput, Gender
from .base import async_command, echo_info, echo_success, ensure_initialized, format_table


@click.group()
def bodycomp():
    """Estimate and track body composition (US Navy method)."""
    pass


@bodycomp.command("calc")
@click.option("--gender", type=click.Choice([g.value for g in Gender]), required=True)
@click.option("--height", type=float, required=True, help="Height (in, or cm with --metric)")
@click.option("--weight", type=float, required=True, help="Body weight (lbs, or kg with --metric)")
@click.option("--waist", type=float, required=True)
@click.option("--neck", type=float, required=True)
@click.option("--hip", type=float, help="Required for female")
@click.option("--metric", is_flag=True, help="Inputs are in cm and kg")
@async_command
async def calc(
    gender: str,
    height: float,
    weight: float,
    waist: float,
    neck: float,
    hip: float | None,
    metric: bool,
):
    """Estimate body fat from measurements without saving anything."""
    if metric:
        converted = convert_metric_to_imperial(height, weight, waist, neck, hip)
    else:
        converted = {
            "height_inches": height,
            "weight_lbs": weight,
            "waist_inches": waist,
            "neck_inches": neck,
            "hip_inches": hip,
        }

    result = calculate_us_navy_body_fat(BodyFatInput(gender=Gender(gender), **converted))
    category = get_body_fat_category(result.body_fat_percent, Gender(gender))

    click.echo(f"Body fat:  {result.body_fat_percent}% ({category})")
    click.echo(f"Lean mass: {result.lean_mass} lbs")
    click.echo(f"Fat mass:  {result.fat_mass} lbs")
    click.echo(f"BMI:       {result.bmi} ({get_bmi_category(result.bmi)})")


@bodycomp.command("log")
@click.argument("weight", type=float)
@click.option("--waist", type=float)
@click.option("--neck", type=float)
@click.option("--hip", type=float)
@click.pass_context
@async_command
async def log(ctx, weight: float, waist: float | None, neck: float | None, hip: float | None):
    """Log a measurement using the gender and height from settings."""
    ensure_initialized(ctx)
    entry = await BodyCompositionRepository().create(
        BodyCompositionEntry(weight=weight, waist=waist, neck=neck, hip=hip)
    )
    echo_success(f"Logged {weight:g} (ID: {entry.id})")
    await _echo_metrics(entry)


@bodycomp.command("edit")
@click.argument("entry_id", type=int)
@click.option("--weight", type=float)
@click.option("--waist", type=float)
@click.option("--neck", type=float)
@click.option("--hip", type=float)
@click.pass_context
@async_command
async def edit(
    ctx,
    entry_id: int,
    weight: float | None,
    waist: float | None,
    neck: float | None,
    hip: float | None,
):
    """Correct a logged measurement; derived metrics are recalculated."""
    ensure_initialized(ctx)
    repo = BodyCompositionRepository()
    entry = await repo.get(entry_id)
    if entry is None:
        raise RecordNotFound("Body composition entry", entry_id)

    changes = {
        name: value
        for name, value in (("weight", weight), ("waist", waist), ("neck", neck), ("hip", hip))
        if value is not None
    }
    if not changes:
        echo_info("Nothing to change")
        return

    entry = await repo.update(replace(entry, **changes))
    echo_success(f"Updated entry {entry_id}")
    await _echo_metrics(entry)


@bodycomp.command("history")
@click.option("--limit", "-n", type=int, default=10, show_default=True)
@click.option("--since", type=click.DateTime(["%Y-%m-%d"]), help="First day to include")
@click.option("--until", type=click.DateTime(["%Y-%m-%d"]), help="Last day to include")
@click.pass_context
@async_command
async def history(ctx, limit: int, since: datetime | None, until: datetime | None):
    """Show logged measurements, newest first."""
    ensure_initialized(ctx)
    repo = BodyCompositionRepository()
    if since or until:
        end = (until or datetime.max).replace(hour=23, minute=59, second=59, microsecond=999999)
        entries = await repo.get_in_range(since or datetime.min, end)
    else:
        entries = await repo.list_all()
    entries = entries[:limit]
    if not entries:
        echo_info("No measurements logged yet")
        return

    def fmt(value: float | None) -> str:
        return f"{value:g}" if value is not None else "-"

    rows = [
        [
            str(e.id),
            e.recorded_at.strftime("%Y-%m-%d") if e.recorded_at else "N/A",
            fmt(e.weight),
            fmt(e.body_fat_percent),
            fmt(e.lean_mass),
            fmt(e.bmi),
        ]
        for e in entries
    ]
    click.echo()
    click.echo(format_table(["ID", "Date", "Weight", "Body fat %", "Lean mass", "BMI"], rows))


async def _echo_metrics(entry: BodyCompositionEntry) -> None:
    settings = await SettingsRepository().get_all()
    if entry.body_fat_percent is not None:
        category = get_body_fat_category(entry.body_fat_percent, settings.gender)
        click.echo(f"  Body fat {entry.body_fat_percent}% ({category}), lean mass {entry.lean_mass}")
    elif entry.waist and entry.neck:
        echo_info("Body fat could not be estimated from these measurements; raw values saved")
    if entry.bmi is not None:
        click.echo(f"  BMI {entry.bmi} ({get_bmi_category(entry.bmi)})")
