"""Equipment commands: barbells, plates and the bar-loading calculators."""

import click

from ..calculations.plates import calculate_plates, format_plate_calculation
from ..calculations.weights import generate_warmup_sets
from ..db import BarbellRepository, PlateInventoryRepository, SettingsRepository
from ..formatting import format_weight
from ..models.equipment import STANDARD_PLATE_SETS
from ..models.exercise import Barbell
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_table,
    resolve_exercise,
)


@click.group()
@click.pass_context
def barbell(ctx):
    """Manage bars and implements."""
    ensure_initialized(ctx)


@barbell.command("add")
@click.argument("name")
@click.argument("weight", type=float)
@click.option("--default", "is_default", is_flag=True, help="Make this the default barbell")
@async_command
async def add_barbell(name: str, weight: float, is_default: bool):
    """Add a barbell."""
    barbell_id = await BarbellRepository().create(Barbell(name=name, weight=weight, is_default=is_default))
    echo_success(f"Added {name} (ID: {barbell_id})")


@barbell.command("list")
@async_command
async def list_barbells():
    """List barbells."""
    bars = await BarbellRepository().list_all()
    if not bars:
        echo_info("No barbells yet. Add one with 'percent-lift barbell add'")
        return

    rows = [[str(b.id), b.name, f"{b.weight:g}", "yes" if b.is_default else ""] for b in bars]
    click.echo()
    click.echo(format_table(["ID", "Name", "Weight", "Default"], rows))


@click.group()
@click.pass_context
def plates(ctx):
    """Manage your plate inventory and work out bar loading."""
    ensure_initialized(ctx)


@plates.command("show")
@async_command
async def show_plates():
    """Show the plate inventory (total plates, not pairs)."""
    entries = await PlateInventoryRepository().list_all()
    if not entries:
        echo_info("No plates. Add some with 'percent-lift plates set'")
        return

    rows = [[f"{e.plate_weight:g}", str(e.count), str(e.pairs)] for e in entries]
    click.echo()
    click.echo(format_table(["Plate", "Count", "Pairs"], rows))


@plates.command("set")
@click.argument("plate_weight", type=float)
@click.argument("count", type=int)
@async_command
async def set_plates(plate_weight: float, count: int):
    """Set how many plates of a size you own (0 removes the size)."""
    repo = PlateInventoryRepository()
    if count == 0:
        await repo.remove(plate_weight)
        echo_success(f"Removed {plate_weight:g} plates")
        return

    await repo.set_count(plate_weight, count)
    if count % 2:
        echo_warning("Odd plate count: the last plate cannot be paired and will not be used")
    echo_success(f"{plate_weight:g} plates: {count}")


@plates.command("preset")
@click.argument("name", type=click.Choice(sorted(STANDARD_PLATE_SETS)))
@async_command
async def preset(name: str):
    """Replace the inventory with a standard plate set."""
    await PlateInventoryRepository().replace_all(STANDARD_PLATE_SETS[name])
    echo_success(f"Plate inventory set to {name}")


@plates.command("reset")
@async_command
async def reset():
    """Restore the default inventory."""
    await PlateInventoryRepository().reset_to_defaults()
    echo_success("Plate inventory reset to defaults")


@plates.command("calc")
@click.argument("target_weight", type=float)
@click.option("--bar", "bar_weight", type=float, help="Bar weight (default barbell or settings)")
@async_command
async def calc(target_weight: float, bar_weight: float | None):
    """Work out the plates for a target weight."""
    settings = await SettingsRepository().get_all()
    if bar_weight is None:
        default_bar = await BarbellRepository().get_default()
        bar_weight = default_bar.weight if default_bar else settings.default_bar_weight

    inventory = await PlateInventoryRepository().as_inventory()
    plan = calculate_plates(target_weight, bar_weight, inventory)
    unit = settings.weight_unit

    click.echo(format_plate_calculation(plan))
    if plan.is_exact:
        echo_success(f"Total: {format_weight(plan.achievable_weight, unit)}")
    else:
        echo_warning(
            f"Closest loadable: {format_weight(plan.achievable_weight, unit)} "
            f"(target {format_weight(target_weight, unit)})"
        )


@click.command()
@click.argument("ref")
@click.pass_context
@async_command
async def warmup(ctx, ref: str):
    """Show warm-up weights for an exercise, from the empty bar to its max."""
    ensure_initialized(ctx)
    found = await resolve_exercise(ref)
    if found is None:
        echo_error(f"Exercise '{ref}' not found")
        ctx.exit(1)

    settings = await SettingsRepository().get_all()
    bar_weight = found.equipment_baseline
    if bar_weight is None:
        bar_weight = settings.default_bar_weight

    inventory = await PlateInventoryRepository().as_inventory()
    click.echo(f"Warm-up for {found.name} (max {found.max_weight:g}):")
    for weight in generate_warmup_sets(found.max_weight, found.weight_increment, bar_weight):
        plan = calculate_plates(weight, bar_weight, inventory)
        click.echo(f"  {format_weight(weight, settings.weight_unit):>10}  {format_plate_calculation(plan)}")
