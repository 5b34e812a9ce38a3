"""Bar loading: which plates go on each side for a target weight."""

import math
from collections.abc import Iterable, Mapping

from ..models.equipment import PlateInventoryEntry, PlateLoadPlan

_FLOAT_TOLERANCE = 1e-9

PlateInventory = Mapping[float, int] | Iterable[PlateInventoryEntry]


def _usable_plates(inventory: PlateInventory) -> list[tuple[float, int]]:
    """Merge the inventory into (weight, total count), heaviest first.

    Sizes with fewer than two plates cannot be loaded symmetrically and are
    dropped, as are non-positive weights.
    """
    counts: dict[float, int] = {}
    if isinstance(inventory, Mapping):
        items = inventory.items()
    else:
        items = ((entry.plate_weight, entry.count) for entry in inventory)

    for weight, count in items:
        weight = float(weight)
        counts[weight] = counts.get(weight, 0) + count

    return sorted(
        ((weight, count) for weight, count in counts.items() if count >= 2 and weight > 0),
        key=lambda item: item[0],
        reverse=True,
    )


def calculate_plates(
    target_weight: float,
    bar_weight: float,
    inventory: PlateInventory,
) -> PlateLoadPlan:
    """Work out plates per side for ``target_weight`` (bar included).

    Uses a greedy pass from the heaviest plate down. This is not a globally
    optimal search: with some inventories it misses an exact combination that
    skipping a large plate would have found. The greedy result is the
    supported behaviour.

    Args:
        target_weight: Total weight wanted on the bar, bar included
        bar_weight: Weight of the empty bar
        inventory: Plate weight -> total plate count, or inventory entries

    Returns:
        PlateLoadPlan whose ``achievable_weight`` never exceeds the target
    """
    if target_weight <= bar_weight:
        return PlateLoadPlan(
            plates_per_side={},
            achievable_weight=bar_weight,
            is_exact=target_weight == bar_weight,
            bar_weight=bar_weight,
        )

    remaining = (target_weight - bar_weight) / 2
    plates_per_side: dict[float, int] = {}

    for weight, count in _usable_plates(inventory):
        available_pairs = count // 2
        if weight > remaining + _FLOAT_TOLERANCE:
            continue

        use = min(math.floor(remaining / weight + _FLOAT_TOLERANCE), available_pairs)
        if use > 0:
            plates_per_side[weight] = use
            remaining -= use * weight

    per_side = sum(weight * count for weight, count in plates_per_side.items())
    achievable = round(bar_weight + per_side * 2, 6)

    return PlateLoadPlan(
        plates_per_side=plates_per_side,
        achievable_weight=achievable,
        is_exact=math.isclose(achievable, target_weight, abs_tol=_FLOAT_TOLERANCE),
        bar_weight=bar_weight,
    )


def get_plate_loading_order(plan: PlateLoadPlan) -> list[float]:
    """Flat list of plates for one side in loading order, heaviest first."""
    order: list[float] = []
    for weight, count in plan.plates_per_side.items():
        order.extend([weight] * count)
    return order


def format_plate_calculation(plan: PlateLoadPlan) -> str:
    """Human-readable plan, e.g. ``"2x45 + 1x25 per side"``."""
    if not plan.plates_per_side:
        return "Just the bar"

    parts = [f"{count}x{weight:g}" for weight, count in plan.plates_per_side.items()]
    return " + ".join(parts) + " per side"
