"""Percentage-of-max weight resolution.

All functions are unit-agnostic: they work the same for pounds and kilograms
as long as the increment is expressed in the same unit as the weights.
"""

import math
from collections.abc import Iterator

DEFAULT_MIN_WEIGHT = 45.0
WARMUP_PERCENTAGES = (0, 60, 70, 80, 90, 100)

# Absorbs float noise such as 157.49999999999997 so ties still round up
_TIE_EPSILON = 1e-9


def round_to_increment(weight: float, increment: float) -> float:
    """Round a weight to the nearest multiple of ``increment``.

    Ties round away from zero (133 with increment 5 becomes 135). A zero or
    negative increment means "no rounding" and returns ``weight`` unchanged.
    """
    if increment <= 0:
        return weight
    steps = math.floor(abs(weight) / increment + 0.5 + _TIE_EPSILON)
    return math.copysign(round(steps * increment, 6), weight)


def calculate_weight_from_percentage(
    max_weight: float,
    percentage: float,
    increment: float,
    min_weight: float = DEFAULT_MIN_WEIGHT,
) -> float:
    """Resolve a percentage of max into a loadable weight.

    Args:
        max_weight: The exercise's max weight (100%)
        percentage: Percentage to resolve, e.g. 60 for 60%
        increment: Smallest loadable step (2.5, 5, ...)
        min_weight: Floor for the result, normally the bar weight

    Returns:
        The rounded weight, never below ``min_weight``
    """
    if percentage <= 0:
        return min_weight

    if percentage >= 100:
        return max(round_to_increment(max_weight, increment), min_weight)

    raw_weight = max_weight * percentage / 100
    return max(round_to_increment(raw_weight, increment), min_weight)


def calculate_percentage(weight: float, max_weight: float) -> float:
    """Percentage of max that ``weight`` represents. Not clamped at 100."""
    if max_weight <= 0:
        return 0.0
    return weight / max_weight * 100


def generate_warmup_sets(
    max_weight: float,
    increment: float,
    bar_weight: float = DEFAULT_MIN_WEIGHT,
) -> Iterator[float]:
    """Yield warm-up weights from the empty bar up to the working weight.

    Walks bar, 60%, 70%, 80%, 90% and 100% of max, skipping any weight that
    rounds to the same value as the one before it.
    """
    previous: float | None = None
    for pct in WARMUP_PERCENTAGES:
        if pct == 0:
            weight = bar_weight
        else:
            weight = calculate_weight_from_percentage(max_weight, pct, increment, bar_weight)

        if weight != previous:
            yield weight
            previous = weight
