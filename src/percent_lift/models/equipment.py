"""Plate inventory and bar-loading models."""

from dataclasses import dataclass, field


@dataclass
class PlateInventoryEntry:
    """Physical plates of one size. ``count`` is total plates, not pairs."""

    plate_weight: float
    count: int
    id: int | None = None

    def __post_init__(self) -> None:
        if self.plate_weight <= 0:
            raise ValueError("plate_weight must be positive")
        if self.count < 0:
            raise ValueError("count must be non-negative")

    @property
    def pairs(self) -> int:
        return self.count // 2

    def to_dict(self) -> dict:
        return {"plate_weight": self.plate_weight, "count": self.count}


@dataclass
class PlateLoadPlan:
    """Plates to load on each side of the bar for one target weight.

    ``plates_per_side`` maps plate weight to count, largest plate first.
    Recomputed on demand and never stored.
    """

    plates_per_side: dict[float, int] = field(default_factory=dict)
    achievable_weight: float = 0.0
    is_exact: bool = False
    bar_weight: float = 0.0

    @property
    def weight_per_side(self) -> float:
        return sum(weight * count for weight, count in self.plates_per_side.items())

    def to_dict(self) -> dict:
        return {
            "plates_per_side": [
                {"weight": weight, "count": count}
                for weight, count in self.plates_per_side.items()
            ],
            "achievable_weight": self.achievable_weight,
            "is_exact": self.is_exact,
            "bar_weight": self.bar_weight,
        }


# Total plate counts (not pairs) for quick setup
DEFAULT_PLATE_INVENTORY: dict[float, int] = {
    45: 4,
    35: 2,
    25: 4,
    10: 4,
    5: 4,
    2.5: 4,
}

STANDARD_PLATE_SETS: dict[str, dict[float, int]] = {
    "home_basic_lb": {
        45: 4,
        25: 2,
        10: 2,
        5: 2,
        2.5: 2,
    },
    "home_full_lb": DEFAULT_PLATE_INVENTORY,
    "commercial_gym_lb": {
        45: 20,
        35: 8,
        25: 12,
        10: 12,
        5: 8,
        2.5: 8,
    },
    "home_basic_kg": {
        20: 4,
        10: 2,
        5: 2,
        2.5: 2,
        1.25: 2,
    },
    "home_full_kg": {
        20: 8,
        15: 4,
        10: 8,
        5: 8,
        2.5: 8,
        1.25: 4,
    },
}
