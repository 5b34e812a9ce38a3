"""Exercise library models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Barbell:
    """A bar or implement whose weight is the floor of every load on it."""

    name: str
    weight: float
    is_default: bool = False
    id: int | None = None

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError("Barbell weight must be non-negative")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "weight": self.weight,
            "is_default": self.is_default,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "Barbell":
        return cls(
            id=id,
            name=data["name"],
            weight=data["weight"],
            is_default=data.get("is_default", False),
        )


@dataclass
class ExerciseProfile:
    """An exercise programmed around a known maximum weight.

    ``equipment_baseline`` is the weight of the bar the exercise is loaded on.
    It is not stored on the exercise itself; repositories fill it in from the
    linked barbell when the exercise is read.
    """

    name: str
    max_weight: float
    weight_increment: float = 5.0
    auto_progression: bool = True
    default_rest_seconds: int | None = None
    barbell_id: int | None = None
    equipment_baseline: float | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.max_weight <= 0:
            raise ValueError("max_weight must be positive")
        if self.weight_increment <= 0:
            raise ValueError("weight_increment must be positive")
        if self.default_rest_seconds is not None and self.default_rest_seconds < 0:
            raise ValueError("default_rest_seconds must be non-negative")

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "max_weight": self.max_weight,
            "weight_increment": self.weight_increment,
            "auto_progression": self.auto_progression,
            "default_rest_seconds": self.default_rest_seconds,
            "barbell_id": self.barbell_id,
            "equipment_baseline": self.equipment_baseline,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        id: int | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> "ExerciseProfile":
        """Create from dictionary."""
        return cls(
            id=id,
            name=data["name"],
            max_weight=data["max_weight"],
            weight_increment=data.get("weight_increment", 5.0),
            auto_progression=data.get("auto_progression", True),
            default_rest_seconds=data.get("default_rest_seconds"),
            barbell_id=data.get("barbell_id"),
            equipment_baseline=data.get("equipment_baseline"),
            created_at=created_at,
            updated_at=updated_at,
        )

    def get_summary(self, unit: str = "lbs") -> str:
        """One-line description for listings."""
        auto = "auto" if self.auto_progression else "manual"
        summary = f"{self.name}: max {self.max_weight:g} {unit}, +{self.weight_increment:g} ({auto})"
        if self.equipment_baseline is not None:
            summary += f", bar {self.equipment_baseline:g}"
        return summary
