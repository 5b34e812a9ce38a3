"""Routine models: exercises with a planned set scheme."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .exercise import ExerciseProfile


class WeightKind(str, Enum):
    """How a planned set expresses its load."""

    PERCENTAGE = "percentage"  # weight_value is a percentage of max
    FIXED = "fixed"  # weight_value is an absolute weight
    BAR = "bar"  # just the bar, weight_value ignored


@dataclass(frozen=True)
class SetPlan:
    """One planned set of a routine. Immutable once authored."""

    weight_kind: WeightKind
    weight_value: float
    target_reps: int
    rest_seconds_override: int | None = None

    def __post_init__(self) -> None:
        if self.target_reps <= 0:
            raise ValueError("target_reps must be positive")
        if self.weight_value < 0:
            raise ValueError("weight_value must be non-negative")
        if self.rest_seconds_override is not None and self.rest_seconds_override < 0:
            raise ValueError("rest_seconds_override must be non-negative")

    def to_dict(self) -> dict:
        return {
            "weight_kind": self.weight_kind.value,
            "weight_value": self.weight_value,
            "target_reps": self.target_reps,
            "rest_seconds_override": self.rest_seconds_override,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SetPlan":
        return cls(
            weight_kind=WeightKind(data["weight_kind"]),
            weight_value=data.get("weight_value", 0),
            target_reps=data["target_reps"],
            rest_seconds_override=data.get("rest_seconds_override"),
        )

    def describe(self) -> str:
        """Short notation, e.g. ``80%x5``, ``135x5`` or ``barx10``."""
        if self.weight_kind == WeightKind.PERCENTAGE:
            load = f"{self.weight_value:g}%"
        elif self.weight_kind == WeightKind.FIXED:
            load = f"{self.weight_value:g}"
        else:
            load = "bar"
        text = f"{load}x{self.target_reps}"
        if self.rest_seconds_override is not None:
            text += f"@{self.rest_seconds_override}"
        return text


_SET_PATTERN = re.compile(
    r"^(?:(?P<sets>\d+)\*)?"
    r"(?P<load>bar|\d+(?:\.\d+)?%?)"
    r"\s*x\s*(?P<reps>\d+)"
    r"(?:@(?P<rest>\d+))?$",
    re.IGNORECASE,
)


def parse_set_plans(text: str) -> list[SetPlan]:
    """Parse a comma-separated set scheme.

    Each item is ``[N*]LOADxREPS[@REST]`` where LOAD is ``60%``, ``135`` or
    ``bar``. ``3*80%x5`` expands to three identical sets.

    Examples:
        >>> [p.describe() for p in parse_set_plans("bar x10, 60%x5, 2*100%x5@180")]
        ['barx10', '60%x5', '100%x5@180', '100%x5@180']

    Raises:
        ValueError: If an item does not match the notation
    """
    plans: list[SetPlan] = []
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        match = _SET_PATTERN.match(item)
        if match is None:
            raise ValueError(f"Invalid set format: {item}")

        load = match.group("load").lower()
        if load == "bar":
            kind, value = WeightKind.BAR, 0.0
        elif load.endswith("%"):
            kind, value = WeightKind.PERCENTAGE, float(load[:-1])
        else:
            kind, value = WeightKind.FIXED, float(load)

        rest = match.group("rest")
        plan = SetPlan(
            weight_kind=kind,
            weight_value=value,
            target_reps=int(match.group("reps")),
            rest_seconds_override=int(rest) if rest is not None else None,
        )
        plans.extend([plan] * int(match.group("sets") or 1))
    return plans


@dataclass
class RoutineExercise:
    """An exercise within a routine together with its planned sets."""

    exercise: ExerciseProfile
    sets: list[SetPlan]
    id: int | None = None

    def to_dict(self) -> dict:
        return {
            "exercise_id": self.exercise.id,
            "sets": [s.to_dict() for s in self.sets],
        }


@dataclass
class Routine:
    """A named, ordered list of exercises."""

    name: str
    exercises: list[RoutineExercise] = field(default_factory=list)
    id: int | None = None
    created_at: datetime | None = None

    def get_summary(self) -> str:
        """Generate a summary of the routine."""
        lines = [f"Routine: {self.name}"]
        for entry in self.exercises:
            scheme = ", ".join(s.describe() for s in entry.sets)
            lines.append(f"  - {entry.exercise.name}: {scheme}")
        return "\n".join(lines)
