"""Program model: a rotation of routines."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ProgramKind(str, Enum):
    """How a program advances."""

    CONTINUOUS = "continuous"  # cycles through its routines forever
    FINITE = "finite"  # ends after total_workouts workouts


@dataclass
class Program:
    """Tracks which routine comes next and when the program is done."""

    name: str
    kind: ProgramKind
    routine_ids: list[int] = field(default_factory=list)
    total_workouts: int | None = None
    current_position: int = 0
    is_active: bool = False
    completed_at: datetime | None = None
    id: int | None = None

    def __post_init__(self) -> None:
        if self.kind == ProgramKind.FINITE and not self.total_workouts:
            raise ValueError("A finite program needs total_workouts")

    @property
    def is_complete(self) -> bool:
        if self.kind == ProgramKind.CONTINUOUS:
            return False
        return self.current_position >= (self.total_workouts or 0)

    def next_routine_id(self) -> int | None:
        """Routine for the current position, or None if there are none."""
        if not self.routine_ids:
            return None
        return self.routine_ids[self.current_position % len(self.routine_ids)]

    def advance(self, now: datetime | None = None) -> int:
        """Move to the next workout.

        Returns:
            The new position
        """
        if not self.routine_ids:
            return self.current_position

        if self.kind == ProgramKind.CONTINUOUS:
            self.current_position = (self.current_position + 1) % len(self.routine_ids)
        else:
            self.current_position += 1
            if self.is_complete:
                self.is_active = False
                self.completed_at = now or datetime.now()
        return self.current_position

    def step_back(self) -> int:
        """Undo one advance, reopening the program if it had completed."""
        if self.current_position <= 0:
            return 0
        self.current_position -= 1
        if self.completed_at is not None:
            self.completed_at = None
            self.is_active = True
        return self.current_position

    def get_progress_display(self) -> str:
        if self.kind == ProgramKind.CONTINUOUS:
            return f"Position {self.current_position + 1} of {len(self.routine_ids)} (continuous)"
        return f"Workout {min(self.current_position, self.total_workouts or 0)} of {self.total_workouts}"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "routine_ids": self.routine_ids,
            "total_workouts": self.total_workouts,
            "current_position": self.current_position,
            "is_active": self.is_active,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
