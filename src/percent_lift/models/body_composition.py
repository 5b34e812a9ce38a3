"""Body composition models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True)
class BodyFatInput:
    """Circumference measurements for the US Navy method (imperial)."""

    gender: Gender
    height_inches: float
    weight_lbs: float
    waist_inches: float
    neck_inches: float
    hip_inches: float | None = None  # required for female


@dataclass(frozen=True)
class BodyFatResult:
    """Calculated metrics, each rounded to one decimal place."""

    body_fat_percent: float
    lean_mass: float
    fat_mass: float
    bmi: float

    def to_dict(self) -> dict:
        return {
            "body_fat_percent": self.body_fat_percent,
            "lean_mass": self.lean_mass,
            "fat_mass": self.fat_mass,
            "bmi": self.bmi,
        }


@dataclass
class BodyCompositionEntry:
    """A logged body measurement with whatever metrics could be derived."""

    weight: float
    waist: float | None = None
    neck: float | None = None
    hip: float | None = None
    body_fat_percent: float | None = None
    bmi: float | None = None
    lean_mass: float | None = None
    recorded_at: datetime | None = None
    id: int | None = None

    def to_dict(self) -> dict:
        return {
            "weight": self.weight,
            "waist": self.waist,
            "neck": self.neck,
            "hip": self.hip,
            "body_fat_percent": self.body_fat_percent,
            "bmi": self.bmi,
            "lean_mass": self.lean_mass,
            "recorded_at": self.recorded_at.isoformat() if self.recorded_at else None,
        }
