"""Display helpers for weights and durations."""

from datetime import datetime

from .calculations.body_fat import LBS_PER_KG


def format_weight_value(weight: float) -> str:
    """``135.0`` -> ``"135"``, ``132.5`` -> ``"132.5"``."""
    if weight % 1 == 0:
        return str(int(weight))
    return f"{weight:.1f}"


def format_weight(weight: float, unit: str = "lbs") -> str:
    return f"{format_weight_value(weight)} {unit}"


def format_set_weight(weight: float, percentage: float | None, unit: str = "lbs") -> str:
    """Weight with its percentage of max when it has one, e.g. ``"135 lbs (60%)"``."""
    if percentage is None:
        return format_weight(weight, unit)
    return f"{format_weight_value(weight)} {unit} ({percentage:g}%)"


def convert_weight(weight: float, from_unit: str, to_unit: str) -> float:
    """Convert between ``"lbs"`` and ``"kg"``."""
    if from_unit == to_unit:
        return weight
    if from_unit == "lbs" and to_unit == "kg":
        return weight / LBS_PER_KG
    if from_unit == "kg" and to_unit == "lbs":
        return weight * LBS_PER_KG
    raise ValueError(f"Unknown weight units: {from_unit} -> {to_unit}")


def format_duration(total_seconds: int) -> str:
    """``150`` -> ``"2:30"``."""
    minutes, seconds = divmod(int(total_seconds), 60)
    return f"{minutes}:{seconds:02d}"


def format_rest_time(total_seconds: int) -> str:
    """``45`` -> ``"45 sec"``, ``120`` -> ``"2 min"``, ``150`` -> ``"2:30"``."""
    if total_seconds < 60:
        return f"{total_seconds} sec"
    minutes, seconds = divmod(total_seconds, 60)
    if seconds == 0:
        return f"{minutes} min"
    return format_duration(total_seconds)


def format_workout_duration(started_at: datetime, completed_at: datetime) -> str:
    """Whole minutes between two timestamps: ``"45 min"``, ``"1 hr"``, ``"1 hr 5 min"``."""
    total_minutes = int((completed_at - started_at).total_seconds() // 60)
    if total_minutes < 60:
        return f"{total_minutes} min"
    hours, minutes = divmod(total_minutes, 60)
    if minutes == 0:
        return f"{hours} hr"
    return f"{hours} hr {minutes} min"
