"""Body composition from circumference measurements (US Navy method)."""

import math

from ..errors import InvalidMeasurement, MissingMeasurement
from ..models.body_composition import BodyFatInput, BodyFatResult, Gender

BODY_FAT_MIN = 2.0
BODY_FAT_MAX = 60.0

CM_PER_INCH = 2.54
LBS_PER_KG = 2.20462

# (upper bound exclusive, label); anything above the last bound is "Obese"
_BODY_FAT_CATEGORIES = {
    Gender.MALE: ((6, "Essential Fat"), (14, "Athletes"), (18, "Fitness"), (25, "Average")),
    Gender.FEMALE: ((14, "Essential Fat"), (21, "Athletes"), (25, "Fitness"), (32, "Average")),
}
_BMI_CATEGORIES = ((18.5, "Underweight"), (25, "Normal"), (30, "Overweight"))


def _round1(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def calculate_bmi(weight_lbs: float, height_inches: float) -> float:
    """Imperial BMI, rounded to one decimal place."""
    if weight_lbs <= 0 or height_inches <= 0:
        raise InvalidMeasurement("Weight and height must be positive numbers")
    return _round1(weight_lbs / (height_inches * height_inches) * 703)


def calculate_us_navy_body_fat(measurements: BodyFatInput) -> BodyFatResult:
    """Estimate body fat, lean mass, fat mass and BMI.

    Men:   86.010*log10(waist - neck) - 70.041*log10(height) + 36.76
    Women: 163.205*log10(waist + hip - neck) - 97.684*log10(height) - 78.387

    The estimate is clamped to 2-60%.

    Raises:
        InvalidMeasurement: If a measurement is non-positive or the waist is
            not larger than the neck
        MissingMeasurement: If a female calculation has no hip measurement
    """
    height = measurements.height_inches
    weight = measurements.weight_lbs
    waist = measurements.waist_inches
    neck = measurements.neck_inches

    if height <= 0 or weight <= 0 or waist <= 0 or neck <= 0:
        raise InvalidMeasurement("All measurements must be positive numbers")

    if waist <= neck:
        raise InvalidMeasurement("Waist must be larger than neck measurement")

    if measurements.gender == Gender.MALE:
        body_fat = 86.010 * math.log10(waist - neck) - 70.041 * math.log10(height) + 36.76
    else:
        hip = measurements.hip_inches
        if not hip or hip <= 0:
            raise MissingMeasurement("Hip measurement required for female body fat calculation")

        circumference = waist + hip - neck
        if circumference <= 0:
            raise InvalidMeasurement(
                "Invalid measurements: circumference calculation resulted in non-positive value"
            )
        body_fat = 163.205 * math.log10(circumference) - 97.684 * math.log10(height) - 78.387

    body_fat = max(BODY_FAT_MIN, min(BODY_FAT_MAX, body_fat))

    fat_mass = weight * body_fat / 100
    lean_mass = weight - fat_mass

    return BodyFatResult(
        body_fat_percent=_round1(body_fat),
        lean_mass=_round1(lean_mass),
        fat_mass=_round1(fat_mass),
        bmi=calculate_bmi(weight, height),
    )


def get_body_fat_category(body_fat_percent: float, gender: Gender) -> str:
    """ACE body fat category for the given gender."""
    for bound, label in _BODY_FAT_CATEGORIES[Gender(gender)]:
        if body_fat_percent < bound:
            return label
    return "Obese"


def get_bmi_category(bmi: float) -> str:
    """WHO BMI category."""
    for bound, label in _BMI_CATEGORIES:
        if bmi < bound:
            return label
    return "Obese"


def height_to_inches(feet: int, inches: float) -> float:
    return feet * 12 + inches


def inches_to_height(total_inches: float) -> tuple[int, float]:
    """Split inches into (feet, inches)."""
    feet = int(total_inches // 12)
    return feet, total_inches - feet * 12


def convert_metric_to_imperial(
    height_cm: float,
    weight_kg: float,
    waist_cm: float,
    neck_cm: float,
    hip_cm: float | None = None,
) -> dict[str, float | None]:
    """Convert metric measurements to the imperial inputs of the Navy formula."""
    return {
        "height_inches": height_cm / CM_PER_INCH,
        "weight_lbs": weight_kg * LBS_PER_KG,
        "waist_inches": waist_cm / CM_PER_INCH,
        "neck_inches": neck_cm / CM_PER_INCH,
        "hip_inches": hip_cm / CM_PER_INCH if hip_cm else None,
    }
