"""Pure training calculations: weights, plates, progression, body metrics."""

from .body_fat import (
    calculate_us_navy_body_fat,
    convert_metric_to_imperial,
    get_bmi_category,
    get_body_fat_category,
    height_to_inches,
    inches_to_height,
)
from .plates import calculate_plates, format_plate_calculation, get_plate_loading_order
from .progression import (
    calculate_completion_rate,
    calculate_volume,
    evaluate_progression,
    is_set_successful,
)
from .weights import (
    calculate_percentage,
    calculate_weight_from_percentage,
    generate_warmup_sets,
    round_to_increment,
)

__all__ = [
    "calculate_completion_rate",
    "calculate_percentage",
    "calculate_plates",
    "calculate_us_navy_body_fat",
    "calculate_volume",
    "calculate_weight_from_percentage",
    "convert_metric_to_imperial",
    "evaluate_progression",
    "format_plate_calculation",
    "generate_warmup_sets",
    "get_bmi_category",
    "get_body_fat_category",
    "get_plate_loading_order",
    "height_to_inches",
    "inches_to_height",
    "is_set_successful",
    "round_to_increment",
]
