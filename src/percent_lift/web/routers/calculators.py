"""Stateless calculator routes."""

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, Field

from ...calculations.body_fat import (
    calculate_us_navy_body_fat,
    get_bmi_category,
    get_body_fat_category,
)
from ...calculations.plates import calculate_plates, format_plate_calculation, get_plate_loading_order
from ...calculations.weights import (
    DEFAULT_MIN_WEIGHT,
    calculate_percentage,
    calculate_weight_from_percentage,
    generate_warmup_sets,
)
from ...db import PlateInventoryRepository
from ...models.body_composition import BodyFatInput, Gender

router = APIRouter(prefix="/calc", tags=["calculators"])


class WeightRequest(BaseModel):
    max_weight: float
    percentage: float
    increment: float = 5.0
    min_weight: float = DEFAULT_MIN_WEIGHT


class PlateCount(BaseModel):
    plate_weight: float = Field(gt=0)
    count: int = Field(ge=0)


class PlatesRequest(BaseModel):
    target_weight: float
    bar_weight: float = DEFAULT_MIN_WEIGHT
    # None means the stored inventory
    inventory: list[PlateCount] | None = None


class BodyFatRequest(BaseModel):
    gender: Gender
    height_inches: float
    weight_lbs: float
    waist_inches: float
    neck_inches: float
    hip_inches: float | None = None


@router.post("/weight")
async def weight(body: WeightRequest):
    """Resolve a percentage of max to a loadable weight."""
    resolved = calculate_weight_from_percentage(
        body.max_weight, body.percentage, body.increment, body.min_weight
    )
    return {
        "weight": resolved,
        "actual_percentage": calculate_percentage(resolved, body.max_weight),
    }


@router.post("/plates")
async def plates(request: Request, body: PlatesRequest):
    """Plates per side for a target weight."""
    if body.inventory is None:
        inventory = await PlateInventoryRepository(request.app.state.db_path).as_inventory()
    else:
        inventory = {p.plate_weight: p.count for p in body.inventory}

    plan = calculate_plates(body.target_weight, body.bar_weight, inventory)
    return {
        **plan.to_dict(),
        "loading_order": get_plate_loading_order(plan),
        "description": format_plate_calculation(plan),
    }


@router.get("/warmup")
async def warmup(
    max_weight: float = Query(gt=0),
    increment: float = Query(5.0),
    bar_weight: float = Query(DEFAULT_MIN_WEIGHT),
):
    """Warm-up ladder from the empty bar to the working weight."""
    return {"weights": list(generate_warmup_sets(max_weight, increment, bar_weight))}


@router.post("/body-fat")
async def body_fat(body: BodyFatRequest):
    """US Navy body fat estimate with category labels."""
    result = calculate_us_navy_body_fat(BodyFatInput(**body.model_dump()))
    return {
        **result.to_dict(),
        "body_fat_category": get_body_fat_category(result.body_fat_percent, body.gender),
        "bmi_category": get_bmi_category(result.bmi),
    }
