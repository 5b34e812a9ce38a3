"""Tests for body composition calculations."""

import pytest

from percent_lift.calculations.body_fat import (
    calculate_bmi,
    calculate_us_navy_body_fat,
    convert_metric_to_imperial,
    get_bmi_category,
    get_body_fat_category,
    height_to_inches,
    inches_to_height,
)
from percent_lift.errors import InvalidMeasurement, MissingMeasurement
from percent_lift.models.body_composition import BodyFatInput, Gender


def male(**overrides):
    values = dict(gender=Gender.MALE, height_inches=70, weight_lbs=180, waist_inches=34, neck_inches=15)
    values.update(overrides)
    return BodyFatInput(**values)


class TestUsNavyBodyFat:
    """Tests for calculate_us_navy_body_fat."""

    def test_male(self):
        result = calculate_us_navy_body_fat(male())
        assert result.body_fat_percent == 17.5
        assert result.fat_mass == 31.5
        assert result.lean_mass == 148.5
        assert result.bmi == 25.8

    def test_female(self):
        result = calculate_us_navy_body_fat(
            BodyFatInput(
                gender=Gender.FEMALE,
                height_inches=65,
                weight_lbs=140,
                waist_inches=30,
                neck_inches=13,
                hip_inches=38,
            )
        )
        assert result.body_fat_percent == 28.6

    def test_female_requires_hip(self):
        with pytest.raises(MissingMeasurement):
            calculate_us_navy_body_fat(
                BodyFatInput(
                    gender=Gender.FEMALE,
                    height_inches=65,
                    weight_lbs=140,
                    waist_inches=30,
                    neck_inches=13,
                )
            )

    def test_missing_measurement_is_an_invalid_measurement(self):
        assert issubclass(MissingMeasurement, InvalidMeasurement)

    def test_clamped_low(self):
        assert calculate_us_navy_body_fat(male(waist_inches=16)).body_fat_percent == 2.0

    def test_clamped_high(self):
        result = calculate_us_navy_body_fat(male(height_inches=60, waist_inches=80, neck_inches=10))
        assert result.body_fat_percent == 60.0

    def test_waist_must_exceed_neck(self):
        with pytest.raises(InvalidMeasurement, match="Waist must be larger"):
            calculate_us_navy_body_fat(male(waist_inches=15))

    @pytest.mark.parametrize("field", ["height_inches", "weight_lbs", "waist_inches", "neck_inches"])
    def test_non_positive_measurements(self, field):
        with pytest.raises(InvalidMeasurement):
            calculate_us_navy_body_fat(male(**{field: 0}))

    def test_result_to_dict(self):
        data = calculate_us_navy_body_fat(male()).to_dict()
        assert data == {"body_fat_percent": 17.5, "lean_mass": 148.5, "fat_mass": 31.5, "bmi": 25.8}


class TestBmi:
    """Tests for calculate_bmi."""

    def test_bmi(self):
        assert calculate_bmi(180, 70) == 25.8

    def test_bmi_rejects_zero(self):
        with pytest.raises(InvalidMeasurement):
            calculate_bmi(180, 0)


class TestCategories:
    """Tests for the category lookups."""

    @pytest.mark.parametrize(
        "percent,expected",
        [(5, "Essential Fat"), (6, "Athletes"), (13.9, "Athletes"), (17.5, "Fitness"), (24, "Average"), (25, "Obese")],
    )
    def test_male_categories(self, percent, expected):
        assert get_body_fat_category(percent, Gender.MALE) == expected

    @pytest.mark.parametrize(
        "percent,expected",
        [(13, "Essential Fat"), (20, "Athletes"), (24, "Fitness"), (28.6, "Average"), (32, "Obese")],
    )
    def test_female_categories(self, percent, expected):
        assert get_body_fat_category(percent, Gender.FEMALE) == expected

    def test_category_accepts_plain_string(self):
        assert get_body_fat_category(17.5, "male") == "Fitness"

    @pytest.mark.parametrize(
        "bmi,expected",
        [(17, "Underweight"), (18.5, "Normal"), (24.9, "Normal"), (25.8, "Overweight"), (30, "Obese")],
    )
    def test_bmi_categories(self, bmi, expected):
        assert get_bmi_category(bmi) == expected


class TestConversions:
    """Tests for unit helpers."""

    def test_height_to_inches(self):
        assert height_to_inches(5, 10) == 70

    def test_inches_to_height(self):
        assert inches_to_height(70) == (5, 10)
        assert inches_to_height(71.5) == (5, 11.5)

    def test_metric_to_imperial(self):
        converted = convert_metric_to_imperial(177.8, 100, 86.36, 38.1)
        assert converted["height_inches"] == pytest.approx(70)
        assert converted["weight_lbs"] == pytest.approx(220.462)
        assert converted["waist_inches"] == pytest.approx(34)
        assert converted["neck_inches"] == pytest.approx(15)
        assert converted["hip_inches"] is None

    def test_metric_to_imperial_with_hip(self):
        converted = convert_metric_to_imperial(165.1, 60, 76.2, 33.02, hip_cm=96.52)
        assert converted["hip_inches"] == pytest.approx(38)
