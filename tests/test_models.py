"""Tests for data models."""

from datetime import datetime

import pytest

from percent_lift.models.body_composition import Gender
from percent_lift.models.equipment import PlateInventoryEntry
from percent_lift.models.exercise import Barbell, ExerciseProfile
from percent_lift.models.program import Program, ProgramKind
from percent_lift.models.routine import SetPlan, WeightKind, parse_set_plans
from percent_lift.models.settings import AppSettings, format_setting, parse_setting
from percent_lift.models.workout import ResolvedSet, WorkoutExercise, WorkoutSession


class TestExerciseProfile:
    """Tests for ExerciseProfile and Barbell."""

    def test_round_trip_through_dict(self):
        profile = ExerciseProfile(name="Squat", max_weight=225, weight_increment=5, barbell_id=1)
        restored = ExerciseProfile.from_dict(profile.to_dict(), id=3)
        assert restored.id == 3
        assert restored.name == "Squat"
        assert restored.barbell_id == 1

    def test_from_dict_defaults(self):
        profile = ExerciseProfile.from_dict({"name": "Row", "max_weight": 135})
        assert profile.weight_increment == 5.0
        assert profile.auto_progression is True
        assert profile.default_rest_seconds is None

    @pytest.mark.parametrize(
        "overrides",
        [{"max_weight": 0}, {"weight_increment": 0}, {"default_rest_seconds": -1}],
    )
    def test_validation(self, overrides):
        values = {"name": "Squat", "max_weight": 225}
        values.update(overrides)
        with pytest.raises(ValueError):
            ExerciseProfile(**values)

    def test_summary(self):
        profile = ExerciseProfile(name="Squat", max_weight=225, equipment_baseline=45)
        assert profile.get_summary() == "Squat: max 225 lbs, +5 (auto), bar 45"

    def test_barbell_weight_cannot_be_negative(self):
        with pytest.raises(ValueError):
            Barbell(name="Broken", weight=-1)

    def test_plate_entry_pairs(self):
        assert PlateInventoryEntry(plate_weight=45, count=5).pairs == 2
        with pytest.raises(ValueError):
            PlateInventoryEntry(plate_weight=0, count=2)


class TestSetPlans:
    """Tests for set notation parsing."""

    def test_parse_mixed_scheme(self):
        plans = parse_set_plans("bar x10, 60%x5, 2*100%x5@180")
        assert [p.describe() for p in plans] == ["barx10", "60%x5", "100%x5@180", "100%x5@180"]
        assert plans[0].weight_kind == WeightKind.BAR
        assert plans[1].weight_kind == WeightKind.PERCENTAGE
        assert plans[1].weight_value == 60
        assert plans[2].rest_seconds_override == 180

    def test_parse_fixed_weight(self):
        (plan,) = parse_set_plans("135x8@0")
        assert plan.weight_kind == WeightKind.FIXED
        assert plan.weight_value == 135
        assert plan.rest_seconds_override == 0

    def test_parse_decimal_and_case(self):
        plans = parse_set_plans("BAR X5, 72.5% x 3")
        assert plans[0].weight_kind == WeightKind.BAR
        assert plans[1].weight_value == 72.5
        assert plans[1].target_reps == 3

    def test_parse_ignores_empty_items(self):
        assert len(parse_set_plans("60%x5, ,")) == 1

    @pytest.mark.parametrize("text", ["60%", "x5", "60%x", "heavy x5", "60%x0"])
    def test_parse_rejects_bad_items(self, text):
        with pytest.raises(ValueError):
            parse_set_plans(text)

    def test_set_plan_round_trip(self):
        plan = SetPlan(weight_kind=WeightKind.PERCENTAGE, weight_value=80, target_reps=5, rest_seconds_override=120)
        assert SetPlan.from_dict(plan.to_dict()) == plan


class TestProgram:
    """Tests for program rotation."""

    def test_continuous_wraps(self):
        program = Program(name="A/B", kind=ProgramKind.CONTINUOUS, routine_ids=[1, 2])
        assert program.next_routine_id() == 1
        program.advance()
        assert program.next_routine_id() == 2
        program.advance()
        assert program.current_position == 0
        assert program.next_routine_id() == 1
        assert not program.is_complete

    def test_finite_runs_exactly_total_workouts(self):
        program = Program(
            name="Block", kind=ProgramKind.FINITE, routine_ids=[1, 2], total_workouts=3, is_active=True
        )
        done = datetime(2024, 3, 1)
        routines = []
        while not program.is_complete:
            routines.append(program.next_routine_id())
            program.advance(now=done)
        assert routines == [1, 2, 1]
        assert program.is_active is False
        assert program.completed_at == done

    def test_step_back_reopens_completed_program(self):
        program = Program(
            name="Block", kind=ProgramKind.FINITE, routine_ids=[1], total_workouts=1, is_active=True
        )
        program.advance()
        assert program.is_complete
        assert program.step_back() == 0
        assert not program.is_complete
        assert program.is_active
        assert program.completed_at is None

    def test_step_back_at_start(self):
        program = Program(name="A", kind=ProgramKind.CONTINUOUS, routine_ids=[1])
        assert program.step_back() == 0

    def test_no_routines(self):
        program = Program(name="Empty", kind=ProgramKind.CONTINUOUS)
        assert program.next_routine_id() is None
        assert program.advance() == 0

    def test_finite_requires_total(self):
        with pytest.raises(ValueError):
            Program(name="Block", kind=ProgramKind.FINITE, routine_ids=[1])

    def test_progress_display(self):
        program = Program(name="Block", kind=ProgramKind.FINITE, routine_ids=[1], total_workouts=4)
        program.advance()
        assert program.get_progress_display() == "Workout 1 of 4"


class TestSettings:
    """Tests for setting parsing."""

    def test_parse_typed_values(self):
        assert parse_setting("default_rest_time", "120") == 120
        assert parse_setting("default_bar_weight", "20") == 20.0
        assert parse_setting("rest_timer_audio", "off") is False
        assert parse_setting("gender", "female") == Gender.FEMALE
        assert parse_setting("units", "metric") == "metric"

    def test_parse_unknown_key(self):
        with pytest.raises(KeyError):
            parse_setting("theme", "dark")

    @pytest.mark.parametrize("key,raw", [("units", "stones"), ("rest_timer_audio", "maybe"), ("default_rest_time", "soon")])
    def test_parse_invalid_values(self, key, raw):
        with pytest.raises(ValueError):
            parse_setting(key, raw)

    def test_format_setting(self):
        assert format_setting(True) == "true"
        assert format_setting(Gender.MALE) == "male"
        assert format_setting(90) == "90"

    def test_weight_unit(self):
        assert AppSettings().weight_unit == "lbs"
        assert AppSettings(units="metric").weight_unit == "kg"


class TestWorkoutSession:
    """Tests for session aggregates."""

    def test_total_volume_uses_actual_weights(self, squat):
        sets = [
            ResolvedSet(target_weight=135, target_reps=5, percentage_of_max=60, rest_seconds=90,
                        actual_weight=135, actual_reps=5, completed=True),
            ResolvedSet(target_weight=225, target_reps=5, percentage_of_max=100, rest_seconds=90,
                        actual_weight=225, actual_reps=3, completed=True),
            ResolvedSet(target_weight=225, target_reps=5, percentage_of_max=100, rest_seconds=90),
        ]
        session = WorkoutSession(routine_id=1, routine_name="Day A", exercises=[WorkoutExercise(squat, sets)])
        assert session.total_volume == 135 * 5 + 225 * 3
        assert session.exercises[0].completed_sets == 2
        assert not session.exercises[0].is_complete

    def test_duration(self, squat):
        session = WorkoutSession(
            routine_id=1,
            routine_name="Day A",
            exercises=[],
            started_at=datetime(2024, 1, 1, 9, 0),
        )
        assert session.duration_seconds is None
        session.completed_at = datetime(2024, 1, 1, 10, 0)
        assert session.duration_seconds == 3600

    def test_successful_set(self):
        resolved = ResolvedSet(target_weight=100, target_reps=5, percentage_of_max=None, rest_seconds=0,
                               actual_weight=100, actual_reps=5, completed=True)
        assert resolved.is_successful
