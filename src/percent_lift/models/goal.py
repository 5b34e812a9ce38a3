"""Weekly training goal: how often to train and on which days."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

# Weekdays follow date.weekday(): Monday is 0, Sunday is 6
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_REMINDER_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last instant of the Monday-to-Sunday week containing ``day``."""
    monday = week_start(day)
    start = datetime.combine(monday, datetime.min.time())
    end = datetime.combine(monday + timedelta(days=6), datetime.max.time())
    return start, end


def parse_weekdays(text: str) -> list[int]:
    """Parse "mon,wed,fri" (names or 0-6 numbers) into sorted weekday numbers.

    Raises:
        ValueError: If a day is not recognized
    """
    days = set()
    for part in text.split(","):
        token = part.strip().lower()
        if not token:
            continue
        if token.isdigit():
            day = int(token)
        else:
            matches = [i for i, name in enumerate(WEEKDAY_NAMES) if token.startswith(name.lower())]
            if not matches:
                raise ValueError(f"Unknown weekday: {part.strip()}")
            day = matches[0]
        if not 0 <= day <= 6:
            raise ValueError(f"Weekday must be 0-6, got {day}")
        days.add(day)
    return sorted(days)


def format_weekdays(days: list[int]) -> str:
    return ", ".join(WEEKDAY_NAMES[d] for d in days) or "none"


@dataclass
class GoalProgress:
    """Where the current week stands against the goal."""

    workouts_this_week: int
    workouts_target: int
    streak_weeks: int
    is_on_track: bool
    scheduled_days: list[int]
    next_scheduled_day: int | None

    def to_dict(self) -> dict:
        return {
            "workouts_this_week": self.workouts_this_week,
            "workouts_target": self.workouts_target,
            "streak_weeks": self.streak_weeks,
            "is_on_track": self.is_on_track,
            "scheduled_days": self.scheduled_days,
            "next_scheduled_day": self.next_scheduled_day,
        }


@dataclass
class Goal:
    """A target number of workouts per week on planned days.

    ``current_streak`` counts consecutive weeks in which the target was met.
    ``last_credited_week`` is the Monday of the last week added to the
    streak, so each week counts once however many workouts follow.
    """

    workouts_per_week: int
    scheduled_days: list[int] = field(default_factory=list)
    reminder_time: str | None = None
    total_weeks: int | None = None
    start_date: datetime | None = None
    current_streak: int = 0
    last_credited_week: date | None = None
    is_active: bool = True
    id: int | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.workouts_per_week <= 7:
            raise ValueError("workouts_per_week must be between 1 and 7")
        if any(not 0 <= d <= 6 for d in self.scheduled_days):
            raise ValueError("Scheduled days must be weekday numbers 0-6")
        self.scheduled_days = sorted(set(self.scheduled_days))
        if self.reminder_time is not None and not _REMINDER_PATTERN.match(self.reminder_time):
            raise ValueError("reminder_time must be HH:MM")
        if self.total_weeks is not None and self.total_weeks <= 0:
            raise ValueError("total_weeks must be positive")

    def is_scheduled(self, day: date) -> bool:
        return day.weekday() in self.scheduled_days

    def next_scheduled_day(self, day: date) -> int | None:
        """Next planned weekday from ``day`` on (today included), wrapping to next week."""
        for scheduled in self.scheduled_days:
            if scheduled >= day.weekday():
                return scheduled
        return self.scheduled_days[0] if self.scheduled_days else None

    def progress(self, workouts_this_week: int, day: date) -> GoalProgress:
        """Progress for the week containing ``day``.

        On track means at least one workout for every planned day already
        behind us this week.
        """
        days_passed = sum(1 for d in self.scheduled_days if d < day.weekday())
        return GoalProgress(
            workouts_this_week=workouts_this_week,
            workouts_target=self.workouts_per_week,
            streak_weeks=self.current_streak,
            is_on_track=workouts_this_week >= days_passed,
            scheduled_days=list(self.scheduled_days),
            next_scheduled_day=self.next_scheduled_day(day),
        )

    def update_streak(self, workouts_this_week: int, day: date) -> bool:
        """Credit or break the streak given this week's workouts.

        A week that went by uncredited breaks the streak. The current week
        is credited once the target is met; it breaks the streak if every
        planned day is behind us without meeting it.

        Returns:
            True if the streak changed
        """
        before = (self.current_streak, self.last_credited_week)
        this_week = week_start(day)

        if self.last_credited_week is not None and this_week - self.last_credited_week > timedelta(days=7):
            self.current_streak = 0

        if workouts_this_week >= self.workouts_per_week:
            if self.last_credited_week != this_week:
                self.current_streak += 1
                self.last_credited_week = this_week
        elif all(d < day.weekday() for d in self.scheduled_days):
            self.current_streak = 0

        return (self.current_streak, self.last_credited_week) != before

    def week_number(self, day: date) -> int:
        """1-based week of the goal that ``day`` falls in."""
        if self.start_date is None:
            return 1
        return (week_start(day) - week_start(self.start_date.date())).days // 7 + 1

    def get_summary(self, day: date | None = None) -> str:
        summary = f"{self.workouts_per_week}x per week on {format_weekdays(self.scheduled_days)}"
        if self.total_weeks:
            week = min(self.week_number(day or date.today()), self.total_weeks)
            summary += f" (week {week} of {self.total_weeks})"
        if self.reminder_time:
            summary += f", reminder at {self.reminder_time}"
        return summary

    def to_dict(self) -> dict:
        return {
            "workouts_per_week": self.workouts_per_week,
            "scheduled_days": self.scheduled_days,
            "reminder_time": self.reminder_time,
            "total_weeks": self.total_weeks,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "current_streak": self.current_streak,
            "is_active": self.is_active,
        }
