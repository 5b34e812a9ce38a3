"""User settings model."""

from dataclasses import dataclass, fields

from .body_composition import Gender


@dataclass
class AppSettings:
    """Typed view of the ``settings`` table with documented defaults."""

    units: str = "imperial"
    height: float = 70.0  # inches
    gender: Gender = Gender.MALE
    default_weight_increment: float = 5.0
    default_rest_time: int = 90  # seconds
    default_bar_weight: float = 45.0
    auto_progression_default: bool = True
    rest_timer_audio: bool = True
    rest_timer_haptic: bool = True
    notifications_enabled: bool = True

    @property
    def weight_unit(self) -> str:
        return "kg" if self.units == "metric" else "lbs"

    @classmethod
    def keys(cls) -> list[str]:
        return [f.name for f in fields(cls)]


DEFAULT_SETTINGS = AppSettings()


def parse_setting(key: str, raw: str):
    """Convert a stored string to the type of the matching AppSettings field.

    Raises:
        KeyError: If ``key`` is not a known setting
        ValueError: If ``raw`` cannot be converted
    """
    if key not in AppSettings.keys():
        raise KeyError(key)

    default = getattr(DEFAULT_SETTINGS, key)
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"Invalid boolean for {key}: {raw}")
    if isinstance(default, Gender):
        return Gender(raw)
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    if key == "units" and raw not in ("imperial", "metric"):
        raise ValueError(f"Invalid units: {raw}")
    return raw


def format_setting(value) -> str:
    """Convert a typed value to its stored string form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Gender):
        return value.value
    return str(value)
