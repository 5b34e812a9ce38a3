"""CLI commands for percent-lift."""

from .body import bodycomp
from .equipment import barbell, plates, warmup
from .exercises import exercise
from .goals import goal
from .init import init
from .programs import program
from .routines import routine
from .serve import serve
from .settings import settings
from .workout import workout

__all__ = [
    "barbell",
    "bodycomp",
    "exercise",
    "goal",
    "init",
    "plates",
    "program",
    "routine",
    "serve",
    "settings",
    "warmup",
    "workout",
]
