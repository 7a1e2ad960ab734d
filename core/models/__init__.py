"""Re-export individual model modules for easy imports."""

from .profile import ProfileIn
from .targets import (
    CalorieRangeOut,
    MacroCaloriesOut,
    MacrosOut,
    SourceOfTruth,
    TargetsOut,
)

__all__ = [
    "ProfileIn",
    "CalorieRangeOut",
    "MacroCaloriesOut",
    "MacrosOut",
    "SourceOfTruth",
    "TargetsOut",
]
