"""
Angle units and calendar constants shared by every solar calculation.

Angles travel through the library as either Degrees or Radians. Both are
plain floats at runtime; the distinct types let a type checker catch a
degree value being fed to a trig function (or the reverse).
"""

import math
from typing import NewType, Union

Degrees = NewType('Degrees', float)
Radians = NewType('Radians', float)

DEG_TO_RAD = math.pi / 180.0
RAD_TO_DEG = 180.0 / math.pi
CIRCLE = Radians(2.0 * math.pi)

DAYS_PER_YEAR = 365
MINUTES_PER_DAY = 1440
SOLAR_NOON = 720  # minutes past midnight
MINUTES_PER_DEGREE = 4.0  # earth turns 1 degree every 4 minutes
EQUINOX_DAY = 81  # phase anchor for the seasonal terms


class InvalidInputError(ValueError):
    """Raised when an input falls outside its physical range."""
    pass


def to_radians(angle: Degrees) -> Radians:
    """Convert degrees to radians."""
    return Radians(angle * DEG_TO_RAD)


def to_degrees(angle: Radians) -> Degrees:
    """Convert radians to degrees."""
    return Degrees(angle * RAD_TO_DEG)


def normalize_day(day: int) -> int:
    """Wrap a day of year into [0, 365)."""
    return day % DAYS_PER_YEAR


def check_time_of_day(minutes: Union[int, float]) -> float:
    """
    Validate a local time given in minutes past midnight.
    Returns the time as a float.
    """
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidInputError(
            f"Time of day {minutes} out of range [0, {MINUTES_PER_DAY}) minutes"
        )
    return float(minutes)


def year_angle(day: int) -> Radians:
    """
    Fraction of the orbit elapsed since the spring equinox anchor.
    Used by both the declination and the equation of time.
    """
    return Radians((CIRCLE / DAYS_PER_YEAR) * (normalize_day(day) - EQUINOX_DAY))
