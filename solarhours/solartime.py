"""
Clock time to solar time corrections.

Local solar time differs from the clock because of the observer's offset from
the time-zone meridian and because of the equation of time (orbital
eccentricity plus axial tilt). Times are minutes past midnight.
"""

import math
from typing import Union

from .angles import (
    MINUTES_PER_DEGREE, SOLAR_NOON, Degrees, Radians,
    check_time_of_day, to_degrees, to_radians, year_angle
)
from .location import Location

DEGREES_PER_HOUR = 15.0
DEGREES_PER_MINUTE = DEGREES_PER_HOUR / 60.0


def local_standard_time_meridian(timezone_offset: float) -> Radians:
    """Meridian of the time zone, 15 degrees per hour of offset from GMT."""
    return to_radians(Degrees(DEGREES_PER_HOUR * timezone_offset))


def timezone_for(location: Location) -> float:
    """
    Nominal offset from GMT in hours, derived from longitude alone.

    This is the meridian-based offset (15 degrees per hour), not the
    political time zone, and it is not rounded to whole hours.
    """
    lon = 180.0 - ((180.0 - location.longitude) % 360.0)
    return lon / DEGREES_PER_HOUR


def equation_of_time(day: int) -> float:
    """Minutes by which solar time runs ahead of mean time on a given day."""
    b = year_angle(day)
    return 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


def time_correction_factor(day: int, location: Location) -> float:
    """
    Minutes to add to local clock time to get local solar time.
    Combines the longitude offset from the zone meridian with the equation of time.
    """
    lstm = to_degrees(local_standard_time_meridian(timezone_for(location)))
    return MINUTES_PER_DEGREE * (location.longitude - lstm) + equation_of_time(day)


def local_solar_time(local_time: Union[int, float], day: int, location: Location) -> float:
    """Local solar time in minutes for a clock time in minutes past midnight."""
    return check_time_of_day(local_time) + time_correction_factor(day, location)


def local_clock_time(solar_time: float, day: int, location: Location) -> float:
    """Inverse of local_solar_time: nominal clock minutes for a solar time."""
    return solar_time - time_correction_factor(day, location)


def hour_angle(local_time: Union[int, float], day: int, location: Location) -> Radians:
    """
    Angular distance of the sun from local solar noon.
    Zero at solar noon, negative in the morning, positive in the afternoon.
    """
    lst = local_solar_time(local_time, day, location)
    return to_radians(Degrees((lst - SOLAR_NOON) * DEGREES_PER_MINUTE))
