"""
Position of the sun in the sky: declination, elevation, zenith and azimuth.
All results are in radians.
"""

import math
from typing import Union

from .angles import CIRCLE, SOLAR_NOON, Degrees, Radians, to_radians, year_angle
from .location import Location
from .solartime import hour_angle, local_solar_time

EARTH_AXIAL_TILT = Degrees(23.45)

Minutes = Union[int, float]


def _clamp_unit(value: float) -> float:
    # Guards asin/acos against floating point overshoot only
    return max(-1.0, min(1.0, value))


def declination(day: int) -> Radians:
    """
    Angle between the sun's rays and the equatorial plane.
    Zero at the equinoxes, +/-23.45 degrees at the solstices.
    """
    return Radians(to_radians(EARTH_AXIAL_TILT) * math.sin(year_angle(day)))


def elevation(local_time: Minutes, day: int, location: Location) -> Radians:
    """Angle of the sun above the horizon, in [-pi/2, pi/2]."""
    dec = declination(day)
    lat = to_radians(Degrees(location.latitude))
    ha = hour_angle(local_time, day, location)

    sin_elevation = (math.sin(dec) * math.sin(lat) +
                     math.cos(dec) * math.cos(lat) * math.cos(ha))
    return Radians(math.asin(_clamp_unit(sin_elevation)))


def zenith(local_time: Minutes, day: int, location: Location) -> Radians:
    """Angle of the sun measured from the vertical."""
    return Radians(math.pi / 2 - elevation(local_time, day, location))


def azimuth(local_time: Minutes, day: int, location: Location) -> Radians:
    """
    Compass bearing of the sun: 0 = North, measured clockwise.

    The morning value comes straight from the arccosine; after solar noon the
    sun sweeps through the western half so the bearing is mirrored. With the
    sun exactly at zenith or nadir the bearing is undefined and 0 is returned.
    """
    dec = declination(day)
    lat = to_radians(Degrees(location.latitude))
    ha = hour_angle(local_time, day, location)
    sin_zenith = math.sin(zenith(local_time, day, location))

    if math.isclose(sin_zenith, 0.0, abs_tol=1e-12):
        return Radians(0.0)

    cos_azimuth = (math.sin(dec) * math.cos(lat) -
                   math.cos(ha) * math.cos(dec) * math.sin(lat)) / sin_zenith
    angle = math.acos(_clamp_unit(cos_azimuth))

    if local_solar_time(local_time, day, location) < SOLAR_NOON:
        return Radians(angle)
    return Radians(CIRCLE - angle)
