"""
Irradiance reaching the ground and a latitude-tilted module.

Constants follow the PV Education air-mass and intensity model:
http://www.pveducation.org/pvcdrom/properties-of-sunlight/air-mass
Intensities are in kW/m^2.
"""

import math

from .angles import Degrees, to_degrees, to_radians
from .geometry import Minutes, elevation, zenith
from .location import Location

SOLAR_CONSTANT = 1.353  # kW/m^2 above the atmosphere
ATMOSPHERIC_TRANSMITTANCE = 0.7
ALTITUDE_COEFFICIENT = 0.14  # per km
DIFFUSE_FACTOR = 1.1  # ~10% extra from scattered sky radiation

# Kasten-Young fit. The limit and the power term are fitted in degrees.
AIR_MASS_LIMIT = Degrees(96.07995)
AIR_MASS_COEFFICIENT = 0.50572
AIR_MASS_EXPONENT = -1.6364


def air_mass(local_time: Minutes, day: int, location: Location) -> float:
    """
    Relative path length of sunlight through the atmosphere (1 = overhead at sea level).
    Returns 0 once the sun is far enough below the horizon that the fit no longer applies.
    """
    theta = zenith(local_time, day, location)
    x = AIR_MASS_LIMIT - to_degrees(theta)
    if x <= 0.0:
        return 0.0

    return 1.0 / (math.cos(theta) + AIR_MASS_COEFFICIENT * math.pow(x, AIR_MASS_EXPONENT))


def direct_intensity(local_time: Minutes, day: int, location: Location) -> float:
    """Direct beam intensity, corrected for air mass and site altitude."""
    am = air_mass(local_time, day, location)
    if am <= 0.0:
        return 0.0

    alt = ALTITUDE_COEFFICIENT * location.altitude
    transmitted = math.pow(ATMOSPHERIC_TRANSMITTANCE, math.pow(am, 0.678))
    return SOLAR_CONSTANT * ((1.0 - alt) * transmitted + alt)


def global_intensity(local_time: Minutes, day: int, location: Location) -> float:
    """Direct plus diffuse intensity."""
    return DIFFUSE_FACTOR * direct_intensity(local_time, day, location)


def module_power(local_time: Minutes, day: int, location: Location) -> float:
    """
    Power landing on a fixed module tilted at the site latitude, facing the equator.
    The ratio is singular at sunrise and sunset, so 0 is returned whenever the
    sun is on or below the horizon.
    """
    alpha = elevation(local_time, day, location)
    if alpha <= 0.0:
        return 0.0

    tilt = to_radians(Degrees(abs(location.latitude)))
    power = global_intensity(local_time, day, location) * math.sin(alpha + tilt) / math.sin(alpha)
    return max(0.0, power)
