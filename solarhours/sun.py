"""
Daily sun aggregates: sunrise, sunset, day length and peak solar hours.
Handles polar day/night edge cases.

Sunrise and sunset are returned in local solar time (minutes past midnight);
use solartime.local_clock_time for the nominal clock time.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from .angles import (
    MINUTES_PER_DAY, MINUTES_PER_DEGREE, SOLAR_NOON, Degrees, Radians,
    normalize_day, to_degrees, to_radians
)
from .geometry import Minutes, azimuth, declination, elevation, zenith
from .irradiance import air_mass, direct_intensity, global_intensity, module_power
from .location import Location
from .solartime import (
    equation_of_time, hour_angle, local_clock_time, local_solar_time,
    time_correction_factor, timezone_for
)

logger = logging.getLogger(__name__)


class PolarConditionError(ArithmeticError):
    """Raised when the sun does not rise or does not set on the given day."""

    def __init__(self, day: int, location: Location, polar_day: bool):
        self.day = day
        self.location = location
        self.polar_day = polar_day
        condition = 'never sets (polar day)' if polar_day else 'never rises (polar night)'
        super().__init__(
            f"Sun {condition} on day {day} at latitude {location.latitude}"
        )


def horizon_hour_angle(day: int, location: Location) -> Radians:
    """
    Hour angle at which the sun crosses the horizon.
    Raises PolarConditionError when the crossing does not exist.
    """
    lat = to_radians(Degrees(location.latitude))
    cos_h = -math.tan(lat) * math.tan(declination(day))

    if cos_h < -1.0:
        raise PolarConditionError(day, location, polar_day=True)
    if cos_h > 1.0:
        raise PolarConditionError(day, location, polar_day=False)
    return Radians(math.acos(cos_h))


def sunrise(day: int, location: Location) -> float:
    """Sunrise in local solar time, minutes past midnight."""
    return SOLAR_NOON - MINUTES_PER_DEGREE * to_degrees(horizon_hour_angle(day, location))


def sunset(day: int, location: Location) -> float:
    """Sunset in local solar time, minutes past midnight."""
    return SOLAR_NOON + MINUTES_PER_DEGREE * to_degrees(horizon_hour_angle(day, location))


def sun_time(day: int, location: Location) -> float:
    """Minutes between sunrise and sunset."""
    return sunset(day, location) - sunrise(day, location)


def peak_solar_hours(day: int, location: Location) -> float:
    """
    Hours of 1 kW/m^2 sunshine equivalent to the day's total global irradiance.

    Global intensity is sampled once a minute from the clock minute of sunrise
    for the length of the sunlit window, and the kW/m^2 samples are summed then
    divided by 60. The window is clipped to the calendar day. A polar night
    yields 0; a polar day samples the whole day.
    """
    try:
        rise = sunrise(day, location)
        steps = int(sunset(day, location) - rise)
        start = int(local_clock_time(rise, day, location))
    except PolarConditionError as e:
        if not e.polar_day:
            return 0.0
        start, steps = 0, MINUTES_PER_DAY

    first = max(start, 0)
    last = min(start + steps, MINUTES_PER_DAY)
    logger.debug(f"Integrating day {day}: minutes {first} to {last}")

    total = 0.0
    for minute in range(first, last):
        total += global_intensity(minute, day, location)

    return total / 60.0


def solar_position(local_time: Minutes, day: int, location: Location) -> Dict[str, Any]:
    """
    Instantaneous sun position and irradiance at a clock time.
    Angles are reported in degrees.
    """
    return {
        'local_time': local_time,
        'local_solar_time': local_solar_time(local_time, day, location),
        'hour_angle_deg': to_degrees(hour_angle(local_time, day, location)),
        'elevation_deg': to_degrees(elevation(local_time, day, location)),
        'zenith_deg': to_degrees(zenith(local_time, day, location)),
        'azimuth_deg': to_degrees(azimuth(local_time, day, location)),
        'air_mass': air_mass(local_time, day, location),
        'direct_intensity_kw_m2': direct_intensity(local_time, day, location),
        'global_intensity_kw_m2': global_intensity(local_time, day, location),
        'module_power_kw_m2': module_power(local_time, day, location),
    }


def solar_day(day: int, location: Location) -> Dict[str, Any]:
    """
    Summarise one day for a location.

    Returns dict with:
    - day: normalised day of year
    - sunrise/sunset: local solar time in minutes (None on polar days/nights)
    - sunrise_clock/sunset_clock: nominal clock time in minutes
    - sun_time: minutes of daylight
    - peak_solar_hours
    - declination_deg, equation_of_time, time_correction, timezone_offset
    - flags: polar_day, polar_night
    """
    day = normalize_day(day)

    result = {
        'day': day,
        'sunrise': None,
        'sunset': None,
        'sunrise_clock': None,
        'sunset_clock': None,
        'sun_time': 0.0,
        'peak_solar_hours': peak_solar_hours(day, location),
        'declination_deg': to_degrees(declination(day)),
        'equation_of_time': equation_of_time(day),
        'time_correction': time_correction_factor(day, location),
        'timezone_offset': timezone_for(location),
        'flags': {
            'polar_day': False,
            'polar_night': False,
        }
    }

    try:
        rise = sunrise(day, location)
        set_ = sunset(day, location)
    except PolarConditionError as e:
        if e.polar_day:
            result['flags']['polar_day'] = True
            result['sun_time'] = float(MINUTES_PER_DAY)
        else:
            result['flags']['polar_night'] = True
        return result

    result['sunrise'] = rise
    result['sunset'] = set_
    result['sunrise_clock'] = local_clock_time(rise, day, location)
    result['sunset_clock'] = local_clock_time(set_, day, location)
    result['sun_time'] = set_ - rise
    return result


def solar_days_for_range(start_day: int, end_day: int, location: Location) -> List[Dict[str, Any]]:
    """
    Summaries for every day from start_day to end_day inclusive.
    A range running past the year end wraps back to day 0.
    """
    return [solar_day(day, location) for day in range(start_day, end_day + 1)]


def format_minutes(minutes: Optional[float]) -> Optional[str]:
    """Format minutes past midnight as HH:MM, wrapping around midnight."""
    if minutes is None:
        return None
    whole = int(round(minutes)) % MINUTES_PER_DAY
    hours, mins = divmod(whole, 60)
    return f"{hours:02d}:{mins:02d}"
