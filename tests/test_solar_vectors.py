"""
Test the solar geometry and irradiance chain against known values.
Reference site: Lakewood, WA (47.1718 N, 122.5185 W, 79 m).
"""

import pytest
import math
from unittest.mock import patch

from solarhours.angles import (
    CIRCLE, DAYS_PER_YEAR, InvalidInputError, normalize_day,
    to_degrees, to_radians, year_angle
)
from solarhours.location import Location
from solarhours.solartime import (
    equation_of_time, hour_angle, local_clock_time, local_solar_time,
    local_standard_time_meridian, time_correction_factor, timezone_for
)
from solarhours.geometry import azimuth, declination, elevation, zenith
from solarhours.irradiance import (
    air_mass, direct_intensity, global_intensity, module_power
)


@pytest.fixture
def lakewood():
    return Location(latitude=47.1718, longitude=-122.5185, altitude=0.079,
                    city='Lakewood', region='WA')


class TestAngles:
    """Test unit conversions and calendar helpers."""

    def test_round_trip_conversion(self):
        """Degrees and radians convert through pi/180."""
        assert abs(to_radians(180.0) - math.pi) < 1e-12
        assert abs(to_degrees(math.pi / 2) - 90.0) < 1e-12
        assert abs(CIRCLE - 2 * math.pi) < 1e-12

    def test_day_normalisation(self):
        """Days wrap around the 365 day year."""
        assert normalize_day(0) == 0
        assert normalize_day(365) == 0
        assert normalize_day(366) == 1
        assert normalize_day(-1) == DAYS_PER_YEAR - 1

    def test_year_angle_anchor(self):
        """Year angle is zero on the equinox anchor day."""
        assert year_angle(81) == 0.0
        assert year_angle(81 + 365) == 0.0


class TestLocation:
    """Test Location validation."""

    def test_location_is_frozen(self, lakewood):
        """Location is immutable."""
        with pytest.raises(Exception):
            lakewood.latitude = 10.0  # type: ignore

    def test_location_label(self, lakewood):
        """Label joins the descriptive fields."""
        assert lakewood.label == 'Lakewood, WA'
        assert Location(0.0, 0.0).label == ''

    @pytest.mark.parametrize('lat, lon, alt', [
        (95.0, 0.0, 0.0),
        (-90.5, 0.0, 0.0),
        (0.0, 181.0, 0.0),
        (0.0, -180.5, 0.0),
        (0.0, 0.0, -1.0),
    ])
    def test_invalid_location(self, lat, lon, alt):
        """Out of range coordinates are rejected."""
        with pytest.raises(InvalidInputError):
            Location(lat, lon, alt)

    def test_invalid_input_is_value_error(self):
        """InvalidInputError can be caught as ValueError."""
        with pytest.raises(ValueError):
            Location(100.0, 0.0)


class TestTimeCorrection:
    """Test clock to solar time corrections."""

    def test_timezone(self, lakewood):
        """Timezone for western Washington is roughly PST."""
        assert int(timezone_for(lakewood)) == -8

    def test_timezone_east_positive(self):
        """Eastern longitudes give positive offsets."""
        assert abs(timezone_for(Location(0.0, 30.0)) - 2.0) < 1e-12

    def test_timezone_antimeridian(self):
        """Longitude -180 is treated as +180."""
        assert timezone_for(Location(0.0, -180.0)) == 12.0
        assert timezone_for(Location(0.0, 180.0)) == 12.0

    def test_lstm(self, lakewood):
        """The meridian of a longitude-derived timezone is the longitude itself."""
        lstm = local_standard_time_meridian(timezone_for(lakewood))
        assert abs(to_degrees(lstm) - lakewood.longitude) < 1e-9

    def test_equation_of_time_new_year(self):
        """Around January 1 solar time lags the clock by about 3 minutes."""
        assert -4 < equation_of_time(0) < -3

    def test_equation_of_time_extremes(self):
        """The correction stays within about a quarter of an hour."""
        values = [equation_of_time(day) for day in range(DAYS_PER_YEAR)]
        assert max(values) < 17
        assert min(values) > -15

    def test_equation_of_time_periodic(self):
        """The correction repeats every year."""
        assert equation_of_time(10) == equation_of_time(10 + DAYS_PER_YEAR)

    def test_tcf_solstice(self, lakewood):
        """On the June solstice solar time is off by roughly a minute."""
        tcf = time_correction_factor(172, lakewood)
        assert -2 < tcf < -1

    def test_local_solar_time_adds_raw_minutes(self, lakewood):
        """Local solar time is clock minutes plus the correction in minutes."""
        lst = local_solar_time(720, 100, lakewood)
        assert lst == 720 + time_correction_factor(100, lakewood)

    def test_local_clock_time_inverts(self, lakewood):
        """Clock time undoes the solar time correction."""
        lst = local_solar_time(600, 200, lakewood)
        assert abs(local_clock_time(lst, 200, lakewood) - 600) < 1e-9

    def test_hour_angle(self, lakewood):
        """Hour angle is ~0 at noon, negative before, positive after."""
        assert abs(to_degrees(hour_angle(720, 0, lakewood))) < 1
        assert to_degrees(hour_angle(0, 0, lakewood)) < 0
        assert to_degrees(hour_angle(800, 0, lakewood)) > 0

    def test_hour_angle_rate(self, lakewood):
        """The sun moves 15 degrees per hour."""
        delta = hour_angle(840, 50, lakewood) - hour_angle(780, 50, lakewood)
        assert abs(to_degrees(delta) - 15.0) < 1e-9

    @pytest.mark.parametrize('minutes', [-1, 1440, 2000])
    def test_time_out_of_range(self, lakewood, minutes):
        """Times outside the day are rejected."""
        with pytest.raises(InvalidInputError):
            hour_angle(minutes, 0, lakewood)


class TestSolarGeometry:
    """Test sun position calculations."""

    def test_declination_equinox(self):
        """Declination is close to zero at the March equinox."""
        assert abs(to_degrees(declination(79))) < 1.0

    def test_declination_solstices(self):
        """Declination peaks at +/-23.45 degrees at the solstices."""
        assert abs(to_degrees(declination(171)) - 23.45) < 1.0
        assert abs(to_degrees(declination(355)) + 23.45) < 1.0

    def test_declination_bounded(self):
        """Declination never exceeds the axial tilt."""
        for day in range(DAYS_PER_YEAR):
            assert abs(to_degrees(declination(day))) <= 23.45 + 1e-9

    def test_declination_wraps(self):
        """Negative days map onto the end of the year."""
        assert declination(-1) == declination(364)

    def test_elevation_winter_noon(self, lakewood):
        """At noon on Jan 1 the sun is about 20 degrees up."""
        e = to_degrees(elevation(720, 0, lakewood))
        assert 19 < e < 20.5

    def test_elevation_winter_morning(self, lakewood):
        """At 7:45am on Jan 1 the sun is near the horizon."""
        e = to_degrees(elevation(465, 0, lakewood))
        assert -2 < e < 1

    def test_elevation_midnight(self, lakewood):
        """The sun is well below the horizon at midnight."""
        assert to_degrees(elevation(0, 171, lakewood)) < -10

    def test_zenith_identity(self, lakewood):
        """Zenith is exactly the complement of elevation."""
        for t, day in [(465, 0), (720, 171), (0, 300), (1439, 364)]:
            assert zenith(t, day, lakewood) == math.pi / 2 - elevation(t, day, lakewood)

    @pytest.mark.parametrize('day', [0, 1, 171, 172])
    def test_azimuth_noon(self, lakewood, day):
        """At noon the sun is roughly due south in the northern hemisphere."""
        a = to_degrees(azimuth(720, day, lakewood))
        assert 177 < a < 183

    def test_azimuth_solar_noon_all_year(self, lakewood):
        """At solar noon the sun is due south on every day of the year."""
        for day in range(DAYS_PER_YEAR):
            noon = local_clock_time(720, day, lakewood)
            a = to_degrees(azimuth(noon, day, lakewood))
            assert abs(a - 180) < 3, f"Day {day}: {a}"

    def test_azimuth_southern_noon(self):
        """At noon the sun is roughly due north in the southern hemisphere."""
        sydney = Location(-33.8688, 151.2093)
        a = to_degrees(azimuth(720, 171, sydney))
        assert a < 3 or a > 357

    def test_azimuth_morning_afternoon(self, lakewood):
        """Morning sun is in the east, afternoon sun in the west."""
        assert 0 < to_degrees(azimuth(540, 171, lakewood)) < 180
        assert 180 < to_degrees(azimuth(960, 171, lakewood)) < 360

    def test_azimuth_at_zenith(self, lakewood):
        """Azimuth is defined as 0 with the sun straight overhead."""
        with patch('solarhours.geometry.zenith', return_value=0.0):
            assert azimuth(720, 171, lakewood) == 0.0


class TestIrradiance:
    """Test air mass and intensity calculations."""

    def test_air_mass_equinox_noon(self, lakewood):
        """Noon on the equinox is between one and two air masses."""
        am = air_mass(720, 79, lakewood)
        assert 1 < am < 2

    def test_air_mass_summer_morning(self, lakewood):
        """Mid-morning in summer is close to two air masses."""
        am = air_mass(465, 179, lakewood)
        assert 1.5 < am < 2.2

    def test_air_mass_below_horizon(self, lakewood):
        """Air mass is exactly zero once past the fit's domain."""
        assert to_degrees(zenith(0, 0, lakewood)) > 96.07995
        assert air_mass(0, 0, lakewood) == 0.0
        assert direct_intensity(0, 0, lakewood) == 0.0
        assert global_intensity(0, 0, lakewood) == 0.0

    def test_air_mass_zero_for_every_night_minute(self, lakewood):
        """Every minute past the guard yields exactly zero air mass."""
        for t in range(0, 1440, 10):
            if to_degrees(zenith(t, 355, lakewood)) > 96.07995:
                assert air_mass(t, 355, lakewood) == 0.0

    def test_air_mass_near_horizon_positive(self, lakewood):
        """Just below the horizon the fit still gives a positive air mass."""
        # 7:45am on Jan 1 is slightly below the horizon
        assert air_mass(465, 0, lakewood) > 10

    def test_direct_intensity_summer_noon(self, lakewood):
        """Summer noon direct intensity is a little under 1 kW/m^2."""
        i = direct_intensity(720, 171, lakewood)
        assert 0.85 < i < 1.0

    def test_global_intensity_boost(self, lakewood):
        """Global intensity adds 10% of diffuse light."""
        assert global_intensity(720, 171, lakewood) == 1.1 * direct_intensity(720, 171, lakewood)

    def test_altitude_increases_intensity(self, lakewood):
        """Higher sites receive more direct light."""
        mountain = Location(lakewood.latitude, lakewood.longitude, altitude=2.0)
        assert direct_intensity(720, 171, mountain) > direct_intensity(720, 171, lakewood)

    def test_module_power_summer_noon(self, lakewood):
        """A latitude-tilted module gets close to 1 kW/m^2 at summer noon."""
        p = module_power(720, 171, lakewood)
        assert int(p) == 1

    def test_module_power_night(self, lakewood):
        """No module power with the sun below the horizon."""
        assert module_power(0, 171, lakewood) == 0.0
        assert module_power(465, 0, lakewood) == 0.0

    def test_module_power_zero_elevation(self, lakewood):
        """Module power is 0 at the sunrise/sunset singularity."""
        with patch('solarhours.irradiance.elevation', return_value=0.0):
            assert module_power(720, 171, lakewood) == 0.0

    def test_module_power_southern_hemisphere(self):
        """A southern module tilted towards the equator gets positive power."""
        sydney = Location(-33.8688, 151.2093)
        assert module_power(720, 0, sydney) > 0.9

    def test_idempotent(self, lakewood):
        """Repeated calls give bit-identical results."""
        for fn in (hour_angle, elevation, azimuth, air_mass, global_intensity, module_power):
            assert fn(600, 42, lakewood) == fn(600, 42, lakewood)
