"""Geographic location consumed by every solar calculation."""

from dataclasses import dataclass

from .angles import InvalidInputError


@dataclass(frozen=True)
class Location:
    """
    Observer position on the earth.

    Attributes:
        latitude: decimal degrees, positive = North
        longitude: decimal degrees, positive = East
        altitude: kilometres above sea level
        city: optional descriptive label
        region: optional descriptive label (state, province)
    """

    latitude: float
    longitude: float
    altitude: float = 0.0
    city: str = ""
    region: str = ""

    def __post_init__(self) -> None:
        if not -90 <= self.latitude <= 90:
            raise InvalidInputError(f"Latitude {self.latitude} out of range [-90, 90]")
        if not -180 <= self.longitude <= 180:
            raise InvalidInputError(f"Longitude {self.longitude} out of range [-180, 180]")
        if self.altitude < -0.5:
            raise InvalidInputError(f"Altitude {self.altitude} km is below -0.5 km")

    @property
    def label(self) -> str:
        """Human readable name, e.g. 'Lakewood, WA'."""
        return ", ".join(part for part in (self.city, self.region) if part)
