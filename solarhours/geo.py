"""
Location resolution for solarhours.
Turns a free-text place name into a Location using the Google Maps
Geocoding and Elevation web services, and parses direct coordinate input.
"""

import os
import logging
from typing import Any, Callable, Dict, Optional, Tuple
from functools import lru_cache

import requests

from .location import Location

logger = logging.getLogger(__name__)

# Environment configuration
GOOGLE_MAPS_API_KEY = os.environ.get('GOOGLE_MAPS_API_KEY', '')
GEOCODER_BASE_URL = os.environ.get('GEOCODER_BASE_URL', 'https://maps.googleapis.com/maps/api')
GEOCODER_TIMEOUT_SECONDS = float(os.environ.get('GEOCODER_TIMEOUT_SECONDS', '5'))


class GeocodingError(Exception):
    """Raised when geocoding fails."""
    pass


class LocationNotFoundError(GeocodingError):
    """Raised when the geocoder has no match for a place name."""
    pass


class RateLimitedError(GeocodingError):
    """Raised when the geocoder rejects a request for exceeding its quota."""
    pass


class GeocodingNetworkError(GeocodingError):
    """Raised when the geocoder cannot be reached."""
    pass


def _google_request(endpoint: str, params: Dict[str, Any], api_key: str) -> Dict[str, Any]:
    """
    Call a Google Maps JSON endpoint and return the decoded body.
    Maps HTTP and API status failures onto GeocodingError subclasses.
    """
    if not api_key:
        raise GeocodingError("No Google Maps API key configured")

    try:
        response = requests.get(
            f"{GEOCODER_BASE_URL}/{endpoint}/json",
            params={**params, 'key': api_key},
            timeout=GEOCODER_TIMEOUT_SECONDS
        )
        if response.status_code == 429:
            raise RateLimitedError(f"Google Maps {endpoint} rate limit exceeded")
        response.raise_for_status()
        data = response.json()
    except requests.JSONDecodeError as e:
        logger.error(f"Invalid Google Maps {endpoint} response: {e}")
        raise GeocodingError("Invalid geocoding response")
    except requests.RequestException as e:
        logger.error(f"Google Maps {endpoint} request failed: {e}")
        raise GeocodingNetworkError(f"Geocoding service error: {str(e)}")

    status = data.get('status')
    if status == 'OK':
        return data
    if status == 'ZERO_RESULTS':
        raise LocationNotFoundError(f"No {endpoint} results for {params}")
    if status == 'OVER_QUERY_LIMIT':
        raise RateLimitedError(f"Google Maps {endpoint} quota exceeded")

    message = data.get('error_message', status)
    logger.error(f"Google Maps {endpoint} returned {status}: {message}")
    raise GeocodingError(f"Geocoding service rejected request: {message}")


def _address_labels(result: Dict[str, Any]) -> Tuple[str, str]:
    """Pull city and region names out of a geocoding result."""
    city = ''
    region = ''
    for component in result.get('address_components', []):
        types = component.get('types', [])
        if 'locality' in types and not city:
            city = component.get('long_name', '')
        elif 'administrative_area_level_1' in types and not region:
            region = component.get('short_name', '')
    return city, region


def geocode_with_google(query: str, api_key: str) -> Tuple[float, float, str, str]:
    """
    Geocode a place name.
    Returns (lat, lon, city, region).
    """
    data = _google_request('geocode', {'address': query}, api_key)

    results = data.get('results') or []
    if not results:
        raise LocationNotFoundError(f"No results found for query: {query}")

    try:
        result = results[0]
        lat = float(result['geometry']['location']['lat'])
        lon = float(result['geometry']['location']['lng'])
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Invalid geocoding result for '{query}': {e}")
        raise GeocodingError("Invalid geocoding response")

    city, region = _address_labels(result)
    return lat, lon, city, region


def elevation_with_google(lat: float, lon: float, api_key: str) -> float:
    """Ground elevation in metres at the given coordinates."""
    data = _google_request('elevation', {'locations': f"{lat},{lon}"}, api_key)

    try:
        return float(data['results'][0]['elevation'])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        logger.error(f"Invalid elevation result for ({lat}, {lon}): {e}")
        raise GeocodingError("Invalid elevation response")


@lru_cache(maxsize=1000)
def resolve_place(place_name: str, api_key: Optional[str] = None) -> Location:
    """
    Resolve a free-text place name to a Location.
    Altitude is converted from the service's metres to kilometres.
    """
    key = api_key or GOOGLE_MAPS_API_KEY

    lat, lon, city, region = geocode_with_google(place_name, key)
    elevation_m = elevation_with_google(lat, lon, key)

    logger.info(f"Google Maps resolved '{place_name}' to ({lat}, {lon}, {elevation_m}m)")
    return Location(
        latitude=lat,
        longitude=lon,
        altitude=elevation_m / 1000.0,
        city=city,
        region=region
    )


def parse_gps_string(gps: str) -> Tuple[float, float]:
    """
    Parse GPS coordinate string "lat,lon".
    Returns (lat, lon) tuple.
    """
    try:
        parts = gps.strip().split(',')
        if len(parts) != 2:
            raise ValueError("GPS string must be 'lat,lon' format")

        lat = float(parts[0].strip())
        lon = float(parts[1].strip())

        if not (-90 <= lat <= 90):
            raise ValueError(f"Latitude {lat} out of range [-90, 90]")
        if not (-180 <= lon <= 180):
            raise ValueError(f"Longitude {lon} out of range [-180, 180]")

        return lat, lon

    except (ValueError, IndexError) as e:
        raise ValueError(f"Invalid GPS string format: {str(e)}")


def resolve_location(params: Dict[str, Any],
                     resolver: Callable[[str], Location] = resolve_place) -> Location:
    """
    Resolve location from various input formats.

    Supports:
    - lat, lon (direct coordinates, optional altitude_km)
    - gps (string "lat,lon")
    - place (free-text name, looked up through resolver)

    Returns Location.
    """
    altitude = float(params.get('altitude_km', 0.0))

    # Direct coordinates
    if 'lat' in params and 'lon' in params:
        return Location(float(params['lat']), float(params['lon']), altitude)

    # GPS string
    if 'gps' in params:
        lat, lon = parse_gps_string(params['gps'])
        return Location(lat, lon, altitude)

    # Place name
    if 'place' in params:
        return resolver(params['place'])

    raise ValueError("No valid location parameters provided")
