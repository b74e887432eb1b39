"""
AWS Lambda handler for the solarhours API.
Handles /solar and /healthz endpoints.
"""

import os
import json
import logging
import time
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from .angles import DAYS_PER_YEAR, InvalidInputError, normalize_day
from .geo import (
    resolve_location, GeocodingError, GeocodingNetworkError,
    LocationNotFoundError, RateLimitedError
)
from .sun import solar_day, solar_days_for_range, solar_position, format_minutes

# Configure logging
log_level = os.environ.get('LOG_LEVEL', 'INFO')
logging.basicConfig(level=getattr(logging, log_level))
logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.environ.get('ENV', 'dev')
MAX_RANGE_DAYS = int(os.environ.get('MAX_RANGE_DAYS', '366'))

# Build info
BUILD_SHA = os.environ.get('BUILD_SHA', 'unknown')
BUILD_DATE = os.environ.get('BUILD_DATE', 'unknown')

VERSION = '1.0.0'


def create_response(status_code: int, body: Any, headers: Optional[Dict] = None) -> Dict:
    """Create Lambda response with CORS headers."""
    default_headers = {
        'Content-Type': 'application/json',
        'Access-Control-Allow-Origin': '*',
        'Access-Control-Allow-Methods': 'GET, OPTIONS',
        'Access-Control-Allow-Headers': 'Content-Type',
        'X-SolarHours-Version': VERSION,
        'X-SolarHours-Environment': ENV
    }

    if headers:
        default_headers.update(headers)

    return {
        'statusCode': status_code,
        'headers': default_headers,
        'body': json.dumps(body) if not isinstance(body, str) else body
    }


def parse_time_of_day(value: str) -> float:
    """Parse 'HH:MM' or plain minutes past midnight."""
    if ':' in value:
        hours, minutes = value.split(':', 1)
        return int(hours) * 60 + int(minutes)
    return float(value)


def day_of_year(date: datetime) -> int:
    """Zero-based day of the year. Dec 31 of a leap year stays on the last day."""
    return min(date.timetuple().tm_yday - 1, DAYS_PER_YEAR - 1)


def parse_query_parameters(event: Dict) -> Dict[str, Any]:
    """Parse and validate query parameters from API Gateway event."""
    params = event.get('queryStringParameters') or {}

    parsed = {}

    # Location parameters
    if 'lat' in params:
        parsed['lat'] = float(params['lat'])
    if 'lon' in params:
        parsed['lon'] = float(params['lon'])
    if 'altitude_km' in params:
        parsed['altitude_km'] = float(params['altitude_km'])
    if 'gps' in params:
        parsed['gps'] = params['gps']
    if 'place' in params:
        parsed['place'] = params['place'].strip()

    # Day parameters (0 = January 1)
    if 'day' in params:
        parsed['day'] = int(params['day'])
    if 'date' in params:
        date = datetime.fromisoformat(params['date']).replace(tzinfo=timezone.utc)
        parsed['day'] = day_of_year(date)
    if 'start_day' in params:
        parsed['start_day'] = int(params['start_day'])
    if 'end_day' in params:
        parsed['end_day'] = int(params['end_day'])

    if 'time' in params:
        parsed['time'] = parse_time_of_day(params['time'])

    return parsed


def format_day(day: Dict[str, Any]) -> Dict[str, Any]:
    """Add HH:MM renderings of the day's event times."""
    formatted = dict(day)
    for key in ('sunrise', 'sunset', 'sunrise_clock', 'sunset_clock'):
        formatted[f'{key}_hhmm'] = format_minutes(day[key])
    return formatted


def handle_solar_endpoint(event: Dict) -> Dict:
    """Handle GET /solar endpoint."""
    start_time = time.time()

    try:
        # Parse parameters
        try:
            params = parse_query_parameters(event)
        except ValueError as e:
            return create_response(400, {
                'error': 'Invalid parameters',
                'message': str(e)
            })

        # Resolve location
        try:
            location = resolve_location(params)
        except LocationNotFoundError as e:
            logger.error(f"Location not found: {e}")
            return create_response(404, {
                'error': 'Location not found',
                'message': str(e)
            })
        except RateLimitedError as e:
            logger.error(f"Geocoder rate limited: {e}")
            return create_response(429, {
                'error': 'Geocoder rate limited',
                'message': str(e)
            })
        except GeocodingNetworkError as e:
            logger.error(f"Geocoder unreachable: {e}")
            return create_response(502, {
                'error': 'Geocoder unavailable',
                'message': str(e)
            })
        except (GeocodingError, ValueError) as e:
            logger.error(f"Location resolution failed: {e}")
            return create_response(400, {
                'error': 'Invalid location parameters',
                'message': str(e)
            })

        # Determine day range
        if 'start_day' in params and 'end_day' in params:
            start_day = params['start_day']
            end_day = params['end_day']

            days_count = end_day - start_day + 1
            if days_count > MAX_RANGE_DAYS:
                return create_response(400, {
                    'error': 'Day range too large',
                    'message': f'Maximum range is {MAX_RANGE_DAYS} days, requested {days_count} days'
                })
            if days_count < 1:
                return create_response(400, {
                    'error': 'Invalid day range',
                    'message': 'End day must be after or equal to start day'
                })
        else:
            # Default to today
            day = params.get('day', day_of_year(datetime.now(timezone.utc)))
            start_day = end_day = normalize_day(day)

        # Calculate daily aggregates
        if start_day == end_day:
            days = [format_day(solar_day(start_day, location))]
        else:
            days = [format_day(d) for d in solar_days_for_range(start_day, end_day, location)]

        # Instantaneous position
        position = None
        if 'time' in params:
            try:
                position = solar_position(params['time'], start_day, location)
            except InvalidInputError as e:
                return create_response(400, {
                    'error': 'Invalid time of day',
                    'message': str(e)
                })

        # Calculate processing time
        compute_time_ms = int((time.time() - start_time) * 1000)

        # Build response
        response_body = {
            'request': {
                'lat': round(location.latitude, 6),
                'lon': round(location.longitude, 6),
                'altitude_km': round(location.altitude, 4),
                'place': location.label or None,
            },
            'days': days,
            'meta': {
                'computed_in_ms': compute_time_ms
            }
        }

        if start_day == end_day:
            response_body['request']['day'] = start_day
        else:
            response_body['request']['start_day'] = start_day
            response_body['request']['end_day'] = end_day

        if position is not None:
            response_body['request']['time'] = params['time']
            response_body['position'] = position

        return create_response(200, response_body)

    except Exception as e:
        logger.exception(f"Unexpected error in solar endpoint: {e}")
        return create_response(500, {
            'error': 'Internal server error',
            'message': 'An unexpected error occurred'
        })


def handle_healthz_endpoint(event: Dict) -> Dict:
    """Handle GET /healthz endpoint."""
    return create_response(200, {
        'status': 'healthy',
        'service': 'SolarHours',
        'version': VERSION,
        'environment': ENV,
        'build': {
            'sha': BUILD_SHA,
            'date': BUILD_DATE
        },
        'config': {
            'max_range_days': MAX_RANGE_DAYS
        }
    })


def lambda_handler(event: Dict, context: Any) -> Dict:
    """
    Main Lambda handler function.
    Routes requests to appropriate endpoint handlers.
    """
    logger.info(f"Request: {event.get('httpMethod')} {event.get('path')}")

    # Handle CORS preflight
    if event.get('httpMethod') == 'OPTIONS':
        return create_response(200, '')

    path = event.get('path', '/')

    if path == '/solar' and event.get('httpMethod') == 'GET':
        return handle_solar_endpoint(event)
    elif path == '/healthz' and event.get('httpMethod') == 'GET':
        return handle_healthz_endpoint(event)
    else:
        return create_response(404, {
            'error': 'Not found',
            'message': f"Unknown endpoint: {event.get('httpMethod')} {path}"
        })
