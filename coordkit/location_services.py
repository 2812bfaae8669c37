"""Single-call clients for the auxiliary geo-data APIs.

sunrise-sunset.org, Open-Elevation, TimeZoneDB and Overpass. Each function
performs one request and either returns a parsed value or raises
GeocodingError.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date as date_cls, datetime, timezone
from typing import List, Optional

from .geocoding_base import GeocodingError, validate_coordinates
from .geometry import distance
from .webapi import get_json, post_json

logger = logging.getLogger(__name__)

SUNRISE_SUNSET_URL = 'https://api.sunrise-sunset.org/json'
OPEN_ELEVATION_URL = 'https://api.open-elevation.com/api/v1/lookup'
TIMEZONEDB_URL = 'https://api.timezonedb.com/v2.1/get-time-zone'
OVERPASS_URL = 'https://overpass-api.de/api/interpreter'

SUN_EVENTS = [
    ('sunrise', 'Sunrise'),
    ('sunset', 'Sunset'),
    ('civil_twilight_begin', 'Civil Twilight Begin'),
    ('civil_twilight_end', 'Civil Twilight End'),
    ('nautical_twilight_begin', 'Nautical Twilight Begin'),
    ('nautical_twilight_end', 'Nautical Twilight End'),
    ('astronomical_twilight_begin', 'Astronomical Twilight Begin'),
    ('astronomical_twilight_end', 'Astronomical Twilight End'),
    ('solar_noon', 'Solar Noon'),
]


@dataclass
class SunTimes:
    day: date_cls
    events: dict  # event key -> aware UTC datetime

    @property
    def day_length_minutes(self) -> int:
        return int((self.events['sunset'] - self.events['sunrise']).total_seconds() // 60)


def sun_times(lat: float, lon: float, day: Optional[date_cls] = None) -> SunTimes:
    validate_coordinates(lat, lon)
    day = day or date_cls.today()
    js = get_json(SUNRISE_SUNSET_URL, params={
        'lat': lat, 'lng': lon, 'date': day.isoformat(), 'formatted': 0,
    })
    if not isinstance(js, dict) or js.get('status') != 'OK':
        status = js.get('status') if isinstance(js, dict) else None
        raise GeocodingError(f"sunrise-sunset.org: {status or 'unexpected response'}")
    results = js.get('results') or {}
    events = {}
    try:
        for key, _label in SUN_EVENTS:
            events[key] = datetime.fromisoformat(results[key]).astimezone(timezone.utc)
    except (KeyError, TypeError, ValueError) as e:
        raise GeocodingError(f"sunrise-sunset.org: malformed times ({e})") from e
    return SunTimes(day=day, events=events)


def elevation(lat: float, lon: float) -> Optional[float]:
    """Meters above sea level, or None when the service has no value."""
    validate_coordinates(lat, lon)
    js = post_json(OPEN_ELEVATION_URL, payload={'locations': [{'latitude': lat, 'longitude': lon}]})
    results = js.get('results') if isinstance(js, dict) else None
    if not results:
        return None
    value = results[0].get('elevation')
    return float(value) if value is not None else None


def describe_elevation(meters: float) -> str:
    if meters < 0:
        return 'below sea level'
    if meters > 3000:
        return 'high altitude'
    if meters > 1000:
        return 'moderate elevation'
    return 'low elevation'


@dataclass
class TimezoneInfo:
    zone_name: str
    country_code: str
    local_time: datetime
    gmt_offset: int  # seconds
    dst: bool

    @property
    def utc_offset_label(self) -> str:
        hours = self.gmt_offset / 3600
        text = f'{hours:g}'
        return f"UTC{'+' if self.gmt_offset >= 0 else ''}{text}"


def timezone_info(lat: float, lon: float, api_key: Optional[str] = None) -> TimezoneInfo:
    validate_coordinates(lat, lon)
    key = api_key or os.environ.get('TIMEZONEDB_API_KEY') or 'demo'
    js = get_json(TIMEZONEDB_URL, params={
        'key': key, 'format': 'json', 'by': 'position', 'lat': lat, 'lng': lon,
    })
    if not isinstance(js, dict) or js.get('status') != 'OK':
        msg = js.get('message') if isinstance(js, dict) else None
        raise GeocodingError(f"TimeZoneDB: {msg or 'lookup failed'}")
    try:
        # TimeZoneDB's timestamp is already shifted to local wall time
        local = datetime.fromtimestamp(int(js['timestamp']), tz=timezone.utc).replace(tzinfo=None)
        return TimezoneInfo(
            zone_name=str(js.get('zoneName', '')),
            country_code=str(js.get('countryCode', '')),
            local_time=local,
            gmt_offset=int(js.get('gmtOffset', 0)),
            dst=str(js.get('dst', '0')) not in ('0', 'False', 'false', ''),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise GeocodingError(f"TimeZoneDB: malformed response ({e})") from e


def estimate_utc_offset(lon: float) -> int:
    """Whole-hour offset from longitude alone."""
    return int(round(lon / 15))


@dataclass
class Place:
    name: str
    kind: str
    lat: float
    lon: float
    distance_m: float


def overpass_query(lat: float, lon: float, radius_m: int) -> str:
    around = f'around:{int(radius_m)},{lat},{lon}'
    return (
        '[out:json][timeout:25];\n'
        '(\n'
        f'  node["amenity"~"restaurant|cafe|hospital|bank|school|hotel"]({around});\n'
        f'  node["shop"]({around});\n'
        ');\n'
        'out center meta;\n'
    )


def nearby_places(lat: float, lon: float, radius_m: int = 1000, limit: int = 10) -> List[Place]:
    validate_coordinates(lat, lon)
    if radius_m <= 0:
        raise ValueError('radius must be positive')
    js = post_json(OVERPASS_URL, body=overpass_query(lat, lon, radius_m))
    elements = js.get('elements') if isinstance(js, dict) else None
    places: List[Place] = []
    for el in elements or []:
        if el.get('lat') is None or el.get('lon') is None:
            continue
        tags = el.get('tags') or {}
        p_lat, p_lon = float(el['lat']), float(el['lon'])
        places.append(Place(
            name=tags.get('name') or 'Unknown',
            kind=tags.get('amenity') or tags.get('shop') or 'place',
            lat=p_lat,
            lon=p_lon,
            distance_m=distance((lat, lon), (p_lat, p_lon)),
        ))
    places.sort(key=lambda p: p.distance_m)
    logger.debug("overpass returned %d places around %s,%s", len(places), lat, lon)
    return places[:limit]
