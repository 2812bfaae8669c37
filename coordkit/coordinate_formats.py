# -*- coding: utf-8 -*-
"""Coordinate notation conversions.

DMS / DM strings, WGS84 UTM (with the legacy approximate grid kept apart),
geohash and Open Location Code. MGRS is not provided.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict

from .geocoding_base import validate_coordinates

_DIRECTIONS = {'lat': ('N', 'S'), 'lon': ('E', 'W')}


def _direction(decimal: float, axis: str) -> str:
    try:
        pos, neg = _DIRECTIONS[axis]
    except KeyError:
        raise ValueError(f"axis must be 'lat' or 'lon', got {axis!r}") from None
    return pos if decimal >= 0 else neg


def to_dms(decimal: float, axis: str) -> str:
    """48.8566 -> 48° 51' 23.76" N"""
    direction = _direction(decimal, axis)
    absolute = abs(decimal)
    degrees = math.floor(absolute)
    minutes_float = (absolute - degrees) * 60
    minutes = math.floor(minutes_float)
    seconds = round((minutes_float - minutes) * 60, 2)
    if seconds >= 60:
        seconds -= 60
        minutes += 1
    if minutes >= 60:
        minutes -= 60
        degrees += 1
    return f"{degrees}° {minutes}' {seconds:.2f}\" {direction}"


def to_dm(decimal: float, axis: str) -> str:
    """48.8566 -> 48° 51.3960' N"""
    direction = _direction(decimal, axis)
    absolute = abs(decimal)
    degrees = math.floor(absolute)
    minutes = round((absolute - degrees) * 60, 4)
    if minutes >= 60:
        minutes -= 60
        degrees += 1
    return f"{degrees}° {minutes:.4f}' {direction}"


def to_simplified_utm(lat: float, lon: float) -> Dict[str, object]:
    """Legacy zone/grid numbers from a flat 111320 m-per-degree scale.
    Not a UTM projection; kept so older outputs can be reproduced.
    """
    zone = math.floor((lon + 180) / 6) + 1
    hemisphere = 'N' if lat >= 0 else 'S'
    easting = ((lon + 180) % 6) * 111320
    northing = lat * 111320
    return {
        'zone': f'{zone}{hemisphere}',
        'hemisphere': hemisphere,
        'easting': round(abs(easting)),
        'northing': round(abs(northing)),
        'approximate': True,
    }


# ---- UTM (WGS84, Snyder's transverse Mercator series) ----
_A = 6378137.0
_F = 1 / 298.257223563
_K0 = 0.9996
_E2 = _F * (2 - _F)
_EP2 = _E2 / (1 - _E2)
_BANDS = 'CDEFGHJKLMNPQRSTUVWXX'


@dataclass(frozen=True)
class UTMCoordinate:
    zone: int
    band: str
    hemisphere: str
    easting: float
    northing: float

    def __str__(self) -> str:
        return f"{self.zone}{self.band} {self.easting:.0f}mE {self.northing:.0f}mN"


def utm_zone(lat: float, lon: float) -> int:
    if lon >= 180:
        return 60
    zone = int(math.floor((lon + 180) / 6)) + 1
    # Norway
    if 56 <= lat < 64 and 3 <= lon < 12:
        return 32
    # Svalbard
    if 72 <= lat < 84:
        if 0 <= lon < 9:
            return 31
        if 9 <= lon < 21:
            return 33
        if 21 <= lon < 33:
            return 35
        if 33 <= lon < 42:
            return 37
    return zone


def to_utm(lat: float, lon: float) -> UTMCoordinate:
    validate_coordinates(lat, lon)
    if not -80 <= lat <= 84:
        raise ValueError(f"UTM is defined for latitudes -80..84, got {lat}")
    zone = utm_zone(lat, lon)
    lon0 = (zone - 1) * 6 - 180 + 3
    phi = math.radians(lat)
    lam = math.radians(lon - lon0)
    sin_phi, cos_phi, tan_phi = math.sin(phi), math.cos(phi), math.tan(phi)

    n = _A / math.sqrt(1 - _E2 * sin_phi ** 2)
    t = tan_phi ** 2
    c = _EP2 * cos_phi ** 2
    a = cos_phi * lam
    e4, e6 = _E2 ** 2, _E2 ** 3
    m = _A * (
        (1 - _E2 / 4 - 3 * e4 / 64 - 5 * e6 / 256) * phi
        - (3 * _E2 / 8 + 3 * e4 / 32 + 45 * e6 / 1024) * math.sin(2 * phi)
        + (15 * e4 / 256 + 45 * e6 / 1024) * math.sin(4 * phi)
        - (35 * e6 / 3072) * math.sin(6 * phi)
    )

    easting = _K0 * n * (
        a + (1 - t + c) * a ** 3 / 6
        + (5 - 18 * t + t ** 2 + 72 * c - 58 * _EP2) * a ** 5 / 120
    ) + 500000.0
    northing = _K0 * (m + n * tan_phi * (
        a ** 2 / 2
        + (5 - t + 9 * c + 4 * c ** 2) * a ** 4 / 24
        + (61 - 58 * t + t ** 2 + 600 * c - 330 * _EP2) * a ** 6 / 720
    ))
    if lat < 0:
        northing += 10000000.0
    band = _BANDS[int(math.floor((lat + 80) / 8))]
    return UTMCoordinate(zone, band, 'N' if lat >= 0 else 'S', easting, northing)


# ---- geohash ----
_GEOHASH_BASE32 = '0123456789bcdefghjkmnpqrstuvwxyz'


def to_geohash(lat: float, lon: float, precision: int = 9) -> str:
    validate_coordinates(lat, lon)
    lat_lo, lat_hi = -90.0, 90.0
    lon_lo, lon_hi = -180.0, 180.0
    out = []
    bits = 0
    ch = 0
    even = True
    while len(out) < precision:
        if even:
            mid = (lon_lo + lon_hi) / 2
            if lon > mid:
                ch = (ch << 1) | 1
                lon_lo = mid
            else:
                ch <<= 1
                lon_hi = mid
        else:
            mid = (lat_lo + lat_hi) / 2
            if lat > mid:
                ch = (ch << 1) | 1
                lat_lo = mid
            else:
                ch <<= 1
                lat_hi = mid
        even = not even
        bits += 1
        if bits == 5:
            out.append(_GEOHASH_BASE32[ch])
            bits = 0
            ch = 0
    return ''.join(out)


# ---- Open Location Code (plus codes), full 10-digit codes ----
_OLC_ALPHABET = '23456789CFGHJMPQRVWX'
_OLC_PAIR_LENGTH = 10
_OLC_GRID_LENGTH = 5
_OLC_LAT_PRECISION = 8000 * 5 ** _OLC_GRID_LENGTH
_OLC_LNG_PRECISION = 8000 * 4 ** _OLC_GRID_LENGTH


def to_plus_code(lat: float, lon: float) -> str:
    validate_coordinates(lat, lon)
    if lat >= 90:
        lat = 90 - 20 ** (2 - _OLC_PAIR_LENGTH / 2)
    if lon >= 180:
        lon -= 360
    lat_val = int(round((lat + 90) * _OLC_LAT_PRECISION, 6)) // 5 ** _OLC_GRID_LENGTH
    lng_val = int(round((lon + 180) * _OLC_LNG_PRECISION, 6)) // 4 ** _OLC_GRID_LENGTH
    code = ''
    for _ in range(_OLC_PAIR_LENGTH // 2):
        code = _OLC_ALPHABET[lng_val % 20] + code
        code = _OLC_ALPHABET[lat_val % 20] + code
        lat_val //= 20
        lng_val //= 20
    return code[:8] + '+' + code[8:]


def map_links(lat: float, lon: float) -> Dict[str, str]:
    return {
        'Google Maps': f'https://maps.google.com/?q={lat},{lon}',
        'Apple Maps': f'https://maps.apple.com/?q={lat},{lon}',
        'OpenStreetMap': f'https://www.openstreetmap.org/?mlat={lat}&mlon={lon}&zoom=15',
    }
