# -*- coding: utf-8 -*-
"""Coordinate parsing utilities.
Normalizes decimal, DMS and DM text (with optional hemisphere letter) to
decimal degrees. Accepts the strings produced by coordinate_formats.
"""
from __future__ import annotations
import re

# degrees[°] [minutes['] [seconds["]]] [N/S/E/W]
DMS_RE = re.compile(r"""^\s*
    (?P<deg>[-+]?\d+(?:\.\d+)?)
    (?:[°º\s]\s*(?P<min>\d+(?:\.\d+)?)
        (?:(?:['’′]\s*|\s+)(?P<sec>\d+(?:\.\d+)?)["”″]?|['’′])?
    )?
    [°º]?\s*(?P<hem>[NnSsEeWw])?\s*$
""", re.VERBOSE)

HEM_SIGNS = {
    'N': 1, 'n': 1,
    'E': 1, 'e': 1,
    'S': -1, 's': -1,
    'W': -1, 'w': -1,
}


def parse_dms(text: str) -> float:
    m = DMS_RE.match(text or '')
    if not m:
        # plain float as a last try
        try:
            return float(text.strip())
        except (AttributeError, ValueError) as e:
            raise ValueError(f"Cannot parse coordinate: {text}") from e
    deg = float(m.group('deg'))
    minutes = m.group('min')
    seconds = m.group('sec')
    hem = m.group('hem')
    val = abs(deg)
    if minutes is not None:
        val += float(minutes) / 60.0
    if seconds is not None:
        val += float(seconds) / 3600.0
    # explicit sign on degrees, overridden by a hemisphere letter
    sign = -1 if m.group('deg').startswith('-') else 1
    if hem:
        sign = HEM_SIGNS.get(hem, sign)
    return sign * val


def parse_lat(text: str) -> float:
    v = parse_dms(text)
    if not -90 <= v <= 90:
        raise ValueError("Latitude out of range")
    return v


def parse_lon(text: str) -> float:
    v = parse_dms(text)
    if not -180 <= v <= 180:
        raise ValueError("Longitude out of range")
    return v


def parse_pair(text: str) -> tuple[float, float]:
    """'48.85, 2.35' -> (48.85, 2.35)"""
    parts = [p for p in re.split(r'[,;]', text or '') if p.strip()]
    if len(parts) != 2:
        raise ValueError(f"Expected 'lat, lon', got: {text}")
    return parse_lat(parts[0]), parse_lon(parts[1])
