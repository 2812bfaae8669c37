# -*- coding: utf-8 -*-
"""Nominatim (OpenStreetMap) geocoder: forward search and reverse lookup.
No key required, but the usage policy asks for an identifying User-Agent.
"""
from __future__ import annotations
import os
from typing import List, Optional

from . import __version__
from .geocoding_base import BoundingBox, GeocodeResult, GeocodingError, IGeocoder, clean_details, make_result
from .webapi import get_json

DEFAULT_USER_AGENT = f'coordkit/{__version__}'


def _parse_bbox(raw) -> Optional[BoundingBox]:
    # Nominatim: [south, north, west, east] as strings
    if not isinstance(raw, list) or len(raw) != 4:
        return None
    try:
        s, n, w, e = (float(v) for v in raw)
    except (TypeError, ValueError):
        return None
    return (s, n, w, e)


class NominatimGeocoder(IGeocoder):
    provider_id = 'osm'
    label = 'OpenStreetMap'
    BASE_URL = 'https://nominatim.openstreetmap.org'

    def __init__(self, user_agent: Optional[str] = None, base_url: Optional[str] = None):
        self.user_agent = user_agent or os.environ.get('NOMINATIM_USER_AGENT') or DEFAULT_USER_AGENT
        self.base_url = (base_url or self.BASE_URL).rstrip('/')

    @property
    def headers(self) -> dict:
        return {'User-Agent': self.user_agent, 'Accept-Language': 'en'}

    def _to_result(self, item: dict) -> GeocodeResult:
        return make_result(
            item.get('lat'), item.get('lon'), item.get('display_name'), self.label,
            details=clean_details(item.get('address')),
            bounding_box=_parse_bbox(item.get('boundingbox')),
            raw=item,
        )

    def geocode(self, address: str, limit: int = 5) -> List[GeocodeResult]:
        q = (address or '').strip()
        if not q:
            return []
        params = {'q': q, 'format': 'json', 'limit': limit, 'addressdetails': 1}
        data = get_json(f'{self.base_url}/search', params=params, headers=self.headers)
        if not isinstance(data, list):
            raise GeocodingError('OpenStreetMap: unexpected search response')
        return [self._to_result(item) for item in data]

    def reverse_geocode(self, lat: float, lon: float) -> Optional[GeocodeResult]:
        params = {'lat': lat, 'lon': lon, 'format': 'json', 'addressdetails': 1}
        data = get_json(f'{self.base_url}/reverse', params=params, headers=self.headers)
        if not isinstance(data, dict):
            raise GeocodingError('OpenStreetMap: unexpected reverse response')
        # open ocean and similar places come back as {"error": "Unable to geocode"}
        if data.get('error') or 'display_name' not in data:
            return None
        if data.get('lat') is None:
            data = dict(data, lat=lat, lon=lon)
        return self._to_result(data)
