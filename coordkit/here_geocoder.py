"""HERE Geocoding & Search API (geocode and revgeocode endpoints).
Endpoints are fixed; the key comes from the gateway.
"""
from __future__ import annotations
from typing import List, Optional

from .geocoding_base import GeocodeResult, GeocodingError, IGeocoder, MissingCredentialError, clean_details, make_result
from .webapi import get_json


class HereGeocoder(IGeocoder):
    provider_id = 'here'
    label = 'HERE'
    GEOCODE_URL = 'https://geocode.search.hereapi.com/v1/geocode'
    REVGEOCODE_URL = 'https://revgeocode.search.hereapi.com/v1/revgeocode'

    def __init__(self, api_key: str):
        if not api_key:
            raise MissingCredentialError(self.provider_id, 'HERE')
        self.key = api_key

    def _items(self, url: str, params: dict) -> List[dict]:
        js = get_json(url, params=dict(params, apiKey=self.key))
        if not isinstance(js, dict):
            raise GeocodingError('HERE: unexpected response')
        if 'items' not in js and (js.get('error') or js.get('title')):
            raise GeocodingError(f"HERE: {js.get('error_description') or js.get('title') or js.get('error')}")
        return js.get('items') or []

    def _to_result(self, item: dict) -> GeocodeResult:
        pos = item.get('position') or {}
        return make_result(
            pos.get('lat'), pos.get('lng'), item.get('title'), self.label,
            details=clean_details(item.get('address')),
            raw=item,
        )

    def geocode(self, address: str, limit: int = 5) -> List[GeocodeResult]:
        q = (address or '').strip()
        if not q:
            return []
        return [self._to_result(it) for it in self._items(self.GEOCODE_URL, {'q': q, 'limit': limit})]

    def reverse_geocode(self, lat: float, lon: float) -> Optional[GeocodeResult]:
        items = self._items(self.REVGEOCODE_URL, {'at': f'{lat},{lon}'})
        if not items:
            return None
        return self._to_result(items[0])
