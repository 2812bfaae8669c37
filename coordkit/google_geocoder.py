# -*- coding: utf-8 -*-
"""Google Geocoding API implementation.
Uses the API key handed over by the gateway. No fallback to other providers.
Address components are folded into a flat details mapping.
"""
from __future__ import annotations
from typing import Dict, List, Optional

from .geocoding_base import GeocodeResult, GeocodingError, IGeocoder, MissingCredentialError, make_result
from .webapi import get_json

# details key -> (component type, use short_name)
COMPONENTS = [
    ('streetNumber', 'street_number', False),
    ('streetName', 'route', False),
    ('city', 'locality', False),
    ('state', 'administrative_area_level_1', False),
    ('country', 'country', False),
    ('countryCode', 'country', True),
    ('zipcode', 'postal_code', False),
]

STATUS_MESSAGES = {
    'OVER_QUERY_LIMIT': 'Over query limit',
    'REQUEST_DENIED': 'Request denied',
    'INVALID_REQUEST': 'Invalid request',
}


def fold_components(components) -> Dict[str, str]:
    by_type: Dict[str, dict] = {}
    for c in components or []:
        if not isinstance(c, dict):
            continue
        for t in c.get('types') or []:
            by_type.setdefault(t, c)
    details: Dict[str, str] = {}
    for key, ctype, short in COMPONENTS:
        comp = by_type.get(ctype)
        if not comp:
            continue
        val = comp.get('short_name' if short else 'long_name')
        if val:
            details[key] = str(val)
    return details


class GoogleGeocoder(IGeocoder):
    provider_id = 'google'
    label = 'Google Maps'
    BASE_URL = 'https://maps.googleapis.com/maps/api/geocode/json'

    def __init__(self, api_key: str):
        if not api_key:
            raise MissingCredentialError(self.provider_id, 'Google')
        self.api_key = api_key

    def _request(self, params: dict) -> List[dict]:
        js = get_json(self.BASE_URL, params=dict(params, key=self.api_key))
        if not isinstance(js, dict):
            raise GeocodingError('Google Maps: unexpected response')
        status = js.get('status')
        if status == 'ZERO_RESULTS':
            return []
        if status != 'OK':
            msg = STATUS_MESSAGES.get(status, status or 'Unknown status')
            if js.get('error_message'):
                msg = f"{msg}: {js['error_message']}"
            raise GeocodingError(f'Google Maps: {msg}')
        return js.get('results') or []

    def _to_result(self, item: dict) -> GeocodeResult:
        loc = (item.get('geometry') or {}).get('location') or {}
        return make_result(
            loc.get('lat'), loc.get('lng'), item.get('formatted_address'), self.label,
            details=fold_components(item.get('address_components')),
            raw=item,
        )

    def geocode(self, address: str, limit: int = 5) -> List[GeocodeResult]:
        addr = (address or '').strip()
        if not addr:
            return []
        results = self._request({'address': addr})
        return [self._to_result(r) for r in results[:limit]]

    def reverse_geocode(self, lat: float, lon: float) -> Optional[GeocodeResult]:
        results = self._request({'latlng': f'{lat},{lon}'})
        if not results:
            return None
        return self._to_result(results[0])
