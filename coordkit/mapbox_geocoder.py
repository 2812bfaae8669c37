"""Mapbox Geocoding API implementation (forward and reverse).
Requires access token. Feature centers are [lon, lat].
"""
from __future__ import annotations
import urllib.parse
from typing import Dict, List, Optional

from .geocoding_base import BoundingBox, GeocodeResult, GeocodingError, IGeocoder, MissingCredentialError, make_result
from .webapi import get_json


def fold_context(context) -> Dict[str, str]:
    """{'id': 'postcode.123', 'text': '75001'} -> {'postcode': '75001'}"""
    details: Dict[str, str] = {}
    for ctx in context or []:
        if not isinstance(ctx, dict):
            continue
        prefix = str(ctx.get('id', '')).split('.')[0]
        if prefix and ctx.get('text'):
            details[prefix] = str(ctx['text'])
    return details


def _parse_bbox(raw) -> Optional[BoundingBox]:
    # Mapbox: [west, south, east, north]
    if not isinstance(raw, list) or len(raw) != 4:
        return None
    try:
        w, s, e, n = (float(v) for v in raw)
    except (TypeError, ValueError):
        return None
    return (s, n, w, e)


class MapboxGeocoder(IGeocoder):
    provider_id = 'mapbox'
    label = 'Mapbox'
    BASE_URL = 'https://api.mapbox.com/geocoding/v5/mapbox.places'

    def __init__(self, access_token: str):
        if not access_token:
            raise MissingCredentialError(self.provider_id, 'Mapbox')
        self.token = access_token

    def _features(self, path: str, params: dict) -> List[dict]:
        url = f"{self.BASE_URL}/{path}.json"
        js = get_json(url, params=dict(params, access_token=self.token))
        if not isinstance(js, dict):
            raise GeocodingError('Mapbox: unexpected response')
        if js.get('message') and 'features' not in js:
            raise GeocodingError(f"Mapbox: {js['message']}")
        return js.get('features') or []

    def _to_result(self, f: dict) -> GeocodeResult:
        center = f.get('center') or [None, None]
        if len(center) < 2:
            raise GeocodingError('Mapbox: feature without center')
        return make_result(
            center[1], center[0], f.get('place_name'), self.label,
            details=fold_context(f.get('context')),
            bounding_box=_parse_bbox(f.get('bbox')),
            raw=f,
        )

    def geocode(self, address: str, limit: int = 5) -> List[GeocodeResult]:
        q = (address or '').strip()
        if not q:
            return []
        return [self._to_result(f) for f in self._features(urllib.parse.quote(q), {'limit': limit})]

    def reverse_geocode(self, lat: float, lon: float) -> Optional[GeocodeResult]:
        feats = self._features(f'{lon},{lat}', {})
        if not feats:
            return None
        return self._to_result(feats[0])
