# -*- coding: utf-8 -*-
"""Geocoding base interfaces.
Normalized result dataclass, provider protocol and the error taxonomy shared
by every provider implementation.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple


class CoordkitError(Exception):
    """Base class for errors raised by coordkit."""


class GeocodingError(CoordkitError):
    """Upstream call failed or returned malformed data."""


class UnsupportedProviderError(CoordkitError):
    def __init__(self, provider_id: str):
        super().__init__(f"Unsupported provider: {provider_id}")
        self.provider_id = provider_id


class MissingCredentialError(CoordkitError):
    def __init__(self, provider_id: str, display_name: str = ''):
        name = display_name or provider_id
        super().__init__(f"{name} API key not configured")
        self.provider_id = provider_id


def validate_coordinates(lat: float, lon: float) -> None:
    if not -90 <= lat <= 90:
        raise ValueError(f"Latitude out of range: {lat}")
    if not -180 <= lon <= 180:
        raise ValueError(f"Longitude out of range: {lon}")


BoundingBox = Tuple[float, float, float, float]  # south, north, west, east


@dataclass
class GeocodeResult:
    latitude: float
    longitude: float
    formatted_address: str
    provider_label: str
    details: Dict[str, str] = field(default_factory=dict)
    bounding_box: Optional[BoundingBox] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        validate_coordinates(self.latitude, self.longitude)

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot used for history records (raw payload excluded)."""
        return {
            'lat': self.latitude,
            'lon': self.longitude,
            'address': self.formatted_address,
            'details': dict(self.details),
            'boundingBox': list(self.bounding_box) if self.bounding_box else None,
            'provider': self.provider_label,
        }


def make_result(lat: Any, lon: Any, address: Any, provider_label: str, **kwargs) -> GeocodeResult:
    """Build a result from loosely typed upstream values.
    Non-numeric or out-of-range coordinates become GeocodingError.
    """
    try:
        return GeocodeResult(
            latitude=float(lat),
            longitude=float(lon),
            formatted_address=str(address or ''),
            provider_label=provider_label,
            **kwargs,
        )
    except (TypeError, ValueError) as e:
        raise GeocodingError(f"{provider_label}: malformed coordinates ({e})") from e


def clean_details(values: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Drop empty values and stringify the rest."""
    if not isinstance(values, dict):
        return {}
    out: Dict[str, str] = {}
    for k, v in values.items():
        if v is None or v == '' or isinstance(v, (dict, list)):
            continue
        out[str(k)] = str(v)
    return out


class IGeocoder(Protocol):
    provider_id: str
    label: str

    def geocode(self, address: str, limit: int = 5) -> List[GeocodeResult]: ...

    def reverse_geocode(self, lat: float, lon: float) -> Optional[GeocodeResult]: ...
