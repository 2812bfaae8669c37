"""Multi-provider geocoding gateway.

Dispatches a forward or reverse lookup to the provider variant registered for
a provider id and hands back normalized `GeocodeResult` objects. The gateway
never records history or touches configuration; callers do that.
"""
from __future__ import annotations
import logging
from typing import Callable, Dict, List, Optional

from .geocoding_base import (
    GeocodeResult,
    GeocodingError,
    IGeocoder,
    MissingCredentialError,
    UnsupportedProviderError,
    validate_coordinates,
)
from .google_geocoder import GoogleGeocoder
from .here_geocoder import HereGeocoder
from .mapbox_geocoder import MapboxGeocoder
from .nominatim_geocoder import NominatimGeocoder
from .provider_registry import get_info
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)

GeocoderFactory = Callable[[str], IGeocoder]

# provider id -> factory taking the credential ('' for keyless providers)
DEFAULT_FACTORIES: Dict[str, GeocoderFactory] = {
    'osm': lambda _key: NominatimGeocoder(),
    'google': GoogleGeocoder,
    'mapbox': MapboxGeocoder,
    'here': HereGeocoder,
}

# shapes we did not expect from an upstream payload
_MALFORMED = (KeyError, IndexError, TypeError, AttributeError)


class GeocodingGateway:
    def __init__(self, settings: SettingsStore, factories: Optional[Dict[str, GeocoderFactory]] = None):
        self.settings = settings
        self.factories = dict(factories if factories is not None else DEFAULT_FACTORIES)

    def geocoder_for(self, provider_id: str) -> IGeocoder:
        """Build the provider variant; credential is checked before any request."""
        if provider_id not in self.factories:
            raise UnsupportedProviderError(provider_id)
        info = get_info(provider_id)
        key = ''
        if info.requires_credential:
            key = self.settings.get_credential(provider_id)
            if not key:
                raise MissingCredentialError(provider_id, info.label)
        return self.factories[provider_id](key)

    def _resolve(self, provider_id: Optional[str]) -> str:
        return provider_id or self.settings.preferred_provider()

    def geocode(self, address: str, provider_id: Optional[str] = None, limit: int = 5) -> List[GeocodeResult]:
        pid = self._resolve(provider_id)
        geocoder = self.geocoder_for(pid)
        logger.debug("geocode via %s: %r", pid, address)
        try:
            return geocoder.geocode(address, limit=limit)
        except _MALFORMED as e:
            raise GeocodingError(f"{geocoder.label}: malformed response ({e!r})") from e

    def reverse_geocode(self, lat: float, lon: float, provider_id: Optional[str] = None) -> Optional[GeocodeResult]:
        validate_coordinates(lat, lon)
        pid = self._resolve(provider_id)
        geocoder = self.geocoder_for(pid)
        logger.debug("reverse geocode via %s: %s,%s", pid, lat, lon)
        try:
            return geocoder.reverse_geocode(lat, lon)
        except _MALFORMED as e:
            raise GeocodingError(f"{geocoder.label}: malformed response ({e!r})") from e
