"""Central provider registry: internal IDs, display names and credential keys.
Modify here to reflect across the CLI, settings defaults and the gateway."""
from __future__ import annotations
from typing import Iterator, NamedTuple


class ProviderInfo(NamedTuple):
    provider_id: str
    display_name: str
    label: str  # short source name shown on results
    requires_credential: bool


# Ordered; osm is the no-key baseline and must stay first
PROVIDERS = [
    ProviderInfo("osm", "OpenStreetMap (Nominatim)", "OpenStreetMap", False),
    ProviderInfo("google", "Google Maps API", "Google Maps", True),
    ProviderInfo("mapbox", "Mapbox API", "Mapbox", True),
    ProviderInfo("here", "HERE API", "HERE", True),
]

BASELINE_PROVIDER = "osm"

# Fast lookup dict
_BY_ID = {p.provider_id: p for p in PROVIDERS}


def is_known(provider_id: str | None) -> bool:
    return provider_id in _BY_ID


def get_info(provider_id: str) -> ProviderInfo:
    """Raises KeyError for unknown ids; callers translate as needed."""
    return _BY_ID[provider_id]


def get_display_name(provider_id: str | None) -> str:
    if not provider_id:
        return ""
    info = _BY_ID.get(provider_id)
    return info.display_name if info else provider_id


def credential_key(provider_id: str) -> str:
    return f"{provider_id.upper()}_API_KEY"


def iter_providers() -> Iterator[ProviderInfo]:
    """Yield providers preserving declaration order."""
    yield from PROVIDERS
