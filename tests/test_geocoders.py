from unittest.mock import patch

import pytest

from coordkit.geocoding_base import GeocodingError, MissingCredentialError
from coordkit.google_geocoder import GoogleGeocoder, fold_components
from coordkit.here_geocoder import HereGeocoder
from coordkit.mapbox_geocoder import MapboxGeocoder, fold_context
from coordkit.nominatim_geocoder import NominatimGeocoder

NOMINATIM_PARIS = {
    "lat": "48.8566",
    "lon": "2.3522",
    "display_name": "Paris, Île-de-France, France",
    "boundingbox": ["48.8155", "48.9021", "2.2241", "2.4699"],
    "address": {"city": "Paris", "country": "France", "country_code": "fr"},
}


@patch("coordkit.nominatim_geocoder.get_json")
def test_nominatim_search_maps_fields(mock_get):
    mock_get.return_value = [NOMINATIM_PARIS]
    results = NominatimGeocoder().geocode("Paris")
    assert len(results) == 1
    r = results[0]
    assert r.latitude == pytest.approx(48.8566)
    assert r.longitude == pytest.approx(2.3522)
    assert r.formatted_address.startswith("Paris")
    assert r.details["city"] == "Paris"
    assert r.bounding_box == (48.8155, 48.9021, 2.2241, 2.4699)
    assert r.provider_label == "OpenStreetMap"

    url = mock_get.call_args[0][0]
    kwargs = mock_get.call_args[1]
    assert url.endswith("/search")
    assert kwargs["params"]["q"] == "Paris"
    assert kwargs["params"]["limit"] == 5
    assert kwargs["headers"]["User-Agent"].startswith("coordkit/")


@patch("coordkit.nominatim_geocoder.get_json")
def test_nominatim_user_agent_from_environment(mock_get, monkeypatch):
    monkeypatch.setenv("NOMINATIM_USER_AGENT", "my-app/1.0 (me@example.org)")
    mock_get.return_value = []
    NominatimGeocoder().geocode("x")
    assert mock_get.call_args[1]["headers"]["User-Agent"] == "my-app/1.0 (me@example.org)"


@patch("coordkit.nominatim_geocoder.get_json")
def test_nominatim_zero_results_is_empty(mock_get):
    mock_get.return_value = []
    assert NominatimGeocoder().geocode("nowhere at all") == []


@patch("coordkit.nominatim_geocoder.get_json")
def test_nominatim_reverse_unable_to_geocode_returns_none(mock_get):
    mock_get.return_value = {"error": "Unable to geocode"}
    assert NominatimGeocoder().reverse_geocode(0.0, 0.0) is None


@patch("coordkit.nominatim_geocoder.get_json")
def test_nominatim_reverse(mock_get):
    mock_get.return_value = NOMINATIM_PARIS
    r = NominatimGeocoder().reverse_geocode(48.8566, 2.3522)
    assert r.details["country_code"] == "fr"
    assert mock_get.call_args[1]["params"]["lat"] == 48.8566


@patch("coordkit.nominatim_geocoder.get_json")
def test_nominatim_malformed_coordinates(mock_get):
    mock_get.return_value = [{"lat": "abc", "lon": "2", "display_name": "x"}]
    with pytest.raises(GeocodingError):
        NominatimGeocoder().geocode("x")


def test_fold_components():
    comps = [
        {"long_name": "1600", "short_name": "1600", "types": ["street_number"]},
        {"long_name": "Amphitheatre Parkway", "short_name": "Amphitheatre Pkwy", "types": ["route"]},
        {"long_name": "Mountain View", "short_name": "Mountain View", "types": ["locality", "political"]},
        {"long_name": "California", "short_name": "CA", "types": ["administrative_area_level_1"]},
        {"long_name": "United States", "short_name": "US", "types": ["country", "political"]},
        {"long_name": "94043", "short_name": "94043", "types": ["postal_code"]},
    ]
    details = fold_components(comps)
    assert details == {
        "streetNumber": "1600",
        "streetName": "Amphitheatre Parkway",
        "city": "Mountain View",
        "state": "California",
        "country": "United States",
        "countryCode": "US",
        "zipcode": "94043",
    }


def test_google_requires_key():
    with pytest.raises(MissingCredentialError):
        GoogleGeocoder("")


@patch("coordkit.google_geocoder.get_json")
def test_google_geocode(mock_get):
    mock_get.return_value = {
        "status": "OK",
        "results": [{
            "formatted_address": "Berlin, Germany",
            "geometry": {"location": {"lat": 52.52, "lng": 13.405}},
            "address_components": [],
        }],
    }
    results = GoogleGeocoder("k").geocode("Berlin")
    assert results[0].latitude == 52.52
    assert results[0].longitude == 13.405
    assert mock_get.call_args[1]["params"] == {"address": "Berlin", "key": "k"}


@patch("coordkit.google_geocoder.get_json")
def test_google_zero_results(mock_get):
    mock_get.return_value = {"status": "ZERO_RESULTS", "results": []}
    g = GoogleGeocoder("k")
    assert g.geocode("qwertyuiop") == []
    assert g.reverse_geocode(0.0, 0.0) is None


@patch("coordkit.google_geocoder.get_json")
def test_google_request_denied(mock_get):
    mock_get.return_value = {"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."}
    with pytest.raises(GeocodingError, match="Request denied"):
        GoogleGeocoder("bad").geocode("Berlin")


def test_fold_context():
    ctx = [{"id": "postcode.123", "text": "75001"}, {"id": "place.9", "text": "Paris"}, {"id": "x"}]
    assert fold_context(ctx) == {"postcode": "75001", "place": "Paris"}


@patch("coordkit.mapbox_geocoder.get_json")
def test_mapbox_center_is_lon_lat(mock_get):
    mock_get.return_value = {"features": [{
        "center": [2.3522, 48.8566],
        "place_name": "Paris, France",
        "bbox": [2.22, 48.81, 2.47, 48.90],
        "context": [{"id": "country.1", "text": "France"}],
    }]}
    r = MapboxGeocoder("tok").geocode("Paris France")[0]
    assert (r.latitude, r.longitude) == (48.8566, 2.3522)
    assert r.bounding_box == (48.81, 48.90, 2.22, 2.47)
    assert r.details == {"country": "France"}
    url = mock_get.call_args[0][0]
    assert url.endswith("/Paris%20France.json")


@patch("coordkit.mapbox_geocoder.get_json")
def test_mapbox_reverse_path_is_lon_lat(mock_get):
    mock_get.return_value = {"features": []}
    assert MapboxGeocoder("tok").reverse_geocode(1.5, 2.5) is None
    assert mock_get.call_args[0][0].endswith("/2.5,1.5.json")


@patch("coordkit.mapbox_geocoder.get_json")
def test_mapbox_error_message(mock_get):
    mock_get.return_value = {"message": "Not Authorized - Invalid Token"}
    with pytest.raises(GeocodingError, match="Invalid Token"):
        MapboxGeocoder("tok").geocode("Paris")


@patch("coordkit.here_geocoder.get_json")
def test_here_geocode_and_reverse(mock_get):
    mock_get.return_value = {"items": [{
        "title": "Invalidenstraße 116, 10115 Berlin, Deutschland",
        "position": {"lat": 52.53041, "lng": 13.38527},
        "address": {"city": "Berlin", "postalCode": "10115", "label": "x", "houseNumber": ""},
    }]}
    here = HereGeocoder("key")
    r = here.geocode("Invalidenstraße 116 Berlin")[0]
    assert r.latitude == 52.53041
    assert r.details["postalCode"] == "10115"
    assert "houseNumber" not in r.details
    assert mock_get.call_args[1]["params"]["apiKey"] == "key"

    here.reverse_geocode(52.5, 13.4)
    assert mock_get.call_args[0][0] == HereGeocoder.REVGEOCODE_URL
    assert mock_get.call_args[1]["params"]["at"] == "52.5,13.4"


@patch("coordkit.here_geocoder.get_json")
def test_here_no_items(mock_get):
    mock_get.return_value = {"items": []}
    assert HereGeocoder("key").geocode("nothing") == []
