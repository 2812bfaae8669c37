import urllib.error
from unittest.mock import patch

import pytest

from coordkit import webapi
from coordkit.geocoding_base import GeocodingError


def test_build_url():
    assert webapi.build_url("https://x.test/a") == "https://x.test/a"
    assert webapi.build_url("https://x.test/a", {"q": "a b", "n": 1}) == "https://x.test/a?q=a+b&n=1"


def test_redact_hides_secrets():
    url = "https://x.test/geo?address=Paris&key=SECRET&apiKey=OTHER"
    redacted = webapi._redact(url)
    assert "SECRET" not in redacted
    assert "OTHER" not in redacted
    assert "address=Paris" in redacted


@patch("coordkit.webapi.urllib.request.urlopen")
def test_get_json_decodes(mock_open):
    mock_open.return_value.__enter__.return_value.read.return_value = b'[{"lat": "1"}]'
    assert webapi.get_json("https://x.test", {"q": "a"}) == [{"lat": "1"}]
    req = mock_open.call_args[0][0]
    assert req.full_url == "https://x.test?q=a"
    assert mock_open.call_args[1]["timeout"] == webapi.DEFAULT_TIMEOUT


@patch("coordkit.webapi.urllib.request.urlopen")
def test_post_json_payload_and_body(mock_open):
    mock_open.return_value.__enter__.return_value.read.return_value = b'{}'
    webapi.post_json("https://x.test", payload={"a": 1})
    req = mock_open.call_args[0][0]
    assert req.get_method() == "POST"
    assert req.data == b'{"a": 1}'
    assert req.get_header("Content-type") == "application/json"

    webapi.post_json("https://x.test", body="[out:json];")
    req = mock_open.call_args[0][0]
    assert req.data == b"[out:json];"
    assert req.get_header("Content-type") == "text/plain"


@patch("coordkit.webapi.urllib.request.urlopen")
def test_network_error_becomes_geocoding_error(mock_open):
    mock_open.side_effect = urllib.error.URLError("Name or service not known")
    with pytest.raises(GeocodingError, match="Network error") as info:
        webapi.get_json("https://x.test")
    assert isinstance(info.value.__cause__, urllib.error.URLError)


@patch("coordkit.webapi.urllib.request.urlopen")
def test_timeout_becomes_geocoding_error(mock_open):
    mock_open.side_effect = TimeoutError("timed out")
    with pytest.raises(GeocodingError):
        webapi.get_json("https://x.test")


@patch("coordkit.webapi.urllib.request.urlopen")
def test_invalid_json(mock_open):
    mock_open.return_value.__enter__.return_value.read.return_value = b"<html>busy</html>"
    with pytest.raises(GeocodingError, match="Invalid JSON"):
        webapi.get_json("https://x.test")
