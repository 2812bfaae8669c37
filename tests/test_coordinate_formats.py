import pytest

from coordkit import coordinate_formats as fmt
from coordkit.coordinate_parser import parse_dms


def test_to_dms():
    assert fmt.to_dms(48.8566, "lat") == "48° 51' 23.76\" N"
    assert fmt.to_dms(-0.5, "lon") == "0° 30' 0.00\" W"


def test_to_dm():
    assert fmt.to_dm(48.8566, "lat") == "48° 51.3960' N"
    assert fmt.to_dm(-33.5, "lat") == "33° 30.0000' S"


def test_seconds_carry_into_minutes_and_degrees():
    assert fmt.to_dms(10.99999999, "lat") == "11° 0' 0.00\" N"


def test_bad_axis():
    with pytest.raises(ValueError):
        fmt.to_dms(1.0, "alt")


@pytest.mark.parametrize("value,axis", [
    (48.8566, "lat"), (-33.8688, "lat"), (151.2093, "lon"), (-0.1278, "lon"), (0.0, "lat"),
])
def test_formatted_strings_parse_back(value, axis):
    assert parse_dms(fmt.to_dms(value, axis)) == pytest.approx(value, abs=1e-4)
    assert parse_dms(fmt.to_dm(value, axis)) == pytest.approx(value, abs=1e-4)


def test_simplified_utm_is_marked_approximate():
    grid = fmt.to_simplified_utm(48.8566, 2.3522)
    assert grid["zone"] == "31N"
    assert grid["approximate"] is True


def test_utm_equator_origin():
    utm = fmt.to_utm(0.0, 0.0)
    assert (utm.zone, utm.band, utm.hemisphere) == (31, "N", "N")
    assert utm.easting == pytest.approx(166021.44, abs=1)
    assert utm.northing == pytest.approx(0, abs=1e-6)


def test_utm_central_meridian():
    utm = fmt.to_utm(45.0, 3.0)
    assert utm.easting == pytest.approx(500000.0)
    assert utm.northing == pytest.approx(4982950.4, abs=5)
    assert str(utm).startswith("31T 500000mE")


def test_utm_southern_hemisphere_false_northing():
    north = fmt.to_utm(10.0, 3.0)
    south = fmt.to_utm(-10.0, 3.0)
    assert south.hemisphere == "S"
    assert south.northing == pytest.approx(10_000_000 - north.northing)


def test_utm_zone_exceptions():
    assert fmt.utm_zone(60.0, 5.0) == 32
    assert fmt.utm_zone(75.0, 10.0) == 33
    assert fmt.utm_zone(0.0, 180.0) == 60


def test_utm_outside_latitude_band():
    with pytest.raises(ValueError):
        fmt.to_utm(85.0, 0.0)


def test_geohash():
    assert fmt.to_geohash(57.64911, 10.40744, 11) == "u4pruydqqvj"
    assert len(fmt.to_geohash(0.0, 0.0)) == 9


def test_plus_code():
    assert fmt.to_plus_code(47.365590, 8.524997) == "8FVC9G8F+6X"


def test_map_links():
    links = fmt.map_links(1.5, -2.5)
    assert links["Google Maps"] == "https://maps.google.com/?q=1.5,-2.5"
    assert "mlat=1.5&mlon=-2.5" in links["OpenStreetMap"]
