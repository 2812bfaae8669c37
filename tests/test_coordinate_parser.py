import pytest

from coordkit.coordinate_parser import parse_dms, parse_lat, parse_lon, parse_pair


@pytest.mark.parametrize("text,expected", [
    ("35.681236", 35.681236),
    ("-0.5", -0.5),
    ("35 40 52.45", 35 + 40 / 60 + 52.45 / 3600),
    ("139°46'1.97\"E", 139 + 46 / 60 + 1.97 / 3600),
    ("0° 30' 0\" S", -0.5),
    ("12.5W", -12.5),
    ("48° 51.396' N", 48.8566),
])
def test_parse_dms(text, expected):
    assert parse_dms(text) == pytest.approx(expected, abs=1e-6)


def test_parse_dms_rejects_garbage():
    with pytest.raises(ValueError):
        parse_dms("north-ish")


def test_ranges():
    assert parse_lat("90") == 90
    assert parse_lon("-180") == -180
    with pytest.raises(ValueError):
        parse_lat("90.0001")
    with pytest.raises(ValueError):
        parse_lon("181")


def test_parse_pair():
    assert parse_pair("48.85, 2.35") == (48.85, 2.35)
    assert parse_pair("51° 30' N; 0° 7' W") == pytest.approx((51.5, -7 / 60))
    with pytest.raises(ValueError):
        parse_pair("48.85")
    with pytest.raises(ValueError):
        parse_pair("95, 10")
