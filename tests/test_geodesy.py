import pytest

from livefleet.services.geodesy import distance_km, km_to_nm

POINTS = [
    (0.0, 0.0),
    (51.4700, -0.4543),
    (40.6413, -73.7781),
    (-33.9399, 151.1753),
    (89.9, 179.9),
    (-45.0, -179.9),
]


@pytest.mark.parametrize("lat,lon", POINTS)
def test_distance_to_same_point_is_zero(lat, lon):
    assert distance_km(lat, lon, lat, lon) == 0


def test_distance_is_symmetric_and_non_negative():
    for lat1, lon1 in POINTS:
        for lat2, lon2 in POINTS:
            forward = distance_km(lat1, lon1, lat2, lon2)
            backward = distance_km(lat2, lon2, lat1, lon1)
            assert forward >= 0
            assert forward == pytest.approx(backward)


def test_distance_matches_known_route():
    # London Heathrow to New York JFK is roughly 5540 km.
    assert distance_km(51.4700, -0.4543, 40.6413, -73.7781) == pytest.approx(5540, rel=0.01)


def test_one_degree_along_equator():
    assert distance_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(111.195, rel=1e-4)


@pytest.mark.parametrize("km", [0.0, 1.0, 111.195, 5540.0])
def test_km_to_nm(km):
    assert km_to_nm(km) == km * 0.539957
