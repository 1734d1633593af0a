import math

from healthmate.services.distance import Coordinate, distance_km


MUMBAI = Coordinate(latitude=19.0760, longitude=72.8777)
DELHI = Coordinate(latitude=28.7041, longitude=77.1025)


def test_same_point_is_zero():
    assert distance_km(MUMBAI, MUMBAI) == 0.0


def test_distance_is_symmetric():
    assert distance_km(MUMBAI, DELHI) == distance_km(DELHI, MUMBAI)


def test_mumbai_to_delhi_great_circle():
    # roughly 1150 km as the crow flies
    assert 1140 < distance_km(MUMBAI, DELHI) < 1160


def test_one_degree_of_latitude():
    a = Coordinate(latitude=0.0, longitude=0.0)
    b = Coordinate(latitude=1.0, longitude=0.0)
    assert math.isclose(distance_km(a, b), 111.19, abs_tol=0.01)


def test_antipodal_points_do_not_fail():
    a = Coordinate(latitude=0.0, longitude=0.0)
    b = Coordinate(latitude=0.0, longitude=180.0)
    assert math.isclose(distance_km(a, b), math.pi * 6371.0, rel_tol=1e-9)
