import pytest

from lead_scoring.geo import distance_to_gothenburg, haversine_km


def test_gothenburg_is_zero():
    assert distance_to_gothenburg(57.7089, 11.9746) == pytest.approx(0.0)


def test_symmetric():
    a = haversine_km(57.7089, 11.9746, 55.6050, 13.0038)
    b = haversine_km(55.6050, 13.0038, 57.7089, 11.9746)
    assert a == pytest.approx(b)


def test_known_distances():
    assert 390 < distance_to_gothenburg(59.3293, 18.0686) < 405  # Stockholm
    assert 230 < distance_to_gothenburg(55.6050, 13.0038) < 255  # Malmö
