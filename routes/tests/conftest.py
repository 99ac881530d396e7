from unittest.mock import Mock

import pytest
from django.core.cache import cache

from routes import services

from .helpers import make_location


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def osrm_payload():
    return {
        'code': 'Ok',
        'routes': [
            {
                'distance': 120000.0,
                'geometry': {'coordinates': [[77.5946, 12.9716], [77.1, 12.6], [76.6394, 12.2958]]},
                'legs': [{'summary': 'NH275, SH17'}],
            },
            {
                'distance': 131500.0,
                'geometry': {'coordinates': [[77.5946, 12.9716], [76.6394, 12.2958]]},
                'legs': [{'summary': 'NH948'}],
            },
        ],
    }


@pytest.fixture
def fake_geolocator(monkeypatch, settings):
    known = {
        'Bengaluru': make_location(12.9716, 77.5946, 'Bengaluru, Karnataka, India'),
        'Mysuru': make_location(12.2958, 76.6394, 'Mysuru, Karnataka, India'),
        '東京': make_location(35.6812, 139.7671, 'Tokyo, Japan'),
        '大阪': make_location(34.6937, 135.5023, 'Osaka, Japan'),
    }
    geolocator = Mock()
    geolocator.geocode.side_effect = lambda query, exactly_one=True: known.get(query)
    monkeypatch.setattr(services, 'geolocator', geolocator)
    monkeypatch.setattr(services, '_rate_limited_geocode', None)
    settings.GEOCODER_MIN_DELAY = 0
    return geolocator
