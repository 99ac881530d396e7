from unittest.mock import Mock


def make_response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def make_location(lat, lon, address):
    return Mock(latitude=lat, longitude=lon, address=address)
