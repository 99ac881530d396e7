import hashlib
import logging

import openrouteservice
import requests
from django.conf import settings
from django.core.cache import cache
from django.core.exceptions import ImproperlyConfigured
from geopy.exc import GeopyError
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim
from requests import RequestException

from constants import DEFAULT_MAP_CENTER, DEFAULT_MAP_ZOOM, MAP_FIT_PADDING
from .estimator import DEFAULT_CONFIG, estimate_truck_duration
from .exceptions import GeocodingError, LocationNotFoundError, RouteNotFoundError
from .structures import Place, RouteResult

logger = logging.getLogger(__name__)

geolocator = Nominatim(user_agent=settings.GEOCODER_USER_AGENT, timeout=settings.HTTP_TIMEOUT)

_ors_client = None
_rate_limited_geocode = None


def get_ors_client():
    global _ors_client
    if _ors_client is None:
        if not settings.ORS_API_KEY:
            raise ImproperlyConfigured("ORS_API_KEY must be set to use the 'ors' routing backend")
        _ors_client = openrouteservice.Client(key=settings.ORS_API_KEY, timeout=settings.HTTP_TIMEOUT)
    return _ors_client


def make_cache_key(query):
    digest = hashlib.sha256(query.strip().lower().encode('utf-8')).hexdigest()
    return f"geocode_{digest}"


def get_geocoder():
    """
    Nominatim lookups throttled to the service's one-request-per-second policy.
    """
    global _rate_limited_geocode
    if _rate_limited_geocode is None:
        _rate_limited_geocode = RateLimiter(
            geolocator.geocode,
            min_delay_seconds=settings.GEOCODER_MIN_DELAY,
            max_retries=0,
            swallow_exceptions=False,
        )
    return _rate_limited_geocode


def geocode_location(query):
    """
    Returns a Place for a free-text query, or None when nothing matches.
    Results are cached.
    """
    if not query or not query.strip():
        raise GeocodingError("Location query cannot be empty")

    cache_key = make_cache_key(query)
    cached = cache.get(cache_key)
    if cached:
        return cached

    try:
        location = get_geocoder()(query.strip(), exactly_one=True)
    except GeopyError as e:
        raise GeocodingError(f"Geocoding failed for {query}: {e}") from e

    if location is None:
        logger.info(f"No geocoding match for {query!r}")
        return None

    place = Place(
        latitude=float(location.latitude),
        longitude=float(location.longitude),
        display_name=location.address,
    )
    cache.set(cache_key, place, timeout=settings.GEOCODE_CACHE_TIMEOUT)
    return place


def geocode_pair(from_query, to_query):
    """
    Geocodes both ends of a trip. Raises LocationNotFoundError if either one
    has no match.
    """
    origin = geocode_location(from_query)
    destination = geocode_location(to_query)
    if not origin or not destination:
        missing = [q for q, p in ((from_query, origin), (to_query, destination)) if not p]
        raise LocationNotFoundError(f"No match for: {', '.join(missing)}")
    return origin, destination


def _flip(coords):
    # GeoJSON is [lon, lat]
    return [(lat, lon) for lon, lat in coords]


def _osrm_route(origin, destination):
    url = (
        f"{settings.OSRM_BASE_URL.rstrip('/')}/route/v1/driving/"
        f"{origin.longitude},{origin.latitude};{destination.longitude},{destination.latitude}"
    )
    params = {
        'overview': 'full',
        'geometries': 'geojson',
        'alternatives': 'true',
    }
    try:
        response = requests.get(
            url,
            params=params,
            headers={'User-Agent': settings.GEOCODER_USER_AGENT},
            timeout=settings.HTTP_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()
    except (RequestException, ValueError) as e:
        raise RouteNotFoundError(f"Routing failed: {e}") from e

    if data.get('code') != 'Ok' or not data.get('routes'):
        raise RouteNotFoundError(f"Unable to find route between these locations ({data.get('code')})")

    try:
        primary = data['routes'][0]
        legs = primary.get('legs') or [{}]
        return RouteResult(
            coordinates=_flip(primary['geometry']['coordinates']),
            distance_m=float(primary['distance']),
            alternatives=[_flip(r['geometry']['coordinates']) for r in data['routes'][1:]],
            summary=legs[0].get('summary', ''),
        )
    except (KeyError, IndexError, TypeError) as e:
        raise RouteNotFoundError(f"Malformed routing response: {e}") from e


def _ors_route(origin, destination):
    coords = [[origin.longitude, origin.latitude], [destination.longitude, destination.latitude]]
    try:
        route = get_ors_client().directions(
            coords,
            profile='driving-hgv',
            format='geojson',
            alternative_routes={'target_count': 3},
        )
        features = route['features']
        return RouteResult(
            coordinates=_flip(features[0]['geometry']['coordinates']),
            distance_m=float(features[0]['properties']['summary']['distance']),
            alternatives=[_flip(f['geometry']['coordinates']) for f in features[1:]],
            summary='driving-hgv',
        )
    except (openrouteservice.exceptions.ApiError,
            openrouteservice.exceptions.HTTPError,
            openrouteservice.exceptions.Timeout,
            RequestException) as e:
        raise RouteNotFoundError(f"OpenRouteService API error: {e}") from e
    except (KeyError, IndexError, TypeError) as e:
        raise RouteNotFoundError(f"Malformed routing response: {e}") from e


ROUTING_BACKENDS = {
    'osrm': _osrm_route,
    'ors': _ors_route,
}


def get_route(origin, destination):
    """
    Returns the driving route between two places using the configured backend.
    """
    try:
        backend = ROUTING_BACKENDS[settings.ROUTING_BACKEND]
    except KeyError:
        raise ImproperlyConfigured(f"Unknown ROUTING_BACKEND {settings.ROUTING_BACKEND!r}") from None
    return backend(origin, destination)


def get_viewbox(coordinates):
    """
    Bounding box [[south, west], [north, east]] around a list of (lat, lon).
    """
    lats = [lat for lat, _ in coordinates]
    lons = [lon for _, lon in coordinates]
    return [[min(lats), min(lons)], [max(lats), max(lons)]]


def build_map_overlay(coordinates, from_label, to_label):
    """
    Start/end markers and fit-to-route bounds for the map front end.
    """
    if not coordinates:
        return None
    start, end = coordinates[0], coordinates[-1]
    return {
        'markers': [
            {'position': list(start), 'popup': f"Start: {from_label}"},
            {'position': list(end), 'popup': f"End: {to_label}"},
        ],
        'bounds': get_viewbox(coordinates),
        'padding': list(MAP_FIT_PADDING),
    }


def default_map_view():
    return {'center': list(DEFAULT_MAP_CENTER), 'zoom': DEFAULT_MAP_ZOOM}


def get_estimator_config():
    overrides = getattr(settings, 'TRUCK_ESTIMATOR', None) or {}
    try:
        return DEFAULT_CONFIG.with_overrides(**overrides)
    except (TypeError, ValueError) as e:
        raise ImproperlyConfigured(f"Invalid TRUCK_ESTIMATOR setting: {e}") from e


def plan_route(from_query, to_query):
    """
    Geocodes both locations, fetches the route and estimates truck travel time.
    """
    origin, destination = geocode_pair(from_query, to_query)
    route = get_route(origin, destination)
    estimate = estimate_truck_duration(route.distance_km, route.summary, config=get_estimator_config())
    logger.info(
        f"Planned {from_query!r} -> {to_query!r}: {route.distance_km:.1f} km, "
        f"{estimate.total_minutes} min, {estimate.rest_stop_count} rest stops"
    )
    return origin, destination, route, estimate
