import logging
import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from types import MappingProxyType
from collections.abc import Mapping

from constants import (
    CITY_ACCESS_MAX_KM,
    CITY_ACCESS_MINUTES,
    LOADING_LONG_MIN_KM,
    LOADING_UNLOADING_LONG,
    LOADING_UNLOADING_SHORT,
    MAX_CONTINUOUS_DRIVING_HOURS,
    MOTORWAY_MIN_KM,
    REST_BREAK_MINUTES,
    SHORT_HAUL_MAX_KM,
    TIME_FACTORS,
    TRUCK_SPEEDS_KMH,
    TRUNK_MIN_KM,
    URBAN_LOAD_UNLOAD_MINUTES,
    URBAN_SPEED_KMH,
    URBAN_TRAFFIC_BUFFER,
    WEIGHT_STATION_MIN_KM,
    WEIGHT_STATION_MINUTES,
)
from .exceptions import InvalidDistanceError

logger = logging.getLogger(__name__)


class RoadClass(str, Enum):
    MOTORWAY = 'motorway'
    TRUNK = 'trunk'
    PRIMARY = 'primary'
    SECONDARY = 'secondary'
    RESIDENTIAL = 'residential'


class TrafficCondition(str, Enum):
    PEAK = 'peak'
    NORMAL = 'normal'
    NIGHTTIME = 'nighttime'


@dataclass(frozen=True)
class DurationEstimate:
    total_minutes: int
    rest_stop_count: int


@dataclass(frozen=True)
class EstimatorConfig:
    """
    Tunable constants of the truck duration heuristic.

    Speed profile and time factors are keyed by the ``RoadClass`` and
    ``TrafficCondition`` values.
    """
    short_haul_max_km: float = SHORT_HAUL_MAX_KM
    urban_speed_kmh: float = URBAN_SPEED_KMH
    urban_load_unload_minutes: float = URBAN_LOAD_UNLOAD_MINUTES
    urban_traffic_buffer: float = URBAN_TRAFFIC_BUFFER

    speed_profile: Mapping = field(default_factory=lambda: MappingProxyType(dict(TRUCK_SPEEDS_KMH)))
    motorway_min_km: float = MOTORWAY_MIN_KM
    trunk_min_km: float = TRUNK_MIN_KM

    time_factors: Mapping = field(default_factory=lambda: MappingProxyType(dict(TIME_FACTORS)))
    traffic_condition: TrafficCondition = TrafficCondition.NORMAL

    max_continuous_driving_hours: float = MAX_CONTINUOUS_DRIVING_HOURS
    rest_break_minutes: float = REST_BREAK_MINUTES

    loading_unloading_long: float = LOADING_UNLOADING_LONG
    loading_unloading_short: float = LOADING_UNLOADING_SHORT
    loading_long_min_km: float = LOADING_LONG_MIN_KM
    city_access_minutes: float = CITY_ACCESS_MINUTES
    city_access_max_km: float = CITY_ACCESS_MAX_KM
    weight_station_minutes: float = WEIGHT_STATION_MINUTES
    weight_station_min_km: float = WEIGHT_STATION_MIN_KM

    def __post_init__(self):
        # Freeze mappings so the shared DEFAULT_CONFIG cannot be edited in place
        object.__setattr__(self, 'speed_profile', MappingProxyType(dict(self.speed_profile)))
        object.__setattr__(self, 'time_factors', MappingProxyType(dict(self.time_factors)))
        object.__setattr__(self, 'traffic_condition', TrafficCondition(self.traffic_condition))

        for road_class in RoadClass:
            _require_positive(f"speed_profile[{road_class.value!r}]", self.speed_profile.get(road_class.value))
        for condition in TrafficCondition:
            _require_positive(f"time_factors[{condition.value!r}]", self.time_factors.get(condition.value))
        _require_positive('urban_speed_kmh', self.urban_speed_kmh)
        _require_positive('max_continuous_driving_hours', self.max_continuous_driving_hours)

    def speed_for(self, road_class):
        return self.speed_profile[RoadClass(road_class).value]

    def time_factor(self):
        return self.time_factors[self.traffic_condition.value]

    def with_overrides(self, **overrides):
        """
        Returns a copy with the given fields replaced.

        ``speed_profile`` and ``time_factors`` overrides are merged over the
        current tables, so ``{"motorway": 90}`` only changes that entry.
        Unknown names, unknown road classes or traffic conditions and
        non-positive speeds or factors raise ``ValueError``.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown estimator settings: {', '.join(unknown)}")

        if 'speed_profile' in overrides:
            overrides['speed_profile'] = _merge(self.speed_profile, overrides['speed_profile'], RoadClass)
        if 'time_factors' in overrides:
            overrides['time_factors'] = _merge(self.time_factors, overrides['time_factors'], TrafficCondition)
        return replace(self, **overrides)


def _require_positive(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
        raise ValueError(f"{name} must be a positive number, got {value!r}")


def _merge(current, changes, keys_enum):
    if not isinstance(changes, Mapping):
        raise ValueError(f"Expected a mapping of {keys_enum.__name__} values, got {changes!r}")
    merged = dict(current)
    for key, value in changes.items():
        merged[keys_enum(key).value] = value
    return merged


DEFAULT_CONFIG = EstimatorConfig()


def round_half_up(value):
    # Python's round() is banker's rounding; x.5 must always go up here
    return int(math.floor(value + 0.5))


def select_road_class(distance_km, config=DEFAULT_CONFIG):
    """
    Picks the road class assumed for a long-haul trip from its length.
    Only motorway, trunk and primary are reachable.
    """
    if distance_km > config.motorway_min_km:
        return RoadClass.MOTORWAY
    if distance_km > config.trunk_min_km:
        return RoadClass.TRUNK
    return RoadClass.PRIMARY


def estimate_truck_duration(distance_km, route_type_hint='', config=DEFAULT_CONFIG):
    """
    Estimates total truck travel time (minutes) and mandatory rest stops
    for a route of ``distance_km`` kilometres.

    Short trips use an urban delivery model. Longer trips assume a road
    class from the distance, add a 45 minute break per 4.5 hours of driving
    and the fixed truck delays (loading, city access, weight stations).
    ``route_type_hint`` is accepted but not used yet.
    """
    if distance_km is None or not math.isfinite(distance_km) or distance_km < 0:
        raise InvalidDistanceError(f"Distance must be a non-negative number, got {distance_km!r}")

    if route_type_hint:
        logger.debug(f"Ignoring route type hint {route_type_hint!r}")

    if distance_km <= config.short_haul_max_km:
        base_minutes = (distance_km / config.urban_speed_kmh) * 60
        traffic_buffer = base_minutes * config.urban_traffic_buffer
        return DurationEstimate(
            total_minutes=round_half_up(base_minutes + config.urban_load_unload_minutes + traffic_buffer),
            rest_stop_count=0,
        )

    base_speed = config.speed_for(select_road_class(distance_km, config))

    driving_hours = distance_km / base_speed
    rest_stops = int(math.floor(driving_hours / config.max_continuous_driving_hours))
    rest_minutes = rest_stops * config.rest_break_minutes

    duration = (distance_km / base_speed) * 60
    duration *= config.time_factor()
    duration += rest_minutes
    if distance_km > config.loading_long_min_km:
        duration += config.loading_unloading_long
    else:
        duration += config.loading_unloading_short

    if distance_km < config.city_access_max_km:
        duration += config.city_access_minutes

    if distance_km > config.weight_station_min_km:
        duration += config.weight_station_minutes

    return DurationEstimate(total_minutes=round_half_up(duration), rest_stop_count=rest_stops)


def format_duration(minutes):
    """Human readable duration, e.g. ``2 hours 5 mins``."""
    hours = int(minutes // 60)
    remaining = round_half_up(minutes % 60)
    if hours == 0:
        return f"{remaining} mins"
    unit = 'hour' if hours == 1 else 'hours'
    if remaining == 0:
        return f"{hours} {unit}"
    return f"{hours} {unit} {remaining} mins"
