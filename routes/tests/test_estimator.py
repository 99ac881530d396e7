import math

import pytest

from routes.estimator import (
    DEFAULT_CONFIG,
    DurationEstimate,
    EstimatorConfig,
    RoadClass,
    TrafficCondition,
    estimate_truck_duration,
    format_duration,
    round_half_up,
    select_road_class,
)
from routes.exceptions import InvalidDistanceError


class TestShortHaul:
    @pytest.mark.parametrize("distance", [0, 0.5, 3, 7.25, 10, 14.99, 15])
    def test_no_rest_stops(self, distance):
        assert estimate_truck_duration(distance).rest_stop_count == 0

    def test_zero_distance_is_only_loading_time(self):
        assert estimate_truck_duration(0) == DurationEstimate(total_minutes=15, rest_stop_count=0)

    def test_ten_km(self):
        # 24 min driving + 15 loading + 4.8 buffer
        assert estimate_truck_duration(10) == DurationEstimate(total_minutes=44, rest_stop_count=0)

    def test_boundary_fifteen_km_is_urban(self):
        # 36 min driving + 15 loading + 7.2 buffer
        assert estimate_truck_duration(15) == DurationEstimate(total_minutes=58, rest_stop_count=0)


class TestLongHaul:
    @pytest.mark.parametrize("distance,expected_minutes,expected_stops", [
        (16, 63, 0),     # primary: 23.04 + 20 loading + 20 city access
        (50, 92, 0),     # primary: 72 + 20 loading, no city access at exactly 50
        (60, 102, 0),    # trunk: 72 + 30 loading
        (100, 150, 0),   # trunk: 120 + 30, no weight station at exactly 100
        (120, 153, 0),   # motorway: 108 + 30 + 15
        (359, 368, 0),   # 4.49 h driving, still no break
        (360, 414, 1),   # exactly 4.5 h driving
        (400, 450, 1),   # 360 + 45 rest + 30 + 15
        (720, 783, 2),   # 648 + 90 rest + 30 + 15
    ])
    def test_known_values(self, distance, expected_minutes, expected_stops):
        estimate = estimate_truck_duration(distance)
        assert estimate.total_minutes == expected_minutes
        assert estimate.rest_stop_count == expected_stops

    @pytest.mark.parametrize("distance,road_class", [
        (15.1, RoadClass.PRIMARY),
        (50, RoadClass.PRIMARY),
        (50.01, RoadClass.TRUNK),
        (100, RoadClass.TRUNK),
        (100.01, RoadClass.MOTORWAY),
    ])
    def test_tier_boundaries(self, distance, road_class):
        assert select_road_class(distance) == road_class

    def test_secondary_and_residential_speeds_are_kept(self):
        assert DEFAULT_CONFIG.speed_for(RoadClass.SECONDARY) == 40
        assert DEFAULT_CONFIG.speed_for('residential') == 30

    def test_route_type_hint_is_ignored(self):
        assert estimate_truck_duration(250, 'A1, M25') == estimate_truck_duration(250)


class TestProperties:
    @pytest.mark.parametrize("start,stop", [(0, 15), (15.5, 49.5), (50.5, 100), (100.5, 3000)])
    def test_monotonic_within_tier(self, start, stop):
        steps = 200
        previous = None
        for i in range(steps + 1):
            distance = start + (stop - start) * i / steps
            minutes = estimate_truck_duration(distance).total_minutes
            assert minutes >= 0
            if previous is not None:
                assert minutes >= previous
            previous = minutes

    def test_deterministic(self):
        assert estimate_truck_duration(437.3) == estimate_truck_duration(437.3)

    @pytest.mark.parametrize("distance", [-0.01, -100, float('nan'), float('inf')])
    def test_rejects_invalid_distance(self, distance):
        with pytest.raises(InvalidDistanceError):
            estimate_truck_duration(distance)

    def test_invalid_distance_is_a_value_error(self):
        with pytest.raises(ValueError):
            estimate_truck_duration(-1)


class TestConfig:
    def test_peak_traffic_override(self):
        config = DEFAULT_CONFIG.with_overrides(traffic_condition=TrafficCondition.PEAK)
        # 60 min * 1.4 + 30 loading
        assert estimate_truck_duration(60, config=config).total_minutes == 114

    def test_override_accepts_plain_strings(self):
        config = DEFAULT_CONFIG.with_overrides(traffic_condition='nighttime')
        assert config.time_factor() == pytest.approx(1.1)

    def test_unknown_override_rejected(self):
        with pytest.raises(ValueError, match="top_speed"):
            DEFAULT_CONFIG.with_overrides(top_speed=120)

    def test_default_config_untouched_by_overrides(self):
        DEFAULT_CONFIG.with_overrides(rest_break_minutes=30)
        assert DEFAULT_CONFIG.rest_break_minutes == 45

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_CONFIG.speed_profile['motorway'] = 200
        with pytest.raises(TypeError):
            DEFAULT_CONFIG.time_factors['normal'] = 2.0

    def test_plain_dict_tables_are_frozen_too(self):
        config = EstimatorConfig(speed_profile={**DEFAULT_CONFIG.speed_profile, 'motorway': 90})
        with pytest.raises(TypeError):
            config.speed_profile['trunk'] = 1

    def test_partial_speed_override_keeps_other_tiers(self):
        config = DEFAULT_CONFIG.with_overrides(speed_profile={'motorway': 90})
        # 80 min * 1.2 + 30 loading + 15 weight station
        assert estimate_truck_duration(120, config=config).total_minutes == 141
        assert estimate_truck_duration(60, config=config).total_minutes == 102

    @pytest.mark.parametrize("overrides", [
        {'traffic_condition': 'rush'},
        {'speed_profile': {'autobahn': 120}},
        {'speed_profile': {'primary': 0}},
        {'speed_profile': {'trunk': -60}},
        {'time_factors': {'nighttime': 0}},
        {'urban_speed_kmh': 0},
    ])
    def test_invalid_values_rejected(self, overrides):
        with pytest.raises(ValueError):
            DEFAULT_CONFIG.with_overrides(**overrides)

    def test_custom_rest_rules(self):
        config = EstimatorConfig(max_continuous_driving_hours=2, rest_break_minutes=30)
        # 400 km at 80 km/h is 5 h -> two breaks
        estimate = estimate_truck_duration(400, config=config)
        assert estimate.rest_stop_count == 2
        assert estimate.total_minutes == 360 + 60 + 30 + 15


class TestRounding:
    @pytest.mark.parametrize("value,expected", [(0.5, 1), (2.5, 3), (2.49, 2), (43.2, 43), (58.2, 58)])
    def test_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_results_are_ints(self):
        assert isinstance(estimate_truck_duration(math.pi * 100).total_minutes, int)


class TestFormatDuration:
    @pytest.mark.parametrize("minutes,expected", [
        (0, "0 mins"),
        (44, "44 mins"),
        (60, "1 hour"),
        (120, "2 hours"),
        (61, "1 hour 1 mins"),
        (153, "2 hours 33 mins"),
        (450, "7 hours 30 mins"),
    ])
    def test_format(self, minutes, expected):
        assert format_duration(minutes) == expected
