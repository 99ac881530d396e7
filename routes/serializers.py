import math

from rest_framework import serializers


class RoutePlanRequestSerializer(serializers.Serializer):
    from_location = serializers.CharField(max_length=255, trim_whitespace=True)
    to_location = serializers.CharField(max_length=255, trim_whitespace=True)


class DurationEstimateRequestSerializer(serializers.Serializer):
    distance_km = serializers.FloatField(min_value=0)
    route_type_hint = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_distance_km(self, value):
        if not math.isfinite(value):
            raise serializers.ValidationError("Distance must be a finite number")
        return value


class PlaceSerializer(serializers.Serializer):
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    display_name = serializers.CharField()


class DurationEstimateSerializer(serializers.Serializer):
    duration_minutes = serializers.IntegerField(source='total_minutes')
    rest_stops = serializers.IntegerField(source='rest_stop_count')
