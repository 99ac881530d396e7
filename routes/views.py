import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .estimator import estimate_truck_duration, format_duration
from .exceptions import GeocodingError, InvalidDistanceError, RouteNotFoundError
from .serializers import (
    DurationEstimateRequestSerializer,
    DurationEstimateSerializer,
    PlaceSerializer,
    RoutePlanRequestSerializer,
)
from .services import build_map_overlay, default_map_view, get_estimator_config, plan_route

logger = logging.getLogger(__name__)

LOCATION_NOT_FOUND_MESSAGE = "Could not find one or both locations. Please check the spelling and try again."
ROUTE_FAILED_MESSAGE = "Failed to calculate route"


def error_response(message, http_status, **extra):
    return Response({'status': 'error', 'message': message, **extra}, status=http_status)


class RoutePlanView(APIView):
    def post(self, request):
        serializer = RoutePlanRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid data provided', status.HTTP_400_BAD_REQUEST, errors=serializer.errors)

        from_location = serializer.validated_data['from_location']
        to_location = serializer.validated_data['to_location']

        try:
            origin, destination, route, estimate = plan_route(from_location, to_location)
        except GeocodingError as e:
            logger.warning(f"Geocoding failed: {e}")
            return error_response(LOCATION_NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)
        except RouteNotFoundError as e:
            logger.warning(f"Routing failed: {e}")
            return error_response(ROUTE_FAILED_MESSAGE, status.HTTP_502_BAD_GATEWAY)
        except Exception as e:
            logger.exception("Unexpected error while planning route")
            return error_response(
                "Failed to plan route. Please try again.",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                system_message=str(e),
            )

        return Response({
            'status': 'success',
            'from': PlaceSerializer(origin).data,
            'to': PlaceSerializer(destination).data,
            'distance_km': round(route.distance_km, 2),
            **DurationEstimateSerializer(estimate).data,
            'duration_display': format_duration(estimate.total_minutes),
            'route': [list(c) for c in route.coordinates],
            'alternatives': [[list(c) for c in alt] for alt in route.alternatives],
            'map': build_map_overlay(route.coordinates, from_location, to_location),
        })


class DurationEstimateView(APIView):
    def post(self, request):
        serializer = DurationEstimateRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid data provided', status.HTTP_400_BAD_REQUEST, errors=serializer.errors)

        distance_km = serializer.validated_data['distance_km']
        try:
            estimate = estimate_truck_duration(
                distance_km,
                serializer.validated_data['route_type_hint'],
                config=get_estimator_config(),
            )
        except InvalidDistanceError as e:
            return error_response(str(e), status.HTTP_400_BAD_REQUEST)

        return Response({
            'status': 'success',
            'distance_km': distance_km,
            **DurationEstimateSerializer(estimate).data,
            'duration_display': format_duration(estimate.total_minutes),
        })


class MapDefaultsView(APIView):
    def get(self, request):
        return Response(default_map_view())
