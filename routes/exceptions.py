class RoutePlanningError(ValueError):
    """Base error for everything the route planner raises on bad input or upstream failures."""


class InvalidDistanceError(RoutePlanningError):
    pass


class GeocodingError(RoutePlanningError):
    pass


class LocationNotFoundError(GeocodingError):
    pass


class RouteNotFoundError(RoutePlanningError):
    pass
