# Standardized data structures passed between the services and the views.

from dataclasses import dataclass, field


@dataclass
class Place:
    """A geocoded place."""
    latitude: float
    longitude: float
    display_name: str

    @property
    def coordinates(self):
        return self.latitude, self.longitude


@dataclass
class RouteResult:
    """Primary path plus alternatives, coordinates as (lat, lon) pairs."""
    coordinates: list
    distance_m: float
    alternatives: list = field(default_factory=list)
    summary: str = ''

    @property
    def distance_km(self):
        return self.distance_m / 1000
