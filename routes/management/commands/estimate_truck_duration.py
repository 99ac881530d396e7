from django.core.management.base import BaseCommand, CommandError

from routes.estimator import estimate_truck_duration, format_duration
from routes.exceptions import InvalidDistanceError
from routes.services import get_estimator_config


class Command(BaseCommand):
    help = "Estimate truck travel time and rest stops for a route distance in km."

    def add_arguments(self, parser):
        parser.add_argument('distance_km', type=float)
        parser.add_argument('--hint', default='', help="Route type hint (currently ignored).")

    def handle(self, *args, **options):
        try:
            estimate = estimate_truck_duration(options['distance_km'], options['hint'], config=get_estimator_config())
        except InvalidDistanceError as e:
            raise CommandError(str(e))

        self.stdout.write(
            f"{options['distance_km']:.1f} km: {format_duration(estimate.total_minutes)} "
            f"({estimate.total_minutes} min), rest stops: {estimate.rest_stop_count}"
        )
