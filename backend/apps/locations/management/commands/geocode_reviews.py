from django.core.management.base import BaseCommand
from apps.locations.geocoding import GeocodingService


class Command(BaseCommand):
    help = "Geocodes published reviews that have no coordinates yet."

    def add_arguments(self, parser):
        parser.add_argument(
            '--delay',
            type=float,
            default=None,
            help='Seconds to wait between provider requests',
        )
        parser.add_argument(
            '--stats-only',
            action='store_true',
            help='Only print the data quality numbers',
        )

    def handle(self, *args, **options):
        quality = GeocodingService.data_quality_stats()
        self.stdout.write(
            f"Published: {quality['total_published']} | "
            f"with coordinates: {quality['with_coordinates']} | "
            f"without: {quality['without_coordinates']}"
        )

        if options['stats_only']:
            return

        stats = GeocodingService.bulk_geocode(delay_seconds=options['delay'])
        self.stdout.write(self.style.SUCCESS(
            f"Processed {stats['processed']}/{stats['total']}: "
            f"{stats['success']} ok, {stats['failed']} failed, {stats['skipped']} skipped"
        ))
