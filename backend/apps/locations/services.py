# apps/locations/services.py
import math
from django.conf import settings
from .validators import parse_postal_code_token


def is_valid_coordinate(lat, lng, bounds=None):
    """
    A coordinate pair is usable only when both values are set, non-zero
    and inside the configured bounding box (Germany).
    """
    if lat is None or lng is None:
        return False
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError):
        return False
    if lat == 0 or lng == 0:
        return False

    bounds = bounds or settings.GEO_BOUNDS
    return (
        bounds["south"] <= lat <= bounds["north"]
        and bounds["west"] <= lng <= bounds["east"]
    )


class LocationService:
    EARTH_RADIUS_KM = 6371

    @staticmethod
    def calculate_distance_km(lat1, lon1, lat2, lon2) -> float:
        """
        Calculates distance between two points using Haversine formula.
        Returns distance in Kilometers.
        """
        # Convert to float for math operations
        lat1, lon1, lat2, lon2 = map(float, [lat1, lon1, lat2, lon2])

        dlat = math.radians(lat2 - lat1)
        dlon = math.radians(lon2 - lon1)

        a = (
            math.sin(dlat / 2) ** 2
            + math.cos(math.radians(lat1))
            * math.cos(math.radians(lat2))
            * math.sin(dlon / 2) ** 2
        )

        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        return LocationService.EARTH_RADIUS_KM * c

    @staticmethod
    def find_nearest_location(lat, lng, locations):
        """
        Closest location that has coordinates, annotated with `distance` (km).
        On equal distance the earlier location in `locations` wins.
        """
        nearest = None
        nearest_distance = None

        for location in locations:
            if location.latitude is None or location.longitude is None:
                continue
            distance = LocationService.calculate_distance_km(
                lat, lng, location.latitude, location.longitude
            )
            if nearest is None or distance < nearest_distance:
                nearest = location
                nearest_distance = distance

        if nearest is not None:
            nearest.distance = nearest_distance
        return nearest

    @staticmethod
    def resolve_contact_location(lat, lng, locations):
        """
        Location shown as contact for a review:
        nearest active location, else the active default, else the first active one.
        """
        active = [loc for loc in locations if loc.is_active]

        if is_valid_coordinate(lat, lng):
            nearest = LocationService.find_nearest_location(lat, lng, active)
            if nearest is not None:
                return nearest

        for location in active:
            if location.is_default:
                return location

        return active[0] if active else None


class FieldStaffService:

    @staticmethod
    def is_postal_code_in_range(code, token) -> bool:
        if not isinstance(code, str):
            return False
        code = code.strip()
        if len(code) < 2 or not code[:2].isdigit():
            return False

        bounds = parse_postal_code_token(token)
        if bounds is None:
            return False

        if "-" not in token:
            return code.startswith(token)

        lower, upper = bounds
        return lower <= int(code[:2]) <= upper

    @staticmethod
    def find_field_staff_for_postal_code(code, staff):
        """
        All active staff responsible for `code`, in the order given.
        Callers use the first entry as the assigned contact.
        """
        if not code:
            return []
        return [
            member for member in staff
            if member.is_active and any(
                FieldStaffService.is_postal_code_in_range(code, token)
                for token in member.assigned_postal_codes or []
            )
        ]
