"""
Geocoding service for enriching dog locations with address details.
"""
import logging

from ..models.dog import DogLocation
from .. import gcp_clients

logger = logging.getLogger(__name__)


class GeocodingService:
    """Service for reverse geocoding operations."""

    def __init__(self, gmaps_client=None):
        """
        Initialize geocoding service.

        Args:
            gmaps_client: Google Maps client (or None to use global client)
        """
        self.gmaps = gmaps_client or gcp_clients.gmaps

    def enrich_location(self, location: DogLocation) -> DogLocation:
        """
        Fill city, region and country from the coordinates.

        Failures are logged and the location is returned unchanged, so a dog
        can always be saved without address details.

        Args:
            location: Location with latitude/longitude set

        Returns:
            DogLocation: The same object, enriched where possible
        """
        if not self.gmaps:
            logger.debug("Google Maps client not initialized, skipping geocoding")
            return location

        try:
            results = self.gmaps.reverse_geocode((location.latitude, location.longitude))
        except Exception as e:
            logger.error(f"Geocoding failed for ({location.latitude}, {location.longitude}): {e}")
            return location

        if not results:
            logger.warning(f"No geocoding results for ({location.latitude}, {location.longitude})")
            return location

        parsed = self._parse_address_components(results[0].get('address_components', []))
        location.city = parsed['city']
        location.region = parsed['region']
        location.country = parsed['country']
        if not location.address:
            location.address = results[0].get('formatted_address', '')

        logger.info(f"Geocoded ({location.latitude}, {location.longitude}) to "
                    f"{location.city}, {location.region}, {location.country}")
        return location

    def _parse_address_components(self, components: list) -> dict:
        """
        Extract city, region, country from Google Maps address components.

        Args:
            components: List of address component dictionaries from Google Maps API

        Returns:
            dict: Parsed address with 'city', 'region', 'country' keys
        """
        parsed = {'city': '', 'region': '', 'country': ''}

        for component in components:
            types = component.get('types', [])
            long_name = component.get('long_name', '')

            if 'locality' in types:
                parsed['city'] = long_name
            elif 'administrative_area_level_1' in types:
                parsed['region'] = long_name
            elif 'country' in types:
                parsed['country'] = long_name

        return parsed
