"""Nominatim geocoding client and geotemporal averaging."""
from geotemporal.config import GeocodingClientConfig, Settings
from geotemporal.exceptions import (
    ApiError,
    GeocodingError,
    HeaderError,
    InvalidCoordinateError,
    InvalidWeightError,
    NoDataError,
    ParsingError,
    UrlError,
)
from geotemporal.schemas.geocoding import Coordinates, Location, Place
from geotemporal.services.geocoding_client import GeocodingClient
from geotemporal.services.geotemporal_averager import GeotemporalAverager, WeightedSum

__all__ = [
    "GeocodingClientConfig",
    "Settings",
    "Coordinates",
    "Location",
    "Place",
    "GeocodingClient",
    "GeotemporalAverager",
    "WeightedSum",
    # Errors
    "GeocodingError",
    "ApiError",
    "ParsingError",
    "UrlError",
    "HeaderError",
    "InvalidCoordinateError",
    "NoDataError",
    "InvalidWeightError",
]
