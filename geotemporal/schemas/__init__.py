"""Pydantic schemas for geocoding values and provider payloads."""
from geotemporal.schemas.geocoding import (
    Coordinates,
    Location,
    Place,
    PlaceRead,
    WeightedLocation,
)
from geotemporal.schemas.nominatim import (
    Feature,
    FeatureCollection,
    Geometry,
    Properties,
    ReverseParameters,
    SearchParameters,
)

__all__ = [
    # Value types
    "Coordinates",
    "Location",
    "Place",
    "PlaceRead",
    "WeightedLocation",
    # Provider request/response
    "SearchParameters",
    "ReverseParameters",
    "Geometry",
    "Properties",
    "Feature",
    "FeatureCollection",
]
