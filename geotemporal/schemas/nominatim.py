"""Nominatim request parameters and geocodejson response schemas."""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from geotemporal.exceptions import ParsingError
from geotemporal.schemas.geocoding import Coordinates, Location, Place


class SearchParameters(BaseModel):
    """Query parameters for the /search endpoint."""

    model_config = ConfigDict(frozen=True)

    location: Location
    format: str = "geocodejson"
    email: Optional[str] = None

    def to_query_params(self) -> List[Tuple[str, str]]:
        """
        Flatten the location and settings into ordered query parameters.

        Values are left unencoded; httpx encodes them (spaces become '+').
        """
        params = self.location.to_query_params()
        params.append(("format", self.format))
        if self.email:
            params.append(("email", self.email))
        return params


class ReverseParameters(BaseModel):
    """Query parameters for the /reverse endpoint."""

    model_config = ConfigDict(frozen=True)

    coordinates: Coordinates
    format: str = "geocodejson"
    zoom: int = Field(default=10, ge=0, le=255, description="0 = country, 10 = city, 18 = building")
    email: Optional[str] = None

    def to_query_params(self) -> List[Tuple[str, str]]:
        params = self.coordinates.to_query_params()
        params.append(("zoom", str(self.zoom)))
        params.append(("format", self.format))
        if self.email:
            params.append(("email", self.email))
        return params


class Geometry(BaseModel):
    """Feature geometry; coordinates are ordered [lon, lat] JSON numbers."""

    model_config = ConfigDict(extra="ignore", strict=True)

    coordinates: List[float]


class Properties(BaseModel):
    """Feature properties; only the geocoding map is consumed."""

    model_config = ConfigDict(extra="ignore")

    geocoding: Dict[str, Any]


class Feature(BaseModel):
    model_config = ConfigDict(extra="ignore")

    geometry: Geometry
    properties: Properties


class FeatureCollection(BaseModel):
    """Top-level geocodejson response for both /search and /reverse."""

    model_config = ConfigDict(extra="ignore")

    features: List[Feature]

    @classmethod
    def parse(cls, payload: Any, endpoint: str) -> "FeatureCollection":
        """
        Validate a decoded JSON payload.

        Args:
            payload: Decoded response body
            endpoint: "search" or "reverse", used in error messages

        Returns:
            FeatureCollection

        Raises:
            ParsingError: If the payload does not have the geocodejson shape
        """
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
                for err in e.errors()
            )
            raise ParsingError(
                f"The {endpoint} response has an unexpected shape: {errors}"
            ) from e

    def first_coordinates(self) -> Coordinates:
        """
        Coordinates of the first feature.

        Raises:
            ParsingError: If there are no features or the geometry is not a pair
            InvalidCoordinateError: If the provider returned an out-of-range point
        """
        if not self.features:
            raise ParsingError("The search response contained no features")

        coordinates = self.features[0].geometry.coordinates
        if len(coordinates) != 2:
            raise ParsingError(
                f"The search response provided an invalid number of coordinates {len(coordinates)}"
            )

        return Coordinates(lat=coordinates[1], lon=coordinates[0])

    def first_place(self) -> Place:
        """
        Name and country of the first feature.

        Raises:
            ParsingError: If there are no features, or name/country is missing
                or not a string
        """
        if not self.features:
            raise ParsingError("The reverse response contained no features")

        geocoding = self.features[0].properties.geocoding
        if "name" not in geocoding or "country" not in geocoding:
            raise ParsingError(
                "The reverse response did not contain the name or country"
            )

        for key in ("name", "country"):
            if not isinstance(geocoding[key], str):
                raise ParsingError(
                    f"The reverse response returned an invalid {key}: {geocoding[key]!r}"
                )

        return Place(name=geocoding["name"], country=geocoding["country"])
