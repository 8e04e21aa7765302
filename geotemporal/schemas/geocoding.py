"""Pydantic schemas for geocoding value types."""

import math
from typing import List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from geotemporal.exceptions import InvalidCoordinateError

LATITUDE_BOUND = 90.0
LONGITUDE_BOUND = 180.0


def _divide(numerator: float, denominator: float) -> float:
    """IEEE-754 division: x/0 is +-inf and 0/0 is NaN instead of raising."""
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


class Coordinates(BaseModel):
    """
    Geographic coordinates.

    Construction is the only way to obtain an instance, and it rejects any
    latitude outside [-90, 90] or longitude outside [-180, 180] (NaN and
    infinities included) with InvalidCoordinateError. Components must be
    numbers; strings and booleans are not coerced. Arithmetic returns
    new instances, which are validated the same way.
    """

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        json_schema_extra={
            "example": {
                "lat": 56.1518,
                "lon": 10.210985
            }
        }
    )

    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")

    @field_validator("lat")
    @classmethod
    def validate_latitude(cls, v: float) -> float:
        """Ensure latitude is within [-90, 90]."""
        if not -LATITUDE_BOUND <= v <= LATITUDE_BOUND:
            raise InvalidCoordinateError(v, "latitude", LATITUDE_BOUND)
        return v

    @field_validator("lon")
    @classmethod
    def validate_longitude(cls, v: float) -> float:
        """Ensure longitude is within [-180, 180]."""
        if not -LONGITUDE_BOUND <= v <= LONGITUDE_BOUND:
            raise InvalidCoordinateError(v, "longitude", LONGITUDE_BOUND)
        return v

    def add(self, other: "Coordinates") -> "Coordinates":
        return Coordinates(lat=self.lat + other.lat, lon=self.lon + other.lon)

    def scale(self, factor: float) -> "Coordinates":
        return Coordinates(lat=self.lat * factor, lon=self.lon * factor)

    def divide(self, divisor: float) -> "Coordinates":
        return Coordinates(
            lat=_divide(self.lat, divisor),
            lon=_divide(self.lon, divisor)
        )

    def __add__(self, other: "Coordinates") -> "Coordinates":
        if not isinstance(other, Coordinates):
            return NotImplemented
        return self.add(other)

    def __mul__(self, factor: float) -> "Coordinates":
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return self.scale(factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Coordinates":
        if not isinstance(divisor, (int, float)):
            return NotImplemented
        return self.divide(divisor)

    def to_query_params(self) -> List[Tuple[str, str]]:
        """Flatten into ordered query parameters."""
        return [("lat", str(self.lat)), ("lon", str(self.lon))]


class Location(BaseModel):
    """Structured postal address used for forward geocoding."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "street": "Spanien 1",
                "city": "Aarhus",
                "country": "Denmark",
                "county": None,
                "state": None,
                "postalcode": 8000
            }
        }
    )

    street: str = Field(..., description="House number and street name")
    city: str = Field(..., description="City name")
    country: str = Field(..., description="Country name or code")
    county: Optional[str] = Field(None, description="County name")
    state: Optional[str] = Field(None, description="State/region name")
    postalcode: Optional[int] = Field(
        None,
        ge=0,
        le=65535,
        description="Postal code"
    )

    def to_query_params(self) -> List[Tuple[str, str]]:
        """Flatten into ordered query parameters, omitting absent fields."""
        params = [
            ("street", self.street),
            ("city", self.city),
            ("country", self.country),
        ]
        if self.county is not None:
            params.append(("county", self.county))
        if self.state is not None:
            params.append(("state", self.state))
        if self.postalcode is not None:
            params.append(("postalcode", str(self.postalcode)))
        return params


class Place(NamedTuple):
    """Reverse geocoding result: place name and country."""

    name: str
    country: str


class PlaceRead(BaseModel):
    """API representation of a reverse geocoded place."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Aarhus",
                "country": "Danmark"
            }
        }
    )

    name: str = Field(..., description="Place name at the requested zoom level")
    country: str = Field(..., description="Country name as reported by the provider")

    @classmethod
    def from_place(cls, place: Place) -> "PlaceRead":
        return cls(name=place.name, country=place.country)


class WeightedLocation(BaseModel):
    """A location paired with its weight (e.g. dwell time)."""

    weight: float = Field(..., description="Non-negative weight")
    location: Location

    def as_pair(self) -> Tuple[float, Location]:
        return (self.weight, self.location)
