"""Error taxonomy for geocoding and geotemporal averaging."""

from typing import Optional


class GeocodingError(Exception):
    """Base class for every error raised by the geocoding core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiError(GeocodingError):
    """Transport failure or non-success HTTP status from the provider."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        timeout: bool = False
    ):
        super().__init__(message)
        self.status_code = status_code
        self.timeout = timeout


class ParsingError(GeocodingError):
    """Provider response did not match the expected geocodejson shape."""


class UrlError(GeocodingError):
    """Base URL is malformed or a request URL could not be joined."""


class HeaderError(GeocodingError):
    """A configured value cannot be sent as an HTTP header."""


class InvalidCoordinateError(GeocodingError):
    """
    Latitude or longitude outside its valid range.

    Must not subclass ValueError, so it propagates out of pydantic
    validators unwrapped instead of becoming a ValidationError.
    """

    def __init__(self, value: float, axis: str, bound: float):
        super().__init__(
            f"{value} is not a valid {axis} (must be between {-bound} and {bound})"
        )
        self.value = value
        self.axis = axis
        self.bound = bound


class NoDataError(GeocodingError):
    """Nothing to average: empty input or zero total weight."""


class InvalidWeightError(GeocodingError):
    """A weight is negative, NaN or infinite."""

    def __init__(self, weight: float, index: int):
        super().__init__(
            f"Weight {weight} at position {index} must be a finite number >= 0"
        )
        self.weight = weight
        self.index = index
