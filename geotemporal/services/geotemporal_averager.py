"""Geotemporal averaging: weighted mean of geocoded locations."""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import httpx

from geotemporal.config import Settings
from geotemporal.exceptions import InvalidWeightError, NoDataError
from geotemporal.schemas.geocoding import (
    LATITUDE_BOUND,
    LONGITUDE_BOUND,
    Coordinates,
    Location,
    Place,
)
from geotemporal.services.geocoding_client import GeocodingClient

logger = logging.getLogger(__name__)

ROUNDING_TOLERANCE = 1e-9


@dataclass(frozen=True)
class WeightedSum:
    """
    Unchecked accumulator for a weighted coordinate mean.

    Components are plain floats: a running sum of valid coordinates can
    leave the coordinate ranges, so only mean() produces Coordinates.
    """

    total_weight: float = 0.0
    lat: float = 0.0
    lon: float = 0.0

    def add(self, weight: float, coordinates: Coordinates) -> "WeightedSum":
        return WeightedSum(
            total_weight=self.total_weight + weight,
            lat=self.lat + coordinates.lat * weight,
            lon=self.lon + coordinates.lon * weight,
        )

    def mean(self) -> Coordinates:
        """
        Weighted mean of everything added so far.

        Raises:
            NoDataError: If the total weight is zero
        """
        if self.total_weight == 0:
            raise NoDataError("Cannot average locations with a total weight of zero")

        return Coordinates(
            lat=_clamp(self.lat / self.total_weight, LATITUDE_BOUND),
            lon=_clamp(self.lon / self.total_weight, LONGITUDE_BOUND)
        )


def _clamp(value: float, bound: float) -> float:
    """Absorb rounding overshoot such as 90.00000000000001."""
    # inf and NaN pass through unchanged and are rejected by Coordinates
    if math.isfinite(value) and abs(value) - bound < ROUNDING_TOLERANCE:
        return max(-bound, min(bound, value))
    return value


def _normalize(weights: Sequence[float]) -> List[float]:
    """Scale weights so the largest is 1.0."""
    largest = max(weights)
    if largest == 0:
        return list(weights)
    return [weight / largest for weight in weights]


class GeotemporalAverager:
    """
    Combines time-weighted locations into one representative point.

    Locations are geocoded concurrently through a GeocodingClient, folded
    into a weighted mean, and the mean can be reverse geocoded to a place.
    """

    def __init__(self, client: GeocodingClient):
        self.client = client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None
    ) -> "GeotemporalAverager":
        return cls(GeocodingClient.from_settings(settings, http_client))

    async def __aenter__(self) -> "GeotemporalAverager":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def average_locations(
        self,
        pairs: Sequence[Tuple[float, Location]]
    ) -> Coordinates:
        """
        Weighted average of the coordinates of the given locations.

        Args:
            pairs: (weight, location) pairs; weights are typically dwell times

        Returns:
            Weighted mean coordinates

        Raises:
            InvalidWeightError: If a weight is negative or not finite
            NoDataError: If there are no pairs or all weights are zero
            GeocodingError: Any failure from geocoding a location
        """
        if not pairs:
            raise NoDataError("Cannot average an empty list of locations")

        weights = [weight for weight, _ in pairs]
        locations = [location for _, location in pairs]

        for index, weight in enumerate(weights):
            if not math.isfinite(weight) or weight < 0:
                raise InvalidWeightError(weight, index)

        logger.info(f"Averaging {len(locations)} locations")
        coordinates = await self.client.search_list(locations)

        weighted_sum = WeightedSum()
        for weight, point in zip(_normalize(weights), coordinates):
            weighted_sum = weighted_sum.add(weight, point)

        average = weighted_sum.mean()
        logger.info(
            f"Average of {len(locations)} locations "
            f"(largest weight {max(weights)}): {average.lat}, {average.lon}"
        )
        return average

    async def get_geotemporal_origin(
        self,
        pairs: Sequence[Tuple[float, Location]]
    ) -> Place:
        """
        Reverse geocode the weighted average of the given locations.

        Returns:
            Place(name, country) of the averaged point
        """
        average = await self.average_locations(pairs)
        return await self.client.reverse(average)
