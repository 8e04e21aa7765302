"""Geocoding client for the Nominatim search and reverse endpoints."""

import asyncio
import logging
from typing import Iterable, List, Optional, Tuple

import httpx

from geotemporal.config import GeocodingClientConfig, Settings
from geotemporal.exceptions import ApiError, HeaderError, ParsingError, UrlError
from geotemporal.schemas.geocoding import Coordinates, Location, Place
from geotemporal.schemas.nominatim import (
    FeatureCollection,
    ReverseParameters,
    SearchParameters,
)

logger = logging.getLogger(__name__)


class GeocodingClient:
    """
    Client for geocodejson-speaking Nominatim instances.

    Features:
    - Forward geocoding (structured address to coordinates)
    - Concurrent batch forward geocoding with input order preserved
    - Reverse geocoding (coordinates to place name and country)

    The client owns one httpx.AsyncClient for its lifetime so connections are
    reused across requests. Use it as an async context manager or call
    aclose() when done.
    """

    def __init__(
        self,
        config: GeocodingClientConfig,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize geocoding client.

        Args:
            config: Provider configuration
            http_client: Optional shared HTTP client; when omitted the
                geocoding client creates and owns one

        Raises:
            UrlError: If the base URL is malformed
            HeaderError: If the referer cannot be sent as a header value
        """
        self.config = config
        self.base_url = self._parse_base_url(config.base_url)
        self.headers = {"Referer": self._validate_header_value("Referer", config.referer)}

        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=config.timeout)

        logger.info(
            f"GeocodingClient initialized for {self.base_url} "
            f"(format={config.format}, zoom={config.zoom})"
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None
    ) -> "GeocodingClient":
        return cls(settings.client_config(), http_client)

    async def __aenter__(self) -> "GeocodingClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this geocoding client created it."""
        if self._owns_http_client:
            await self.http_client.aclose()

    @staticmethod
    def _parse_base_url(base_url: str) -> httpx.URL:
        try:
            url = httpx.URL(base_url)
        except (httpx.InvalidURL, TypeError) as e:
            raise UrlError(f"Invalid base URL {base_url!r}: {e}") from e

        if url.scheme not in ("http", "https") or not url.host:
            raise UrlError(
                f"Invalid base URL {base_url!r}: expected an absolute http(s) URL"
            )
        if url.query or url.fragment:
            raise UrlError(
                f"Invalid base URL {base_url!r}: query strings and fragments are not supported"
            )
        return url

    @staticmethod
    def _validate_header_value(name: str, value: str) -> str:
        if any(char in value for char in "\r\n\0"):
            raise HeaderError(f"Invalid {name} header: control characters are not allowed")
        try:
            value.encode("ascii")
        except UnicodeEncodeError as e:
            raise HeaderError(f"Invalid {name} header {value!r}: {e.reason}") from e
        return value

    def _endpoint_url(self, endpoint: str) -> httpx.URL:
        path = self.base_url.path.rstrip("/") + "/" + endpoint
        try:
            return self.base_url.copy_with(path=path)
        except httpx.InvalidURL as e:
            raise UrlError(f"Cannot build /{endpoint} URL from {self.base_url}: {e}") from e

    async def _get(
        self,
        endpoint: str,
        params: List[Tuple[str, str]]
    ) -> FeatureCollection:
        """
        Issue a GET request and decode the geocodejson response.

        Raises:
            ApiError: On transport failure or non-success status
            ParsingError: If the body is not JSON or not geocodejson
        """
        url = self._endpoint_url(endpoint)

        try:
            response = await self.http_client.get(url, params=params, headers=self.headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"Nominatim HTTP error on /{endpoint}: {status_code}")
            raise ApiError(
                f"Nominatim /{endpoint} returned HTTP {status_code}",
                status_code=status_code
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Nominatim /{endpoint} request timeout")
            raise ApiError(f"Nominatim /{endpoint} request timeout", timeout=True) from e
        except httpx.RequestError as e:
            logger.error(f"Nominatim /{endpoint} request error: {e}")
            raise ApiError(f"Error calling Nominatim /{endpoint}: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Nominatim /{endpoint} returned a non-JSON body")
            raise ParsingError(f"The {endpoint} response is not valid JSON: {e}") from e

        return FeatureCollection.parse(payload, endpoint)

    async def search(self, location: Location) -> Coordinates:
        """
        Convert a structured address to coordinates (forward geocoding).

        Args:
            location: Address to resolve

        Returns:
            Coordinates of the first matching feature

        Raises:
            ApiError: On transport failure or non-success status
            ParsingError: On an undecodable body, no features, or a geometry
                that is not a [lon, lat] pair
            InvalidCoordinateError: If the provider returned an out-of-range point
        """
        params = SearchParameters(
            location=location,
            format=self.config.format,
            email=self.config.email
        )
        logger.info(f"Geocoding location: {location.street}, {location.city}, {location.country}")

        collection = await self._get("search", params.to_query_params())
        return collection.first_coordinates()

    async def search_list(self, locations: Iterable[Location]) -> List[Coordinates]:
        """
        Geocode many locations concurrently.

        Every search is started before any is awaited. Results are returned in
        input order. The first failure is raised unchanged and the searches
        still in flight are cancelled.

        Args:
            locations: Addresses to resolve

        Returns:
            Coordinates in the same order as the input
        """
        locations = list(locations)
        if not locations:
            return []

        logger.info(f"Geocoding {len(locations)} locations concurrently")
        tasks = [asyncio.ensure_future(self.search(location)) for location in locations]

        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            raise

    async def reverse(
        self,
        coordinates: Coordinates,
        zoom: Optional[int] = None
    ) -> Place:
        """
        Convert coordinates to a place name and country (reverse geocoding).

        Args:
            coordinates: Point to resolve
            zoom: Optional per-call detail level; defaults to the client's zoom

        Returns:
            Place(name, country), which unpacks like a (name, country) tuple

        Raises:
            ApiError: On transport failure or non-success status
            ParsingError: On an undecodable body, no features, or a missing
                or non-string name/country
        """
        params = ReverseParameters(
            coordinates=coordinates,
            format=self.config.format,
            zoom=self.config.zoom if zoom is None else zoom,
            email=self.config.email
        )
        logger.info(f"Reverse geocoding coordinates: {coordinates.lat}, {coordinates.lon}")

        collection = await self._get("reverse", params.to_query_params())
        return collection.first_place()
