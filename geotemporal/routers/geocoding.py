"""Geocoding and geotemporal averaging API endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query

from geotemporal.dependencies import get_geocoding_client, get_geotemporal_averager
from geotemporal.schemas.geocoding import (
    Coordinates,
    Location,
    PlaceRead,
    WeightedLocation,
)
from geotemporal.services.geocoding_client import GeocodingClient
from geotemporal.services.geotemporal_averager import GeotemporalAverager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_provider_error_responses = {
    502: {"description": "Geocoding service error or unexpected response"},
    503: {"description": "Geocoding service unavailable"},
    504: {"description": "Geocoding service timeout"},
}


@router.post(
    "/geocode/search",
    response_model=Coordinates,
    summary="Geocode a structured address",
    description="""
    Convert a structured postal address to geographic coordinates (forward geocoding).

    The first feature returned by Nominatim is used.
    """,
    responses={
        200: {
            "description": "Successfully geocoded address",
            "content": {
                "application/json": {
                    "example": {
                        "lat": 56.1518,
                        "lon": 10.210985
                    }
                }
            }
        },
        **_provider_error_responses,
    }
)
async def search(
    location: Location,
    client: GeocodingClient = Depends(get_geocoding_client)
) -> Coordinates:
    """
    Convert an address to coordinates.

    Args:
        location: Structured address
        client: Geocoding client instance

    Returns:
        Coordinates with latitude and longitude
    """
    return await client.search(location)


@router.post(
    "/geocode/search-list",
    response_model=List[Coordinates],
    summary="Geocode several addresses",
    description="""
    Geocode a list of addresses concurrently.

    Results are returned in the same order as the input. If any address fails,
    the whole request fails with that error.
    """,
    responses=_provider_error_responses
)
async def search_list(
    locations: List[Location],
    client: GeocodingClient = Depends(get_geocoding_client)
) -> List[Coordinates]:
    return await client.search_list(locations)


@router.get(
    "/geocode/reverse",
    response_model=PlaceRead,
    summary="Reverse geocode coordinates",
    description="""
    Convert geographic coordinates to a place name and country (reverse geocoding).

    The zoom level defaults to the configured level (10 = city).
    """,
    responses={
        200: {
            "description": "Successfully reverse geocoded coordinates",
            "content": {
                "application/json": {
                    "example": {
                        "name": "Aarhus",
                        "country": "Danmark"
                    }
                }
            }
        },
        **_provider_error_responses,
    }
)
async def reverse(
    lat: float = Query(
        ...,
        ge=-90,
        le=90,
        description="Latitude in decimal degrees",
        examples=[56.1518]
    ),
    lon: float = Query(
        ...,
        ge=-180,
        le=180,
        description="Longitude in decimal degrees",
        examples=[10.210985]
    ),
    zoom: Optional[int] = Query(
        None,
        ge=0,
        le=255,
        description="Detail level override (0 = country, 18 = building)"
    ),
    client: GeocodingClient = Depends(get_geocoding_client)
) -> PlaceRead:
    """
    Convert coordinates to a place.

    Args:
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees
        zoom: Optional detail level override
        client: Geocoding client instance

    Returns:
        Place name and country
    """
    place = await client.reverse(Coordinates(lat=lat, lon=lon), zoom=zoom)
    return PlaceRead.from_place(place)


@router.post(
    "/geotemporal/average",
    response_model=Coordinates,
    summary="Weighted average of addresses",
    description="""
    Geocode every address and return the weighted mean of the results.

    Weights must be finite and non-negative, and at least one must be positive.
    """,
    responses={
        400: {"description": "Nothing to average or invalid weight"},
        **_provider_error_responses,
    }
)
async def average(
    weighted_locations: List[WeightedLocation] = Body(...),
    averager: GeotemporalAverager = Depends(get_geotemporal_averager)
) -> Coordinates:
    logger.info(f"Averaging {len(weighted_locations)} weighted locations")
    return await averager.average_locations(
        [item.as_pair() for item in weighted_locations]
    )


@router.post(
    "/geotemporal/origin",
    response_model=PlaceRead,
    summary="Geotemporal origin of addresses",
    description="""
    Weighted average of the addresses, reverse geocoded to a place name and country.
    """,
    responses={
        400: {"description": "Nothing to average or invalid weight"},
        **_provider_error_responses,
    }
)
async def origin(
    weighted_locations: List[WeightedLocation] = Body(...),
    averager: GeotemporalAverager = Depends(get_geotemporal_averager)
) -> PlaceRead:
    """
    Resolve the geotemporal origin of a set of weighted addresses.

    Args:
        weighted_locations: Addresses with their weights
        averager: Geotemporal averager instance

    Returns:
        Place name and country of the weighted mean
    """
    logger.info(f"Resolving origin of {len(weighted_locations)} weighted locations")
    place = await averager.get_geotemporal_origin(
        [item.as_pair() for item in weighted_locations]
    )
    return PlaceRead.from_place(place)
