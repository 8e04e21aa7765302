"""FastAPI dependencies for the geocoding client and averager."""
import logging
from typing import Optional

from fastapi import Depends

from geotemporal.config import Settings
from geotemporal.services.geocoding_client import GeocodingClient
from geotemporal.services.geotemporal_averager import GeotemporalAverager

logger = logging.getLogger(__name__)


# Initialize settings
settings = Settings()


# Geocoding client singleton
_geocoding_client: Optional[GeocodingClient] = None


def get_geocoding_client() -> GeocodingClient:
    """
    Dependency to get the process-wide geocoding client.

    The client is created on first use and reused afterwards so the HTTP
    connection pool is shared by all requests.

    Returns:
        GeocodingClient: Configured geocoding client
    """
    global _geocoding_client

    if _geocoding_client is None:
        _geocoding_client = GeocodingClient.from_settings(settings)

    return _geocoding_client


def get_geotemporal_averager(
    client: GeocodingClient = Depends(get_geocoding_client)
) -> GeotemporalAverager:
    """
    Dependency to get a geotemporal averager over the shared client.

    Args:
        client: Shared geocoding client

    Returns:
        GeotemporalAverager: Averager using the shared client
    """
    return GeotemporalAverager(client)


async def close_geocoding_client() -> None:
    """Close the shared geocoding client, if one was created."""
    global _geocoding_client

    if _geocoding_client is not None:
        await _geocoding_client.aclose()
        _geocoding_client = None
        logger.info("Geocoding client closed")
