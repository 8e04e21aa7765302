"""Shared test fixtures and configuration."""

import os

# Set TESTING flag to prevent loading .env file
os.environ['TESTING'] = '1'

from typing import Any, Dict, Generator, Iterable, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from geotemporal.config import GeocodingClientConfig
from geotemporal.schemas.geocoding import Location
from geotemporal.services.geocoding_client import GeocodingClient

BASE_URL = "https://nominatim.openstreetmap.org"

# Recorded geocodejson answers for the two Aarhus test addresses
SPANIEN_1 = (10.210985, 56.1518)
SPANIEN_11 = (10.21082, 56.15142)


def feature(
    coordinates: Iterable[float],
    geocoding: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Build one geocodejson feature; coordinates are [lon, lat]."""
    return {
        "type": "Feature",
        "properties": {"geocoding": geocoding or {"type": "house"}},
        "geometry": {"type": "Point", "coordinates": list(coordinates)},
    }


def feature_collection(*features: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "geocoding": {
            "version": "0.1.0",
            "attribution": "Data © OpenStreetMap contributors, ODbL 1.0. http://osm.org/copyright",
            "licence": "ODbL",
        },
        "features": list(features),
    }


def search_payload(lon: float, lat: float) -> Dict[str, Any]:
    return feature_collection(feature([lon, lat]))


def reverse_payload(name: Any = "Aarhus", country: Any = "Danmark") -> Dict[str, Any]:
    geocoding = {
        "place_id": 259108164,
        "osm_type": "relation",
        "type": "city",
        "label": "Aarhus, Aarhus Kommune, Region Midtjylland, Danmark",
        "name": name,
        "country": country,
    }
    return feature_collection(feature([10.2039948, 56.1496278], geocoding))


def mock_response(payload: Any, status_code: int = 200) -> MagicMock:
    """Mock httpx response returning the given JSON payload."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


def query(call_kwargs: Dict[str, Any]) -> Dict[str, str]:
    """Query parameters of a recorded http_client.get call as a dict."""
    return dict(call_kwargs["params"])


def spanien(number: int) -> Location:
    return Location(street=f"Spanien {number}", city="Aarhus", country="Denmark")


@pytest.fixture(autouse=True)
def setup_test_env() -> Generator[None, None, None]:
    """Set up test environment variables before each test."""
    original_env = os.environ.copy()

    os.environ['TESTING'] = '1'

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Provide a clean environment for tests that need to test missing variables."""
    original_env = os.environ.copy()

    os.environ.clear()
    os.environ['TESTING'] = '1'

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def client_config() -> GeocodingClientConfig:
    """Client configuration pointing at the public Nominatim instance."""
    return GeocodingClientConfig(base_url=BASE_URL)


@pytest.fixture
def mock_http_client() -> AsyncMock:
    """Create mock httpx.AsyncClient."""
    http_client = AsyncMock(spec=httpx.AsyncClient)
    http_client.get = AsyncMock(return_value=mock_response(search_payload(*SPANIEN_1)))
    return http_client


@pytest.fixture
def geocoding_client(client_config, mock_http_client) -> GeocodingClient:
    return GeocodingClient(client_config, http_client=mock_http_client)


@pytest.fixture
def aarhus_provider(mock_http_client) -> AsyncMock:
    """
    Mock provider answering the Spanien 1 / Spanien 11 searches and the
    Aarhus reverse lookup from recorded payloads.
    """
    answers = {
        "Spanien 1": search_payload(*SPANIEN_1),
        "Spanien 11": search_payload(*SPANIEN_11),
    }

    async def get(url, params=None, headers=None):
        params = dict(params)
        if str(url).endswith("/reverse"):
            return mock_response(reverse_payload())
        return mock_response(answers.get(params["street"], feature_collection()))

    mock_http_client.get = AsyncMock(side_effect=get)
    return mock_http_client
