"""
ZIP code to coordinate lookup via the Zippopotam.us public API.
"""

import re
from typing import Optional
from urllib.parse import quote

import requests

from catholic_schedule import config
from catholic_schedule.core.errors import InvalidInputError, NotFoundError, RemoteFailureError
from catholic_schedule.core.http_client import HTTPClient, get_http_client
from catholic_schedule.core.logger import get_logger
from catholic_schedule.core.models import Coordinates

logger = get_logger(__name__)

ZIP_PATTERN = re.compile(r"^\d{5}$")

INVALID_ZIP_MESSAGE = "Please enter a valid 5-digit ZIP code."
ZIP_NOT_FOUND_MESSAGE = "Could not find that ZIP code."


def clean_zip_code(zip_code: str) -> str:
    """Strip whitespace and validate the 5-digit format. Raises InvalidInputError."""
    cleaned = (zip_code or "").strip()
    if not ZIP_PATTERN.match(cleaned):
        raise InvalidInputError(INVALID_ZIP_MESSAGE, field="zip")
    return cleaned


def zip_to_lat_lng(zip_code: str, http_client: Optional[HTTPClient] = None) -> Coordinates:
    """
    Resolve a U.S. ZIP code to the coordinates of its first listed place.

    Args:
        zip_code: Raw user input
        http_client: Client to use; defaults to the shared pooled client

    Returns:
        Coordinates parsed from the place's latitude/longitude strings

    Raises:
        InvalidInputError: Malformed ZIP (no network call is made)
        NotFoundError: Lookup failed or returned no places
        RemoteFailureError: Transport failure
    """
    cleaned = clean_zip_code(zip_code)
    client = http_client or get_http_client()
    url = f"{config.GEOCODER_BASE_URL.rstrip('/')}/{config.GEOCODER_COUNTRY}/{quote(cleaned)}"

    try:
        response = client.get(url)
    except requests.RequestException as e:
        logger.warning(f"❌ ZIP lookup failed for {cleaned}: {e}")
        raise RemoteFailureError(str(e)) from e

    if not response.ok:
        logger.info(f"ZIP {cleaned} not found (status {response.status_code})")
        raise NotFoundError(ZIP_NOT_FOUND_MESSAGE)

    try:
        data = response.json()
    except ValueError as e:
        raise NotFoundError(ZIP_NOT_FOUND_MESSAGE) from e

    places = data.get("places") if isinstance(data, dict) else None
    if not places:
        logger.info(f"ZIP {cleaned} returned no places")
        raise NotFoundError(ZIP_NOT_FOUND_MESSAGE)

    place = places[0]
    try:
        coordinates = Coordinates(float(place["latitude"]), float(place["longitude"]))
    except (KeyError, TypeError, ValueError) as e:
        raise NotFoundError(ZIP_NOT_FOUND_MESSAGE) from e

    logger.info(f"📍 ZIP {cleaned} -> ({coordinates.lat}, {coordinates.lng})")
    return coordinates
