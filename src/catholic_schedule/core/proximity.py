"""
Distance-ranked church lookup through the backend's nearby_churches procedure.
"""

from typing import List

from supabase import Client

from catholic_schedule import config
from catholic_schedule.core.errors import InvalidInputError, RemoteFailureError, remote_error_message
from catholic_schedule.core.logger import get_logger
from catholic_schedule.core.models import Church, Coordinates

logger = get_logger(__name__)

NEARBY_CHURCHES_RPC = "nearby_churches"


def validate_radius(radius_miles: int) -> int:
    """Only the radii offered by the search form are accepted."""
    try:
        radius = int(radius_miles)
    except (TypeError, ValueError) as e:
        raise InvalidInputError("Please choose a search radius.", field="radius") from e
    if radius not in config.ALLOWED_RADII:
        allowed = ", ".join(str(r) for r in config.ALLOWED_RADII)
        raise InvalidInputError(f"Radius must be one of {allowed} miles.", field="radius")
    return radius


def find_nearby_churches(
    supabase: Client,
    center: Coordinates,
    radius_miles: int = config.DEFAULT_RADIUS,
    limit: int = config.RESULT_LIMIT,
) -> List[Church]:
    """
    Ask the backend for churches within radius_miles of center.

    Results keep the backend's order (ascending distance), each carrying
    miles_away. Any backend failure is raised as RemoteFailureError with
    the backend's message.
    """
    radius = validate_radius(radius_miles)
    params = {
        "lat": center.lat,
        "lng": center.lng,
        "miles": radius,
        "limit_count": min(limit, config.RESULT_LIMIT),
    }

    try:
        response = supabase.rpc(NEARBY_CHURCHES_RPC, params).execute()
    except Exception as e:
        message = remote_error_message(e)
        logger.warning(f"❌ {NEARBY_CHURCHES_RPC} failed: {message}")
        raise RemoteFailureError(message) from e

    churches = [Church.from_record(record) for record in (response.data or [])]
    logger.info(f"⛪ Found {len(churches)} churches within {radius} miles of ({center.lat}, {center.lng})")
    return churches
