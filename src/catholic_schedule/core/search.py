"""
Search form state and the ZIP -> nearby churches -> schedule cards pipeline.

A submit clears the previous results (cancelling their outstanding schedule
fetches), resolves the ZIP, queries nearby churches and builds one card per
church. InvalidInput, NotFound and RemoteFailure end up as the plain-text
error; the result list is then empty.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client

from catholic_schedule import config
from catholic_schedule.core.errors import CatholicScheduleError
from catholic_schedule.core.geocoding import clean_zip_code, zip_to_lat_lng
from catholic_schedule.core.http_client import HTTPClient
from catholic_schedule.core.logger import get_logger
from catholic_schedule.core.models import Church, Coordinates
from catholic_schedule.core.presentation import MapView, ResultCard, build_map_view
from catholic_schedule.core.proximity import find_nearby_churches, validate_radius
from catholic_schedule.core.schedule import ScheduleKind

logger = get_logger(__name__)


class SearchView:
    """State behind one search page (Mass or Confession)."""

    def __init__(
        self,
        supabase: Client,
        kind: ScheduleKind = ScheduleKind.MASS,
        http_client: Optional[HTTPClient] = None,
    ):
        self.supabase = supabase
        self.kind = kind
        self.http_client = http_client
        self.zip = ""
        self.radius = config.DEFAULT_RADIUS
        self.loading = False
        self.error = ""
        self.failure: Optional[CatholicScheduleError] = None
        self.center: Optional[Coordinates] = None
        self.cards: List[ResultCard] = []
        self._generation = 0

    @property
    def churches(self) -> List[Church]:
        return [card.church for card in self.cards]

    @property
    def map_view(self) -> MapView:
        return build_map_view(self.center, self.churches)

    def _begin(self, zip_code: Optional[str], radius: Optional[int]) -> None:
        if zip_code is not None:
            self.zip = zip_code
        if radius is not None:
            self.radius = radius
        self.error = ""
        self.failure = None
        self.loading = True
        self._generation += 1
        self.clear_results()

    def clear_results(self) -> None:
        for card in self.cards:
            card.discard()
        self.cards = []

    def _find_churches(self) -> Tuple[Coordinates, List[Church]]:
        # Both inputs are validated before the first network call
        cleaned = clean_zip_code(self.zip)
        radius = validate_radius(self.radius)

        center = zip_to_lat_lng(cleaned, self.http_client)
        return center, find_nearby_churches(self.supabase, center, radius, config.RESULT_LIMIT)

    def submit(self, zip_code: Optional[str] = None, radius: Optional[int] = None, load_schedules: bool = True):
        """Run a search synchronously, loading each card's schedule in turn."""
        self._begin(zip_code, radius)
        try:
            self.center, churches = self._find_churches()
            self.cards = [ResultCard(church) for church in churches]
            if load_schedules:
                for card in self.cards:
                    card.load(self.supabase, self.kind)
        except CatholicScheduleError as e:
            logger.warning(f"🔍 Search for ZIP {self.zip!r} failed: {e.message}")
            self.error = e.message
            self.failure = e
        finally:
            self.loading = False
        return self

    async def submit_async(self, zip_code: Optional[str] = None, radius: Optional[int] = None, load_schedules: bool = True):
        """Run a search on the event loop; card schedules load concurrently."""
        self._begin(zip_code, radius)
        generation = self._generation
        try:
            center, churches = await asyncio.to_thread(self._find_churches)
            if generation != self._generation:
                # A newer submit owns the view now
                return self
            self.center = center
            cards = [ResultCard(church) for church in churches]
            self.cards = cards
            if load_schedules:
                await asyncio.gather(*(card.load_async(self.supabase, self.kind) for card in cards))
        except CatholicScheduleError as e:
            logger.warning(f"🔍 Search for ZIP {self.zip!r} failed: {e.message}")
            if generation == self._generation:
                self.error = e.message
                self.failure = e
        finally:
            if generation == self._generation:
                self.loading = False
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "zip": self.zip,
            "radius": self.radius,
            "kind": self.kind.value,
            "loading": self.loading,
            "error": self.error or None,
            "center": {"lat": self.center.lat, "lng": self.center.lng} if self.center else None,
            "results": [card.to_dict() for card in self.cards],
            "map": self.map_view.to_dict(),
        }
