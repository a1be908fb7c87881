"""
View-models consumed by the front-end: result cards and the results map.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

from supabase import Client

from catholic_schedule import config
from catholic_schedule.core.models import Church, Coordinates
from catholic_schedule.core.schedule import ScheduleKind, ScheduleView
from catholic_schedule.core.schedule_fetcher import CancellationToken, load_schedule, load_schedule_async

DIRECTIONS_URL = "https://www.google.com/maps/search/?api=1&query={query}"

MAP_ZOOM = 12
SINGLE_MARKER_ZOOM = 13
FIT_BOUNDS_PADDING = 40


def directions_url(church: Church) -> str:
    return DIRECTIONS_URL.format(query=quote(church.address_line, safe=""))


def distance_label(miles: Optional[float]) -> Optional[str]:
    if miles is None:
        return None
    return f"{miles:.1f} mi"


@dataclass
class ResultCard:
    """One search result. Owns the token for its schedule fetch."""

    church: Church
    schedule: Optional[ScheduleView] = None
    token: CancellationToken = field(default_factory=CancellationToken)

    @property
    def removed(self) -> bool:
        return self.token.cancelled

    def discard(self) -> None:
        """Remove the card; any fetch still in flight will not commit."""
        self.token.cancel()

    def commit(self, view: Optional[ScheduleView]) -> bool:
        if view is None or self.token.cancelled:
            return False
        self.schedule = view
        return True

    def load(self, supabase: Client, kind: ScheduleKind) -> bool:
        return self.commit(load_schedule(supabase, self.church.id, kind, self.token))

    async def load_async(self, supabase: Client, kind: ScheduleKind) -> bool:
        return self.commit(await load_schedule_async(supabase, self.church.id, kind, self.token))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "church": self.church.to_dict(),
            "address_line": self.church.address_line,
            "distance": distance_label(self.church.miles_away),
            "directions_url": directions_url(self.church),
            "schedule": self.schedule.to_dict() if self.schedule else None,
        }


@dataclass
class MapMarker:
    id: str
    name: str
    address_line: str
    lat: float
    lng: float


@dataclass
class MapView:
    center: Tuple[float, float]
    zoom: int = MAP_ZOOM
    markers: List[MapMarker] = field(default_factory=list)
    bounds: Optional[Tuple[Tuple[float, float], Tuple[float, float]]] = None
    padding: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "center": {"lat": self.center[0], "lng": self.center[1]},
            "zoom": self.zoom,
            "markers": [marker.__dict__ for marker in self.markers],
            "bounds": [list(corner) for corner in self.bounds] if self.bounds else None,
            "padding": self.padding,
        }


def build_map_view(center: Optional[Coordinates], churches: Sequence[Church]) -> MapView:
    """
    Center on the search point, then fit the view to the plotted churches.

    One church: center on it at street zoom. Several: their bounding box.
    Churches without finite coordinates are not plotted.
    """
    origin = (center.lat, center.lng) if center else config.DEFAULT_MAP_CENTER
    view = MapView(center=origin)

    for church in churches:
        coordinates = church.coordinates
        if coordinates is None or not coordinates.is_finite():
            continue
        view.markers.append(
            MapMarker(
                id=church.id,
                name=church.name,
                address_line=church.address_line,
                lat=coordinates.lat,
                lng=coordinates.lng,
            )
        )

    if len(view.markers) == 1:
        marker = view.markers[0]
        view.center = (marker.lat, marker.lng)
        view.zoom = SINGLE_MARKER_ZOOM
    elif len(view.markers) > 1:
        lats = [m.lat for m in view.markers]
        lngs = [m.lng for m in view.markers]
        view.bounds = ((min(lats), min(lngs)), (max(lats), max(lngs)))
        view.padding = FIT_BOUNDS_PADDING

    return view
