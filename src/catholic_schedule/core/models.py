"""
Transient view-models of the remote church and schedule records.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def is_finite(self) -> bool:
        return math.isfinite(self.lat) and math.isfinite(self.lng)


@dataclass
class Church:
    """A church as returned by the churches table or the nearby_churches procedure."""

    id: str
    name: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    miles_away: Optional[float] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Church":
        return cls(
            id=str(record["id"]),
            name=record.get("name") or "",
            address=record.get("address") or "",
            city=record.get("city") or "",
            state=record.get("state") or "",
            zip=record.get("zip") or "",
            lat=_optional_float(record.get("lat")),
            lng=_optional_float(record.get("lng")),
            miles_away=_optional_float(record.get("miles_away")),
        )

    @property
    def address_line(self) -> str:
        return f"{self.address}, {self.city}, {self.state} {self.zip}"

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if self.lat is None or self.lng is None:
            return None
        return Coordinates(self.lat, self.lng)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MassTime:
    """A point-in-time weekly entry."""

    day_of_week: int
    time: str
    notes: Optional[str] = None
    church_id: Optional[str] = None

    @property
    def start(self) -> str:
        return self.time

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "MassTime":
        return cls(
            day_of_week=int(record["day_of_week"]),
            time=record["time"],
            notes=record.get("notes") or None,
            church_id=_optional_str(record.get("church_id")),
        )


@dataclass
class ConfessionTime:
    """An interval weekly entry."""

    day_of_week: int
    start_time: str
    end_time: str
    notes: Optional[str] = None
    church_id: Optional[str] = None

    @property
    def start(self) -> str:
        return self.start_time

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ConfessionTime":
        return cls(
            day_of_week=int(record["day_of_week"]),
            start_time=record["start_time"],
            end_time=record["end_time"],
            notes=record.get("notes") or None,
            church_id=_optional_str(record.get("church_id")),
        )


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
