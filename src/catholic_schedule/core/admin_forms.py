"""
Create-only admin forms for churches, Mass times and confession times.

Each form validates locally, then issues exactly one insert through the
signed-in session. State: IDLE -> SUBMITTING -> IDLE, with a status message
derived only from the outcome of that insert.
"""

import math
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from catholic_schedule.core.errors import (
    CatholicScheduleError,
    InvalidInputError,
    RemoteFailureError,
    remote_error_message,
)
from catholic_schedule.core.logger import get_logger
from catholic_schedule.core.models import Church
from catholic_schedule.core.schedule import day_name, normalize_time
from catholic_schedule.core.session import AuthSession

logger = get_logger(__name__)


class FormState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class ChurchDirectory:
    """Cached id/name list that feeds the church selection of the schedule forms."""

    def __init__(self, session: AuthSession):
        self.session = session
        self.churches: List[Church] = []
        self.message = ""
        self._listeners: List[Callable[[List[Church]], None]] = []

    def subscribe(self, listener: Callable[[List[Church]], None]) -> None:
        self._listeners.append(listener)

    @property
    def options(self) -> List[Tuple[str, str]]:
        return [(church.id, church.name) for church in self.churches]

    def refresh(self) -> bool:
        self.message = ""
        try:
            response = self.session.client.table("churches").select("id,name").order("name").execute()
        except Exception as e:
            self.message = f"Error loading churches: {remote_error_message(e)}"
            logger.warning(self.message)
            return False

        self.churches = [Church.from_record(record) for record in (response.data or [])]
        logger.debug(f"Church directory refreshed: {len(self.churches)} churches")
        for listener in self._listeners:
            listener(self.churches)
        return True


class AdminForm:
    """Shared submit flow. Subclasses define fields, validation and reset."""

    table = ""
    label = ""
    success_message = ""

    def __init__(self, session: AuthSession):
        self.session = session
        self.state = FormState.IDLE
        self.message = ""
        self.error: Optional[CatholicScheduleError] = None
        self.on_success: Optional[Callable[[], Any]] = None

    def build_row(self) -> Dict[str, Any]:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def _fail(self, error: CatholicScheduleError, message: str) -> bool:
        self.error = error
        self.message = message
        return False

    def submit(self) -> bool:
        self.message = ""
        self.error = None

        try:
            row = self.build_row()
        except InvalidInputError as e:
            return self._fail(e, e.message)

        try:
            client = self.session.client
        except CatholicScheduleError as e:
            return self._fail(e, e.message)

        self.state = FormState.SUBMITTING
        try:
            client.table(self.table).insert([row]).execute()
        except Exception as e:
            error = RemoteFailureError(remote_error_message(e))
            logger.warning(f"❌ Insert into {self.table} failed: {error.message}")
            return self._fail(error, f"Add {self.label} failed: {error.message}")
        finally:
            self.state = FormState.IDLE

        logger.info(f"✅ {self.success_message} ({self.table}, by {self.session.email})")
        self.message = self.success_message
        self.clear()
        if self.on_success is not None:
            self.on_success()
        return True


def _required(value: Optional[str], field: str, label: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise InvalidInputError(f"{label} is required.", field=field)
    return cleaned


def _finite_float(value: Any) -> Optional[float]:
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _day_of_week(value: Any) -> int:
    try:
        day = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError("Please choose a day.", field="day_of_week") from e
    day_name(day)
    return day


class ChurchForm(AdminForm):
    table = "churches"
    label = "church"
    success_message = "Church added."

    FIELDS = ("name", "address", "city", "state", "zip", "lat", "lng")

    def __init__(self, session: AuthSession, **values: str):
        super().__init__(session)
        self.clear()
        for key, value in values.items():
            if key not in self.FIELDS:
                raise TypeError(f"Unknown church field: {key}")
            setattr(self, key, value)

    def clear(self) -> None:
        for key in self.FIELDS:
            setattr(self, key, "")

    def build_row(self) -> Dict[str, Any]:
        row = {
            "name": _required(self.name, "name", "Name"),
            "address": _required(self.address, "address", "Address"),
            "city": _required(self.city, "city", "City"),
            "state": _required(self.state, "state", "State"),
            "zip": _required(self.zip, "zip", "ZIP"),
        }

        lat = _finite_float(self.lat)
        lng = _finite_float(self.lng)
        if lat is None or lng is None:
            raise InvalidInputError("Please enter valid latitude and longitude.", field="lat")
        row["lat"] = lat
        row["lng"] = lng
        return row


class MassTimeForm(AdminForm):
    table = "mass_times"
    label = "Mass time"
    success_message = "Mass time added."

    def __init__(self, session: AuthSession, church_id: str = "", day_of_week: int = 0, time: str = "09:00", notes: str = ""):
        super().__init__(session)
        self.church_id = church_id
        self.day_of_week = day_of_week
        self.time = time
        self.notes = notes

    def clear(self) -> None:
        self.notes = ""

    def build_row(self) -> Dict[str, Any]:
        return {
            "church_id": _required(self.church_id, "church_id", "Church"),
            "day_of_week": _day_of_week(self.day_of_week),
            "time": normalize_time(_required(self.time, "time", "Time")),
            "notes": (self.notes or "").strip() or None,
        }


class ConfessionTimeForm(AdminForm):
    table = "confession_times"
    label = "confession time"
    success_message = "Confession time added."

    def __init__(
        self,
        session: AuthSession,
        church_id: str = "",
        day_of_week: int = 6,
        start_time: str = "15:00",
        end_time: str = "16:00",
        notes: str = "",
    ):
        super().__init__(session)
        self.church_id = church_id
        self.day_of_week = day_of_week
        self.start_time = start_time
        self.end_time = end_time
        self.notes = notes

    def clear(self) -> None:
        self.notes = ""

    def build_row(self) -> Dict[str, Any]:
        return {
            "church_id": _required(self.church_id, "church_id", "Church"),
            "day_of_week": _day_of_week(self.day_of_week),
            "start_time": normalize_time(_required(self.start_time, "start_time", "Start")),
            "end_time": normalize_time(_required(self.end_time, "end_time", "End")),
            "notes": (self.notes or "").strip() or None,
        }


class AdminConsole:
    """The admin page: one session, the church directory and the three forms."""

    def __init__(self, session: AuthSession):
        self.session = session
        self.directory = ChurchDirectory(session)
        self.church_form = ChurchForm(session)
        self.mass_form = MassTimeForm(session)
        self.confession_form = ConfessionTimeForm(session)

        self.church_form.on_success = self.directory.refresh
        self.directory.subscribe(self._default_selection)

    def _default_selection(self, churches: List[Church]) -> None:
        if not churches:
            return
        for form in (self.mass_form, self.confession_form):
            if not form.church_id:
                form.church_id = churches[0].id

    def sign_in(self, email: str, password: str) -> bool:
        if not self.session.sign_in(email, password):
            return False
        self.directory.refresh()
        return True

    def sign_out(self) -> None:
        self.session.sign_out()
        self.directory.churches = []
