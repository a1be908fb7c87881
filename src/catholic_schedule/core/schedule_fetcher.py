"""
Per-church schedule reads.

Each result card loads its own schedule independently. A fetch carries a
CancellationToken that is checked before the result is committed: once the
card is discarded, a late result is dropped instead of written.
"""

import asyncio
import threading
from typing import List, Optional

from supabase import Client

from catholic_schedule.core.errors import CatholicScheduleError, RemoteFailureError, remote_error_message
from catholic_schedule.core.logger import get_logger
from catholic_schedule.core.models import ConfessionTime, MassTime
from catholic_schedule.core.schedule import ScheduleEntry, ScheduleKind, ScheduleView, build_schedule_view, error_view

logger = get_logger(__name__)


class CancellationToken:
    """One-way flag shared between a card and its in-flight fetch."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def fetch_schedule_entries(supabase: Client, church_id: str, kind: ScheduleKind) -> List[ScheduleEntry]:
    """Read all entries of one kind for a church. Raises RemoteFailureError."""
    try:
        response = supabase.table(kind.table).select(kind.columns).eq("church_id", church_id).execute()
    except Exception as e:
        raise RemoteFailureError(remote_error_message(e)) from e

    model = MassTime if kind is ScheduleKind.MASS else ConfessionTime
    try:
        return [model.from_record(record) for record in (response.data or [])]
    except (KeyError, TypeError, ValueError) as e:
        raise RemoteFailureError(f"Malformed {kind.table} row for church {church_id}: {e!r}") from e


def load_schedule(
    supabase: Client,
    church_id: str,
    kind: ScheduleKind,
    token: Optional[CancellationToken] = None,
) -> Optional[ScheduleView]:
    """
    Fetch and format a church's schedule for its card.

    Returns None when the token was cancelled before the fetch resolved.
    A failed read is returned as an error view scoped to this card.
    """
    try:
        entries = fetch_schedule_entries(supabase, church_id, kind)
        view = build_schedule_view(kind, entries)
    except CatholicScheduleError as e:
        logger.warning(f"⚠️ {kind.title} fetch failed for church {church_id}: {e.message}")
        view = error_view(kind, e.message)

    if token is not None and token.cancelled:
        logger.debug(f"Discarding {kind.value} schedule for church {church_id}: card was removed")
        return None
    return view


async def load_schedule_async(
    supabase: Client,
    church_id: str,
    kind: ScheduleKind,
    token: Optional[CancellationToken] = None,
) -> Optional[ScheduleView]:
    """Run load_schedule off the event loop; the Supabase client is synchronous."""
    return await asyncio.to_thread(load_schedule, supabase, church_id, kind, token)
