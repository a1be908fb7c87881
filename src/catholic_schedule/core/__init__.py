"""
Core module for Catholic Schedule.

ZIP geocoding, the nearby-church search, schedule formatting and the admin
forms. Backend access goes through the Supabase client in ``core.db``.
"""

from .errors import CatholicScheduleError, InvalidInputError, NotAuthenticatedError, NotFoundError, RemoteFailureError
from .logger import get_logger

__all__ = [
    "get_logger",
    "CatholicScheduleError",
    "InvalidInputError",
    "NotFoundError",
    "RemoteFailureError",
    "NotAuthenticatedError",
]
