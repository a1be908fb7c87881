"""
Catholic Schedule - find nearby Mass and Confession times.

Searches churches near a U.S. ZIP code and formats their weekly schedules,
with an authenticated admin surface for adding churches and schedule entries.
"""

from .__version__ import __version__, get_build_info, get_version

__all__ = ["__version__", "get_version", "get_build_info"]

# Package metadata
__title__ = "catholic-schedule"
__description__ = "Find local Mass and Confession times by ZIP code"
__license__ = "MIT"
