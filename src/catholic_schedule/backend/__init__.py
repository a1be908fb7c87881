"""
HTTP API for Catholic Schedule.

Serve with::

    uvicorn catholic_schedule.backend.main:app
"""
