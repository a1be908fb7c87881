"""
Command-line interface module for Catholic Schedule.

This module provides CLI commands for searching schedules, serving the API
and running admin inserts.
"""

from .main import main

__all__ = ["main"]
