"""
Utilities Module
================

Helper functions and utility classes.
"""

from app.utils.helpers import generate_uuid, utc_now

__all__ = ["generate_uuid", "utc_now"]
