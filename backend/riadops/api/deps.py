"""Shared API dependencies — single import point for all routers.

Re-exports spreadsheet and authentication dependencies so that router
modules can import everything they need from one place::

    from riadops.api.deps import get_guest_table, get_current_operator
"""

from riadops.auth.dependencies import get_current_operator
from riadops.sheets.dependencies import get_guest_table, get_sheets

__all__ = [
    "get_current_operator",
    "get_guest_table",
    "get_sheets",
]
