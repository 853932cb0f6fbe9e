"""Shared utility functions and helpers"""
from placehub.utils.database import get_or_404, get_or_none
from placehub.utils.responses import format_deleted_response, format_success_response

__all__ = [
    "get_or_404",
    "get_or_none",
    "format_deleted_response",
    "format_success_response",
]
