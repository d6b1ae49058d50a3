"""Utility functions for the invoice dashboard."""

from .numeric import format_currency, from_cents, to_cents
from .revalidate import ViewCache, revalidate_path

__all__ = [
    "format_currency",
    "from_cents",
    "to_cents",
    "ViewCache",
    "revalidate_path",
]
