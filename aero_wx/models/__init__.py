"""
Generic collection models for the aero_wx library.
"""

from .queryable_collection import QueryableCollection

__all__ = [
    'QueryableCollection',
]
