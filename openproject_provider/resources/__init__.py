"""
OpenProject Resources - Pydantic models for declared OpenProject objects.
"""

from .base import Resource
from .user import OpenProjectUserResource

__all__ = [
    "OpenProjectUserResource",
    "Resource",
]
