"""Pulumi dynamic providers for OpenProject resources."""

from .user import OpenProjectUser, OpenProjectUserProvider

__all__ = [
    "OpenProjectUser",
    "OpenProjectUserProvider",
]
