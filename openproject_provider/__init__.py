"""
OpenProject Provider - Declarative OpenProject users, reconciled with Pulumi.

Declare users as Python objects in a project's main.py; the provider creates
them through the OpenProject API, notices when they disappear, and replaces
them when their declaration changes.
"""

from .models import ConnectionContext, RemoteUserRecord, UserSpec, UserState
from .reconciler import UserReconciler
from .settings import OpenProjectSettings, get_settings, reload_settings

__version__ = "0.1.0"
__all__ = [
    "ConnectionContext",
    "OpenProjectSettings",
    "RemoteUserRecord",
    "UserReconciler",
    "UserSpec",
    "UserState",
    "get_settings",
    "reload_settings",
]
