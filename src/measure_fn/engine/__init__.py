"""The measuring engine: call contexts, wrappers, resolvers and scopes."""

from .async_measure import AsyncMeasure, AsyncResolver
from .context import CallContext, RootCounter
from .scope import Scope, create_scope, default_scope, measure, measure_sync, reset_counter
from .sync_measure import SyncMeasure, SyncResolver

__all__ = [
    "AsyncMeasure",
    "AsyncResolver",
    "CallContext",
    "RootCounter",
    "Scope",
    "SyncMeasure",
    "SyncResolver",
    "create_scope",
    "default_scope",
    "measure",
    "measure_sync",
    "reset_counter",
]
