"""Database layer: declarative base, engine and session management."""

from procurement_kernel.db.base import (
    AccountScopedMixin,
    Base,
    ExternalIdMixin,
    TrackedBase,
    UUIDString,
)
from procurement_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    read_session,
    session_scope,
)

__all__ = [
    "AccountScopedMixin",
    "Base",
    "ExternalIdMixin",
    "TrackedBase",
    "UUIDString",
    "create_tables",
    "get_engine",
    "get_session",
    "init_engine_from_url",
    "read_session",
    "session_scope",
]
