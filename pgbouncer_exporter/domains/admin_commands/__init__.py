"""Admin command adapters."""

from pgbouncer_exporter.domains.admin_commands.adapters import (
    DatabasesAdapter,
    ListsAdapter,
    MemoryAdapter,
    PoolsAdapter,
    StatsAdapter,
    default_adapters,
)
from pgbouncer_exporter.domains.admin_commands.protocols import AdminQueryAdapter

__all__ = [
    "AdminQueryAdapter",
    "DatabasesAdapter",
    "ListsAdapter",
    "MemoryAdapter",
    "PoolsAdapter",
    "StatsAdapter",
    "default_adapters",
]
