"""Shared fixtures: a frozen registry and canned admin console output."""

import pytest

from pgbouncer_exporter.adapters.admin_executor import FakeAdminExecutor
from pgbouncer_exporter.domains.metrics import MetricDescriptorRegistry, build_registry

LISTS_ROWS = [("databases", 3), ("users", 7)]

MEM_ROWS = [
    ("user_cache", 184, 4, 85, 15640),
    ("db_cache", 208, 2, 76, 16224),
]

# database, 7 totals, 7 averages
STATS_ROWS = [
    ("app", 10, 20, 3000, 4000, 500, 600, 70, 1, 2, 30, 40, 5, 6, 7),
    ("pgbouncer", 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
]

# name, host, port, database, force_user, pool_size, reserve_pool, pool_mode,
# max_connections, current_connections, paused, disabled
DATABASES_ROWS = [
    ("app", "10.0.0.5", 5432, "app", None, 20, 5, "transaction", 100, 4, 0, 0),
]

# database, user, cl_active, cl_waiting, sv_active, sv_idle, sv_used,
# sv_tested, sv_login, maxwait, maxwait_us, pool_mode
POOLS_ROWS = [
    ("app", "web", 12, 1, 3, 2, 1, 0, 0, 2, 150, "transaction"),
    ("app", "worker", 4, 0, 1, 1, 0, 0, 0, 0, 0, "transaction"),
]


@pytest.fixture
def registry() -> MetricDescriptorRegistry:
    return build_registry()


@pytest.fixture
def fake_executor() -> FakeAdminExecutor:
    """Executor answering every admin command with realistic rows."""
    fake = FakeAdminExecutor()
    fake.set_rows("SHOW LISTS;", LISTS_ROWS)
    fake.set_rows("SHOW MEM;", MEM_ROWS)
    fake.set_rows("SHOW STATS;", STATS_ROWS)
    fake.set_rows("SHOW DATABASES;", DATABASES_ROWS)
    fake.set_rows("SHOW POOLS;", POOLS_ROWS)
    return fake
