"""Row-to-sample adapters, one per PgBouncer admin command.

Column meaning is positional and fixed per command:

    SHOW LISTS;      0 list, 1 items
    SHOW MEM;        0 name, 4 memtotal
    SHOW STATS;      0 database, 1-14 totals then averages
    SHOW DATABASES;  0 name, 5 pool_size, 6 reserve_pool, 8 max_connections,
                     9 current_connections, 10 paused, 11 disabled
    SHOW POOLS;      0 database, 1 user, 2-10 client/server state and maxwait

A row whose width differs from the documented layout fails the whole
adapter with ``QueryError``; no samples from a partially read result are
returned.
"""

from collections.abc import Sequence

from pgbouncer_exporter.core.coercion import Row, to_float, to_label
from pgbouncer_exporter.core.exceptions import QueryError
from pgbouncer_exporter.core.protocols.admin_executor import AdminExecutor
from pgbouncer_exporter.core.protocols.registry import MetricRegistryProtocol
from pgbouncer_exporter.domains.admin_commands.protocols import AdminQueryAdapter
from pgbouncer_exporter.domains.metrics.registry_data import (
    DATABASE_FIELDS,
    MEMORY_USAGE,
    POOL_FIELDS,
    STAT_FIELDS,
    database_metric_name,
    list_metric_name,
    pool_metric_name,
    stat_metric_name,
)
from pgbouncer_exporter.domains.metrics.types import Sample

# Column positions in SHOW DATABASES, in DATABASE_FIELDS order.
_DATABASE_COLUMNS: tuple[int, ...] = (5, 6, 8, 9, 10, 11)


class _CommandAdapter:
    """Shared fetch-and-validate step for every admin command."""

    command: str = ""
    columns: int = 0

    def __init__(self, registry: MetricRegistryProtocol) -> None:
        self._registry = registry

    def _fetch(self, executor: AdminExecutor) -> list[Row]:
        rows = executor.query(self.command)
        for index, row in enumerate(rows):
            if len(row) != self.columns:
                raise QueryError(
                    self.command,
                    f"row {index}: expected {self.columns} columns, got {len(row)}",
                )
        return rows

    def run(self, executor: AdminExecutor) -> list[Sample]:
        return self._map_rows(self._fetch(executor))

    def _map_rows(self, rows: list[Row]) -> list[Sample]:
        raise NotImplementedError


class ListsAdapter(_CommandAdapter):
    """``SHOW LISTS;`` -- one unlabeled gauge per list key."""

    command = "SHOW LISTS;"
    columns = 2

    def _map_rows(self, rows: list[Row]) -> list[Sample]:
        # Last value wins if pgbouncer ever repeats a key.
        counts: dict[str, float] = {}
        for row in rows:
            counts[to_label(row[0])] = to_float(row[1])

        return [
            Sample(self._registry.get(list_metric_name(key)), value)
            for key, value in counts.items()
        ]


class MemoryAdapter(_CommandAdapter):
    """``SHOW MEM;`` -- total bytes per memory pool."""

    command = "SHOW MEM;"
    columns = 5

    def __init__(self, registry: MetricRegistryProtocol) -> None:
        super().__init__(registry)
        self._descriptor = registry.get(MEMORY_USAGE)

    def _map_rows(self, rows: list[Row]) -> list[Sample]:
        usage: dict[str, float] = {}
        for row in rows:
            usage[to_label(row[0])] = to_float(row[4])

        return [Sample(self._descriptor, value, (pool,)) for pool, value in usage.items()]


class StatsAdapter(_CommandAdapter):
    """``SHOW STATS;`` -- fourteen counters and gauges per database."""

    command = "SHOW STATS;"
    columns = 1 + len(STAT_FIELDS)

    def __init__(self, registry: MetricRegistryProtocol) -> None:
        super().__init__(registry)
        self._descriptors = [registry.get(stat_metric_name(field)) for field in STAT_FIELDS]

    def _map_rows(self, rows: list[Row]) -> list[Sample]:
        per_database: dict[str, Row] = {}
        for row in rows:
            per_database[to_label(row[0])] = row

        samples: list[Sample] = []
        for database, row in per_database.items():
            for descriptor, value in zip(self._descriptors, row[1:]):
                samples.append(Sample(descriptor, to_float(value), (database,)))
        return samples


class DatabasesAdapter(_CommandAdapter):
    """``SHOW DATABASES;`` -- pool configuration and state per database."""

    command = "SHOW DATABASES;"
    columns = 12

    def __init__(self, registry: MetricRegistryProtocol) -> None:
        super().__init__(registry)
        self._descriptors = [
            registry.get(database_metric_name(field)) for field in DATABASE_FIELDS
        ]

    def _map_rows(self, rows: list[Row]) -> list[Sample]:
        samples: list[Sample] = []
        for row in rows:
            database = to_label(row[0])
            for descriptor, column in zip(self._descriptors, _DATABASE_COLUMNS):
                samples.append(Sample(descriptor, to_float(row[column]), (database,)))
        return samples


class PoolsAdapter(_CommandAdapter):
    """``SHOW POOLS;`` -- client and server counts per (database, user) pool."""

    command = "SHOW POOLS;"
    columns = 12

    def __init__(self, registry: MetricRegistryProtocol) -> None:
        super().__init__(registry)
        self._descriptors = [registry.get(pool_metric_name(field)) for field in POOL_FIELDS]

    def _map_rows(self, rows: list[Row]) -> list[Sample]:
        samples: list[Sample] = []
        for row in rows:
            labels = (to_label(row[0]), to_label(row[1]))
            for descriptor, value in zip(self._descriptors, row[2:]):
                samples.append(Sample(descriptor, to_float(value), labels))
        return samples


def default_adapters(registry: MetricRegistryProtocol) -> Sequence[AdminQueryAdapter]:
    """Return the five adapters in the order a scrape pass runs them."""
    return (
        ListsAdapter(registry),
        MemoryAdapter(registry),
        StatsAdapter(registry),
        DatabasesAdapter(registry),
        PoolsAdapter(registry),
    )
