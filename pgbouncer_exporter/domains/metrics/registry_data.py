"""Registration data for every metric the exporter exposes.

This is the single source of truth for metric names, help text, kinds and
label shapes.  The registry reads it once at startup; adapters look their
descriptors up by name and never construct ad-hoc ones.
"""

from dataclasses import dataclass

from pgbouncer_exporter.domains.metrics.types import MetricKind

PREFIX = "pgbouncer"

DATABASE_LABEL = "database"
USER_LABEL = "user"
MEMORY_TYPE_LABEL = "type"


@dataclass(frozen=True)
class MetricSpec:
    """Registration entry for one metric descriptor."""

    name: str
    help: str
    kind: MetricKind = MetricKind.gauge
    label_names: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Internal health
# ---------------------------------------------------------------------------

UP = f"{PREFIX}_up"
SCRAPE_DURATION = f"{PREFIX}_scrape_duration"
SCRAPE_LAST_TIME = f"{PREFIX}_scrape_last_time"
SCRAPE_TOTAL = f"{PREFIX}_scrape_total"
SCRAPE_ERROR_COUNT = f"{PREFIX}_scrape_error_count"

HEALTH_METRICS: list[MetricSpec] = [
    MetricSpec(UP, "whether pgbouncer is alive"),
    MetricSpec(SCRAPE_DURATION, "time that spending on scrapping, in nanoseconds"),
    MetricSpec(SCRAPE_LAST_TIME, "last timestamp of scrape in unix epoch"),
    MetricSpec(SCRAPE_TOTAL, "total scrape count", MetricKind.counter),
    MetricSpec(SCRAPE_ERROR_COUNT, "total error count when scrapping", MetricKind.counter),
]

# ---------------------------------------------------------------------------
# SHOW LISTS -- one gauge per list key, named ``pgbouncer_<key>``
# ---------------------------------------------------------------------------


def list_metric_name(key: str) -> str:
    return f"{PREFIX}_{key}"


LIST_METRICS: list[MetricSpec] = [
    MetricSpec(list_metric_name("databases"), "pgbouncer total database count"),
    MetricSpec(list_metric_name("users"), "pgbouncer total users count"),
    MetricSpec(list_metric_name("pools"), "pgbouncer total pools count"),
    MetricSpec(list_metric_name("free_clients"), "pgbouncer available clients count"),
    MetricSpec(list_metric_name("used_clients"), "pgbouncer used clients count"),
    MetricSpec(list_metric_name("login_clients"), "pgbouncer login clients count"),
    MetricSpec(list_metric_name("free_servers"), "pgbouncer available servers count"),
    MetricSpec(list_metric_name("used_servers"), "pgbouncer used servers count"),
    MetricSpec(list_metric_name("dns_names"), "pgbouncer dns name count"),
    MetricSpec(list_metric_name("dns_zones"), "pgbouncer dns zone count"),
    MetricSpec(list_metric_name("dns_queries"), "pgbouncer dns queries count"),
    MetricSpec(list_metric_name("dns_pending"), "pgbouncer dns pending queries count"),
    MetricSpec(list_metric_name("peers"), "pgbouncer configured peers count"),
    MetricSpec(list_metric_name("peer_pools"), "pgbouncer peer pools count"),
]

# ---------------------------------------------------------------------------
# SHOW MEM
# ---------------------------------------------------------------------------

MEMORY_USAGE = f"{PREFIX}_memory_usage"

MEMORY_METRICS: list[MetricSpec] = [
    MetricSpec(MEMORY_USAGE, "pgbouncer memory usage", label_names=(MEMORY_TYPE_LABEL,)),
]

# ---------------------------------------------------------------------------
# SHOW STATS -- column order matters, see domains.admin_commands.adapters
# ---------------------------------------------------------------------------

STAT_FIELDS: tuple[str, ...] = (
    "total_xact_count",
    "total_query_count",
    "total_received",
    "total_sent",
    "total_xact_time",
    "total_query_time",
    "total_wait_time",
    "avg_xact_count",
    "avg_query_count",
    "avg_recv",
    "avg_sent",
    "avg_xact_time",
    "avg_query_time",
    "avg_wait_time",
)


def stat_metric_name(field: str) -> str:
    return f"{PREFIX}_stat_{field}"


# Totals are cumulative since pgbouncer started; averages are point-in-time.
STAT_METRICS: list[MetricSpec] = [
    MetricSpec(
        stat_metric_name(field),
        f"pgbouncer {field} of show stats",
        MetricKind.counter if field.startswith("total") else MetricKind.gauge,
        (DATABASE_LABEL,),
    )
    for field in STAT_FIELDS
]

# ---------------------------------------------------------------------------
# SHOW DATABASES
# ---------------------------------------------------------------------------

DATABASE_FIELDS: tuple[str, ...] = (
    "pool_size",
    "reserve_pool",
    "max_connections",
    "current_connections",
    "paused",
    "disabled",
)


def database_metric_name(field: str) -> str:
    return f"{PREFIX}_database_{field}"


DATABASE_METRICS: list[MetricSpec] = [
    MetricSpec(
        database_metric_name(field),
        f"pgbouncer database {field} from show databases",
        label_names=(DATABASE_LABEL,),
    )
    for field in DATABASE_FIELDS
]

# ---------------------------------------------------------------------------
# SHOW POOLS
# ---------------------------------------------------------------------------

POOL_FIELDS: tuple[str, ...] = (
    "cl_active",
    "cl_waiting",
    "sv_active",
    "sv_idle",
    "sv_used",
    "sv_tested",
    "sv_login",
    "maxwait",
    "maxwait_us",
)


def pool_metric_name(field: str) -> str:
    return f"{PREFIX}_pool_{field}"


POOL_METRICS: list[MetricSpec] = [
    MetricSpec(
        pool_metric_name(field),
        f"pgbouncer pool {field} from show pools",
        label_names=(DATABASE_LABEL, USER_LABEL),
    )
    for field in POOL_FIELDS
]


ALL_METRICS: list[MetricSpec] = [
    *HEALTH_METRICS,
    *LIST_METRICS,
    *MEMORY_METRICS,
    *STAT_METRICS,
    *DATABASE_METRICS,
    *POOL_METRICS,
]
