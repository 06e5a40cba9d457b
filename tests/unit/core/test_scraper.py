"""Unit tests for the scrape orchestrator and health state."""

import math
import threading
import time
from datetime import datetime, timedelta, timezone

import pytest

from pgbouncer_exporter.core.exceptions import QueryError, UnknownMetricError
from pgbouncer_exporter.core.health import HealthState
from pgbouncer_exporter.core.scraper import ScrapeOrchestrator, ScrapePhase
from pgbouncer_exporter.domains.admin_commands import default_adapters
from pgbouncer_exporter.domains.metrics.types import MetricKind

HEALTH_NAMES = [
    "pgbouncer_up",
    "pgbouncer_scrape_duration",
    "pgbouncer_scrape_last_time",
    "pgbouncer_scrape_total",
    "pgbouncer_scrape_error_count",
]

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class SteppingClock:
    """Clock that advances by a fixed step on every call."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(milliseconds=250)):
        self._now = start
        self._step = step

    def __call__(self) -> datetime:
        now = self._now
        self._now += self._step
        return now


def _by_name(samples):
    result = {}
    for sample in samples:
        result.setdefault(sample.name, []).append(sample)
    return result


# ---------------------------------------------------------------------------
# HealthState
# ---------------------------------------------------------------------------


class TestHealthState:
    """Tests for the health data holder."""

    def test_defaults(self):
        state = HealthState()
        assert state.up is False
        assert state.total_scrape_count == 0
        assert state.total_error_count == 0
        assert state.last_scrape_timestamp is None

    def test_successful_update(self):
        state = HealthState()
        state.update(T0, timedelta(seconds=2), succeeded=True)

        assert state.up is True
        assert state.last_scrape_duration == timedelta(seconds=2)
        assert state.last_scrape_timestamp == T0 + timedelta(seconds=2)
        assert state.total_scrape_count == 1
        assert state.total_error_count == 0

    def test_failed_update(self):
        state = HealthState()
        state.update(T0, timedelta(seconds=1), succeeded=True)
        state.update(T0, timedelta(seconds=1), succeeded=False)

        assert state.up is False
        assert state.total_scrape_count == 2
        assert state.total_error_count == 1

    def test_to_samples(self, registry):
        state = HealthState()
        state.update(T0, timedelta(milliseconds=1), succeeded=True)
        samples = {s.name: s for s in state.to_samples(registry)}

        assert list(samples) == HEALTH_NAMES
        assert samples["pgbouncer_up"].value == 1.0
        assert samples["pgbouncer_scrape_duration"].value == 1_000_000.0
        assert samples["pgbouncer_scrape_last_time"].value == T0.timestamp()
        assert samples["pgbouncer_scrape_total"].value == 1.0
        assert samples["pgbouncer_scrape_total"].descriptor.kind is MetricKind.counter
        assert samples["pgbouncer_scrape_error_count"].descriptor.kind is MetricKind.counter


# ---------------------------------------------------------------------------
# ScrapeOrchestrator
# ---------------------------------------------------------------------------


class TestScrapeOrchestrator:
    """Tests for pass sequencing and failure policy."""

    def test_successful_pass(self, registry, fake_executor):
        orchestrator = ScrapeOrchestrator(registry, fake_executor)
        samples, error = orchestrator.collect()

        assert error is None
        assert fake_executor.queries == [
            "SHOW LISTS;",
            "SHOW MEM;",
            "SHOW STATS;",
            "SHOW DATABASES;",
            "SHOW POOLS;",
        ]
        # 2 lists + 2 mem + 14x2 stats + 6 databases + 9x2 pools + 5 health
        assert len(samples) == 2 + 2 + 28 + 6 + 18 + 5
        assert [s.name for s in samples[-5:]] == HEALTH_NAMES
        assert orchestrator.health.up is True

    def test_phase_transitions(self, registry, fake_executor):
        orchestrator = ScrapeOrchestrator(registry, fake_executor)
        assert orchestrator.phase is ScrapePhase.idle

        phases = []
        orchestrator.scrape(lambda sample: phases.append(orchestrator.phase))

        assert phases[0] is ScrapePhase.running
        assert phases[-1] is ScrapePhase.done
        assert orchestrator.phase is ScrapePhase.done

    def test_stats_failure_keeps_earlier_samples(self, registry, fake_executor):
        orchestrator = ScrapeOrchestrator(registry, fake_executor)
        orchestrator.collect()
        fake_executor.queries.clear()
        fake_executor.set_error("SHOW STATS;", QueryError("SHOW STATS;", "failed: boom"))

        samples, error = orchestrator.collect()
        names = _by_name(samples)

        assert isinstance(error, QueryError)
        assert fake_executor.queries == ["SHOW LISTS;", "SHOW MEM;", "SHOW STATS;"]
        assert "pgbouncer_databases" in names
        assert "pgbouncer_memory_usage" in names
        assert not any(n.startswith("pgbouncer_stat_") for n in names)
        assert not any(n.startswith("pgbouncer_database_") for n in names)
        assert not any(n.startswith("pgbouncer_pool_") for n in names)
        assert names["pgbouncer_up"][0].value == 0.0
        assert names["pgbouncer_scrape_error_count"][0].value == 1.0
        assert orchestrator.health.total_error_count == 1

    def test_samples_delivered_before_abort(self, registry, fake_executor):
        fake_executor.set_error("SHOW MEM;", QueryError("SHOW MEM;", "failed: driver error"))
        orchestrator = ScrapeOrchestrator(registry, fake_executor)

        delivered = []
        error = orchestrator.scrape(delivered.append)

        assert isinstance(error, QueryError)
        assert [(s.name, s.value) for s in delivered[:2]] == [
            ("pgbouncer_databases", 3.0),
            ("pgbouncer_users", 7.0),
        ]
        assert all(s.descriptor.kind is MetricKind.gauge for s in delivered[:2])
        assert [s.name for s in delivered[2:]] == HEALTH_NAMES

    def test_empty_pools_still_succeeds(self, registry, fake_executor):
        fake_executor.set_rows("SHOW POOLS;", [])
        orchestrator = ScrapeOrchestrator(registry, fake_executor)

        samples, error = orchestrator.collect()

        assert error is None
        assert not any(s.name.startswith("pgbouncer_pool_") for s in samples)
        assert orchestrator.health.up is True

    def test_counters_are_monotonic(self, registry, fake_executor):
        orchestrator = ScrapeOrchestrator(registry, fake_executor)
        outcomes = [True, False, False, True, False]
        history = []

        for ok in outcomes:
            if ok:
                fake_executor.set_rows("SHOW LISTS;", [("databases", 1)])
            else:
                fake_executor.set_error("SHOW LISTS;", QueryError("SHOW LISTS;", "failed"))
            orchestrator.collect()
            health = orchestrator.health
            history.append((health.total_scrape_count, health.total_error_count, health.up))

        assert [h[0] for h in history] == [1, 2, 3, 4, 5]
        assert [h[1] for h in history] == [0, 1, 2, 2, 3]
        assert [h[2] for h in history] == outcomes

    def test_duration_and_timestamp_from_clock(self, registry, fake_executor):
        clock = SteppingClock(step=timedelta(milliseconds=250))
        orchestrator = ScrapeOrchestrator(registry, fake_executor, clock=clock)

        samples, _ = orchestrator.collect()
        names = _by_name(samples)

        assert names["pgbouncer_scrape_duration"][0].value == 250_000_000.0
        assert names["pgbouncer_scrape_last_time"][0].value == math.floor(
            (T0 + timedelta(milliseconds=250)).timestamp()
        )

    def test_unknown_list_key_is_a_defect(self, registry, fake_executor):
        fake_executor.set_rows("SHOW LISTS;", [("not_a_list", 1)])
        orchestrator = ScrapeOrchestrator(registry, fake_executor)

        with pytest.raises(UnknownMetricError):
            orchestrator.collect()

        health = orchestrator.health
        assert orchestrator.phase is ScrapePhase.done
        assert health.up is False
        assert health.total_scrape_count == 1
        assert health.total_error_count == 1

        # The lock is released; the next pass runs normally.
        fake_executor.set_rows("SHOW LISTS;", [("databases", 1)])
        _, error = orchestrator.collect()
        assert error is None

    def test_unexpected_adapter_error_is_recorded_before_propagating(
        self, registry, fake_executor
    ):
        class BrokenAdapter:
            command = "SHOW MEM;"

            def run(self, executor):
                raise ValueError("bad row")

        adapters = [*default_adapters(registry)[:1], BrokenAdapter()]
        orchestrator = ScrapeOrchestrator(registry, fake_executor, adapters=adapters)
        delivered = []

        with pytest.raises(ValueError, match="bad row"):
            orchestrator.scrape(delivered.append)

        names = _by_name(delivered)
        assert orchestrator.phase is ScrapePhase.done
        assert names["pgbouncer_databases"][0].value == 3.0
        assert names["pgbouncer_up"][0].value == 0.0
        assert names["pgbouncer_scrape_total"][0].value == 1.0
        assert names["pgbouncer_scrape_error_count"][0].value == 1.0

    def test_out_of_range_column_does_not_abort_pass(self, registry, fake_executor):
        fake_executor.set_rows("SHOW MEM;", [("user_cache", 1, 2, 3, datetime.min)])
        orchestrator = ScrapeOrchestrator(registry, fake_executor)

        samples, error = orchestrator.collect()
        names = _by_name(samples)

        assert error is None
        assert math.isnan(names["pgbouncer_memory_usage"][0].value)
        assert orchestrator.health.up is True

    def test_close_closes_executor(self, registry, fake_executor):
        orchestrator = ScrapeOrchestrator(registry, fake_executor)
        orchestrator.close()
        assert fake_executor.closed is True

    def test_close_waits_for_in_flight_pass(self, registry, fake_executor):
        entered = threading.Event()
        seen_closed = []

        class SlowAdapter:
            command = "SHOW LISTS;"

            def run(self, executor):
                entered.set()
                time.sleep(0.05)
                seen_closed.append(executor.closed)
                return []

        orchestrator = ScrapeOrchestrator(registry, fake_executor, adapters=[SlowAdapter()])
        scraper = threading.Thread(target=orchestrator.collect)
        scraper.start()
        entered.wait(timeout=1)
        orchestrator.close()
        scraper.join()

        assert seen_closed == [False]
        assert fake_executor.closed is True

    def test_health_is_a_copy(self, registry, fake_executor):
        orchestrator = ScrapeOrchestrator(registry, fake_executor)
        snapshot = orchestrator.health
        snapshot.total_scrape_count = 99

        assert orchestrator.health.total_scrape_count == 0

    def test_passes_are_serialized(self, registry, fake_executor):
        active = 0
        max_active = 0
        guard = threading.Lock()

        class SlowAdapter:
            command = "SHOW LISTS;"

            def run(self, executor):
                nonlocal active, max_active
                with guard:
                    active += 1
                    max_active = max(max_active, active)
                time.sleep(0.01)
                with guard:
                    active -= 1
                return []

        orchestrator = ScrapeOrchestrator(registry, fake_executor, adapters=[SlowAdapter()])
        threads = [threading.Thread(target=orchestrator.collect) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert max_active == 1
        assert orchestrator.health.total_scrape_count == 4
