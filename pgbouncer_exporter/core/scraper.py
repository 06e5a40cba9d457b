"""Scrape orchestrator.

Runs the admin command adapters in a fixed order against the single admin
connection, forwarding each adapter's samples to the caller's sink as soon
as it returns.  The first failing adapter ends the pass; samples already
forwarded stay delivered.  Health state is updated and emitted on every
pass, successful or not.

Passes are serialized by one lock held for the whole pass: a concurrent
collection request blocks until the in-flight pass completes.
"""

import threading
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pgbouncer_exporter.core.exceptions import ExporterError
from pgbouncer_exporter.core.health import HealthState
from pgbouncer_exporter.core.logging import logger
from pgbouncer_exporter.core.protocols.admin_executor import AdminExecutor
from pgbouncer_exporter.core.protocols.registry import MetricRegistryProtocol
from pgbouncer_exporter.domains.admin_commands import AdminQueryAdapter, default_adapters
from pgbouncer_exporter.domains.metrics.types import Sample

SampleSink = Callable[[Sample], None]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScrapePhase(str, Enum):
    """Lifecycle of a scrape pass."""

    idle = "idle"
    running = "running"
    done = "done"


class ScrapeOrchestrator:
    """Sequence the admin adapters and own the exporter's health state.

    Args:
        registry: Frozen metric descriptor registry.
        executor: Admin connection the adapters query.
        adapters: Adapters in run order; defaults to lists, mem, stats,
            databases, pools.
        clock: Source of the pass start and end instants.
    """

    def __init__(
        self,
        registry: MetricRegistryProtocol,
        executor: AdminExecutor,
        adapters: Optional[Sequence[AdminQueryAdapter]] = None,
        clock: Clock = _utcnow,
    ) -> None:
        self._registry = registry
        self._executor = executor
        self._adapters = tuple(adapters) if adapters is not None else default_adapters(registry)
        self._clock = clock
        self._lock = threading.Lock()
        self._health = HealthState()
        self._phase = ScrapePhase.idle
        self.logger = logger.with_context(context_base="scraper")

    @property
    def phase(self) -> ScrapePhase:
        return self._phase

    @property
    def health(self) -> HealthState:
        """Copy of the current health state."""
        with self._lock:
            return replace(self._health)

    def scrape(self, sink: SampleSink) -> Optional[ExporterError]:
        """Run one scrape pass, pushing every sample into ``sink``.

        Returns:
            The error that ended the pass early, or None if every adapter
            completed.  Scrape errors are reported, never raised.

        Raises:
            Exception: Anything that is not an ``ExporterError`` (for example
                ``UnknownMetricError``) propagates once the pass has been
                recorded as failed and the health samples emitted.
        """
        with self._lock:
            self._phase = ScrapePhase.running
            started = self._clock()
            error: Optional[ExporterError] = None

            try:
                for adapter in self._adapters:
                    try:
                        samples = adapter.run(self._executor)
                    except ExporterError as e:
                        error = e
                        break
                    for sample in samples:
                        sink(sample)
            except Exception:
                self.logger.error("scrape aborted by unexpected error", exc_info=True)
                self._finish(started, sink, succeeded=False)
                raise

            if error is not None:
                self.logger.warning(f"scrape failed: {error}")
            self._finish(started, sink, succeeded=error is None)
            return error

    def _finish(self, started: datetime, sink: SampleSink, succeeded: bool) -> None:
        finished = self._clock()
        self._phase = ScrapePhase.done
        self._health.update(started, finished - started, succeeded=succeeded)
        for sample in self._health.to_samples(self._registry):
            sink(sample)

    def collect(self) -> tuple[list[Sample], Optional[ExporterError]]:
        """Run one pass and return its samples alongside the pass status."""
        samples: list[Sample] = []
        error = self.scrape(samples.append)
        return samples, error

    def close(self) -> None:
        """Close the admin connection once any in-flight pass has finished."""
        with self._lock:
            self._executor.close()
