"""Scrape health state.

One ``HealthState`` lives for the whole process.  The orchestrator updates
it exactly once per scrape pass, inside its lock, and re-emits it as the
five ``pgbouncer_up`` / ``pgbouncer_scrape_*`` samples whether the pass
succeeded or not.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from pgbouncer_exporter.core.coercion import to_float
from pgbouncer_exporter.core.protocols.registry import MetricRegistryProtocol
from pgbouncer_exporter.domains.metrics import registry_data
from pgbouncer_exporter.domains.metrics.types import Sample


@dataclass
class HealthState:
    """Liveness snapshot of the scrape engine."""

    up: bool = False
    last_scrape_duration: timedelta = timedelta(0)
    last_scrape_timestamp: Optional[datetime] = None
    total_scrape_count: int = 0
    total_error_count: int = 0

    def update(self, started: datetime, duration: timedelta, succeeded: bool) -> None:
        """Record the outcome of one scrape pass.

        Args:
            started: Instant the pass began.
            duration: Wall time the pass took.
            succeeded: Whether every adapter in the pass completed.
        """
        self.last_scrape_timestamp = started + duration
        self.last_scrape_duration = duration
        self.total_scrape_count += 1
        if succeeded:
            self.up = True
        else:
            self.up = False
            self.total_error_count += 1

    def to_samples(self, registry: MetricRegistryProtocol) -> list[Sample]:
        """Render the state as the five internal health samples."""
        return [
            Sample(registry.get(registry_data.UP), to_float(self.up)),
            Sample(
                registry.get(registry_data.SCRAPE_DURATION),
                to_float(self.last_scrape_duration),
            ),
            Sample(
                registry.get(registry_data.SCRAPE_LAST_TIME),
                to_float(self.last_scrape_timestamp),
            ),
            Sample(registry.get(registry_data.SCRAPE_TOTAL), to_float(self.total_scrape_count)),
            Sample(
                registry.get(registry_data.SCRAPE_ERROR_COUNT),
                to_float(self.total_error_count),
            ),
        ]
