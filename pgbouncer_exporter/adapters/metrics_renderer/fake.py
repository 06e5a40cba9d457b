"""Fake MetricsRenderer for testing.

Records generate() calls so tests can assert on metrics-server behaviour
without depending on prometheus-client.
"""

from pgbouncer_exporter.core.protocols.metrics_renderer import MetricsRenderer


class FakeMetricsRenderer(MetricsRenderer):
    """In-memory spy implementing the MetricsRenderer protocol."""

    def __init__(self, payload: bytes = b"# fake metrics\n") -> None:
        self.generate_calls: int = 0
        self._payload = payload

    @property
    def content_type(self) -> str:
        return "text/plain"

    def generate(self) -> bytes:
        self.generate_calls += 1
        return self._payload
