"""Metrics renderer adapters."""

from pgbouncer_exporter.adapters.metrics_renderer.fake import FakeMetricsRenderer
from pgbouncer_exporter.adapters.metrics_renderer.prometheus import PrometheusMetricsRenderer

__all__ = ["PrometheusMetricsRenderer", "FakeMetricsRenderer"]
