"""Metric descriptors and the registry that owns them."""

from pgbouncer_exporter.domains.metrics.registry import MetricDescriptorRegistry, build_registry
from pgbouncer_exporter.domains.metrics.types import MetricDescriptor, MetricKind, Sample

__all__ = [
    "MetricDescriptor",
    "MetricDescriptorRegistry",
    "MetricKind",
    "Sample",
    "build_registry",
]
