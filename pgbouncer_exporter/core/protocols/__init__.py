"""Core protocols for dependency injection."""

from pgbouncer_exporter.core.protocols.admin_executor import AdminExecutor
from pgbouncer_exporter.core.protocols.metrics_renderer import MetricsRenderer
from pgbouncer_exporter.core.protocols.registry import MetricRegistryProtocol, RegistryProtocol

__all__ = [
    "AdminExecutor",
    "MetricRegistryProtocol",
    "MetricsRenderer",
    "RegistryProtocol",
]
