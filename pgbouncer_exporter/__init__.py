"""Prometheus exporter for PgBouncer's admin console."""

__version__ = "0.1.0"
