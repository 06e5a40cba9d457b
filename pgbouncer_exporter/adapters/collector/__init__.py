"""Collector adapters."""

from pgbouncer_exporter.adapters.collector.prometheus import PrometheusScrapeCollector

__all__ = ["PrometheusScrapeCollector"]
