"""Prometheus custom collector over the scrape orchestrator.

Every ``collect()`` runs one scrape pass and turns the resulting samples
into metric families, so the values on the wire are always those of the
pass triggered by that very request.  ``describe()`` answers from the
descriptor registry and never touches pgbouncer, which keeps registration
on a ``CollectorRegistry`` free of side effects.

Counter families follow prometheus-client naming: the exposed sample name
carries a ``_total`` suffix.
"""

from collections.abc import Iterable

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from pgbouncer_exporter.core.protocols.registry import MetricRegistryProtocol
from pgbouncer_exporter.core.scraper import ScrapeOrchestrator
from pgbouncer_exporter.domains.metrics.types import MetricDescriptor, MetricKind


def _new_family(descriptor: MetricDescriptor) -> Metric:
    family_cls = CounterMetricFamily if descriptor.kind is MetricKind.counter else GaugeMetricFamily
    return family_cls(descriptor.name, descriptor.help, labels=list(descriptor.label_names))


class PrometheusScrapeCollector(Collector):
    """Expose scrape passes to a prometheus-client ``CollectorRegistry``."""

    def __init__(
        self,
        orchestrator: ScrapeOrchestrator,
        registry: MetricRegistryProtocol,
    ) -> None:
        self._orchestrator = orchestrator
        self._registry = registry

    def collect(self) -> Iterable[Metric]:
        samples, _ = self._orchestrator.collect()

        # Families appear in the order their first sample was emitted.
        families: dict[str, Metric] = {}
        for sample in samples:
            family = families.get(sample.name)
            if family is None:
                family = families[sample.name] = _new_family(sample.descriptor)
            family.add_metric(list(sample.label_values), sample.value)

        yield from families.values()

    def describe(self) -> Iterable[Metric]:
        return [_new_family(descriptor) for descriptor in self._registry.list_all()]
