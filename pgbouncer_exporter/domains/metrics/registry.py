"""In-memory metric descriptor registry."""

from collections.abc import Iterable

from pgbouncer_exporter.core.exceptions import UnknownMetricError
from pgbouncer_exporter.domains.metrics.registry_data import ALL_METRICS, MetricSpec
from pgbouncer_exporter.domains.metrics.types import MetricDescriptor, MetricKind


class MetricDescriptorRegistry:
    """Name -> descriptor map, writable until frozen and read-only after.

    Usage:
        registry = MetricDescriptorRegistry.from_specs(ALL_METRICS)
        registry.get("pgbouncer_up")
    """

    def __init__(self) -> None:
        self._descriptors: dict[str, MetricDescriptor] = {}
        self._frozen = False

    @classmethod
    def from_specs(cls, specs: Iterable[MetricSpec]) -> "MetricDescriptorRegistry":
        """Register every entry and return the frozen registry."""
        registry = cls()
        for spec in specs:
            registry.register(spec.name, spec.help, spec.kind, spec.label_names)
        registry.freeze()
        return registry

    def register(
        self,
        name: str,
        help: str,
        kind: MetricKind,
        label_names: Iterable[str] = (),
    ) -> MetricDescriptor:
        """Register a descriptor.

        Registering an identical descriptor twice is a no-op.

        Raises:
            RuntimeError: If the registry is already frozen.
            ValueError: If ``name`` is registered with different metadata.
        """
        if self._frozen:
            raise RuntimeError(f"cannot register '{name}': registry is frozen")

        descriptor = MetricDescriptor(
            name=name,
            help=help,
            kind=kind,
            label_names=tuple(label_names),
        )
        existing = self._descriptors.get(name)
        if existing is not None:
            if existing != descriptor:
                raise ValueError(f"metric '{name}' is already registered as {existing!r}")
            return existing

        self._descriptors[name] = descriptor
        return descriptor

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> MetricDescriptor:
        try:
            return self._descriptors[name]
        except KeyError:
            raise UnknownMetricError(name) from None

    def list_all(self) -> list[MetricDescriptor]:
        return list(self._descriptors.values())

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


def build_registry() -> MetricDescriptorRegistry:
    """Build the frozen registry of every metric the exporter exposes."""
    return MetricDescriptorRegistry.from_specs(ALL_METRICS)
