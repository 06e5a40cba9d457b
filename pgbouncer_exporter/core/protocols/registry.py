"""Protocols for registries."""

from typing import Protocol, TypeVar

from pgbouncer_exporter.domains.metrics.types import MetricDescriptor

EntryT = TypeVar("EntryT", covariant=True)


class RegistryProtocol(Protocol[EntryT]):
    """Base protocol for in-memory registries.

    Built once at startup. All lookups are synchronous dict reads.
    """

    def get(self, name: str) -> EntryT:
        """Get an entry by name. Raises KeyError if not found."""
        ...

    def list_all(self) -> list[EntryT]:
        """List all registered entries."""
        ...


class MetricRegistryProtocol(RegistryProtocol[MetricDescriptor], Protocol):
    """Metric descriptor registry protocol.

    ``get`` raises ``UnknownMetricError`` (a ``KeyError``) for names that were
    never registered.
    """

    pass
