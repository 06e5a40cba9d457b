"""Protocols for admin command adapters."""

from typing import Protocol

from pgbouncer_exporter.core.protocols.admin_executor import AdminExecutor
from pgbouncer_exporter.domains.metrics.types import Sample


class AdminQueryAdapter(Protocol):
    """Maps the rows of one admin command onto metric samples."""

    @property
    def command(self) -> str:
        """The admin command this adapter issues."""
        ...

    def run(self, executor: AdminExecutor) -> list[Sample]:
        """Issue the command and map every row.

        Either every row maps and the full sample list is returned, or
        ``QueryError`` is raised and nothing is returned.
        """
        ...
