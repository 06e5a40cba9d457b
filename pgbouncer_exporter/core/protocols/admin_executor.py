"""AdminExecutor protocol for the PgBouncer admin console.

Abstracts the admin connection so the query adapters depend on a protocol
rather than a concrete driver.  Production uses psycopg2; tests inject a
fake that serves canned rows per command.
"""

from typing import Protocol, runtime_checkable

from pgbouncer_exporter.core.coercion import Row


@runtime_checkable
class AdminExecutor(Protocol):
    """Protocol for issuing admin commands and reading their rows."""

    def query(self, command: str) -> list[Row]:
        """Run one admin command and return every row it produced.

        Args:
            command: The admin command text, e.g. ``"SHOW POOLS;"``.

        Raises:
            AdminConnectionError: If the admin console cannot be reached.
            QueryError: If the command fails.
        """
        ...

    def close(self) -> None:
        """Release the admin connection."""
        ...
