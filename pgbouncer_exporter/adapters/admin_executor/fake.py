"""Fake AdminExecutor for testing.

Serves canned rows (or raises canned errors) per admin command and records
every query so tests can assert on ordering without a running pgbouncer.
"""

from pgbouncer_exporter.core.coercion import Row
from pgbouncer_exporter.core.exceptions import ExporterError


class FakeAdminExecutor:
    """In-memory spy implementing the AdminExecutor protocol.

    Usage:
        fake = FakeAdminExecutor()
        fake.set_rows("SHOW LISTS;", [("databases", 3)])
        fake.set_error("SHOW MEM;", QueryError("SHOW MEM;", "boom"))
        assert fake.queries == ["SHOW LISTS;", "SHOW MEM;"]

    Commands without a canned response return no rows.
    """

    def __init__(self) -> None:
        self._rows: dict[str, list[Row]] = {}
        self._errors: dict[str, ExporterError] = {}
        self.queries: list[str] = []
        self.closed: bool = False

    def query(self, command: str) -> list[Row]:
        self.queries.append(command)
        if command in self._errors:
            raise self._errors[command]
        return list(self._rows.get(command, []))

    def close(self) -> None:
        self.closed = True

    # -- test helpers --

    def set_rows(self, command: str, rows: list[Row]) -> None:
        """Serve ``rows`` for ``command`` and clear any canned error."""
        self._errors.pop(command, None)
        self._rows[command] = list(rows)

    def set_error(self, command: str, error: ExporterError) -> None:
        """Raise ``error`` whenever ``command`` is queried."""
        self._errors[command] = error

    def clear(self) -> None:
        """Reset all recorded state."""
        self._rows.clear()
        self._errors.clear()
        self.queries.clear()
        self.closed = False
