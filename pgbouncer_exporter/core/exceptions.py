"""Exporter error taxonomy.

``ExporterError`` covers every failure a scrape pass can recover from: the
orchestrator catches it, marks the pass as failed and carries on.
``UnknownMetricError`` is deliberately outside that hierarchy because it
signals a defect in the descriptor table, not a runtime condition.
"""


class ExporterError(Exception):
    """Base class for recoverable scrape errors."""


class AdminConnectionError(ExporterError):
    """The PgBouncer admin console could not be reached."""


class QueryError(ExporterError):
    """An admin command failed or returned a row that could not be decoded."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"{command} {message}")
        self.command = command


class UnknownMetricError(KeyError):
    """A sample referenced a metric name that has no registered descriptor."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"metric '{self.name}' is not registered"
