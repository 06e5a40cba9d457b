"""Admin console executor adapters."""

from pgbouncer_exporter.adapters.admin_executor.fake import FakeAdminExecutor
from pgbouncer_exporter.adapters.admin_executor.psycopg import PsycopgAdminExecutor

__all__ = ["PsycopgAdminExecutor", "FakeAdminExecutor"]
