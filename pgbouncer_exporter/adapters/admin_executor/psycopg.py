"""psycopg2 implementation of the AdminExecutor protocol.

Holds a single autocommit connection to PgBouncer's admin console.  The
console only speaks the simple query protocol and rejects ``BEGIN``, so the
connection must never open a transaction.  A broken connection is dropped
and re-established lazily on the next query.
"""

from collections.abc import Callable
from typing import Any, Optional

import psycopg2

from pgbouncer_exporter.core.coercion import Row
from pgbouncer_exporter.core.config import mask_dsn
from pgbouncer_exporter.core.exceptions import AdminConnectionError, QueryError
from pgbouncer_exporter.core.logging import logger
from pgbouncer_exporter.core.protocols.admin_executor import AdminExecutor


class PsycopgAdminExecutor(AdminExecutor):
    """psycopg2-backed admin console connection."""

    def __init__(self, dsn: str, connect: Callable[..., Any] = psycopg2.connect) -> None:
        self._dsn = dsn
        self._connect = connect
        self._conn: Optional[Any] = None
        self.logger = logger.with_context(
            context_base="admin_executor",
            dsn=mask_dsn(dsn),
        )

    @property
    def connected(self) -> bool:
        return self._conn is not None and not self._conn.closed

    def connect(self) -> None:
        """Open the admin connection if it is not already open.

        Raises:
            AdminConnectionError: If pgbouncer refuses or cannot be reached.
        """
        if self.connected:
            return
        try:
            conn = self._connect(self._dsn)
        except psycopg2.Error as e:
            raise AdminConnectionError(f"fail to connect to pgbouncer: {e}") from e
        try:
            conn.autocommit = True
        except psycopg2.Error as e:
            conn.close()
            raise AdminConnectionError(f"fail to configure pgbouncer connection: {e}") from e
        self._conn = conn
        self.logger.info("Connected to pgbouncer admin console")

    def query(self, command: str) -> list[Row]:
        self.connect()
        try:
            with self._conn.cursor() as cursor:
                cursor.execute(command)
                return [tuple(row) for row in cursor.fetchall()]
        except (psycopg2.OperationalError, psycopg2.InterfaceError) as e:
            self._discard()
            raise QueryError(command, f"failed, connection dropped: {e}") from e
        except psycopg2.Error as e:
            raise QueryError(command, f"failed: {e}") from e

    def close(self) -> None:
        if self._conn is not None:
            self._discard()
            self.logger.info("Closed pgbouncer admin connection")

    def _discard(self) -> None:
        conn, self._conn = self._conn, None
        try:
            conn.close()
        except psycopg2.Error:
            self.logger.warning("Error while closing admin connection", exc_info=True)
