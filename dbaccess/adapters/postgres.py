"""
This module provides a PostgreSQL connector.

It includes the `PostgresConnector` class, which implements the `Connector` interface
using the `asyncpg` library. Statements use PostgreSQL's native ``$n`` placeholders
and driver errors (``asyncpg.PostgresError`` subclasses) propagate unchanged.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import asyncpg  # type: ignore[import-untyped]

from dbaccess.adapters.base import Connector
from dbaccess.core.config import settings
from dbaccess.core.error_utils import redact_url, safe_log_error, safe_log_warning
from dbaccess.core.exceptions import ConnectorNotOpenError

logger = logging.getLogger(__name__)


class PostgresConnector(Connector):
    """
    PostgreSQL connector.

    This class manages a small asyncpg connection pool. Each statement acquires
    a connection for the duration of the call only.
    """

    engine = "postgres"

    def __init__(self, connection_string: str, min_size: int = 1, max_size: int = 5):
        """
        Initializes the PostgresConnector.

        Args:
            connection_string: The connection string for the PostgreSQL database.
            min_size: Minimum number of pooled connections.
            max_size: Maximum number of pooled connections.
        """
        self.connection_string = connection_string
        self.min_size = min_size
        self.max_size = max_size
        self.pool: Optional[asyncpg.Pool] = None

    @property
    def is_open(self) -> bool:
        return self.pool is not None

    async def open(self) -> None:
        """
        Creates the connection pool.

        The statement cache is disabled for compatibility with external poolers.
        """
        if self.pool is not None:
            return
        try:
            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=settings.DB_COMMAND_TIMEOUT,
                statement_cache_size=0,
            )
            logger.debug(
                f"PostgreSQL connection pool created for {redact_url(self.connection_string)} "
                f"(min={self.min_size}, max={self.max_size})"
            )
        except Exception as e:
            safe_log_error(logger, f"Failed to create PostgreSQL connection pool: {e}")
            raise

    async def close(self) -> None:
        """Closes the connection pool and terminates all database connections."""
        if self.pool:
            try:
                await asyncio.wait_for(self.pool.close(), timeout=2.0)
            except asyncio.TimeoutError:
                logger.warning("PostgreSQL pool close timed out, terminating")
                self.pool.terminate()
            except Exception as e:
                safe_log_warning(logger, f"Error closing PostgreSQL pool: {e}")
            finally:
                self.pool = None

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise ConnectorNotOpenError("PostgreSQL connector is not open")
        return self.pool

    async def execute_query(
        self, text: str, params: Optional[Sequence[Any]] = None
    ) -> List[Dict[str, Any]]:
        """
        Executes a query and returns the results.

        Args:
            text: The SQL query string to execute.
            params: Positional parameters bound to ``$1``, ``$2``, ...

        Returns:
            A list of dictionaries, where each dictionary represents a result row.
        """
        pool = self._require_pool()
        self.log_statement(text, params)
        async with pool.acquire() as conn:
            rows = await conn.fetch(text, *(params or []))
        return [dict(row) for row in rows]

    async def execute_non_query(
        self, text: str, params: Optional[Sequence[Any]] = None
    ) -> int:
        """
        Executes a statement and returns the number of affected rows.

        asyncpg reports a command status such as ``INSERT 0 1`` or ``UPDATE 3``;
        the trailing number is the affected row count.
        """
        pool = self._require_pool()
        self.log_statement(text, params)
        async with pool.acquire() as conn:
            status = await conn.execute(text, *(params or []))
        return parse_command_status(status)


def parse_command_status(status: Optional[str]) -> int:
    """Returns the affected row count from an asyncpg command status string."""
    if not status:
        return 0
    last = status.split()[-1]
    return int(last) if last.isdigit() else 0
