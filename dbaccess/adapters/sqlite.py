"""SQLite connector backed by aiosqlite"""

import logging
import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import aiosqlite

from dbaccess.adapters.base import Connector
from dbaccess.core.config import settings
from dbaccess.core.exceptions import ConnectorNotOpenError

logger = logging.getLogger(__name__)


def _adapt(value: Any) -> Any:
    """Converts values sqlite3 cannot bind natively into text."""
    if isinstance(value, (Decimal, uuid.UUID)):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


class SqliteConnector(Connector):
    """SQLite connector; statements use ``?`` placeholders"""

    engine = "sqlite"

    def __init__(self, database_path: str = ":memory:"):
        # Accept sqlite:///path URLs as well as plain paths
        if database_path.startswith("sqlite:///"):
            database_path = database_path[len("sqlite:///"):]
        self.database_path = database_path
        self._connection: Optional[aiosqlite.Connection] = None

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    async def open(self) -> None:
        """Open the database file (or in-memory database)"""
        if self._connection is not None:
            return
        self._connection = await aiosqlite.connect(
            self.database_path, timeout=settings.DB_COMMAND_TIMEOUT
        )
        self._connection.row_factory = aiosqlite.Row
        await self._connection.execute("PRAGMA foreign_keys = ON")
        logger.debug(f"SQLite database opened: {self.database_path}")

    async def close(self) -> None:
        """Close the database connection"""
        if self._connection is not None:
            try:
                await self._connection.close()
            finally:
                self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise ConnectorNotOpenError("SQLite connector is not open")
        return self._connection

    async def execute_query(
        self, text: str, params: Optional[Sequence[Any]] = None
    ) -> List[Dict[str, Any]]:
        connection = self._require_connection()
        self.log_statement(text, params)
        async with connection.execute(text, [_adapt(p) for p in params or []]) as cursor:
            rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def execute_non_query(
        self, text: str, params: Optional[Sequence[Any]] = None
    ) -> int:
        connection = self._require_connection()
        self.log_statement(text, params)
        async with connection.execute(text, [_adapt(p) for p in params or []]) as cursor:
            affected = cursor.rowcount
        await connection.commit()
        # DDL statements report -1
        return max(affected, 0)
