"""
Reusable, disposable query executor.

A `QueryExecutor` is bound to one connector and one entity type. It can be
executed any number of times; each call builds its statement text from the
base statement and that call's predicate only, so nothing carries over between
calls. Once disposed, every further `execute` raises `ObjectDisposedError`.

One executor is meant for sequential use. Concurrent `execute` calls on the
same instance must be serialized by the caller.
"""

import logging
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from dbaccess.adapters.base import Connector
from dbaccess.commands.builder import CommandBuilder, append_where
from dbaccess.commands.dialects import get_dialect
from dbaccess.core.exceptions import ObjectDisposedError
from dbaccess.models.mapping import TableMapping

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)


class ExecutorState(str, Enum):
    READY = "ready"
    DISPOSED = "disposed"


class QueryExecutor(Generic[E]):
    """Runs one base statement against a connector and materializes entities"""

    def __init__(
        self,
        connector: Connector,
        entity_type: Type[E],
        statement: Optional[str] = None,
        mapping: Optional[TableMapping] = None,
    ):
        """
        Args:
            connector: Borrowed connector; it stays open after disposal.
            entity_type: Pydantic model each result row is materialized into.
            statement: Base statement text. Defaults to the SELECT of all mapped
                columns for the connector's dialect.
            mapping: Table mapping, defaults to `TableMapping.from_model(entity_type)`.
        """
        self.entity_type = entity_type
        self.mapping = mapping or TableMapping.from_model(entity_type)
        if statement is None:
            statement = CommandBuilder(self.mapping, get_dialect(connector.engine)).select().text
        self._command = connector.create_command(statement)
        self._state = ExecutorState.READY

    @property
    def state(self) -> ExecutorState:
        return self._state

    @property
    def is_disposed(self) -> bool:
        return self._state is ExecutorState.DISPOSED

    @property
    def statement(self) -> str:
        return self._command.text

    def _ensure_ready(self) -> None:
        if self._state is ExecutorState.DISPOSED:
            raise ObjectDisposedError(type(self).__name__)

    async def execute(self, where: Optional[str] = None, *params: Any) -> List[E]:
        """
        Runs the base statement, optionally restricted by a predicate.

        Args:
            where: Predicate appended as a WHERE clause for this call only. Only
                valid when the base statement has no WHERE clause of its own.
            *params: Values bound to the predicate's native placeholders.

        Returns:
            A new list with one entity per result row.

        Raises:
            ObjectDisposedError: If the executor has been disposed.
        """
        self._ensure_ready()
        rows = await self._command.fetch(append_where(self._command.text, where), params)
        return self._materialize(rows)

    def _materialize(self, rows: List[Dict[str, Any]]) -> List[E]:
        return [self.mapping.from_row(self.entity_type, row) for row in rows]

    def dispose(self) -> None:
        """Releases the command. Calling it again does nothing."""
        if self._state is ExecutorState.DISPOSED:
            return
        self._command.close()
        self._state = ExecutorState.DISPOSED
        logger.debug(f"{type(self).__name__} for {self.entity_type.__name__} disposed")

    close = dispose

    def __enter__(self) -> "QueryExecutor[E]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    async def __aenter__(self) -> "QueryExecutor[E]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()


async def query(
    connector: Connector,
    entity_type: Type[E],
    where: Optional[str] = None,
    *params: Any,
    mapping: Optional[TableMapping] = None,
) -> List[E]:
    """Single-use query of a mapped table; the executor is disposed on every exit path."""
    with QueryExecutor(connector, entity_type, mapping=mapping) as executor:
        return await executor.execute(where, *params)


async def custom_query(
    connector: Connector,
    entity_type: Type[E],
    sql: str,
    *params: Any,
    mapping: Optional[TableMapping] = None,
) -> List[E]:
    """Single-use query of caller-written statement text."""
    with QueryExecutor(connector, entity_type, statement=sql, mapping=mapping) as executor:
        return await executor.execute(None, *params)
