"""CRUD access to one mapped entity type"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from dbaccess.adapters.base import Connector
from dbaccess.commands.builder import CommandBuilder, Statement
from dbaccess.commands.dialects import get_dialect
from dbaccess.core.config import settings
from dbaccess.core.exceptions import ObjectDisposedError
from dbaccess.models.mapping import TableMapping
from dbaccess.models.schema import TableSchema
from dbaccess.querying.executor import QueryExecutor
from dbaccess.schema.factory import create_schema_provider

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)


class DatabaseAccess(Generic[E]):
    """
    Insert, update, delete and select for one mapped entity type.

    Statement text comes from a `CommandBuilder` for the connector's dialect.
    Selects run through a single-use `QueryExecutor` that is disposed before the
    call returns; `query_executor()` hands out a reusable one owned by the caller.
    """

    def __init__(
        self,
        connector: Connector,
        entity_type: Type[E],
        mapping: Optional[TableMapping] = None,
        table_schema: Optional[TableSchema] = None,
    ):
        self.connector = connector
        self.entity_type = entity_type
        self.builder = CommandBuilder(
            mapping or TableMapping.from_model(entity_type),
            get_dialect(connector.engine),
            table_schema,
        )
        self._disposed = False

    @classmethod
    async def create(
        cls,
        connector: Connector,
        entity_type: Type[E],
        database: Optional[str] = None,
        mapping: Optional[TableMapping] = None,
    ) -> "DatabaseAccess[E]":
        """
        Builds a facade whose mapping is checked against the live table schema.

        The schema is read once, through the schema provider of the connector's
        engine. Key columns missing from the mapping come from the primary key.
        `database` defaults to `settings.DB_DEFAULT_DATABASE`.
        """
        database = database or settings.DB_DEFAULT_DATABASE
        mapping = mapping or TableMapping.from_model(entity_type)
        provider = create_schema_provider(connector)
        table_schema = await provider.get_table_schema(database, mapping.table_name)
        return cls(connector, entity_type, mapping, table_schema)

    @property
    def mapping(self) -> TableMapping:
        return self.builder.mapping

    def _ensure_ready(self) -> None:
        if self._disposed:
            raise ObjectDisposedError(type(self).__name__)

    async def _execute_each(self, statement: Statement, entities: tuple) -> int:
        self._ensure_ready()
        affected = 0
        for entity in entities:
            affected += await self.connector.execute_non_query(
                statement.text, statement.bind(entity)
            )
        return affected

    async def insert(self, *entities: E) -> int:
        """Inserts the entities and returns the number of affected rows."""
        return await self._execute_each(self.builder.insert(), entities)

    async def update(self, *entities: E) -> int:
        """Updates the entities by key and returns the number of affected rows."""
        return await self._execute_each(self.builder.update(), entities)

    async def delete(self, *entities: E) -> int:
        """Deletes the entities by key and returns the number of affected rows."""
        return await self._execute_each(self.builder.delete(), entities)

    async def select(self, where: Optional[str] = None, *params: Any) -> List[E]:
        """Selects the entities matching an optional predicate."""
        with self.query_executor() as executor:
            return await executor.execute(where, *params)

    def query_executor(self) -> QueryExecutor[E]:
        """A reusable executor over this table; the caller disposes it."""
        self._ensure_ready()
        return QueryExecutor(
            self.connector,
            self.entity_type,
            statement=self.builder.select().text,
            mapping=self.mapping,
        )

    def dispose(self) -> None:
        if not self._disposed:
            self._disposed = True
            logger.debug(f"DatabaseAccess for {self.entity_type.__name__} disposed")

    def __enter__(self) -> "DatabaseAccess[E]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    async def __aenter__(self) -> "DatabaseAccess[E]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()
