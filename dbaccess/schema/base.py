"""Base schema provider interface"""

from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from dbaccess.adapters.base import Connector
from dbaccess.converters.types import TypeConverter
from dbaccess.core.exceptions import MappingError
from dbaccess.models.schema import (
    Column,
    Constraint,
    Parameter,
    StoredProcedure,
    Table,
    TableSchema,
    View,
)

T = TypeVar("T")


def matches_include_list(name: str, include: Optional[Sequence[str]]) -> bool:
    """An empty or missing include list matches every name; otherwise exact match."""
    return not include or name in include


def apply_include_list(
    items: Iterable[T],
    include: Optional[Sequence[str]],
    key: Callable[[T], str] = lambda item: item.name,
) -> List[T]:
    """Keeps the items whose name is in the include list (all items when it is empty)."""
    return [item for item in items if matches_include_list(key(item), include)]


class SchemaProvider(ABC):
    """
    Reads an engine's catalog into the engine-neutral descriptor model.

    Catalog read failures are driver errors and propagate unchanged; an empty
    result is never an error.
    """

    def __init__(self, connector: Connector, converter: TypeConverter):
        self.connector = connector
        self.converter = converter

    @abstractmethod
    async def get_tables(self, database: str, *names: str) -> List[Table]:
        """Tables of a database, restricted to `names` when given"""
        pass

    @abstractmethod
    async def get_views(self, database: str, *names: str) -> List[View]:
        """Views of a database, restricted to `names` when given"""
        pass

    @abstractmethod
    async def get_columns(self, database: str, table_name: str) -> List[Column]:
        """Columns of a table with their native types converted"""
        pass

    @abstractmethod
    async def get_constraints(self, database: str, table_name: str) -> List[Constraint]:
        """Constraints of a table"""
        pass

    @abstractmethod
    async def get_stored_procedures(
        self, database: str, *names: str
    ) -> List[StoredProcedure]:
        """Stored routines of a database, restricted to `names` when given"""
        pass

    @abstractmethod
    async def get_parameters(self, database: str, routine_name: str) -> List[Parameter]:
        """Parameters of a stored routine"""
        pass

    async def get_table_schema(self, database: str, table_name: str) -> TableSchema:
        """
        Reads a table (or view) together with its columns and constraints.

        Raises:
            MappingError: If the database has no table or view with that name.
        """
        found: List[Table] = await self.get_tables(database, table_name)
        if not found:
            found = await self.get_views(database, table_name)
        if not found:
            raise MappingError(f"Table '{table_name}' not found in '{database}'")

        return TableSchema(
            table=found[0],
            columns=await self.get_columns(database, table_name),
            constraints=await self.get_constraints(database, table_name),
        )
