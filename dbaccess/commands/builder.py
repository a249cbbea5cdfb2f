"""
Statement text generation from a table mapping.

All engine differences (placeholders, identifier quoting) come from the
`Dialect`; the statements themselves are plain SELECT / INSERT / UPDATE /
DELETE by key.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel

from dbaccess.commands.dialects import Dialect
from dbaccess.core.exceptions import MappingError
from dbaccess.models.mapping import ColumnMapping, TableMapping
from dbaccess.models.schema import TableSchema

logger = logging.getLogger(__name__)


def append_where(text: str, where: Optional[str]) -> str:
    """
    Returns `text` with a WHERE clause appended when a predicate is given.

    The predicate is appended as is, so `text` must not already contain a
    WHERE clause. Caller-written statements that filter on their own should
    be run without a predicate.
    """
    if where is None or not where.strip():
        return text
    return f"{text} WHERE {where}"


@dataclass(frozen=True)
class Statement:
    """Statement text plus the entity fields bound to its placeholders, in order"""
    text: str
    fields: Tuple[str, ...] = ()

    def bind(self, entity: BaseModel) -> List[Any]:
        return [getattr(entity, field) for field in self.fields]


class CommandBuilder:
    """Builds parameterized statements for one mapped table"""

    def __init__(
        self,
        mapping: TableMapping,
        dialect: Dialect,
        table_schema: Optional[TableSchema] = None,
    ):
        """
        Args:
            mapping: The entity-to-table mapping.
            dialect: Placeholder and quoting rules of the target engine.
            table_schema: Optional schema read from a schema provider. When given,
                every mapped column must exist in the table, and key columns missing
                from the mapping are taken from the table's primary key.

        Raises:
            MappingError: If the mapping does not fit the table schema.
        """
        if table_schema is not None:
            mapping = self._check_against_schema(mapping, table_schema)
        self.mapping = mapping
        self.dialect = dialect

    @staticmethod
    def _check_against_schema(mapping: TableMapping, table_schema: TableSchema) -> TableMapping:
        known = set(table_schema.column_names)
        missing = [name for name in mapping.column_names if name not in known]
        if missing:
            raise MappingError(
                f"Columns {missing} do not exist in table '{table_schema.table.name}'"
            )
        if not mapping.key_columns and table_schema.primary_key_columns:
            logger.debug(
                f"Using primary key {table_schema.primary_key_columns} "
                f"of '{table_schema.table.name}' as mapping keys"
            )
            return mapping.with_key_columns(table_schema.primary_key_columns)
        return mapping

    def _table(self) -> str:
        return self.dialect.quote(self.mapping.table_name)

    def _assignments(self, columns: List[ColumnMapping], start: int, separator: str) -> str:
        return separator.join(
            f"{self.dialect.quote(c.column_name)} = {self.dialect.placeholder(start + i)}"
            for i, c in enumerate(columns)
        )

    def _key_mappings(self, operation: str) -> List[ColumnMapping]:
        if not self.mapping.key_columns:
            raise MappingError(
                f"Cannot build {operation} for '{self.mapping.table_name}': no key columns"
            )
        return [self.mapping.get_column(name) for name in self.mapping.key_columns]

    def select(self, where: Optional[str] = None) -> Statement:
        """SELECT of all mapped columns, with an optional caller-supplied predicate"""
        columns = ", ".join(self.dialect.quote(name) for name in self.mapping.column_names)
        return Statement(append_where(f"SELECT {columns} FROM {self._table()}", where))

    def insert(self) -> Statement:
        columns = self.mapping.columns
        names = ", ".join(self.dialect.quote(c.column_name) for c in columns)
        values = ", ".join(self.dialect.placeholder(i) for i in range(1, len(columns) + 1))
        return Statement(
            f"INSERT INTO {self._table()} ({names}) VALUES ({values})",
            tuple(c.field_name for c in columns),
        )

    def update(self) -> Statement:
        """UPDATE of every non-key column, located by key columns"""
        keys = self._key_mappings("UPDATE")
        values = self.mapping.non_key_columns
        if not values:
            raise MappingError(
                f"Cannot build UPDATE for '{self.mapping.table_name}': only key columns are mapped"
            )
        text = (
            f"UPDATE {self._table()} SET {self._assignments(values, 1, ', ')} "
            f"WHERE {self._assignments(keys, len(values) + 1, ' AND ')}"
        )
        return Statement(text, tuple(c.field_name for c in values + keys))

    def delete(self) -> Statement:
        keys = self._key_mappings("DELETE")
        return Statement(
            f"DELETE FROM {self._table()} WHERE {self._assignments(keys, 1, ' AND ')}",
            tuple(c.field_name for c in keys),
        )
