"""
Schema provider for Cassandra-style column-family stores.

The store has no constraint catalog and no stored routines. Tables and views
come from ``system.schema_columnfamilies`` (kind column ``type``), columns from
``system.schema_columns``. Primary keys are synthesized from the key role of
each column: every ``partition_key`` column yields one PrimaryKey constraint,
so composite partition keys give one constraint per component, ordered by
``component_index``. Clustering columns are exposed through `Column.key_role`
but do not produce constraints.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from dbaccess.adapters.base import Connector
from dbaccess.converters.types import CqlTypeConverter
from dbaccess.models.schema import (
    Column,
    Constraint,
    ConstraintType,
    Parameter,
    StoredProcedure,
    Table,
    TableKind,
    View,
)
from dbaccess.schema.base import SchemaProvider, apply_include_list

logger = logging.getLogger(__name__)

PARTITION_KEY = "partition_key"
CLUSTERING_KEY = "clustering_key"

TABLES_QUERY = (
    'SELECT "keyspace_name", "columnfamily_name", "type" '
    "FROM system.schema_columnfamilies"
)
COLUMNS_QUERY = (
    'SELECT "keyspace_name", "columnfamily_name", "column_name", "validator", '
    '"type", "component_index" FROM system.schema_columns'
)

# Partition keys first, then clustering keys, then everything else
_ROLE_ORDER = {PARTITION_KEY: 0, CLUSTERING_KEY: 1}


def _component_index(row: Dict[str, Any]) -> int:
    return row.get("component_index") or 0


def _column_order(row: Dict[str, Any]) -> tuple:
    return (_ROLE_ORDER.get(row.get("type"), 2), _component_index(row), row["column_name"])


class ColumnFamilySchemaProvider(SchemaProvider):
    """Schema provider for column-family stores"""

    def __init__(self, connector: Connector, converter: Optional[CqlTypeConverter] = None):
        super().__init__(connector, converter or CqlTypeConverter())

    def table_where(self, database: str, names: Sequence[str]) -> tuple:
        """WHERE clause and parameters of the table catalog read"""
        clause = '"keyspace_name" = ?'
        params: List[Any] = [database]
        if names:
            clause += ' AND "columnfamily_name" IN ({})'.format(", ".join("?" for _ in names))
            params.extend(names)
        return clause, params

    async def _read_tables(self, database: str, names: Sequence[str]) -> List[Dict[str, Any]]:
        """Shared catalog read for tables and views"""
        where, params = self.table_where(database, names)
        rows = await self.connector.execute_query(f"{TABLES_QUERY} WHERE {where}", params)
        return apply_include_list(rows, names, key=lambda row: row["columnfamily_name"])

    async def _read_columns(self, database: str, table_name: str) -> List[Dict[str, Any]]:
        return await self.connector.execute_query(
            f'{COLUMNS_QUERY} WHERE "keyspace_name" = ? AND "columnfamily_name" = ?',
            [database, table_name],
        )

    async def get_tables(self, database: str, *names: str) -> List[Table]:
        rows = await self._read_tables(database, names)
        return [
            Table(database=database, name=row["columnfamily_name"], kind=TableKind.TABLE)
            for row in rows
            if TableKind.from_catalog(row.get("type")) == TableKind.TABLE
        ]

    async def get_views(self, database: str, *names: str) -> List[View]:
        rows = await self._read_tables(database, names)
        return [
            View(database=database, name=row["columnfamily_name"])
            for row in rows
            if TableKind.from_catalog(row.get("type")) == TableKind.VIEW
        ]

    async def get_columns(self, database: str, table_name: str) -> List[Column]:
        rows = sorted(await self._read_columns(database, table_name), key=_column_order)
        columns = []
        for ordinal, row in enumerate(rows, start=1):
            validator = row.get("validator") or ""
            key_role = row.get("type")
            columns.append(
                Column(
                    database=database,
                    table_name=table_name,
                    name=row["column_name"],
                    ordinal=ordinal,
                    native_type=self.converter.validator_to_cql(validator),
                    data_type=self.converter.convert(validator),
                    is_nullable=key_role not in (PARTITION_KEY, CLUSTERING_KEY),
                    key_role=key_role,
                )
            )
        logger.debug(f"Read {len(columns)} column(s) of {database}.{table_name}")
        return columns

    async def get_constraints(self, database: str, table_name: str) -> List[Constraint]:
        rows = await self._read_columns(database, table_name)
        partition_keys = sorted(
            (row for row in rows if row.get("type") == PARTITION_KEY),
            key=lambda row: (_component_index(row), row["column_name"]),
        )
        return [
            Constraint(
                database=database,
                table_name=table_name,
                name=row["column_name"],
                type=ConstraintType.PRIMARY_KEY,
                from_column_name=row["column_name"],
                position=position,
            )
            for position, row in enumerate(partition_keys, start=1)
        ]

    async def get_stored_procedures(
        self, database: str, *names: str
    ) -> List[StoredProcedure]:
        return []

    async def get_parameters(self, database: str, routine_name: str) -> List[Parameter]:
        return []
