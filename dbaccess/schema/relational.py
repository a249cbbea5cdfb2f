"""
Schema provider for relational engines.

Catalog access is configured by a `RelationalCatalog`: the catalog statements of
one engine, written in that engine's placeholder style. Every statement aliases
its result columns to the same names, so a single provider class reshapes the
rows of any relational engine.

Statement parameters:
    tables / routines:                  [database]
    columns / constraints / parameters: [database, table or routine name]
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from dbaccess.adapters.base import Connector
from dbaccess.converters.types import SqlTypeConverter, TypeConverter
from dbaccess.models.schema import (
    Column,
    Constraint,
    ConstraintType,
    Parameter,
    ParameterDirection,
    StoredProcedure,
    Table,
    TableKind,
    View,
)
from dbaccess.schema.base import SchemaProvider, apply_include_list

logger = logging.getLogger(__name__)

_TYPE_ARGUMENTS = re.compile(r"\(\s*(\d+)\s*(?:,\s*(\d+)\s*)?\)")


@dataclass(frozen=True)
class RelationalCatalog:
    """Catalog statements of one relational engine"""
    engine: str
    tables_query: str
    columns_query: str
    constraints_query: str
    # None when the engine has no stored routines
    routines_query: Optional[str] = None
    parameters_query: Optional[str] = None

    @property
    def supports_routines(self) -> bool:
        return self.routines_query is not None and self.parameters_query is not None


POSTGRES_CATALOG = RelationalCatalog(
    engine="postgres",
    tables_query="""
        SELECT table_name, table_type
        FROM information_schema.tables
        WHERE table_schema = $1
        ORDER BY table_name
    """,
    columns_query="""
        SELECT
            column_name,
            data_type,
            is_nullable,
            ordinal_position,
            character_maximum_length AS max_length,
            numeric_precision,
            numeric_scale,
            column_default
        FROM information_schema.columns
        WHERE table_schema = $1
          AND table_name = $2
        ORDER BY ordinal_position
    """,
    constraints_query="""
        SELECT
            tc.constraint_name,
            tc.constraint_type,
            kcu.column_name,
            ccu.table_name AS referenced_table,
            ccu.column_name AS referenced_column,
            kcu.ordinal_position AS position
        FROM information_schema.table_constraints tc
        JOIN information_schema.key_column_usage kcu
            ON tc.constraint_name = kcu.constraint_name
            AND tc.table_schema = kcu.table_schema
            AND tc.table_name = kcu.table_name
        LEFT JOIN information_schema.constraint_column_usage ccu
            ON tc.constraint_type = 'FOREIGN KEY'
            AND tc.constraint_name = ccu.constraint_name
            AND tc.constraint_schema = ccu.constraint_schema
        WHERE tc.table_schema = $1
          AND tc.table_name = $2
        ORDER BY tc.constraint_name, kcu.ordinal_position
    """,
    routines_query="""
        SELECT routine_name, routine_type
        FROM information_schema.routines
        WHERE routine_schema = $1
        ORDER BY routine_name
    """,
    parameters_query="""
        SELECT
            p.parameter_name,
            p.ordinal_position,
            p.parameter_mode,
            p.data_type
        FROM information_schema.parameters p
        JOIN information_schema.routines r
            ON p.specific_schema = r.specific_schema
            AND p.specific_name = r.specific_name
        WHERE r.routine_schema = $1
          AND r.routine_name = $2
        ORDER BY p.ordinal_position
    """,
)

# `database` is the SQLite schema name: "main", "temp" or an attached database
SQLITE_CATALOG = RelationalCatalog(
    engine="sqlite",
    tables_query="""
        SELECT
            name AS table_name,
            CASE type WHEN 'table' THEN 'BASE TABLE' WHEN 'view' THEN 'VIEW' ELSE type END
                AS table_type
        FROM pragma_table_list
        WHERE schema = ?1
          AND name NOT LIKE 'sqlite\\_%' ESCAPE '\\'
        ORDER BY name
    """,
    columns_query="""
        SELECT
            name AS column_name,
            type AS data_type,
            CASE WHEN "notnull" = 1 THEN 'NO' ELSE 'YES' END AS is_nullable,
            cid + 1 AS ordinal_position,
            NULL AS max_length,
            NULL AS numeric_precision,
            NULL AS numeric_scale,
            dflt_value AS column_default
        FROM pragma_table_info(?2, ?1)
        ORDER BY cid
    """,
    constraints_query="""
        SELECT
            'pk_' || ?2 AS constraint_name,
            'PRIMARY KEY' AS constraint_type,
            name AS column_name,
            NULL AS referenced_table,
            NULL AS referenced_column,
            pk AS position
        FROM pragma_table_info(?2, ?1)
        WHERE pk > 0
        UNION ALL
        SELECT 'fk_' || ?2 || '_' || id, 'FOREIGN KEY', "from", "table", "to", seq + 1
        FROM pragma_foreign_key_list(?2, ?1)
        UNION ALL
        SELECT il.name, 'UNIQUE', ii.name, NULL, NULL, ii.seqno + 1
        FROM pragma_index_list(?2, ?1) AS il, pragma_index_info(il.name, ?1) AS ii
        WHERE il.origin = 'u'
        ORDER BY constraint_name, position
    """,
)


def _to_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class RelationalSchemaProvider(SchemaProvider):
    """Schema provider for engines with an information-schema style catalog"""

    def __init__(
        self,
        connector: Connector,
        catalog: RelationalCatalog,
        converter: Optional[TypeConverter] = None,
    ):
        super().__init__(connector, converter or SqlTypeConverter())
        self.catalog = catalog

    async def _read_tables(self, database: str, names: tuple) -> List[Dict[str, Any]]:
        """Shared catalog read for tables and views"""
        rows = await self.connector.execute_query(self.catalog.tables_query, [database])
        return apply_include_list(rows, names, key=lambda row: row["table_name"])

    async def get_tables(self, database: str, *names: str) -> List[Table]:
        rows = await self._read_tables(database, names)
        return [
            Table(database=database, name=row["table_name"], kind=TableKind.TABLE)
            for row in rows
            if TableKind.from_catalog(row["table_type"]) == TableKind.TABLE
        ]

    async def get_views(self, database: str, *names: str) -> List[View]:
        rows = await self._read_tables(database, names)
        return [
            View(database=database, name=row["table_name"])
            for row in rows
            if TableKind.from_catalog(row["table_type"]) == TableKind.VIEW
        ]

    async def get_columns(self, database: str, table_name: str) -> List[Column]:
        rows = await self.connector.execute_query(
            self.catalog.columns_query, [database, table_name]
        )
        columns = [self._to_column(database, table_name, row) for row in rows]
        logger.debug(f"Read {len(columns)} column(s) of {database}.{table_name}")
        return columns

    def _to_column(self, database: str, table_name: str, row: Dict[str, Any]) -> Column:
        native_type = row.get("data_type") or ""
        max_length = _to_int(row.get("max_length"))
        precision = _to_int(row.get("numeric_precision"))
        scale = _to_int(row.get("numeric_scale"))

        # Declared sizes such as VARCHAR(255) or DECIMAL(10,2)
        match = _TYPE_ARGUMENTS.search(native_type)
        if match and max_length is None and precision is None:
            first, second = int(match.group(1)), _to_int(match.group(2))
            if second is None and "char" in native_type.lower():
                max_length = first
            else:
                precision, scale = first, second

        default = row.get("column_default")
        return Column(
            database=database,
            table_name=table_name,
            name=row["column_name"],
            ordinal=_to_int(row.get("ordinal_position")) or 0,
            native_type=native_type,
            data_type=self.converter.convert(native_type),
            is_nullable=str(row.get("is_nullable", "YES")).upper() == "YES",
            max_length=max_length,
            precision=precision,
            scale=scale,
            default=str(default) if default is not None else None,
        )

    async def get_constraints(self, database: str, table_name: str) -> List[Constraint]:
        rows = await self.connector.execute_query(
            self.catalog.constraints_query, [database, table_name]
        )
        return [
            Constraint(
                database=database,
                table_name=table_name,
                name=row["constraint_name"],
                type=ConstraintType.from_catalog(row["constraint_type"]),
                from_column_name=row["column_name"],
                to_table_name=row.get("referenced_table"),
                to_column_name=row.get("referenced_column"),
                position=_to_int(row.get("position")) or 1,
            )
            for row in rows
        ]

    async def get_stored_procedures(
        self, database: str, *names: str
    ) -> List[StoredProcedure]:
        if not self.catalog.supports_routines:
            return []
        rows = await self.connector.execute_query(self.catalog.routines_query, [database])
        return [
            StoredProcedure(
                database=database,
                name=row["routine_name"],
                routine_type=row.get("routine_type") or "PROCEDURE",
            )
            for row in apply_include_list(rows, names, key=lambda row: row["routine_name"])
        ]

    async def get_parameters(self, database: str, routine_name: str) -> List[Parameter]:
        if not self.catalog.supports_routines:
            return []
        rows = await self.connector.execute_query(
            self.catalog.parameters_query, [database, routine_name]
        )
        parameters = []
        for row in rows:
            position = _to_int(row.get("ordinal_position")) or len(parameters) + 1
            native_type = row.get("data_type") or ""
            parameters.append(
                Parameter(
                    database=database,
                    routine_name=routine_name,
                    name=row.get("parameter_name") or f"${position}",
                    position=position,
                    direction=ParameterDirection.from_catalog(row.get("parameter_mode")),
                    native_type=native_type,
                    data_type=self.converter.convert(native_type),
                )
            )
        return parameters
