from dbaccess.schema.base import SchemaProvider, apply_include_list, matches_include_list
from dbaccess.schema.column_family import ColumnFamilySchemaProvider
from dbaccess.schema.relational import (
    POSTGRES_CATALOG,
    SQLITE_CATALOG,
    RelationalCatalog,
    RelationalSchemaProvider,
)
from dbaccess.schema.factory import create_schema_provider, register_schema_provider

__all__ = [
    "SchemaProvider",
    "apply_include_list",
    "matches_include_list",
    "ColumnFamilySchemaProvider",
    "POSTGRES_CATALOG",
    "SQLITE_CATALOG",
    "RelationalCatalog",
    "RelationalSchemaProvider",
    "create_schema_provider",
    "register_schema_provider",
]
